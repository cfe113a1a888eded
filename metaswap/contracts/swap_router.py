"""
MetaNode SwapRouter Integration

Котировки (quoteExactInput / quoteExactOutput) и кодирование
exactInput / exactOutput.

Quote flow:
    1. Tokens and amount must be set
    2. Pool for (tokenIn, tokenOut, indexPath[0]) must exist
    3. Pool must have liquidity
    4. The quote function is simulated with eth_call; some router builds
       return the amount through revert data, which is decoded here
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from eth_abi import decode
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError

from .abis import SWAP_ROUTER_ABI
from .pool_manager import PoolManager
from ..math.ticks import get_sqrt_price_limit
from ..utils import calculate_deadline, calculate_slippage, is_zero_for_one

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_MINUTES = 20

# Solidity Error(string) and Panic(uint256) selectors
ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")


@dataclass
class QuoteParams:
    """Параметры quoteExactInput."""
    token_in: str
    token_out: str
    amount_in: int
    sqrt_price_limit_x96: int
    index_path: List[int] = field(default_factory=lambda: [0])

    def to_tuple(self) -> tuple:
        return (
            Web3.to_checksum_address(self.token_in),
            Web3.to_checksum_address(self.token_out),
            list(self.index_path),
            self.amount_in,
            self.sqrt_price_limit_x96,
        )


@dataclass
class QuoteExactOutputParams:
    """Параметры quoteExactOutput."""
    token_in: str
    token_out: str
    amount_out: int
    sqrt_price_limit_x96: int
    index_path: List[int] = field(default_factory=lambda: [0])

    def to_tuple(self) -> tuple:
        return (
            Web3.to_checksum_address(self.token_in),
            Web3.to_checksum_address(self.token_out),
            list(self.index_path),
            self.amount_out,
            self.sqrt_price_limit_x96,
        )


@dataclass
class ExactInputParams:
    """Параметры exactInput."""
    token_in: str
    token_out: str
    recipient: str
    deadline: int
    amount_in: int
    amount_out_minimum: int
    sqrt_price_limit_x96: int
    index_path: List[int] = field(default_factory=lambda: [0])

    def to_tuple(self) -> tuple:
        """Конвертация в tuple для контракта (порядок полей как в ABI)."""
        return (
            Web3.to_checksum_address(self.token_in),
            Web3.to_checksum_address(self.token_out),
            list(self.index_path),
            Web3.to_checksum_address(self.recipient),
            self.deadline,
            self.amount_in,
            self.amount_out_minimum,
            self.sqrt_price_limit_x96,
        )


@dataclass
class ExactOutputParams:
    """Параметры exactOutput."""
    token_in: str
    token_out: str
    recipient: str
    deadline: int
    amount_out: int
    amount_in_maximum: int
    sqrt_price_limit_x96: int
    index_path: List[int] = field(default_factory=lambda: [0])

    def to_tuple(self) -> tuple:
        return (
            Web3.to_checksum_address(self.token_in),
            Web3.to_checksum_address(self.token_out),
            list(self.index_path),
            Web3.to_checksum_address(self.recipient),
            self.deadline,
            self.amount_out,
            self.amount_in_maximum,
            self.sqrt_price_limit_x96,
        )


@dataclass
class QuoteResult:
    """
    Результат котировки.

    amount is amountOut for an exact input quote and amountIn for an exact
    output quote. On failure amount == 0 and error is set.
    """
    amount: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_quote_revert(data: Union[str, bytes, None]) -> Optional[int]:
    """
    Extract the quoted amount from quote revert data.

    Accepts a bare 32-byte word or a 4-byte custom error selector followed
    by one word. Error(string), Panic(uint256) and anything else return None.
    """
    if not data:
        return None

    if isinstance(data, str):
        hex_data = data[2:] if data.startswith("0x") else data
        try:
            raw = bytes.fromhex(hex_data)
        except ValueError:
            return None
    elif isinstance(data, (bytes, bytearray)):
        raw = bytes(data)
    else:
        return None

    if len(raw) == 32:
        payload = raw
    elif len(raw) == 36:
        if raw[:4] in (ERROR_STRING_SELECTOR, PANIC_SELECTOR):
            return None
        payload = raw[4:]
    else:
        return None

    (amount,) = decode(["uint256"], payload)
    return amount


def describe_swap_error(error: Exception) -> str:
    """Короткое сообщение об ошибке свапа для пользователя."""
    message = str(error)

    if "SPL" in message:
        return "Price limit error. Please try again."
    if "insufficient" in message.lower():
        return "Insufficient balance"
    if "allowance" in message.lower():
        return "Token approval required"
    if "user rejected" in message.lower():
        return "Transaction rejected"
    return message or "Swap failed"


class SwapRouter:
    """
    Класс для работы с MetaNode SwapRouter.

    Поддерживает:
    - Котировки exact input / exact output с предварительной проверкой пула
    - Подготовку параметров exactInput / exactOutput (slippage, deadline, price limit)
    - Кодирование exactInput / exactOutput
    """

    SWAP_ROUTER_ADDRESSES = {
        11155111: "0xD2c220143F5784b3bD84ae12747d97C8A36CeCB2",  # Sepolia
    }

    def __init__(
        self,
        w3: Web3,
        swap_router_address: str = None,
        chain_id: int = 11155111,
        pool_manager: PoolManager = None
    ):
        self.w3 = w3
        self.chain_id = chain_id

        if swap_router_address:
            self.swap_router_address = Web3.to_checksum_address(swap_router_address)
        else:
            if chain_id not in self.SWAP_ROUTER_ADDRESSES:
                raise ValueError(f"No SwapRouter deployment known for chain {chain_id}")
            self.swap_router_address = Web3.to_checksum_address(
                self.SWAP_ROUTER_ADDRESSES[chain_id]
            )

        self.pool_manager = pool_manager or PoolManager(w3, chain_id=chain_id)
        self.contract: Contract = w3.eth.contract(
            address=self.swap_router_address,
            abi=SWAP_ROUTER_ABI
        )

    def _quote(self, fn_name: str, params, amount: int) -> QuoteResult:
        """Общая логика котировки: проверки пула, eth_call, разбор revert."""
        if not params.token_in or not params.token_out or amount <= 0:
            return QuoteResult(0, "Invalid parameters")

        try:
            pool_address = self.pool_manager.get_pool_address(
                params.token_in, params.token_out, params.index_path[0]
            )
            if pool_address is None:
                return QuoteResult(0, "Pool does not exist. Please create the pool first.")

            liquidity = self.pool_manager.get_pool_state(pool_address).liquidity
            if liquidity == 0:
                return QuoteResult(0, "Pool has no liquidity. Please add liquidity first.")

            logger.debug(f"{fn_name}: {params}")

            try:
                quoted = getattr(self.contract.functions, fn_name)(params.to_tuple()).call()
                return QuoteResult(quoted)

            except ContractLogicError as e:
                quoted = decode_quote_revert(e.data)
                if quoted is not None:
                    logger.debug(f"Quote returned through revert: {quoted}")
                    return QuoteResult(quoted)

                if "Pool not found" in str(e):
                    return QuoteResult(0, "Pool not found")

                logger.warning(f"Quote reverted: {e}")
                return QuoteResult(0, e.message or "Quote failed")

        except Exception as e:
            logger.error(f"Failed to get quote: {e}")
            return QuoteResult(0, str(e) or "Unknown error")

    def quote_exact_input(
        self,
        token_in: str,
        token_out: str,
        amount_in: int,
        index_path: List[int] = None
    ) -> QuoteResult:
        """
        Получить котировку для exact input свапа.

        Never raises: every failure is reported through QuoteResult.error.

        Args:
            token_in: Адрес входного токена
            token_out: Адрес выходного токена
            amount_in: Сумма на входе (base units)
            index_path: Индексы пулов по пути (по умолчанию [0])

        Returns:
            QuoteResult с amountOut
        """
        params = QuoteParams(
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            sqrt_price_limit_x96=get_sqrt_price_limit(is_zero_for_one(token_in or "", token_out or "")),
            index_path=index_path or [0],
        )
        return self._quote("quoteExactInput", params, amount_in)

    def quote_exact_output(
        self,
        token_in: str,
        token_out: str,
        amount_out: int,
        index_path: List[int] = None
    ) -> QuoteResult:
        """
        Получить котировку для exact output свапа: сколько token_in нужно,
        чтобы получить amount_out.

        Returns:
            QuoteResult с amountIn
        """
        params = QuoteExactOutputParams(
            token_in=token_in,
            token_out=token_out,
            amount_out=amount_out,
            sqrt_price_limit_x96=get_sqrt_price_limit(is_zero_for_one(token_in or "", token_out or "")),
            index_path=index_path or [0],
        )
        return self._quote("quoteExactOutput", params, amount_out)

    def build_exact_input_params(
        self,
        token_in: str,
        token_out: str,
        amount_in: int,
        slippage_percent: float,
        recipient: str,
        index_path: List[int] = None,
        expected_amount_out: int = None,
        deadline_minutes: float = DEFAULT_DEADLINE_MINUTES
    ) -> ExactInputParams:
        """
        Подготовка параметров exactInput.

        amountOutMinimum is the quoted output minus slippage when
        expected_amount_out is known; without a quote the slippage is applied
        to amount_in, which only makes sense for pools priced near 1:1.
        """
        reference_amount = expected_amount_out if expected_amount_out is not None else amount_in

        return ExactInputParams(
            token_in=token_in,
            token_out=token_out,
            recipient=recipient,
            deadline=calculate_deadline(deadline_minutes),
            amount_in=amount_in,
            amount_out_minimum=calculate_slippage(reference_amount, slippage_percent, True),
            sqrt_price_limit_x96=get_sqrt_price_limit(is_zero_for_one(token_in, token_out)),
            index_path=index_path or [0],
        )

    def build_exact_output_params(
        self,
        token_in: str,
        token_out: str,
        amount_out: int,
        slippage_percent: float,
        recipient: str,
        index_path: List[int] = None,
        expected_amount_in: int = None,
        deadline_minutes: float = DEFAULT_DEADLINE_MINUTES
    ) -> ExactOutputParams:
        """
        Подготовка параметров exactOutput.

        amountInMaximum is the quoted input plus slippage; without a quote
        the slippage is added to amount_out.
        """
        reference_amount = expected_amount_in if expected_amount_in is not None else amount_out

        return ExactOutputParams(
            token_in=token_in,
            token_out=token_out,
            recipient=recipient,
            deadline=calculate_deadline(deadline_minutes),
            amount_out=amount_out,
            amount_in_maximum=calculate_slippage(reference_amount, slippage_percent, False),
            sqrt_price_limit_x96=get_sqrt_price_limit(is_zero_for_one(token_in, token_out)),
            index_path=index_path or [0],
        )

    def encode_exact_input(self, params: ExactInputParams) -> str:
        """Кодирование exactInput."""
        return self.contract.encode_abi("exactInput", args=[params.to_tuple()])

    def encode_exact_output(self, params: ExactOutputParams) -> str:
        """Кодирование exactOutput."""
        return self.contract.encode_abi("exactOutput", args=[params.to_tuple()])
