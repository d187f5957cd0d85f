"""
Formatter — converts wei amounts to AVAX display strings and tests transactions
against the value and gas-fee thresholds.

All amount arithmetic is done on ints/Decimals; a display string is only
produced once the wei product is complete.
"""
from decimal import Decimal
from web3 import Web3
from agents.sentinel.models.schemas import ClassificationResult, Quantity, Transaction, parse_quantity
from agents.sentinel.config import CURRENCY_SYMBOL, DISPLAY_PRECISION


def to_int(value: Quantity | None) -> int:
    """Hex or decimal quantity as int; missing values count as zero."""
    return parse_quantity(value) or 0


def _to_avax(base_amount: Quantity) -> Decimal:
    return Decimal(Web3.from_wei(to_int(base_amount), "ether"))


def to_display_units(base_amount: Quantity, precision: int = DISPLAY_PRECISION) -> str:
    """Format a wei amount as AVAX with a fixed number of decimals."""
    return f"{_to_avax(base_amount):.{precision}f}"


def compute_fee(gas_used: Quantity, gas_price: Quantity) -> str:
    """Gas fee in AVAX: gas_used * gas_price in wei, then formatted."""
    return to_display_units(to_int(gas_used) * to_int(gas_price))


def classify(
    tx: Transaction,
    threshold_value: float,
    threshold_fee: float,
    gas_used: Quantity | None = None,
) -> ClassificationResult:
    """
    Check a transaction against both thresholds. Both checks always run.

    gas_used should come from the receipt when one was fetched; without it the
    transaction's own gasUsed is used, and a missing value means a zero fee.
    """
    if gas_used is None:
        gas_used = tx.gas_used
    value_wei = tx.value_wei
    fee_wei = to_int(gas_used) * tx.gas_price_wei

    reasons = []
    if _to_avax(value_wei) > Decimal(str(threshold_value)):
        reasons.append(f"Large transaction: {to_display_units(value_wei)} {CURRENCY_SYMBOL}")
    if _to_avax(fee_wei) > Decimal(str(threshold_fee)):
        reasons.append(f"High gas fee: {to_display_units(fee_wei)} {CURRENCY_SYMBOL}")

    return ClassificationResult(is_significant=bool(reasons), reasons=reasons)


def shorten_address(address: str | None) -> str:
    """0x1234...5678 style; cosmetic only, short input is not rejected."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"
