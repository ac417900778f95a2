"""Money helpers shared by the engine and the JSON serializers."""
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
CENT = Decimal("0.01")
# Tolerance used by every "sums to" check in the ledger.
TOLERANCE = Decimal("0.01")


def within_tolerance(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) <= TOLERANCE


def to_cents(amount: Decimal) -> float:
    """Round half-up to cents for display."""
    return float(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))
