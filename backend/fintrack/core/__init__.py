"""Settlement engine: splits, balances and settlement plans."""

from .split_service import SplitCalculator
from .balance_service import Balance, BalanceAggregator
from .debt_service import DebtGraphSimplifier, Transfer

__all__ = [
    "SplitCalculator",
    "Balance",
    "BalanceAggregator",
    "DebtGraphSimplifier",
    "Transfer",
]
