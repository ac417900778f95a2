"""
Balance Aggregator - per-user balance within a group.

Recomputed from the stored records on every call; nothing is cached.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Dict, Any

from fintrack.shared_expenses.models import SharedExpense
from fintrack.shared_expenses.store import SharedExpenseDB
from fintrack.utils.money import ZERO, to_cents


@dataclass(frozen=True)
class Balance:
    total_owed: Decimal = ZERO          # this user owes others
    total_owed_to_user: Decimal = ZERO  # others owe this user

    @property
    def net_balance(self) -> Decimal:
        return self.total_owed_to_user - self.total_owed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalOwed": to_cents(self.total_owed),
            "totalOwedToUser": to_cents(self.total_owed_to_user),
            "netBalance": to_cents(self.net_balance),
        }


class BalanceAggregator:
    """Fold over a group's records for one user."""

    @classmethod
    def compute_balance(cls, records: Iterable[SharedExpense], user_id: str) -> Balance:
        """
        Sum the unpaid obligations owed to and by a user.

        When the user paid a record, every other unpaid participant owes them.
        Otherwise only the user's own unpaid entry (if any) counts against them.
        """
        total_owed = ZERO
        total_owed_to_user = ZERO

        for record in records:
            if record.paid_by == user_id:
                for p in record.participants:
                    if p.user_id != user_id and not p.has_paid:
                        total_owed_to_user += p.amount_owed
            else:
                p = record.participant(user_id)
                if p is not None and not p.has_paid:
                    total_owed += p.amount_owed

        return Balance(total_owed=total_owed, total_owed_to_user=total_owed_to_user)

    @classmethod
    def for_group(cls, group_id: str, user_id: str) -> Balance:
        return cls.compute_balance(SharedExpenseDB.list_by_group(group_id), user_id)
