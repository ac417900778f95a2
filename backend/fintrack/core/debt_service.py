"""
Debt Graph Simplifier - who pays whom, how much.

Builds a directed graph of unpaid obligations (debtor -> payer) and nets
reciprocal edges between the same two people. Chains through a third
person (A->B->C) are left alone: only pairwise netting is done.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Any

from fintrack.shared_expenses.models import SharedExpense
from fintrack.shared_expenses.store import SharedExpenseDB
from fintrack.utils.money import ZERO, TOLERANCE, to_cents

logger = logging.getLogger(__name__)

DebtGraph = Dict[str, Dict[str, Decimal]]


@dataclass(frozen=True)
class Transfer:
    """``from_user`` owes ``to_user`` exactly ``amount``."""
    from_user: str
    to_user: str
    amount: Decimal
    from_name: str = ""
    to_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_user,
            "fromName": self.from_name,
            "to": self.to_user,
            "toName": self.to_name,
            "amount": to_cents(self.amount),
        }


class DebtGraphSimplifier:
    """Settlement plans computed on demand from expense records."""

    @classmethod
    def build_graph(cls, records: Iterable[SharedExpense]) -> DebtGraph:
        """
        Accumulate owed[debtor][creditor] over every unpaid, non-self obligation.

        Dict insertion order follows the records, which keeps plans stable.
        """
        owed: DebtGraph = {}
        for record in records:
            creditor = record.paid_by
            for p in record.participants:
                if p.user_id == creditor or p.has_paid:
                    continue
                edges = owed.setdefault(p.user_id, {})
                edges[creditor] = edges.get(creditor, ZERO) + p.amount_owed
        return owed

    @classmethod
    def net_pairs(cls, owed: DebtGraph) -> List[tuple]:
        """
        Net reciprocal edges.

        For each pair present in both directions, the larger side keeps the
        difference and the smaller side is dropped; equal sides (within
        tolerance) cancel out. Returns ``(debtor, creditor, amount)`` tuples
        with amount > 0, each unordered pair at most once.
        """
        settled = set()
        result = []

        for debtor, edges in owed.items():
            for creditor, amount in edges.items():
                pair = frozenset((debtor, creditor))
                if pair in settled:
                    continue
                settled.add(pair)

                reverse = owed.get(creditor, {}).get(debtor)
                if reverse is None:
                    if amount > ZERO:
                        result.append((debtor, creditor, amount))
                    continue

                difference = amount - reverse
                if abs(difference) <= TOLERANCE:
                    continue
                if difference > ZERO:
                    result.append((debtor, creditor, difference))
                else:
                    result.append((creditor, debtor, -difference))

        return result

    @classmethod
    def simplify(cls, records: Iterable[SharedExpense]) -> List[Transfer]:
        """
        Reduce a group's records to a pairwise-netted settlement plan.

        Returns:
            List of Transfer, empty when everything is settled
        """
        records = list(records)
        names: Dict[str, str] = {}
        for record in records:
            if record.paid_by_name:
                names.setdefault(record.paid_by, record.paid_by_name)
            for p in record.participants:
                if p.user_name:
                    names.setdefault(p.user_id, p.user_name)

        transfers = [
            Transfer(
                from_user=debtor,
                to_user=creditor,
                amount=amount,
                from_name=names.get(debtor, ""),
                to_name=names.get(creditor, ""),
            )
            for debtor, creditor, amount in cls.net_pairs(cls.build_graph(records))
        ]

        logger.debug("Simplified %d records into %d transfers", len(records), len(transfers))
        return transfers

    @classmethod
    def for_group(cls, group_id: str) -> List[Transfer]:
        return cls.simplify(SharedExpenseDB.list_by_group(group_id))
