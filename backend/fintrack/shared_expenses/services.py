"""Shared expense ledger - validates, splits and persists group expenses."""
import logging
from typing import List

from fintrack.core import SplitCalculator
from fintrack.groups.registry import GroupRegistry
from fintrack.shared_expenses.models import CreateExpenseRequest, SharedExpense
from fintrack.shared_expenses.store import SharedExpenseDB
from fintrack.utils.errors import InvalidSplit
from fintrack.utils.validators import utcnow

logger = logging.getLogger(__name__)


class SharedExpenseService:
    """Entry point for creating and updating shared expenses."""

    @classmethod
    def create_expense(cls, request: CreateExpenseRequest, registry: GroupRegistry) -> SharedExpense:
        """
        Validate the split, compute obligations and store the record.

        Nothing is written unless the split validates.

        Raises:
            InvalidSplit: if the split cannot balance to the total
            ValidationError: if the record is structurally incomplete
        """
        try:
            SplitCalculator.validate_split(
                request.total_amount, request.split_type, request.participants
            )
        except InvalidSplit as e:
            logger.warning("Rejected split for group %s: %s", request.group_id, e.message)
            raise

        participants = SplitCalculator.compute_obligations(
            total_amount=request.total_amount,
            split_type=request.split_type,
            participants=request.participants,
            payer_id=request.paid_by,
        )

        record = SharedExpense(
            group_id=request.group_id,
            group_name=registry.name_for(request.group_id, fallback=request.group_name),
            created_by=request.created_by,
            created_by_name=request.created_by_name,
            paid_by=request.paid_by,
            paid_by_name=request.paid_by_name,
            total_amount=request.total_amount,
            split_type=request.split_type,
            participants=participants,
            description=request.description,
            category=request.category,
            payment_method=request.payment_method,
            date=request.date or utcnow(),
        )
        return SharedExpenseDB.create(record)

    @classmethod
    def get_expense(cls, expense_id: str) -> SharedExpense:
        return SharedExpenseDB.get(expense_id)

    @classmethod
    def list_group_expenses(cls, group_id: str) -> List[SharedExpense]:
        return SharedExpenseDB.list_by_group(group_id)

    @classmethod
    def list_user_expenses(cls, user_id: str) -> List[SharedExpense]:
        return SharedExpenseDB.list_by_user(user_id)

    @classmethod
    def mark_paid(cls, expense_id: str, user_id: str) -> SharedExpense:
        return SharedExpenseDB.mark_participant_paid(expense_id, user_id)

    @classmethod
    def delete_expense(cls, expense_id: str) -> SharedExpense:
        return SharedExpenseDB.delete(expense_id)
