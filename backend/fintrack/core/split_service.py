"""
Split Calculator - turns a total and a split policy into obligations.

Responsibilities:
- Validate split input before anything is persisted
- Calculate equal splits
- Calculate percentage splits
- Take custom amounts verbatim
- Seed the payer's own share as already paid
"""
import logging
from decimal import Decimal
from typing import List, Sequence

from fintrack.shared_expenses.models import Participant, ParticipantInput
from fintrack.utils.enums import SplitType
from fintrack.utils.errors import InvalidSplit
from fintrack.utils.money import ZERO, within_tolerance

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class SplitCalculator:
    """Pure split computation. No I/O."""

    @classmethod
    def validate_split(
        cls,
        total_amount: Decimal,
        split_type: SplitType,
        participants: Sequence[ParticipantInput]
    ) -> None:
        """
        Check the preconditions of compute_obligations.

        Raises:
            InvalidSplit: if the input cannot produce balanced obligations
        """
        if not participants:
            raise InvalidSplit("At least one participant is required")

        if total_amount <= ZERO:
            raise InvalidSplit("Total amount must be greater than 0")

        user_ids = [p.user_id for p in participants]
        if len(set(user_ids)) != len(user_ids):
            raise InvalidSplit("Each participant may appear only once")

        split_type = SplitType(split_type)

        if split_type == SplitType.PERCENTAGE:
            if any(p.percentage is None for p in participants):
                raise InvalidSplit("Every participant needs a percentage")
            if any(p.percentage < ZERO for p in participants):
                raise InvalidSplit("Percentages cannot be negative")
            total_pct = sum((p.percentage for p in participants), ZERO)
            if not within_tolerance(total_pct, HUNDRED):
                raise InvalidSplit(f"Percentages must add up to 100, got {total_pct}")

        elif split_type == SplitType.CUSTOM:
            if any(p.custom_amount is None for p in participants):
                raise InvalidSplit("Every participant needs a custom amount")
            if any(p.custom_amount < ZERO for p in participants):
                raise InvalidSplit("Custom amounts cannot be negative")
            amounts_sum = sum((p.custom_amount for p in participants), ZERO)
            if not within_tolerance(amounts_sum, total_amount):
                raise InvalidSplit(
                    f"Custom amounts sum to {amounts_sum}, expected {total_amount}"
                )

    @classmethod
    def compute_obligations(
        cls,
        total_amount: Decimal,
        split_type: SplitType,
        participants: Sequence[ParticipantInput],
        payer_id: str
    ) -> List[Participant]:
        """
        Compute each participant's obligation.

        Equal splits divide the total with one Decimal division for everyone;
        any sub-precision remainder is left as is, not redistributed.
        Percentage and custom splits assume validate_split already passed.

        Args:
            total_amount: Positive expense total
            split_type: equal, percentage or custom
            participants: Immutable split inputs, in order
            payer_id: User who paid; their own share starts as paid

        Returns:
            List of Participant obligations, in input order
        """
        if not participants:
            raise InvalidSplit("At least one participant is required")
        if total_amount <= ZERO:
            raise InvalidSplit("Total amount must be greater than 0")

        split_type = SplitType(split_type)

        if split_type == SplitType.EQUAL:
            share = total_amount / len(participants)
            amounts = [share] * len(participants)
        elif split_type == SplitType.PERCENTAGE:
            amounts = [total_amount * p.percentage / HUNDRED for p in participants]
        else:
            amounts = [p.custom_amount for p in participants]

        obligations = []
        for p, amount in zip(participants, amounts):
            obligations.append(Participant(
                user_id=p.user_id,
                user_name=p.user_name,
                amount_owed=amount,
                has_paid=p.user_id == payer_id,
                percentage=p.percentage if split_type == SplitType.PERCENTAGE else None,
            ))

        logger.debug(
            "Computed %s split of %s across %d participants",
            split_type.value, total_amount, len(obligations)
        )
        return obligations
