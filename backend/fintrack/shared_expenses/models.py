"""
Shared expense models.

Python-side records use snake_case dataclasses; the Mongo documents and the
JSON API keep the camelCase shape the front-end already consumes.
Amounts are Decimal in memory and Decimal128 in Mongo.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any, List

from bson import ObjectId
from bson.decimal128 import Decimal128

from fintrack.utils.enums import SplitType
from fintrack.utils.errors import ValidationError
from fintrack.utils.money import to_cents
from fintrack.utils.validators import require_keys, parse_decimal, parse_datetime, utcnow


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(str(value))


def _isoformat(value):
    return value.isoformat() if hasattr(value, "isoformat") else value


# ==================== RECORDS ====================

@dataclass
class Participant:
    """One participant's obligation toward one expense."""
    user_id: str
    user_name: str
    amount_owed: Decimal
    has_paid: bool = False
    percentage: Optional[Decimal] = None

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "userId": self.user_id,
            "userName": self.user_name,
            "amountOwed": Decimal128(self.amount_owed),
            "hasPaid": self.has_paid,
        }
        if self.percentage is not None:
            doc["percentage"] = Decimal128(self.percentage)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Participant":
        percentage = doc.get("percentage")
        return cls(
            user_id=doc["userId"],
            user_name=doc.get("userName", ""),
            amount_owed=_to_decimal(doc["amountOwed"]),
            has_paid=bool(doc.get("hasPaid", False)),
            percentage=_to_decimal(percentage) if percentage is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "userId": self.user_id,
            "userName": self.user_name,
            "amountOwed": to_cents(self.amount_owed),
            "hasPaid": self.has_paid,
        }
        if self.percentage is not None:
            data["percentage"] = float(self.percentage)
        return data


@dataclass
class SharedExpense:
    """A group expense: one payer, its participants and their obligations."""
    group_id: str
    group_name: str
    created_by: str
    paid_by: str
    total_amount: Decimal
    split_type: SplitType
    participants: List[Participant]

    created_by_name: str = ""
    paid_by_name: str = ""
    description: str = ""
    category: str = "Other"
    payment_method: str = "Cash"
    date: datetime = field(default_factory=utcnow)

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def participant(self, user_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.user_id == user_id:
                return p
        return None

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "groupId": self.group_id,
            "groupName": self.group_name,
            "createdBy": self.created_by,
            "createdByName": self.created_by_name,
            "paidBy": self.paid_by,
            "paidByName": self.paid_by_name,
            "totalAmount": Decimal128(self.total_amount),
            "splitType": SplitType(self.split_type).value,
            "participants": [p.to_document() for p in self.participants],
            "description": self.description,
            "category": self.category,
            "paymentMethod": self.payment_method,
            "date": self.date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.id:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "SharedExpense":
        return cls(
            id=str(doc["_id"]),
            group_id=doc["groupId"],
            group_name=doc.get("groupName", doc["groupId"]),
            created_by=doc.get("createdBy", ""),
            created_by_name=doc.get("createdByName", ""),
            paid_by=doc["paidBy"],
            paid_by_name=doc.get("paidByName", ""),
            total_amount=_to_decimal(doc["totalAmount"]),
            split_type=SplitType(doc.get("splitType", SplitType.EQUAL.value)),
            participants=[Participant.from_document(p) for p in doc.get("participants", [])],
            description=doc.get("description", ""),
            category=doc.get("category", "Other"),
            payment_method=doc.get("paymentMethod", "Cash"),
            date=doc.get("date"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "groupId": self.group_id,
            "groupName": self.group_name,
            "createdBy": self.created_by,
            "createdByName": self.created_by_name,
            "paidBy": self.paid_by,
            "paidByName": self.paid_by_name,
            "totalAmount": to_cents(self.total_amount),
            "splitType": SplitType(self.split_type).value,
            "participants": [p.to_dict() for p in self.participants],
            "description": self.description,
            "category": self.category,
            "paymentMethod": self.payment_method,
            "date": _isoformat(self.date),
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


# ==================== REQUEST SCHEMA ====================

@dataclass(frozen=True)
class ParticipantInput:
    """Immutable split input for one participant."""
    user_id: str
    user_name: str
    percentage: Optional[Decimal] = None
    custom_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class CreateExpenseRequest:
    """Typed body of a create-expense request."""
    group_id: str
    paid_by: str
    created_by: str
    total_amount: Decimal
    split_type: SplitType
    participants: tuple

    group_name: Optional[str] = None
    paid_by_name: str = ""
    created_by_name: str = ""
    description: str = ""
    category: str = "Other"
    payment_method: str = "Cash"
    date: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]], created_by: str) -> "CreateExpenseRequest":
        """
        Build a request from a JSON body.

        Raises:
            ValidationError: if a required field is missing or malformed
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        require_keys(payload, "groupId", "paidBy", "totalAmount", "splitType", "participants")

        try:
            split_type = SplitType(payload["splitType"])
        except ValueError:
            allowed = ", ".join(t.value for t in SplitType)
            raise ValidationError(f"splitType must be one of: {allowed}")

        raw_participants = payload["participants"]
        if not isinstance(raw_participants, list) or not raw_participants:
            raise ValidationError("participants must be a non-empty list")

        participants = []
        for index, raw in enumerate(raw_participants):
            if not isinstance(raw, dict):
                raise ValidationError(f"participants[{index}] must be an object")
            require_keys(raw, "userId", "userName")
            percentage = raw.get("percentage")
            custom_amount = raw.get("customAmount")
            participants.append(ParticipantInput(
                user_id=str(raw["userId"]),
                user_name=str(raw["userName"]),
                percentage=(
                    parse_decimal(percentage, f"participants[{index}].percentage")
                    if percentage not in (None, "") else None
                ),
                custom_amount=(
                    parse_decimal(custom_amount, f"participants[{index}].customAmount")
                    if custom_amount not in (None, "") else None
                ),
            ))

        date = payload.get("date")
        return cls(
            group_id=str(payload["groupId"]),
            paid_by=str(payload["paidBy"]),
            created_by=created_by,
            total_amount=parse_decimal(payload["totalAmount"], "totalAmount"),
            split_type=split_type,
            participants=tuple(participants),
            group_name=payload.get("groupName") or None,
            paid_by_name=payload.get("paidByName") or "",
            created_by_name=payload.get("createdByName") or "",
            description=payload.get("description") or "",
            category=payload.get("category") or "Other",
            payment_method=payload.get("paymentMethod") or "Cash",
            date=parse_datetime(date, "date") if date else None,
        )
