"""
Expense Record Store - MongoDB persistence for shared expenses.

Every mutation is a single-document operation, so readers only ever see a
record fully present or fully absent. Nothing here recomputes obligations.
"""
import logging
from typing import List

from bson import ObjectId, errors
from pymongo import ASCENDING, DESCENDING

from fintrack.extensions import db as mongo
from fintrack.shared_expenses.models import SharedExpense
from fintrack.utils.errors import NotFound, ValidationError
from fintrack.utils.money import ZERO
from fintrack.utils.validators import utcnow

logger = logging.getLogger(__name__)

# Newest first; _id breaks ties between records sharing a date
NEWEST_FIRST = [("date", DESCENDING), ("_id", DESCENDING)]


def _object_id(record_id: str) -> ObjectId:
    try:
        return ObjectId(record_id)
    except (errors.InvalidId, TypeError):
        raise NotFound("Expense not found")


class SharedExpenseDB:
    """Database operations for shared expense records."""

    COLLECTION = "shared_expenses"

    @classmethod
    def collection(cls):
        return mongo[cls.COLLECTION]

    @classmethod
    def ensure_indexes(cls) -> None:
        col = cls.collection()
        col.create_index([("groupId", ASCENDING), ("date", DESCENDING)])
        col.create_index([("groupId", ASCENDING), ("createdBy", ASCENDING)])
        col.create_index("participants.userId")

    @classmethod
    def create(cls, record: SharedExpense) -> SharedExpense:
        """
        Persist a fully computed record.

        Args:
            record: Expense with obligations already computed

        Returns:
            The stored record, with id and timestamps set
        """
        if not record.participants:
            raise ValidationError("An expense needs at least one participant")
        if record.total_amount <= ZERO:
            raise ValidationError("Total amount must be greater than 0")

        now = utcnow()
        record.created_at = now
        record.updated_at = now
        if record.date is None:
            record.date = now

        doc = record.to_document()
        doc.pop("_id", None)
        result = cls.collection().insert_one(doc)
        record.id = str(result.inserted_id)

        logger.info(
            "Created shared expense %s in group %s (%s, %d participants)",
            record.id, record.group_id, record.split_type.value, len(record.participants)
        )
        return record

    @classmethod
    def get(cls, record_id: str) -> SharedExpense:
        doc = cls.collection().find_one({"_id": _object_id(record_id)})
        if not doc:
            raise NotFound("Expense not found")
        return SharedExpense.from_document(doc)

    @classmethod
    def list_by_group(cls, group_id: str) -> List[SharedExpense]:
        """All records of a group, most recent first."""
        docs = cls.collection().find({"groupId": group_id}).sort(NEWEST_FIRST)
        return [SharedExpense.from_document(d) for d in docs]

    @classmethod
    def list_by_user(cls, user_id: str) -> List[SharedExpense]:
        """Records where the user is creator, payer or participant, most recent first."""
        docs = cls.collection().find({
            "$or": [
                {"createdBy": user_id},
                {"paidBy": user_id},
                {"participants.userId": user_id},
            ]
        }).sort(NEWEST_FIRST)

        # deduplicate by record identity
        seen = set()
        records = []
        for d in docs:
            if d["_id"] in seen:
                continue
            seen.add(d["_id"])
            records.append(SharedExpense.from_document(d))
        return records

    @classmethod
    def mark_participant_paid(cls, record_id: str, user_id: str) -> SharedExpense:
        """
        Set one participant's hasPaid flag. Repeating the call is a no-op.

        Raises:
            NotFound: if the record or the participant does not exist
        """
        oid = _object_id(record_id)
        doc = cls.collection().find_one({"_id": oid})
        if doc is None:
            raise NotFound("Expense not found")

        index = next(
            (i for i, p in enumerate(doc.get("participants", [])) if p.get("userId") == user_id),
            None,
        )
        if index is None:
            raise NotFound("Participant not found")
        if doc["participants"][index].get("hasPaid"):
            return SharedExpense.from_document(doc)

        # guarded on the slot still holding this unpaid participant
        result = cls.collection().update_one(
            {
                "_id": oid,
                f"participants.{index}.userId": user_id,
                f"participants.{index}.hasPaid": False,
            },
            {"$set": {f"participants.{index}.hasPaid": True, "updatedAt": utcnow()}},
        )
        if result.modified_count:
            logger.info("Marked %s as paid on shared expense %s", user_id, record_id)
        return cls.get(record_id)

    @classmethod
    def delete(cls, record_id: str) -> SharedExpense:
        """
        Remove a record and all its obligations.

        Raises:
            NotFound: if the record does not exist
        """
        doc = cls.collection().find_one_and_delete({"_id": _object_id(record_id)})
        if doc is None:
            raise NotFound("Expense not found")

        logger.info("Deleted shared expense %s from group %s", record_id, doc.get("groupId"))
        return SharedExpense.from_document(doc)
