"""Expense group registry.

Groups scope which expenses are pooled for balances and settlement plans.
The list comes from configuration and is attached to the Flask app, so
each deployment (and each test) can supply its own.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app


@dataclass(frozen=True)
class ExpenseGroup:
    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


class GroupRegistry:
    """Enumerable, read-only lookup of known groups.

    Unknown group ids are allowed (user-defined groups); they simply have
    no registered display name.
    """

    EXTENSION_KEY = "expense_groups"

    def __init__(self, groups: Iterable[Tuple[str, str]]):
        self._groups: Dict[str, ExpenseGroup] = {}
        for group_id, name in groups:
            self._groups[group_id] = ExpenseGroup(id=group_id, name=name)

    @classmethod
    def from_config(cls, config) -> "GroupRegistry":
        return cls(config.get("EXPENSE_GROUPS", ()))

    def init_app(self, app):
        app.extensions[self.EXTENSION_KEY] = self

    def all(self) -> List[ExpenseGroup]:
        return list(self._groups.values())

    def get(self, group_id: str) -> Optional[ExpenseGroup]:
        return self._groups.get(group_id)

    def name_for(self, group_id: str, fallback: Optional[str] = None) -> str:
        group = self._groups.get(group_id)
        if group:
            return group.name
        return fallback or group_id

    def __contains__(self, group_id) -> bool:
        return group_id in self._groups

    def __len__(self) -> int:
        return len(self._groups)


def get_registry() -> GroupRegistry:
    """Registry of the current app."""
    return current_app.extensions[GroupRegistry.EXTENSION_KEY]
