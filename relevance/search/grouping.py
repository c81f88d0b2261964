from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .candidates import DEFAULT_GROUP_EMOJI, DEFAULT_GROUP_NAME, AccountCandidate


@dataclass
class RecordGroup:
    key: str
    name: str
    emoji: str
    records: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "emoji": self.emoji,
            "records": [r.to_dict() if hasattr(r, "to_dict") else r for r in self.records],
        }


def group_meta(group_name: str | None, group_emoji: str | None) -> tuple[str, str, str]:
    name = (group_name or "").strip() or DEFAULT_GROUP_NAME
    emoji = (group_emoji or "").strip() or DEFAULT_GROUP_EMOJI
    return name.lower(), name, emoji


def group_accounts(accounts: Iterable[AccountCandidate]) -> list[RecordGroup]:
    """Bucket accounts by group name.

    Groups are ordered by name with the default group last; members are
    ordered by their tie-break key.
    """
    groups: dict[str, RecordGroup] = {}
    for account in accounts:
        key, name, emoji = group_meta(account.group_name, account.group_emoji)
        existing = groups.get(key)
        if existing is None:
            groups[key] = RecordGroup(key=key, name=name, emoji=emoji, records=[account])
            continue
        existing.records.append(account)

    ordered = sorted(
        groups.values(),
        key=lambda g: (g.name == DEFAULT_GROUP_NAME, g.name.lower()),
    )
    for group in ordered:
        group.records.sort(key=lambda r: r.tie_break_key())
    return ordered
