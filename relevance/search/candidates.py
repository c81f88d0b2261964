"""Searchable record kinds.

Each kind exposes ``search_fields()`` so the scorers can be written once
against that capability instead of against a concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Sequence, Union


FieldValue = Union[str, Sequence[str], None]

DEFAULT_GROUP_NAME = "Ungrouped"
DEFAULT_GROUP_EMOJI = "📁"


class SearchCandidate(Protocol):
    def search_fields(self) -> list[tuple[str, FieldValue]]: ...

    def tie_break_key(self) -> str: ...


def normalize_actor(actor: str) -> str:
    return (actor or "").strip().lstrip("@").lower()


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 / SQLite timestamp. Naive values are taken as UTC."""
    s = (raw or "").strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(s)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class AccountCandidate:
    """An account mapping: one Bluesky target fed by one or more Twitter sources."""

    id: str
    bsky_identifier: str
    twitter_usernames: tuple[str, ...] = field(default_factory=tuple)
    owner: str = ""
    group_name: str = ""
    group_emoji: str = ""
    enabled: bool = True

    def search_fields(self) -> list[tuple[str, FieldValue]]:
        return [
            ("twitter_usernames", list(self.twitter_usernames)),
            ("bsky_identifier", self.bsky_identifier),
            ("owner", self.owner),
            ("group_name", self.group_name),
        ]

    def tie_break_key(self) -> str:
        return f"{(self.owner or '').lower()}-{(self.bsky_identifier or '').lower()}"

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AccountCandidate":
        usernames = data.get("twitterUsernames") or []
        if isinstance(usernames, str):
            usernames = [usernames]
        return cls(
            id=str(data.get("id", "")),
            bsky_identifier=str(data.get("bskyIdentifier", "") or ""),
            twitter_usernames=tuple(str(u) for u in usernames),
            owner=str(data.get("owner", "") or ""),
            group_name=str(data.get("groupName", "") or ""),
            group_emoji=str(data.get("groupEmoji", "") or ""),
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "bskyIdentifier": self.bsky_identifier,
            "twitterUsernames": list(self.twitter_usernames),
            "owner": self.owner,
            "groupName": self.group_name,
            "groupEmoji": self.group_emoji,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class PostCandidate:
    """A crossposted tweet as recorded in the local history."""

    twitter_id: str
    twitter_username: str
    bsky_identifier: str
    tweet_text: str = ""
    bsky_uri: str = ""
    bsky_cid: str = ""
    status: str = "migrated"
    created_at: str = ""

    def search_fields(self) -> list[tuple[str, FieldValue]]:
        return [
            ("twitter_username", self.twitter_username),
            ("bsky_identifier", self.bsky_identifier),
            ("tweet_text", self.tweet_text),
            ("twitter_id", self.twitter_id),
        ]

    def tie_break_key(self) -> str:
        return f"{(self.bsky_identifier or '').lower()}-{(self.twitter_id or '').lower()}"

    def created_timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    @property
    def post_url(self) -> Optional[str]:
        if not self.bsky_uri:
            return None
        parts = [p for p in self.bsky_uri.split("/") if p]
        if not parts:
            return None
        return f"https://bsky.app/profile/{self.bsky_identifier}/post/{parts[-1]}"

    @property
    def twitter_url(self) -> Optional[str]:
        if not self.twitter_username or not self.twitter_id:
            return None
        return f"https://x.com/{normalize_actor(self.twitter_username)}/status/{self.twitter_id}"
