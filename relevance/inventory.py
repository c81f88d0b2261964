"""In-memory record store used by the HTTP surface and tests.

The real inventory lives elsewhere; this keeps the same read interface.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .search.candidates import AccountCandidate, PostCandidate


class InMemoryInventory:
    def __init__(
        self,
        accounts: Optional[Iterable[AccountCandidate]] = None,
        posts: Optional[Iterable[PostCandidate]] = None,
    ):
        self._accounts: list[AccountCandidate] = list(accounts or [])
        self._posts: list[PostCandidate] = list(posts or [])

    def add_account(self, account: AccountCandidate) -> None:
        self._accounts.append(account)

    def add_post(self, post: PostCandidate) -> None:
        self._posts.append(post)

    def list_accounts(self) -> list[AccountCandidate]:
        return list(self._accounts)

    def list_posts(self) -> list[PostCandidate]:
        """Posts in insertion order."""
        return list(self._posts)

    def clear(self) -> None:
        self._accounts.clear()
        self._posts.clear()
