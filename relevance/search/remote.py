from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config import settings
from ..search_config import search_settings


class RemoteSearchError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class PostSearchResult:
    twitter_id: str
    twitter_username: str
    bsky_identifier: str
    score: float
    tweet_text: Optional[str] = None
    bsky_uri: Optional[str] = None
    bsky_cid: Optional[str] = None
    created_at: Optional[str] = None
    post_url: Optional[str] = None
    twitter_url: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "PostSearchResult":
        try:
            score = float(data.get("score", 0.0) or 0.0)
        except (TypeError, ValueError):
            score = 0.0
        return cls(
            twitter_id=str(data.get("twitterId", "") or ""),
            twitter_username=str(data.get("twitterUsername", "") or ""),
            bsky_identifier=str(data.get("bskyIdentifier", "") or ""),
            score=score,
            tweet_text=data.get("tweetText"),
            bsky_uri=data.get("bskyUri"),
            bsky_cid=data.get("bskyCid"),
            created_at=data.get("createdAt"),
            post_url=data.get("postUrl"),
            twitter_url=data.get("twitterUrl"),
        )


class RemotePostSearch:
    """Client for a server that scores the persisted post history.

    Instances are callable with a query, so one can be handed to
    :class:`~relevance.search.guard.DebouncedSearch` as its evaluator.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.remote_base_url).rstrip("/")
        self.api_key = settings.api_key if api_key is None else api_key
        self.timeout = settings.remote_timeout_s if timeout is None else timeout
        self.limit = search_settings.remote_result_limit if limit is None else limit
        self.transport = transport

    def _get_endpoint(self) -> str:
        return f"{self.base_url}/api/posts/search"

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"X-API-Key": self.api_key}

    async def search(self, query: str) -> list[PostSearchResult]:
        if not (query or "").strip():
            return []

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    self._get_endpoint(),
                    params={"q": query, "limit": self.limit},
                    headers=self._headers(),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise RemoteSearchError(f"Post search failed with HTTP {code}", status_code=code) from e
        except httpx.HTTPError as e:
            raise RemoteSearchError(f"Post search request failed: {e}") from e
        except ValueError as e:
            raise RemoteSearchError("Post search returned invalid JSON") from e

        if not isinstance(data, list):
            return []
        return [PostSearchResult.from_payload(item) for item in data if isinstance(item, dict)]

    async def __call__(self, query: str) -> list[PostSearchResult]:
        return await self.search(query)
