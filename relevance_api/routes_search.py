from __future__ import annotations

import math
from typing import Any, Optional

from fastapi import APIRouter

from relevance.inventory import InMemoryInventory
from relevance.search import account_ranker, group_accounts, post_history_search
from relevance.search.grouping import RecordGroup
from relevance.search.ranker import ScoredRecord
from relevance.search_config import search_settings
from relevance.search_match import normalize_search_value
from relevance_api.deps import ApiKeyDep, InventoryDep

router = APIRouter(tags=["search"])


def _post_payload(hit: ScoredRecord) -> dict[str, Any]:
    post = hit.record
    return {
        "twitterId": post.twitter_id,
        "twitterUsername": post.twitter_username,
        "bskyIdentifier": post.bsky_identifier,
        "tweetText": post.tweet_text or None,
        "bskyUri": post.bsky_uri or None,
        "bskyCid": post.bsky_cid or None,
        "createdAt": post.created_at or None,
        "postUrl": post.post_url,
        "twitterUrl": post.twitter_url,
        "score": round(hit.score, 2),
    }


def _parse_limit(raw: Optional[str]) -> int:
    """Clamp a query-string limit; anything non-numeric falls back to the default."""
    try:
        value = float(raw) if raw else float(search_settings.api_default_limit)
    except ValueError:
        value = float(search_settings.api_default_limit)
    if not math.isfinite(value):
        value = float(search_settings.api_default_limit)
    return max(1, min(int(value), search_settings.api_max_limit))


def _group_payload(group: RecordGroup, scores: dict[str, float]) -> dict[str, Any]:
    payload = group.to_dict()
    for item in payload["records"]:
        item["score"] = round(scores.get(item["id"], 0.0), 2)
    return payload


@router.get("/posts/search", response_model=list, dependencies=[ApiKeyDep])
async def search_posts(
    q: str = "",
    limit: Optional[str] = None,
    inventory: InMemoryInventory = InventoryDep,
) -> list:
    """Relevance search over the crossposted history."""
    if not q.strip():
        return []

    safe_limit = _parse_limit(limit)
    fetch = min(
        search_settings.api_max_limit,
        max(search_settings.api_min_fetch, safe_limit * search_settings.api_fetch_multiplier),
    )

    hits = post_history_search.search(inventory.list_posts(), q, limit=fetch)
    return [_post_payload(h) for h in hits[:safe_limit]]


@router.get("/accounts/search", response_model=dict, dependencies=[ApiKeyDep])
async def search_accounts(
    q: str = "",
    grouped: bool = True,
    inventory: InMemoryInventory = InventoryDep,
) -> dict:
    accounts = inventory.list_accounts()
    query = normalize_search_value(q)
    has_query = bool(query)
    scores = {s.record.id: s.score for s in account_ranker.score_all(accounts, q)}

    if grouped:
        groups = account_ranker.rank_groups(group_accounts(accounts), q)
    else:
        if has_query:
            records = account_ranker.rank(accounts, q)
        else:
            records = sorted(accounts, key=lambda a: a.tie_break_key())
        groups = [
            RecordGroup(
                key="__all__",
                name="Search Results" if has_query else "All Accounts",
                emoji="🔎" if has_query else "🌐",
                records=records,
            )
        ]

    return {
        "query": query,
        "total": sum(len(g.records) for g in groups),
        "groups": [_group_payload(g, scores) for g in groups],
    }
