from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional

from ..search_config import search_settings
from ..search_match import normalize_search_value, tokenize_search_value
from ..search_profiles import POST_FIELD_WEIGHTS, POST_HISTORY_PROFILE, ScoringProfile
from .candidates import PostCandidate
from .composite import score_record
from .ranker import ScoredRecord


_SECONDS_PER_DAY = 24 * 60 * 60


def _as_utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _epoch(post: PostCandidate) -> float:
    ts = post.created_timestamp()
    return ts.timestamp() if ts is not None else 0.0


class PostHistorySearch:
    """Relevance search over the crossposted history.

    Scores with the post tuning, adds a small boost for posts from the last
    few days and breaks score ties by recency.
    """

    def __init__(
        self,
        weights: Mapping[str, float] = POST_FIELD_WEIGHTS,
        min_score: Optional[float] = None,
        profile: ScoringProfile = POST_HISTORY_PROFILE,
        recency_boost_days: Optional[float] = None,
    ):
        self.weights = dict(weights)
        self.min_score = float(
            search_settings.post_min_score if min_score is None else min_score
        )
        self.profile = profile
        self.recency_boost_days = float(
            search_settings.recency_boost_days if recency_boost_days is None else recency_boost_days
        )

    def recency_boost(self, post: PostCandidate, now: datetime) -> float:
        ts = post.created_timestamp()
        if ts is None:
            return 0.0
        age_days = (_as_utc(now) - ts).total_seconds() / _SECONDS_PER_DAY
        return max(0.0, self.recency_boost_days - age_days)

    def score(
        self,
        post: PostCandidate,
        query: str,
        tokens: List[str],
        now: Optional[datetime] = None,
    ) -> float:
        now = _as_utc(now)
        blended = score_record(post, query, tokens, self.weights, self.profile)
        return blended + self.recency_boost(post, now)

    def _clamp_limits(self, limit: Optional[int], scan_limit: Optional[int]) -> tuple[int, int]:
        if limit is None:
            safe_limit = search_settings.post_history_default_limit
        else:
            safe_limit = max(1, min(int(limit), search_settings.post_history_max_limit))
        if scan_limit is None:
            scan_limit = search_settings.post_history_default_scan
        safe_scan = max(safe_limit, min(int(scan_limit), search_settings.post_history_max_scan))
        return safe_limit, safe_scan

    def search(
        self,
        posts: Iterable[PostCandidate],
        query: str,
        limit: Optional[int] = None,
        scan_limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[ScoredRecord]:
        """Search migrated posts, newest ``scan_limit`` first, best ``limit`` returned."""
        normalized = normalize_search_value(query)
        if not normalized:
            return []

        safe_limit, safe_scan = self._clamp_limits(limit, scan_limit)
        tokens = tokenize_search_value(normalized)
        now = _as_utc(now)

        migrated = [p for p in posts if p.status == "migrated"]
        # Newest first; among equal timestamps the later-recorded post wins.
        indexed = sorted(
            enumerate(migrated),
            key=lambda item: (_epoch(item[1]), item[0]),
            reverse=True,
        )
        window = [post for _, post in indexed[:safe_scan]]

        scored = [
            ScoredRecord(record=post, score=self.score(post, normalized, tokens, now))
            for post in window
        ]
        kept = [s for s in scored if s.score >= self.min_score]
        kept.sort(key=lambda s: (-s.score, -_epoch(s.record)))
        return kept[:safe_limit]


post_history_search = PostHistorySearch()
