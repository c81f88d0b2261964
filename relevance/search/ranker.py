from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, Sequence, TypeVar

from ..search_config import search_settings
from ..search_match import normalize_search_value, tokenize_search_value
from ..search_profiles import ACCOUNT_FIELD_WEIGHTS, ACCOUNT_PROFILE, ScoringProfile
from .composite import score_record
from .grouping import RecordGroup


T = TypeVar("T")


@dataclass(frozen=True)
class ScoredRecord(Generic[T]):
    record: T
    score: float


class RecordRanker:
    """Threshold filter and relevance sort over composite record scores."""

    def __init__(
        self,
        weights: Mapping[str, float],
        min_score: float = 22.0,
        profile: ScoringProfile = ACCOUNT_PROFILE,
    ):
        self.weights = dict(weights)
        self.min_score = float(min_score)
        self.profile = profile

    def score_all(self, records: Sequence[Any], raw_query: str) -> List[ScoredRecord]:
        """Return scores aligned with input order. Empty query scores nothing."""
        query = normalize_search_value(raw_query)
        if not query:
            return [ScoredRecord(record=r, score=0.0) for r in records]
        tokens = tokenize_search_value(query)
        return [
            ScoredRecord(
                record=r,
                score=score_record(r, query, tokens, self.weights, self.profile),
            )
            for r in records
        ]

    def _filter_and_sort(self, scored: List[ScoredRecord]) -> List[ScoredRecord]:
        kept = [s for s in scored if s.score >= self.min_score]
        kept.sort(key=lambda s: (-s.score, s.record.tie_break_key()))
        return kept

    def rank_scored(self, records: Sequence[Any], raw_query: str) -> List[ScoredRecord]:
        if not normalize_search_value(raw_query):
            return [ScoredRecord(record=r, score=0.0) for r in records]
        return self._filter_and_sort(self.score_all(records, raw_query))

    def rank(self, records: Sequence[Any], raw_query: str) -> List[Any]:
        """Rank records by relevance to ``raw_query``.

        An empty query returns the records unchanged.
        """
        if not normalize_search_value(raw_query):
            return list(records)
        return [s.record for s in self.rank_scored(records, raw_query)]

    def rank_groups(self, groups: Sequence[RecordGroup], raw_query: str) -> List[RecordGroup]:
        """Rank within each group and drop groups with no remaining matches."""
        if not normalize_search_value(raw_query):
            return list(groups)

        ranked: List[RecordGroup] = []
        for group in groups:
            records = self.rank(group.records, raw_query)
            if not records:
                continue
            ranked.append(
                RecordGroup(key=group.key, name=group.name, emoji=group.emoji, records=records)
            )
        return ranked


account_ranker = RecordRanker(
    ACCOUNT_FIELD_WEIGHTS,
    min_score=search_settings.account_min_score,
    profile=ACCOUNT_PROFILE,
)
