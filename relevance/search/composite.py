import logging
from typing import Mapping, Sequence

from ..search_match import score_search_field
from ..search_profiles import ACCOUNT_PROFILE, ScoringProfile
from .candidates import FieldValue, SearchCandidate


logger = logging.getLogger("RecordScorer")


def score_field_value(
    query: str,
    tokens: Sequence[str],
    value: FieldValue,
    profile: ScoringProfile = ACCOUNT_PROFILE,
) -> float:
    """Score a single or multi-valued field. Lists take their best item."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        return score_search_field(query, tokens, value, profile=profile)
    scores = [score_search_field(query, tokens, v, profile=profile) for v in value]
    return max(scores) if scores else 0.0


def score_record(
    record: SearchCandidate,
    query: str,
    tokens: Sequence[str],
    weights: Mapping[str, float],
    profile: ScoringProfile = ACCOUNT_PROFILE,
) -> float:
    """Blend weighted field scores into one relevance number.

    The best field counts in full; the remaining fields add a fixed share
    (``profile.secondary_credit``) of their sum.
    """
    weighted: list[float] = []
    for name, value in record.search_fields():
        weight = weights.get(name)
        if weight is None:
            logger.debug(f"No weight configured for field {name!r}; ignoring it")
            weight = 0.0
        weighted.append(score_field_value(query, tokens, value, profile) * float(weight))

    if not weighted:
        return 0.0
    best = max(weighted)
    return best + (sum(weighted) - best) * profile.secondary_credit
