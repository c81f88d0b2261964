"""Scoring tunings and field weight tables.

The numbers are empirically tuned; tests assert literal scores against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ScoringProfile:
    """Constants consumed by the field and record scorers."""

    exact_bonus: float
    prefix_bonus: float
    substring_bonus: float
    long_token_bonus: float = 18.0
    short_token_bonus: float = 12.0
    long_token_length: int = 4
    coverage_weight: float = 46.0
    subsequence_weight: float = 45.0
    bigram_weight: float = 52.0
    # Share of the non-best weighted field scores added on top of the best one.
    secondary_credit: float = 0.24


ACCOUNT_PROFILE = ScoringProfile(
    exact_bonus=170.0,
    prefix_bonus=138.0,
    substring_bonus=108.0,
)

POST_HISTORY_PROFILE = ScoringProfile(
    exact_bonus=170.0,
    prefix_bonus=140.0,
    substring_bonus=112.0,
    coverage_weight=48.0,
    subsequence_weight=46.0,
    bigram_weight=55.0,
    secondary_credit=0.22,
)

ACCOUNT_FIELD_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "twitter_usernames": 1.24,
        "bsky_identifier": 1.2,
        "owner": 0.92,
        "group_name": 0.72,
    }
)

POST_FIELD_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "twitter_username": 1.25,
        "bsky_identifier": 1.18,
        "tweet_text": 0.98,
        "twitter_id": 0.72,
    }
)
