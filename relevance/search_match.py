from __future__ import annotations

import re
from typing import Sequence

from .search_profiles import ACCOUNT_PROFILE, ScoringProfile


_DISALLOWED_RE = re.compile(r"[^a-z0-9@#._\-\s]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_search_value(value: str | None) -> str:
    """Canonicalize text for comparison.

    Lowercases, replaces anything outside ``a-z 0-9 @ # . _ -`` with a space,
    collapses whitespace and trims. Idempotent.
    """
    text = (value or "").lower()
    text = _DISALLOWED_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def tokenize_search_value(value: str) -> list[str]:
    if not value:
        return []
    return [tok for tok in value.split(" ") if tok]


def build_bigrams(value: str) -> set[str]:
    """Character shingles of length two.

    A single character is its own shingle so one-letter queries still compare.
    """
    if len(value) < 2:
        return {value} if value else set()
    return {value[i : i + 2] for i in range(len(value) - 1)}


def ordered_subsequence_score(query: str, candidate: str) -> float:
    """Fraction of ``query`` characters found in order inside ``candidate``.

    Characters that cannot be found are skipped without moving the cursor.
    """
    if not query or not candidate:
        return 0.0

    matched = 0
    cursor = 0
    for ch in query:
        idx = candidate.find(ch, cursor)
        if idx < 0:
            continue
        matched += 1
        cursor = idx + 1
    return float(matched) / float(len(query))


def dice_coefficient(a: str, b: str) -> float:
    a_grams = build_bigrams(a)
    b_grams = build_bigrams(b)
    if not a_grams or not b_grams:
        return 0.0
    overlap = len(a_grams & b_grams)
    return (2.0 * overlap) / float(len(a_grams) + len(b_grams))


def score_search_field(
    query: str,
    tokens: Sequence[str],
    value: str | None,
    *,
    profile: ScoringProfile = ACCOUNT_PROFILE,
) -> float:
    """Score one field value against an already normalized query.

    The score adds up four signals:
    - exact / prefix / substring bonus (first match wins)
    - per-token hits plus a coverage ratio bonus
    - ordered subsequence ratio (abbreviations, gaps)
    - bigram Dice overlap (typos, partial strings)
    """
    candidate = normalize_search_value(value)
    if not query or not candidate:
        return 0.0

    score = 0.0
    if candidate == query:
        score += profile.exact_bonus
    elif candidate.startswith(query):
        score += profile.prefix_bonus
    elif query in candidate:
        score += profile.substring_bonus

    matched = 0
    for tok in tokens:
        if tok not in candidate:
            continue
        matched += 1
        if len(tok) >= profile.long_token_length:
            score += profile.long_token_bonus
        else:
            score += profile.short_token_bonus
    if tokens:
        score += (float(matched) / float(len(tokens))) * profile.coverage_weight

    score += ordered_subsequence_score(query, candidate) * profile.subsequence_weight
    score += dice_coefficient(query, candidate) * profile.bigram_weight
    return score
