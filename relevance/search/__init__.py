from .candidates import AccountCandidate, PostCandidate, SearchCandidate
from .composite import score_field_value, score_record
from .grouping import RecordGroup, group_accounts
from .ranker import RecordRanker, ScoredRecord, account_ranker
from .post_history import PostHistorySearch, post_history_search
from .guard import DebouncedSearch, SearchSession, SearchState, ranked_evaluator
from .remote import PostSearchResult, RemotePostSearch, RemoteSearchError
from ..search_config import search_settings, SearchSettings

__all__ = [
    "AccountCandidate",
    "PostCandidate",
    "SearchCandidate",
    "score_field_value",
    "score_record",
    "RecordGroup",
    "group_accounts",
    "RecordRanker",
    "ScoredRecord",
    "account_ranker",
    "PostHistorySearch",
    "post_history_search",
    "DebouncedSearch",
    "SearchSession",
    "SearchState",
    "ranked_evaluator",
    "PostSearchResult",
    "RemotePostSearch",
    "RemoteSearchError",
    "search_settings",
    "SearchSettings",
]
