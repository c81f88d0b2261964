from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RELEVANCE_SEARCH_")

    account_min_score: float = 22.0
    post_min_score: float = 22.0

    debounce_ms: int = 220
    remote_result_limit: int = 120

    post_history_default_limit: int = 60
    post_history_max_limit: int = 200
    post_history_default_scan: int = 3000
    post_history_max_scan: int = 8000
    recency_boost_days: float = 7.0

    api_default_limit: int = 80
    api_max_limit: int = 200
    api_min_fetch: int = 80
    api_fetch_multiplier: int = 4


search_settings = SearchSettings()
