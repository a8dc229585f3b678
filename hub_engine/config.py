from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter generation service
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "google/gemini-2.0-flash-001"
    openrouter_model: str = ""
    query_model: str = ""  # optional override for query derivation only
    generation_timeout_seconds: float = 30.0

    # Query derivation
    max_derived_queries: int = 3
    max_search_queries: int = 2  # deliberately below max_derived_queries

    # Search provider
    search_provider: str = "google"  # google | brave | tavily
    google_api_key: str = ""
    google_cse_id: str = ""
    brave_api_key: str = ""
    tavily_api_key: str = ""
    search_max_results_per_query: int = 10
    search_timeout_seconds: float = 10.0

    # Link filter
    link_denylist: str = (
        "instagram.com,facebook.com,twitter.com,://x.com,tiktok.com,"
        "youtube.com,youtu.be,reddit.com,linkedin.com,pinterest.com,on3.com"
    )

    # Content fetch
    fetch_provider: str = "direct"  # direct | jina | hasdata
    fetch_deadline_ms: int = 750
    fetch_max_body_chars: int = 500_000
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
    )
    jina_api_key: str = ""
    jina_reader_base_url: str = "https://r.jina.ai"
    hasdata_api_key: str = ""

    # Context assembly
    context_max_tokens_per_doc: int = 1000
    chars_per_token: int = 4

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def link_denylist_terms(self) -> list[str]:
        return [t.strip().lower() for t in self.link_denylist.split(",") if t.strip()]


settings = Settings()
