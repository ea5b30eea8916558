"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. Environment variables, e.g. OPENAI_API_KEY=sk-abc123
#   2. A .env file in the working directory (local development)
#
# Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY``.  Defaults
# apply when neither source sets a value.
#
# Every retrieval and embedding threshold lives here rather than as a
# module constant, so deployments can tune them without code changes.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SyncBrain application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Generative model / embedding providers ===
    # Empty string = "not configured"; provider selection in main.py skips
    # providers with empty keys and falls through to the next.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, etc.)
    openai_text_model: str = ""
    openai_embedding_model: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    ollama_base_url: str = "http://localhost:11434"
    llm_timeout_seconds: float = Field(default=25.0, gt=0)

    # === Video metadata ===
    youtube_api_key: str = ""
    youtube_api_base_url: str = "https://www.googleapis.com/youtube/v3"

    # === Storage ===
    sqlite_db_path: str = "data/syncbrain.db"
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "syncbrain_content"

    # === Embedding policy ===
    # Text up to this many characters is embedded as-is; longer text is
    # summarized first and hard-truncated if summarization fails.
    embedding_max_direct_chars: int = Field(default=8000, gt=0)
    # Only the leading portion of an oversized text is sent to the summarizer.
    summary_input_chars: int = Field(default=20000, gt=0)
    summary_max_tokens: int = Field(default=600, gt=0)

    # === Retrieval ===
    retrieval_top_k: int = Field(default=5, gt=0)
    retrieval_keep_top_n: int = Field(default=2, gt=0)
    context_excerpt_chars: int = Field(default=2000, gt=0)
    answer_max_tokens: int = Field(default=1000, gt=0)
    snippet_chars: int = Field(default=100, ge=0)

    # === Browser automation ===
    browser_headless: bool = True
    browser_executable_path: str = ""
    browser_navigation_timeout: float = Field(default=30.0, gt=0)
    max_page_text_chars: int = Field(default=15000, gt=0)

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    @model_validator(mode="after")
    def _check_retrieval_window(self) -> "Settings":
        if self.retrieval_keep_top_n >= self.retrieval_top_k:
            raise ValueError(
                "retrieval_keep_top_n must be less than retrieval_top_k "
                f"({self.retrieval_keep_top_n} >= {self.retrieval_top_k})"
            )
        return self

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names in selection order, skipping unconfigured ones."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
