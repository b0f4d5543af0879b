"""Configuration settings for Pro Fit Agent."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/profit_agent/config.py
PACKAGE_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(PACKAGE_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Storage
    database_path: Path | None = None

    # Advisory service: "llm" talks to OpenAI directly, "http" posts to an
    # external advisory endpoint that already speaks {message, planChanges}.
    advisory_mode: str = "llm"
    advisory_url: str = ""
    advisory_timeout_seconds: float = 60.0

    # OpenAI
    openai_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.7

    # Planning / coaching knobs
    session_horizon_days: int = 30
    chat_history_window: int = 20
    pairing_code_ttl_minutes: int = 10

    def model_post_init(self, __context) -> None:
        """Set default database path after initialization."""
        if self.database_path is None:
            self.database_path = PACKAGE_ROOT / "profit_agent.db"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
