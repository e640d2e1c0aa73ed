import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# Fixed by design: the janitor interval and retry hints are derived from it.
RATE_LIMIT_WINDOW_SECONDS = 60


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # OpenAI-compatible provider
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4-1106-preview")
    openai_fallback_model: str = os.getenv("OPENAI_FALLBACK_MODEL", "gpt-3.5-turbo-1106")
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "500"))
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    openai_timeout_ms: int = int(os.getenv("OPENAI_TIMEOUT", "30000"))

    # Rate limiting
    rate_limit_enabled: bool = os.getenv("AI_RATE_LIMIT_ENABLED", "true").lower() != "false"
    rate_limit_rpm: int = int(os.getenv("AI_RATE_LIMIT_RPM", "10"))
    rate_limit_window_seconds: int = RATE_LIMIT_WINDOW_SECONDS

    # Cache
    cache_ttl: int = int(os.getenv("AI_CACHE_TTL", "3600"))  # 1 hour default
    cache_max_entries: int = int(os.getenv("AI_CACHE_MAX_ENTRIES", "1000"))

    # Runtime
    app_env: str = os.getenv("APP_ENV", "production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def provider_timeout_seconds(self) -> int:
        """Provider timeout in whole seconds, used as the retry hint for timeouts."""
        return max(1, self.openai_timeout_ms // 1000)

    @property
    def is_development(self) -> bool:
        """Whether raw error details may be exposed to clients."""
        return self.app_env.lower() == "development"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.rate_limit_rpm < 1:
            raise ValueError("AI_RATE_LIMIT_RPM must be at least 1")

        if self.cache_ttl < 0:
            raise ValueError("AI_CACHE_TTL must not be negative")

        if self.cache_max_entries < 1:
            raise ValueError("AI_CACHE_MAX_ENTRIES must be at least 1")

        if self.openai_timeout_ms <= 0:
            raise ValueError("OPENAI_TIMEOUT must be a positive number of milliseconds")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
