from functools import lru_cache

from pydantic_settings import BaseSettings

from aistudio_mcp.errors import ConfigurationError

DEFAULT_API_URL = "https://api-aistudio.oxylabs.io"


class Settings(BaseSettings):
    """Environment-driven configuration for the MCP server."""

    # Oxylabs AI Studio credentials
    OXYLABS_AI_STUDIO_API_KEY: str | None = None
    OXYLABS_AI_STUDIO_API_URL: str = DEFAULT_API_URL

    # Browser agent and crawl runs are slow; one ceiling covers every operation.
    AISTUDIO_REQUEST_TIMEOUT: float = 240.0

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigurationError when it is not set."""
        key = (self.OXYLABS_AI_STUDIO_API_KEY or "").strip()
        if not key:
            raise ConfigurationError(
                "Missing credentials. Please set OXYLABS_AI_STUDIO_API_KEY in the environment or .env"
            )
        return key


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
