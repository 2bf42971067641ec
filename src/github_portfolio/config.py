import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from github_portfolio.domain.exceptions import ConfigurationException


class Settings(BaseModel):
    """Process configuration, read once at startup."""
    model_config = ConfigDict(frozen=True)

    github_username: str = Field(..., min_length=1, description="Account whose portfolio is served")
    github_token: Optional[str] = Field(default=None, description="Token used to authenticate to GitHub")
    cache_ttl_minutes: int = Field(default=30, gt=0)
    max_concurrent_enrichments: Optional[int] = Field(
        default=None, gt=0, description="Upper bound on repositories enriched at once; unbounded when unset"
    )
    host: str = "0.0.0.0"
    port: int = Field(default=8000, gt=0, lt=65536)
    env: str = "production"

    @property
    def docs_enabled(self) -> bool:
        return self.env == "dev"


def load_settings() -> Settings:
    """
    Loads settings from the environment, after reading a .env file if one exists.

    Raises:
        ConfigurationException: when GITHUB_USERNAME is missing or a value is invalid.
    """
    load_dotenv()

    username = os.getenv("GITHUB_USERNAME")
    if not username:
        raise ConfigurationException("GITHUB_USERNAME is not set in the environment.")

    values = {
        "github_username": username,
        "github_token": os.getenv("GITHUB_TOKEN") or None,
        "cache_ttl_minutes": os.getenv("PORTFOLIO_CACHE_TTL_MINUTES") or 30,
        "max_concurrent_enrichments": os.getenv("MAX_CONCURRENT_ENRICHMENTS") or None,
        "host": os.getenv("HOST") or "0.0.0.0",
        "port": os.getenv("PORT") or 8000,
        "env": os.getenv("ENV") or "production",
    }

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationException(f"Invalid configuration: {e}") from e
