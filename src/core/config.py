"""Configuration models and YAML loader for the job search scraper."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)


class BrowserConfig(BaseModel):
    """Browser session configuration."""

    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
    timezone_id: str = "America/New_York"
    timeout_ms: int = Field(default=30000, ge=1000)
    navigation_timeout_ms: int = Field(default=20000, ge=1000)
    results_wait_ms: int = Field(default=15000, ge=0)
    settle_ms: int = Field(default=2000, ge=0)


class ScraperConfig(BaseModel):
    """Cache, deadline and page-size settings for the scrape orchestrator."""

    cache_ttl_seconds: float = Field(default=30 * 60, gt=0)
    cache_max_entries: int | None = Field(default=512, ge=1)
    browser_deadline_seconds: float = Field(default=25.0, gt=0)
    request_timeout_seconds: float = Field(default=50.0, gt=0)
    max_results: int = Field(default=25, ge=1, le=100)
    fallback_count: int = Field(default=15, ge=1, le=100)
    fallback_total_count: int = Field(default=125, ge=0)

    @model_validator(mode="after")
    def deadline_inside_request_budget(self) -> "ScraperConfig":
        if self.browser_deadline_seconds >= self.request_timeout_seconds:
            msg = "browser_deadline_seconds must be less than request_timeout_seconds"
            raise ValueError(msg)
        return self


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
