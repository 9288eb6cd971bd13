"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from src.core.config import DEFAULT_USER_AGENT, BrowserConfig, ScraperConfig, Settings


class TestBrowserConfig:
    def test_defaults(self) -> None:
        b = BrowserConfig()
        assert b.headless is True
        assert b.user_agent == DEFAULT_USER_AGENT
        assert b.locale == "en-US"
        assert b.timezone_id == "America/New_York"
        assert b.timeout_ms == 30000
        assert b.navigation_timeout_ms == 20000
        assert b.results_wait_ms == 15000
        assert b.settle_ms == 2000

    def test_timeout_minimum(self) -> None:
        with pytest.raises(ValueError, match="greater than or equal to 1000"):
            BrowserConfig(timeout_ms=500)

    def test_settle_can_be_zero(self) -> None:
        assert BrowserConfig(settle_ms=0).settle_ms == 0


class TestScraperConfig:
    def test_defaults(self) -> None:
        s = ScraperConfig()
        assert s.cache_ttl_seconds == 1800
        assert s.cache_max_entries == 512
        assert s.browser_deadline_seconds == 25.0
        assert s.request_timeout_seconds == 50.0
        assert s.max_results == 25
        assert s.fallback_count == 15
        assert s.fallback_total_count == 125

    def test_unbounded_cache_allowed(self) -> None:
        assert ScraperConfig(cache_max_entries=None).cache_max_entries is None

    def test_deadline_must_fit_request_budget(self) -> None:
        with pytest.raises(ValidationError, match="browser_deadline_seconds"):
            ScraperConfig(browser_deadline_seconds=60, request_timeout_seconds=50)

    def test_max_results_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScraperConfig(max_results=0)
        with pytest.raises(ValidationError):
            ScraperConfig(max_results=101)

    def test_ttl_positive(self) -> None:
        with pytest.raises(ValidationError):
            ScraperConfig(cache_ttl_seconds=0)


class TestSettings:
    def test_all_sections_default(self) -> None:
        s = Settings()
        assert s.browser == BrowserConfig()
        assert s.scraper == ScraperConfig()

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(dedent("""\
            browser:
              headless: false
              settle_ms: 500
            scraper:
              cache_ttl_seconds: 60
              browser_deadline_seconds: 10
              max_results: 10
        """))
        s = Settings.from_yaml(path)
        assert s.browser.headless is False
        assert s.browser.settle_ms == 500
        assert s.scraper.cache_ttl_seconds == 60
        assert s.scraper.browser_deadline_seconds == 10
        assert s.scraper.max_results == 10
        assert s.scraper.fallback_count == 15

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert Settings.from_yaml(path) == Settings()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            Settings.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("scraper:\n  max_results: 0\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(path)

    def test_example_config_loads(self) -> None:
        example = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"
        s = Settings.from_yaml(example)
        assert s.scraper.browser_deadline_seconds < s.scraper.request_timeout_seconds
