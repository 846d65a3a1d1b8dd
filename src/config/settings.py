"""Configuration management for the ParaBank registration harness."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HTML_REPORT_NAME = "test-execution-report.html"
JSON_REPORT_NAME = "test-results.json"
DEBUG_SCREENSHOT_NAME = "debug-screenshot.png"
FAILURE_SCREENSHOT_NAME = "failure-screenshot.png"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Target application
    target_url: str = Field(
        default="https://parabank.parasoft.com/parabank/index.htm",
        description="Landing page of the application under test",
    )
    expected_title: str = Field(
        default="ParaBank", description="Substring the landing page title must contain"
    )
    registration_link_selector: str = Field(
        default='a[href*="register"]', description="Registration entry point"
    )
    registration_url_pattern: str = Field(
        default="register", description="Regex the registration page URL must match"
    )

    # Browser Configuration
    browser_headless: bool = Field(
        default=True, description="Run browser in headless mode"
    )
    browser_timeout: int = Field(
        default=30000, ge=1000, description="Default browser timeout (ms)"
    )
    browser_viewport_width: int = Field(
        default=1920, ge=800, description="Browser viewport width"
    )
    browser_viewport_height: int = Field(
        default=1080, ge=600, description="Browser viewport height"
    )

    # Step timeouts (ms)
    navigation_timeout: int = Field(default=30000, ge=1000)
    element_timeout: int = Field(default=10000, ge=1000)
    submit_timeout: int = Field(default=5000, ge=1000)
    settle_timeout: int = Field(default=15000, ge=1000)
    indicator_timeout: int = Field(
        default=5000, ge=100, description="Wait budget per success indicator (ms)"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json or text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    # Storage Configuration
    reports_dir: Path = Field(
        default=Path("reports"), description="Reports output directory"
    )
    test_suite_file: Path = Field(
        default=Path("Testsuite.md"),
        description="Human-authored test suite document read at startup",
    )

    # Readiness probe
    health_base_url: str = Field(default="http://localhost:3000")
    health_path: str = Field(default="/health")
    health_max_attempts: int = Field(default=10, ge=1)
    health_interval_seconds: float = Field(default=2.0, ge=0.0)

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ["json", "text"]:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @property
    def html_report_path(self) -> Path:
        return self.reports_dir / HTML_REPORT_NAME

    @property
    def json_report_path(self) -> Path:
        return self.reports_dir / JSON_REPORT_NAME

    @property
    def debug_screenshot_path(self) -> Path:
        return self.reports_dir / DEBUG_SCREENSHOT_NAME

    @property
    def failure_screenshot_path(self) -> Path:
        return self.reports_dir / FAILURE_SCREENSHOT_NAME

    @property
    def health_url(self) -> str:
        return self.health_base_url.rstrip("/") + "/" + self.health_path.lstrip("/")

    def create_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)

    def summary(self) -> Dict[str, Any]:
        """Non-sensitive settings worth logging at startup."""
        return {
            "target_url": self.target_url,
            "headless": self.browser_headless,
            "reports_dir": str(self.reports_dir),
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    # Load .env file if it exists
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    settings = Settings()
    settings.create_directories()
    return settings
