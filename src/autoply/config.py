"""Configuration management for Autoply."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOPLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Browser Configuration
    browser_headless: bool = Field(False, description="Run browser in headless mode")
    browser_timeout: int = Field(30000, description="Navigation and default action timeout in ms")
    browser_storage_state: Optional[str] = Field(
        None, description="Path to a persisted authenticated browser state"
    )
    browser_humanize: bool = Field(True, description="Sleep between simulated human actions")
    browser_locale: str = Field("en-US", description="Browser context locale")

    # Selector Configuration
    selector_timeout: float = Field(5.0, description="Default selector resolution timeout in seconds")
    ready_timeout: float = Field(10.0, description="Posting readiness timeout in seconds")
    form_timeout: float = Field(10.0, description="Application form appearance timeout in seconds")

    # Application Configuration
    save_screenshots: bool = Field(True, description="Capture a screenshot after submitting")
    screenshot_dir: str = Field("./screenshots", description="Directory for submission screenshots")
    max_steps: int = Field(15, description="Maximum number of form steps per submission")
    ambiguous_is_success: bool = Field(
        True, description="Report a submission without a confirmation signal as successful"
    )

    # Logging
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")


class BrowserConfig(BaseModel):
    """Browser section handed to each session."""

    headless: bool = Field(False, description="Run browser in headless mode")
    timeout: int = Field(30000, description="Navigation timeout in ms")
    storage_state: Optional[str] = Field(None, description="Persisted authenticated state")
    humanize: bool = Field(True, description="Sleep between simulated human actions")
    locale: str = Field("en-US", description="Browser context locale")
    selector_timeout: float = Field(5.0, description="Selector resolution timeout in seconds")
    ready_timeout: float = Field(10.0, description="Posting readiness timeout in seconds")
    form_timeout: float = Field(10.0, description="Form appearance timeout in seconds")


class ApplicationConfig(BaseModel):
    """Submission section read by the state machine."""

    save_screenshots: bool = Field(True, description="Capture a screenshot after submitting")
    screenshot_dir: str = Field("./screenshots", description="Screenshot directory")
    max_steps: int = Field(15, ge=1, description="Maximum number of form steps")
    ambiguous_is_success: bool = Field(True, description="Treat a missing confirmation as success")


class AppConfig(BaseModel):
    """Read-only configuration consumed by the core."""

    model_config = {"frozen": True}

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    application: ApplicationConfig = Field(default_factory=ApplicationConfig)


def load_app_config(source: Optional[Settings] = None) -> AppConfig:
    """Build the nested configuration from environment settings."""
    source = source or settings
    return AppConfig(
        browser=BrowserConfig(
            headless=source.browser_headless,
            timeout=source.browser_timeout,
            storage_state=source.browser_storage_state,
            humanize=source.browser_humanize,
            locale=source.browser_locale,
            selector_timeout=source.selector_timeout,
            ready_timeout=source.ready_timeout,
            form_timeout=source.form_timeout,
        ),
        application=ApplicationConfig(
            save_screenshots=source.save_screenshots,
            screenshot_dir=source.screenshot_dir,
            max_steps=source.max_steps,
            ambiguous_is_success=source.ambiguous_is_success,
        ),
    )


# Global settings instance
settings = Settings()
