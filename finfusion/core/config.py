"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        backend_base_url: Root URL of the ledger backend.
        assistant_relay_url: Inference webhook that answers assistant prompts.
        assistant_api_key: Key sent to the inference webhook.
        assistant_api_key_header: Header name carrying the key.
        request_timeout_seconds: Per-request timeout; expiry counts as unreachable.
        balance_animation_ms: Duration of the displayed-balance animation.
        balance_animation_frames: Number of animation steps.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="FINFUSION_"
    )

    project_name: str = "FinFusion"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"

    backend_base_url: str = "https://finfusion-v2.onrender.com"
    assistant_relay_url: str = "https://finfusion-v2.onrender.com/assistant"
    assistant_api_key: Optional[str] = None
    assistant_api_key_header: str = "x-api-key"
    request_timeout_seconds: float = 15.0

    balance_animation_ms: int = 1000
    balance_animation_frames: int = 30


settings = Settings()
