"""Environment-based configuration for the demo client."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Demo client configuration.

    All settings can be overridden via environment variables with
    DEMO_ prefix. For example:
        DEMO_API_URL=https://demos.example.com/api/v1
        DEMO_POLL_INTERVAL=5
    """

    # API connection
    api_url: str = "http://localhost:8000/api/v1"

    # Lifecycle polling
    poll_interval: float = 3.0  # seconds between status fetches
    generation_timeout: float = 600.0  # caller-level bound on one watch

    # History
    page_size: int = 10

    # Quota assumed before /user/credits has been read (free tier)
    free_tier_quota: int = 3

    # Local storage for tokens and preferences
    home: Path = Path.home() / ".demo-client"

    model_config = SettingsConfigDict(env_prefix="DEMO_")

    @property
    def storage_path(self) -> Path:
        return self.home / "storage.json"
