"""Settings loading for the job pipeline and publish adapters."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import HTTP_TIMEOUT_SECONDS

# Load .env file
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Runtime settings.

    Values come from (highest priority first): explicit keyword arguments,
    the YAML config file, ``KODAPOST_*`` environment variables, defaults.
    """

    model_config = SettingsConfigDict(env_prefix="KODAPOST_", extra="ignore")

    # Jobs
    jobs_dir: Path = Field(default_factory=lambda: PROJECT_ROOT / "data" / "jobs")

    # Media hosting for platforms that pull images by URL
    image_host: Literal["temporary", "cloudinary"] = "temporary"
    media_base_url: str = "http://localhost:3000"
    media_dir: Path = Field(default_factory=lambda: Path("/tmp"))
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "kodapost"

    # HTTP
    http_timeout_seconds: float = HTTP_TIMEOUT_SECONDS

    # Logging
    log_dir: Path = Field(default_factory=lambda: PROJECT_ROOT / "logs")

    def cloudinary_configured(self) -> bool:
        """Check if all Cloudinary credentials are set."""
        return all([
            self.cloudinary_cloud_name,
            self.cloudinary_api_key,
            self.cloudinary_api_secret,
        ])


def load_settings(config_path: Path | None = None, **overrides: Any) -> Settings:
    """Load settings from the YAML file (if present) and the environment."""
    if config_path is None:
        # Default to config/kodapost.yaml relative to project root
        config_path = PROJECT_ROOT / "config" / "kodapost.yaml"

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    data.update(overrides)
    return Settings(**data)
