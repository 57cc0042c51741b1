"""Configuration management for the track renamer."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Supported audio formats
SUPPORTED_FORMATS = {".flac", ".mp3", ".wav", ".aiff"}

# Rename formats offered for template renaming
FORMAT_ARTIST_TITLE = "Artist - Title"
FORMAT_TRACK_TITLE = "Track. Title"
RENAME_FORMATS = (FORMAT_ARTIST_TITLE, FORMAT_TRACK_TITLE)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class HttpConfig:
    """Settings for fetching release pages."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0  # seconds
    max_retries: int = 3


@dataclass
class GeminiConfig:
    """Google Gemini API configuration for AI filename parsing."""

    api_key: str = ""
    model: str = "gemini-2.5-flash-lite"
    api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"


@dataclass
class Config:
    """Main configuration container."""

    http: HttpConfig = field(default_factory=HttpConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    max_workers: int = 4  # parallel tag readers

    @classmethod
    def from_environment(cls, env_path: Path | None = None) -> "Config":
        """Load configuration from environment variables."""
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        try:
            timeout = float(os.getenv("TRACK_RENAMER_TIMEOUT", "30"))
            max_workers = int(os.getenv("TRACK_RENAMER_WORKERS", "4"))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting in environment: {e}") from e

        return cls(
            http=HttpConfig(
                user_agent=os.getenv("TRACK_RENAMER_USER_AGENT", DEFAULT_USER_AGENT),
                timeout=timeout,
            ),
            gemini=GeminiConfig(
                api_key=os.getenv("GEMINI_API_KEY", ""),
                model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite"),
                api_url=os.getenv(
                    "GEMINI_API_URL",
                    "https://generativelanguage.googleapis.com/v1beta/models",
                ),
            ),
            max_workers=max_workers,
        )

    def validate(self) -> None:
        """Validate the configuration."""
        if self.max_workers < 1:
            raise ValueError("TRACK_RENAMER_WORKERS must be at least 1")
        if self.http.timeout <= 0:
            raise ValueError("TRACK_RENAMER_TIMEOUT must be positive")
        if not self.gemini.model:
            raise ValueError("GEMINI_MODEL must not be empty")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
