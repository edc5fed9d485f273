"""CityzenMag search configuration and settings."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from environment variables."""

    # Paths
    data_dir: Path | None = None
    content_dir: Path | None = None

    # History/popularity store (stand-in for the browser's local storage)
    @property
    def history_path(self) -> Path:
        return Path(str(self.data_dir)) / "search_store.json"

    # Search defaults
    default_limit: int = 20
    suggestion_limit: int = 5
    debounce_ms: int = 300  # autocomplete keystroke debounce

    log_level: str = "WARNING"

    model_config = {"env_prefix": "CITYZENMAG_", "env_file": ".env", "extra": "ignore"}

    def model_post_init(self, __context) -> None:
        """Expand ~ in paths after loading from env."""
        base_dir = "~/.cityzenmag"
        if not self.data_dir or str(self.data_dir) in ("", "."):
            object.__setattr__(self, "data_dir", Path(os.path.expanduser(f"{base_dir}/data")))
        else:
            object.__setattr__(self, "data_dir", Path(os.path.expanduser(str(self.data_dir))))

        if not self.content_dir or str(self.content_dir) in ("", "."):
            object.__setattr__(
                self, "content_dir", Path(os.path.expanduser(f"{base_dir}/content"))
            )
        else:
            object.__setattr__(
                self, "content_dir", Path(os.path.expanduser(str(self.content_dir)))
            )

    def ensure_dirs(self) -> None:
        """Create required directories if they don't exist."""
        if self.data_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        if self.content_dir:
            self.content_dir.mkdir(parents=True, exist_ok=True)


# Singleton
settings = Settings()
