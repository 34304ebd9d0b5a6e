"""Configuration management for toolshare.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

STORE_BACKENDS = ("sqlite", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Application configuration."""

    # Storage
    db_path: Path
    store_backend: str  # sqlite or memory

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "TOOLSHARE_DB_PATH",
            str(Path.home() / ".toolshare" / "toolshare.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            store_backend=os.environ.get("TOOLSHARE_STORE", "sqlite").lower(),
            log_level=os.environ.get("TOOLSHARE_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.store_backend not in STORE_BACKENDS:
            errors.append(
                f"Unknown store backend '{self.store_backend}' "
                f"(expected one of: {', '.join(STORE_BACKENDS)})"
            )

        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level '{self.log_level}'")

        # Check database directory is writable
        if self.store_backend == "sqlite" and str(self.db_path) != ":memory:":
            if not self.db_path.parent.exists():
                try:
                    self.db_path.parent.mkdir(parents=True, exist_ok=True)
                except PermissionError:
                    errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
