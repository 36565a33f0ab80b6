"""Backend connection settings resolved from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from amlak.utils.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0

_config: Optional["ApiConfig"] = None


@dataclass(frozen=True)
class ApiConfig:
    """Base URL, API key and transport settings for the listing backend."""
    base_url: str
    api_key: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    session_file: Optional[str] = None

    def __post_init__(self):
        if not self.base_url or not self.base_url.strip():
            raise ConfigurationError("Missing AMLAK_API_BASE_URL")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

    @classmethod
    def from_env(cls) -> "ApiConfig":
        """Build config from AMLAK_* environment variables."""
        timeout_raw = os.environ.get("AMLAK_REQUEST_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ConfigurationError(f"Invalid AMLAK_REQUEST_TIMEOUT_SECONDS: {timeout_raw!r}")

        return cls(
            base_url=os.environ.get("AMLAK_API_BASE_URL", ""),
            api_key=os.environ.get("AMLAK_API_KEY") or None,
            timeout_seconds=timeout,
            session_file=os.environ.get("AMLAK_SESSION_FILE") or None,
        )


def get_api_config() -> ApiConfig:
    """Get or create the process-wide config."""
    global _config

    if _config is None:
        _config = ApiConfig.from_env()

    return _config


def reset_api_config() -> None:
    """Forget the cached config so the next call re-reads the environment."""
    global _config
    _config = None
