"""Settings Manager - Handles API key, endpoint and cache configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://translation-api.ghananlp.org/v1"
DEFAULT_CACHE_PATH = Path.home() / ".triagro" / "translation-cache.json"


class SettingsManager:
    """
    Manages settings and API key configuration.

    Values come from the environment, seeded from a .env file in the
    project root. Missing or malformed values fall back to defaults.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_ghana_nlp_api_key(self) -> Optional[str]:
        """Get the Ghana NLP subscription key from environment."""
        return self._get_str("GHANA_NLP_API_KEY")

    def get_ghana_nlp_base_url(self) -> str:
        return self._get_str("GHANA_NLP_BASE_URL") or DEFAULT_BASE_URL

    def get_timeout(self, accuracy_first: bool = False) -> float:
        """Request timeout in seconds; accuracy-first mode allows slower responses."""
        if accuracy_first:
            return self._get_float("TRANSLATION_ACCURATE_TIMEOUT", 15.0)
        return self._get_float("TRANSLATION_TIMEOUT", 3.0)

    def get_cache_path(self) -> Path:
        value = self._get_str("TRANSLATION_CACHE_PATH")
        return Path(value).expanduser() if value else DEFAULT_CACHE_PATH

    def get_log_level(self) -> str:
        return (self._get_str("LOG_LEVEL") or "INFO").upper()

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get_str(name: str) -> Optional[str]:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else None

    def _get_float(self, name: str, default: float) -> float:
        value = self._get_str(name)
        if value is None:
            return default
        try:
            parsed = float(value)
        except ValueError:
            return default
        return parsed if parsed > 0 else default
