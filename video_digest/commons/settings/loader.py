"""Settings loader with layered configuration support."""

import json
import os
from pathlib import Path
from typing import Any

from video_digest.commons.settings.models import Settings


class SettingsLoader:
    """Builds a Settings instance from config files and the environment.

    Layers, later ones winning:
    1. ``appsettings.json`` in the config directory
    2. ``appsettings.{environment}.json``
    3. ``VIDEO_DIGEST__``-prefixed environment variables
    """

    ENV_PREFIX = "VIDEO_DIGEST__"
    NESTING = "__"

    def __init__(
        self,
        config_dir: Path | None = None,
        environment: str | None = None,
    ) -> None:
        """Initialize the settings loader.

        Args:
            config_dir: Directory holding the JSON files. Defaults to
                ``VIDEO_DIGEST__CONFIG_DIR`` or ``./config``.
            environment: Environment name (dev, staging, prod). Defaults to
                ``VIDEO_DIGEST__APP__ENVIRONMENT`` or ``dev``.
        """
        self.config_dir = config_dir or Path(
            os.getenv(f"{self.ENV_PREFIX}CONFIG_DIR", "config")
        )
        self.environment = environment or os.getenv(
            f"{self.ENV_PREFIX}APP__ENVIRONMENT", "dev"
        )

    def load(self) -> Settings:
        """Resolve every layer and build the settings.

        Returns:
            Fully resolved Settings instance.
        """
        merged: dict[str, Any] = {}
        for layer in (
            self._read_file("appsettings.json"),
            self._read_file(f"appsettings.{self.environment}.json"),
            self._environment_overrides(),
        ):
            merged = self._merge(merged, layer)
        return Settings(**merged)

    def _environment_overrides(self) -> dict[str, Any]:
        """Turn prefixed environment variables into a nested dict.

        ``VIDEO_DIGEST__RETRY__MAX_ATTEMPTS=3`` becomes
        ``{"retry": {"max_attempts": 3}}``. ``CONFIG_DIR`` is consumed by the
        loader itself and skipped.
        """
        overrides: dict[str, Any] = {}

        for key, raw in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            parts = key[len(self.ENV_PREFIX) :].lower().split(self.NESTING)
            if parts == ["config_dir"]:
                continue

            node = overrides
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = self._coerce(raw)

        return overrides

    @staticmethod
    def _coerce(value: str) -> Any:
        """Decode JSON containers; scalars stay strings for pydantic to parse."""
        # Lists/dicts, e.g. CORS origins or retryable status codes
        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value

        return value

    def _read_file(self, filename: str) -> dict[str, Any]:
        """Read a JSON layer, or an empty dict when the file is absent."""
        path = self.config_dir / filename
        if not path.exists():
            return {}
        with path.open(encoding="utf-8") as f:
            return dict(json.load(f))

    def _merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Recursively merge ``override`` on top of ``base``."""
        result = dict(base)
        for key, value in override.items():
            current = result.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                result[key] = self._merge(current, value)
            else:
                result[key] = value
        return result


class _SettingsHolder:
    """Holder for the process-wide settings instance."""

    instance: Settings | None = None


def get_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
    *,
    reload: bool = False,
) -> Settings:
    """Get or create the global settings instance.

    Args:
        config_dir: Optional config directory override.
        environment: Optional environment override.
        reload: Force reload settings from files.

    Returns:
        Settings instance.
    """
    if _SettingsHolder.instance is None or reload:
        loader = SettingsLoader(config_dir=config_dir, environment=environment)
        _SettingsHolder.instance = loader.load()
    return _SettingsHolder.instance


def reset_settings() -> None:
    """Reset the global settings instance. Useful for testing."""
    _SettingsHolder.instance = None
