from __future__ import annotations

"""Configuration loading and access helpers.

Loads the YAML files packaged with *a11y_overlay* and merges them with user
overrides. Overrides are read from ``$A11Y_OVERLAY_CONFIG_DIR`` when set,
otherwise from ``~/.a11y_overlay/``.

Missing PyYAML falls back to embedded Python dictionaries so the checker keeps
working with its stock behaviour.
"""

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Return the directory holding user configuration overrides."""
    override = os.environ.get("A11Y_OVERLAY_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".a11y_overlay"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "checker": "checker.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_checker_config(self) -> Dict[str, Any]:
        return self._data.get("checker", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def get_id_attribute(self) -> str:
        return str(self.get_checker_config().get("id_attribute") or "data-quail-id")

    def get_root_id(self) -> int:
        try:
            return int(self.get_checker_config().get("root_id", 1))
        except (TypeError, ValueError):
            logger.warning("Invalid root_id in checker config, using 1")
            return 1

    def get_ignore_attribute(self) -> str:
        return str(self.get_checker_config().get("ignore_attribute") or "data-a11y-ignore")

    def strip_ignore_data(self) -> bool:
        return bool(self.get_checker_config().get("no_ignore_data", False))

    def get_quickfix_packages(self) -> List[str]:
        quickfix = self.get_checker_config().get("quickfix") or {}
        return list(quickfix.get("search_packages") or ["a11y_overlay.quickfix"])

    def get_quickfix_dirs(self) -> List[Path]:
        quickfix = self.get_checker_config().get("quickfix") or {}
        return [Path(p).expanduser() for p in (quickfix.get("plugin_dirs") or [])]

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        try:
            import yaml  # type: ignore
        except ModuleNotFoundError:
            logger.warning("PyYAML not installed – falling back to built-in defaults")
            self._data = self._builtin_defaults()
            return

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                packaged = resources.files(__package__).joinpath(filename)
                with packaged.open("r", encoding="utf-8") as fh:
                    merged_cfg.update(yaml.safe_load(fh) or {})
                    status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
                merged_cfg.update(self._builtin_defaults()[key])
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                merged_cfg.update(self._builtin_defaults()[key])
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Return the stock checker settings and no logging config."""
        return {
            "checker": {
                "id_attribute": "data-quail-id",
                "root_id": 1,
                "ignore_attribute": "data-a11y-ignore",
                "no_ignore_data": False,
                "quickfix": {
                    "search_packages": ["a11y_overlay.quickfix"],
                    "plugin_dirs": [],
                },
            },
            "logging": {},
        }
