from __future__ import annotations

"""Quick-fix type discovery and loading.

A quick-fix type name such as ``ImgAlt`` lives in a module named after it in
snake case (``img_alt``). The loader looks for that module in each configured
search package first, then as a ``.py`` file in each configured plugin
directory, and returns the class of the same name.
"""

import importlib
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Sequence, Type

from a11y_overlay.config import ConfigManager
from a11y_overlay.core.exceptions import QuickFixLoadError

from .base import QuickFix

__all__ = ["QuickFixLoader", "module_name_for"]

logger = logging.getLogger(__name__)

_VALID_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def module_name_for(fix_name: str) -> str:
    """Return the module name holding *fix_name* (``ImgAlt`` -> ``img_alt``)."""
    return _CAMEL_BOUNDARY.sub("_", fix_name).lower()


class QuickFixLoader:
    """Resolves quick-fix type names to classes.

    Args:
        search_packages: Dotted package names searched in order. Defaults to
            the ``quickfix.search_packages`` configuration value.
        plugin_dirs: Directories searched after the packages. Defaults to
            ``quickfix.plugin_dirs``.
    """

    def __init__(self, search_packages: Optional[Sequence[str]] = None,
                 plugin_dirs: Optional[Sequence[Path]] = None) -> None:
        if search_packages is None or plugin_dirs is None:
            config = ConfigManager()
            if search_packages is None:
                search_packages = config.get_quickfix_packages()
            if plugin_dirs is None:
                plugin_dirs = config.get_quickfix_dirs()
        self.search_packages: List[str] = list(search_packages)
        self.plugin_dirs: List[Path] = [Path(d) for d in plugin_dirs]
        self._plugin_modules: Dict[Path, ModuleType] = {}
        self._logger = logging.getLogger(f"{__name__}.QuickFixLoader")

    def load(self, fix_name: str) -> Type[QuickFix]:
        """Return the quick-fix class called *fix_name*.

        Raises:
            QuickFixLoadError: If the name is invalid, no module provides it,
                importing fails, or the class is not a QuickFix.
        """
        if not fix_name or not _VALID_NAME.match(fix_name):
            raise QuickFixLoadError(f"Invalid quick-fix name: {fix_name!r}", fix_name=fix_name)

        module = self._import_from_packages(fix_name) or self._import_from_dirs(fix_name)
        if module is None:
            raise QuickFixLoadError(
                f"No module provides quick fix '{fix_name}' "
                f"(packages: {self.search_packages}, dirs: {[str(d) for d in self.plugin_dirs]})",
                fix_name=fix_name,
            )

        fix_type = self._get_fix_class(module, fix_name)
        self._logger.debug("Loaded quick fix %s from %s", fix_name, module.__name__)
        return fix_type

    # -------------------------------------------------------------------------
    # Module import
    # -------------------------------------------------------------------------

    def _import_from_packages(self, fix_name: str) -> Optional[ModuleType]:
        module_name = module_name_for(fix_name)

        for package in self.search_packages:
            full_name = f"{package}.{module_name}"
            try:
                return importlib.import_module(full_name)
            except ModuleNotFoundError as e:
                # Only a missing candidate module means "try the next one".
                if e.name in (full_name, package) or (e.name and package.startswith(e.name + ".")):
                    continue
                raise QuickFixLoadError(
                    f"Failed to import quick-fix module '{full_name}': {e}",
                    fix_name=fix_name,
                    cause=e,
                )
            except Exception as e:
                raise QuickFixLoadError(
                    f"Unexpected error importing quick-fix module '{full_name}': {e}",
                    fix_name=fix_name,
                    cause=e,
                )
        return None

    def _import_from_dirs(self, fix_name: str) -> Optional[ModuleType]:
        module_name = module_name_for(fix_name)

        for plugin_dir in self.plugin_dirs:
            module_path = plugin_dir / f"{module_name}.py"
            if not module_path.is_file():
                continue

            cached = self._plugin_modules.get(module_path)
            if cached is not None:
                return cached

            spec = importlib.util.spec_from_file_location(
                f"a11y_overlay_quickfix_plugins.{module_name}", module_path
            )
            if spec is None or spec.loader is None:
                raise QuickFixLoadError(f"Cannot load quick-fix file {module_path}", fix_name=fix_name)

            module = importlib.util.module_from_spec(spec)

            # Let the plugin import sibling modules from its directory
            original_path = sys.path.copy()
            if str(plugin_dir) not in sys.path:
                sys.path.insert(0, str(plugin_dir))
            try:
                spec.loader.exec_module(module)
            except Exception as e:
                raise QuickFixLoadError(
                    f"Failed to execute quick-fix file {module_path}: {e}",
                    fix_name=fix_name,
                    cause=e,
                )
            finally:
                sys.path[:] = original_path

            self._plugin_modules[module_path] = module
            return module
        return None

    @staticmethod
    def _get_fix_class(module: ModuleType, fix_name: str) -> Type[QuickFix]:
        if not hasattr(module, fix_name):
            available_classes = [name for name in dir(module)
                                 if not name.startswith('_') and
                                 isinstance(getattr(module, name), type)]
            raise QuickFixLoadError(
                f"Class '{fix_name}' not found in module {module.__name__}. "
                f"Available classes: {available_classes}",
                fix_name=fix_name,
            )

        fix_class = getattr(module, fix_name)
        if not isinstance(fix_class, type) or not issubclass(fix_class, QuickFix):
            raise QuickFixLoadError(
                f"'{fix_name}' in {module.__name__} does not inherit from QuickFix",
                fix_name=fix_name,
            )
        return fix_class
