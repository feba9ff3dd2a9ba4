"""Boundary between the source tree and the rule engine.

Validates package patterns against the base path, discovers packages under
the source root, and republishes them as rule_engine Package records.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from verimport.loader.ast_imports import extract_imports
from verimport.rule_engine.models import Package

logger = logging.getLogger(__name__)

_SKIP_DIRS = {"__pycache__", "node_modules", "build", "dist"}


class ConfigurationError(Exception):
    """Raised when base path or patterns are unusable. Nothing has been loaded."""


class LoadError(Exception):
    """Raised when the package set cannot be loaded completely."""


def validate_patterns(base: str, patterns: list[str]) -> str:
    """Check every pattern equals base or descends from it. Returns the normalized base."""
    base = base.rstrip(".")
    if not base:
        raise ConfigurationError("base package path is required")
    if not patterns:
        raise ConfigurationError("at least one package pattern is required")
    prefix = base + "."
    for pattern in patterns:
        if pattern != base and not pattern.startswith(prefix):
            raise ConfigurationError(
                f'pattern must start with base, but "{pattern}" does not start with "{prefix}"'
            )
    return base


class PackageLoader:
    """Loads Python packages (directories of .py files) below a source root."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def discover(self, base: str) -> dict[str, Path]:
        """Map every package path under base to its directory."""
        base_dir = self._root.joinpath(*base.split("."))
        if not base_dir.is_dir():
            raise LoadError(f'package directory "{base_dir}" not found for {base}')

        found: dict[str, Path] = {}
        for dirpath, dirnames, filenames in os.walk(base_dir):
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not d.startswith(".") and d not in _SKIP_DIRS and d.isidentifier()
            )
            if not any(name.endswith(".py") for name in filenames):
                continue
            directory = Path(dirpath)
            rel = directory.relative_to(base_dir).parts
            found[".".join((base, *rel))] = directory
        return found

    def is_module(self, module_path: str) -> bool:
        """True when module_path is a module or package under the source root."""
        location = self._root.joinpath(*module_path.split("."))
        return location.is_dir() or location.with_suffix(".py").is_file()

    def load_package(self, package_path: str, directory: Path) -> Package:
        modules: set[str] = set()
        imports: set[str] = set()
        for source_file in sorted(directory.glob("*.py")):
            if source_file.stem != "__init__":
                modules.add(f"{package_path}.{source_file.stem}")
            try:
                source = source_file.read_text(encoding="utf-8")
                imports |= extract_imports(
                    source,
                    package_path,
                    filename=str(source_file),
                    is_module=self.is_module,
                )
            except (OSError, UnicodeDecodeError) as e:
                raise LoadError(f"cannot read {source_file}: {e}") from e
            except SyntaxError as e:
                raise LoadError(f"{source_file}:{e.lineno}: {e.msg}") from e
            except ValueError as e:
                raise LoadError(f"{source_file}: {e}") from e

        imports -= modules
        imports.discard(package_path)
        return Package(path=package_path, directory=directory, imports=frozenset(imports))

    def load(self, base: str, patterns: list[str]) -> list[Package]:
        available = self.discover(base)
        selected: set[str] = set()
        for pattern in patterns:
            matched = {p for p in available if fnmatch.fnmatchcase(p, pattern)}
            if not matched:
                logger.warning(f"Pattern {pattern} matched no packages")
            selected |= matched
        return [self.load_package(p, available[p]) for p in sorted(selected)]


def load_packages(
    base: str,
    patterns: list[str],
    root: Path,
    *,
    loader: PackageLoader | None = None,
) -> list[Package]:
    """Validate patterns, then load the packages they select."""
    base = validate_patterns(base, patterns)
    loader = loader or PackageLoader(root)
    packages = loader.load(base, patterns)
    logger.info(f"Loaded {len(packages)} packages under {base}")
    return packages
