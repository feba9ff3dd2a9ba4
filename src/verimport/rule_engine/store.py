"""RuleStore: find the rule file governing a package by walking up its directories."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from verimport.rule_engine.models import RULE_FILE_NAME, RuleSet

logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """Raised when the rules for a package cannot be resolved."""


class FileSystemReader:
    """Filesystem access used by RuleStore. Tests substitute their own."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")


class RuleFileCache:
    """Resolved rules per package path, including absent and failed results.

    Owned by a single verification run and never invalidated during it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RuleSet | ResolutionError | None] = {}

    def __contains__(self, package_path: object) -> bool:
        return package_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, package_path: str) -> RuleSet | None:
        """Return the cached RuleSet (or None); re-raise a cached failure."""
        entry = self._entries[package_path]
        if isinstance(entry, ResolutionError):
            raise ResolutionError(str(entry)) from entry
        return entry

    def store(self, package_path: str, entry: RuleSet | ResolutionError | None) -> None:
        self._entries[package_path] = entry


def load_rule_file(path: Path, reader: FileSystemReader | None = None) -> RuleSet:
    """Read and parse one rule file."""
    reader = reader or FileSystemReader()
    try:
        text = reader.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ResolutionError(f'cannot read rule file "{path}": {e}') from e
    try:
        data = json.loads(text)
        rules = RuleSet.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ResolutionError(f'rule file "{path}" is invalid: {e}') from e
    logger.info(f"Loaded rules from {path}")
    return rules.model_copy(update={"source": str(path)})


class RuleStore:
    def __init__(
        self,
        base: str,
        root: Path,
        *,
        cache: RuleFileCache | None = None,
        reader: FileSystemReader | None = None,
        rule_file: str = RULE_FILE_NAME,
    ) -> None:
        self._base = base.rstrip(".")
        self._root = root
        self._cache = cache if cache is not None else RuleFileCache()
        self._reader = reader or FileSystemReader()
        self._rule_file = rule_file

    @property
    def base(self) -> str:
        return self._base

    def in_jurisdiction(self, package_path: str) -> bool:
        return package_path == self._base or package_path.startswith(self._base + ".")

    def directory_for(self, package_path: str) -> Path:
        """Map a dotted package path to its directory under the source root."""
        return self._root.joinpath(*package_path.split("."))

    def resolve(self, package_path: str) -> RuleSet | None:
        """Return the nearest RuleSet for package_path, or None if there is none.

        Packages outside the base path always resolve to None. Every outcome,
        failures included, is cached per package path.
        """
        if not self.in_jurisdiction(package_path):
            return None

        if package_path in self._cache:
            logger.debug(f"Rule cache hit: {package_path}")
            return self._cache.get(package_path)

        try:
            rules = self._lookup(package_path)
        except ResolutionError as e:
            self._cache.store(package_path, e)
            raise
        self._cache.store(package_path, rules)
        return rules

    def _lookup(self, package_path: str) -> RuleSet | None:
        directory = self.directory_for(package_path)
        if not self._reader.exists(directory):
            raise ResolutionError(f'directory "{directory}" not found')
        if not self._reader.is_dir(directory):
            raise ResolutionError(f'not a directory "{directory}"')

        rule_path = directory / self._rule_file
        if self._reader.exists(rule_path):
            return load_rule_file(rule_path, self._reader)

        # The base package is the last directory checked.
        if package_path == self._base:
            return None
        return self.resolve(package_path.rpartition(".")[0])
