"""Shared fixtures for verimport tests."""

import json
from pathlib import Path

import pytest

from verimport.rule_engine.store import FileSystemReader


def write_rules(directory: Path, rules: list[dict], name: str = ".import-restrictions") -> Path:
    """Write a rule file with the given rule dicts into directory."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(json.dumps({"Rules": rules}))
    return path


def write_module(directory: Path, name: str, source: str = "") -> Path:
    """Write a .py module (creating the directory) and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(source)
    return path


class CountingReader(FileSystemReader):
    """FileSystemReader that records every path it is asked about."""

    def __init__(self) -> None:
        self.calls: list[Path] = []

    def exists(self, path: Path) -> bool:
        self.calls.append(path)
        return super().exists(path)

    def is_dir(self, path: Path) -> bool:
        self.calls.append(path)
        return super().is_dir(path)

    def read_text(self, path: Path) -> str:
        self.calls.append(path)
        return super().read_text(path)


@pytest.fixture
def shop_tree(tmp_path: Path) -> Path:
    """Source root with a small `shop` project.

    shop/            rule file: shop.api may not be imported, only shop.* allowed
    shop/api/        no rule file (inherits shop)
    shop/api/v1/     no rule file (inherits shop)
    shop/db/         own rule file: anything goes except shop.api
    shop/util/       imports only stdlib-ish modules
    """
    root = tmp_path / "src"
    shop = root / "shop"
    write_module(shop, "__init__.py")
    write_rules(
        shop,
        [
            {
                "SelectorRegexp": "^shop\\.",
                "AllowedPrefixes": ["shop."],
                "ForbiddenPrefixes": ["shop.api"],
            }
        ],
    )
    write_module(shop / "api", "__init__.py")
    write_module(shop / "api", "handlers.py", "from shop.db import models\nimport json\n")
    write_module(shop / "api" / "v1", "__init__.py", "from .. import handlers\n")
    write_rules(
        shop / "db",
        [{"SelectorRegexp": "^shop\\.", "AllowedPrefixes": ["shop."], "ForbiddenPrefixes": ["shop.api"]}],
    )
    write_module(shop / "db", "__init__.py")
    write_module(shop / "db", "models.py", "import shop.api.handlers\nfrom shop.util import text\n")
    write_module(shop / "util", "__init__.py")
    write_module(shop / "util", "text.py", "import re\nimport os.path\n")
    return root
