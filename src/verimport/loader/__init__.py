"""Package loading: Python import extraction and the rule engine boundary."""

from verimport.loader.adapter import (
    ConfigurationError,
    LoadError,
    PackageLoader,
    load_packages,
    validate_patterns,
)
from verimport.loader.ast_imports import extract_imports, resolve_relative

__all__ = [
    "ConfigurationError",
    "LoadError",
    "PackageLoader",
    "extract_imports",
    "load_packages",
    "resolve_relative",
    "validate_patterns",
]
