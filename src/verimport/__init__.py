"""verimport: verify imports against per-directory restriction rules."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("verimport")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
