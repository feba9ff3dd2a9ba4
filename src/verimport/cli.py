"""CLI entry point for verimport."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from verimport import __version__
from verimport.loader.adapter import ConfigurationError, LoadError, load_packages
from verimport.rule_engine.config import load_verify_config
from verimport.rule_engine.engine import Verifier

_EPILOG = """\
Example:
  verimport --base shop --dir src shop.*
  verimport --base shop shop.api shop.core.*
"""


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="verimport",
        description="Verify that imports obey per-directory .import-restrictions rules",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"verimport {__version__}"
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log rule files loaded (-v) and cache activity (-vv)",
    )
    _ = parser.add_argument(
        "--base",
        default=None,
        help="Base package path (for example: shop)",
    )
    _ = parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Source root containing the base package (default: working directory)",
    )
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: .verimport.json in the working directory)",
    )
    _ = parser.add_argument(
        "patterns",
        nargs="*",
        help="Package patterns, each equal to or below the base (e.g. shop.api.*)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(cast(int, args.verbose))

    config = load_verify_config(cast(Path | None, args.config))
    base = cast(str | None, args.base) or config.base
    patterns = cast(list[str], args.patterns) or config.patterns
    root = cast(Path | None, args.dir) or Path(config.root)

    if not base or not patterns:
        parser.print_help()
        sys.exit(1)

    try:
        packages = load_packages(base, patterns, root)
    except (ConfigurationError, LoadError) as e:
        print(f"load packages: {e}", file=sys.stderr)
        sys.exit(1)

    verifier = Verifier(base, root, rule_file=config.rule_file)
    report = verifier.verify(packages)
    if not report.ok:
        print(report.render(config.max_display))
        print("verify imports: some packages violate import rules", file=sys.stderr)
        sys.exit(1)

    print("\n✓ ok")
