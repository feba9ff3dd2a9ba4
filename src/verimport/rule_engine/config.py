"""VerifyConfig dataclass and loader for verification settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from verimport.rule_engine.engine import DEFAULT_MAX_DISPLAY
from verimport.rule_engine.models import RULE_FILE_NAME

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".verimport.json"


@dataclass
class VerifyConfig:
    base: str = ""
    root: str = "."
    patterns: list[str] = field(default_factory=list)
    rule_file: str = RULE_FILE_NAME
    max_display: int = DEFAULT_MAX_DISPLAY


def load_verify_config(path: Path | None = None) -> VerifyConfig:
    """Load the "verify" section of .verimport.json, then apply env overrides."""
    if path is None:
        path = Path.cwd() / CONFIG_FILE_NAME
    config = VerifyConfig()
    if path.exists():
        try:
            text = path.read_text(encoding="utf-8")
            if text.strip():
                data = json.loads(text)
                section = data.get("verify", {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(config, section)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load verify config from {path}: {e}")
    if env_rule_file := os.environ.get("VERIMPORT_RULE_FILE"):
        config.rule_file = env_rule_file
    if env_max := os.environ.get("VERIMPORT_MAX_DISPLAY"):
        if (max_display := _safe_int(env_max, 0)) > 0:
            config.max_display = max_display
    return config


def _safe_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _apply(cfg: VerifyConfig, data: dict[str, object]) -> None:
    if isinstance(base := data.get("base"), str):
        cfg.base = base
    if isinstance(root := data.get("dir"), str):
        cfg.root = root
    patterns = data.get("patterns")
    if isinstance(patterns, list) and all(isinstance(p, str) for p in patterns):
        cfg.patterns = list(patterns)
    if isinstance(rule_file := data.get("rule_file"), str) and rule_file:
        cfg.rule_file = rule_file
    max_display = data.get("max_display")
    if isinstance(max_display, int) and not isinstance(max_display, bool) and max_display > 0:
        cfg.max_display = max_display
