"""Rule engine: rule models, rule-file resolution, matching, and verification."""

from verimport.rule_engine.config import VerifyConfig, load_verify_config
from verimport.rule_engine.engine import PackageReport, VerificationReport, Verifier
from verimport.rule_engine.matcher import classify_import, compile_selector, evaluate_rules
from verimport.rule_engine.models import (
    RULE_FILE_NAME,
    Package,
    Rule,
    RuleSet,
    Violation,
    ViolationReason,
)
from verimport.rule_engine.store import (
    FileSystemReader,
    ResolutionError,
    RuleFileCache,
    RuleStore,
    load_rule_file,
)

__all__ = [
    "RULE_FILE_NAME",
    "FileSystemReader",
    "Package",
    "PackageReport",
    "ResolutionError",
    "Rule",
    "RuleFileCache",
    "RuleSet",
    "RuleStore",
    "VerificationReport",
    "Verifier",
    "VerifyConfig",
    "Violation",
    "ViolationReason",
    "classify_import",
    "compile_selector",
    "evaluate_rules",
    "load_rule_file",
    "load_verify_config",
]
