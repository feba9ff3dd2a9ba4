"""Classify imports against the rules of a RuleSet."""

from __future__ import annotations

import re
from collections.abc import Iterable

from verimport.rule_engine.models import Rule, RuleSet, Violation, ViolationReason


def compile_selector(rule: Rule) -> re.Pattern[str]:
    """Compile a rule's selector. Raises re.error when it is not a valid pattern."""
    return re.compile(rule.selector_regexp)


def classify_import(selector: re.Pattern[str], import_path: str, rule: Rule) -> list[Violation]:
    """Check one import against one rule.

    Nothing is reported when the selector does not match. Otherwise every
    matching forbidden prefix yields its own violation, and a separate
    violation is added when no allowed prefix matches.
    """
    if not selector.search(import_path):
        return []

    violations: list[Violation] = []
    for forbidden in rule.forbidden_prefixes:
        if import_path.startswith(forbidden):
            violations.append(
                Violation(
                    reason=ViolationReason.FORBIDDEN_PREFIX,
                    message=f'import "{import_path}" has forbidden prefix {forbidden}',
                    import_path=import_path,
                    rule=rule,
                    prefix=forbidden,
                )
            )

    if not any(import_path.startswith(allowed) for allowed in rule.allowed_prefixes):
        violations.append(
            Violation(
                reason=ViolationReason.NO_ALLOWED_PREFIX_MATCH,
                message=f'import "{import_path}" did not match any allowed prefix',
                import_path=import_path,
                rule=rule,
            )
        )
    return violations


def evaluate_rules(rule_set: RuleSet, imports: Iterable[str]) -> list[Violation]:
    """Run every rule over every import, in rule-file order then import order."""
    import_paths = sorted(set(imports))
    violations: list[Violation] = []
    for rule in rule_set.rules:
        try:
            selector = compile_selector(rule)
        except re.error as e:
            violations.append(
                Violation(
                    reason=ViolationReason.BAD_SELECTOR,
                    message=(
                        f"regexp `{rule.selector_regexp}` in file "
                        f'"{rule_set.source}" doesn\'t compile: {e}'
                    ),
                    rule=rule,
                )
            )
            continue
        for import_path in import_paths:
            violations.extend(classify_import(selector, import_path, rule))
    return violations
