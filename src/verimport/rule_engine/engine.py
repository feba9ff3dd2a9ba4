"""Verifier: check every loaded package against its governing rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from verimport.rule_engine.matcher import evaluate_rules
from verimport.rule_engine.models import RULE_FILE_NAME, Package, Violation, ViolationReason
from verimport.rule_engine.store import (
    FileSystemReader,
    ResolutionError,
    RuleFileCache,
    RuleStore,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISPLAY = 10


class PackageReport(BaseModel):
    package_path: str
    violations: list[Violation] = Field(default_factory=list)

    def render(self, max_display: int = DEFAULT_MAX_DISPLAY) -> list[str]:
        """Report lines for this package; the list of violations shown is capped."""
        lines = [f'Package "{self.package_path}"']
        for violation in self.violations[:max_display]:
            lines.append(f"\t{violation}")
        if len(self.violations) > max_display:
            lines.append(f"\t... total {len(self.violations)} imports violated")
        return lines


class VerificationReport(BaseModel):
    packages_checked: int = 0
    failures: list[PackageReport] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def violation_count(self) -> int:
        return sum(len(f.violations) for f in self.failures)

    def render(self, max_display: int = DEFAULT_MAX_DISPLAY) -> str:
        lines: list[str] = []
        for failure in self.failures:
            lines.extend(failure.render(max_display))
            lines.append("")
        return "\n".join(lines)


class Verifier:
    """One verification run. Owns the rule cache shared by all its packages."""

    def __init__(
        self,
        base: str,
        root: Path,
        *,
        reader: FileSystemReader | None = None,
        rule_file: str = RULE_FILE_NAME,
    ) -> None:
        self.cache = RuleFileCache()
        self.store = RuleStore(
            base,
            root,
            cache=self.cache,
            reader=reader,
            rule_file=rule_file,
        )

    def verify_package(self, package: Package) -> list[Violation]:
        try:
            rules = self.store.resolve(package.path)
        except ResolutionError as e:
            return [Violation(reason=ViolationReason.RESOLUTION_ERROR, message=str(e))]
        if rules is None:
            return []
        logger.debug(f"Verifying {package.path} against {rules.source}")
        return evaluate_rules(rules, package.imports)

    def verify(self, packages: Iterable[Package]) -> VerificationReport:
        """Verify all packages in sorted path order and build the full report."""
        by_path = {p.path: p for p in packages}
        report = VerificationReport(packages_checked=len(by_path))
        for path in sorted(by_path):
            violations = self.verify_package(by_path[path])
            if violations:
                report.failures.append(PackageReport(package_path=path, violations=violations))
        return report
