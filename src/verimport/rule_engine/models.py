"""Pydantic models and enums for the import rule engine."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

RULE_FILE_NAME = ".import-restrictions"


class ViolationReason(StrEnum):
    FORBIDDEN_PREFIX = "forbidden-prefix"
    NO_ALLOWED_PREFIX_MATCH = "no-allowed-prefix-match"
    BAD_SELECTOR = "bad-selector"
    RESOLUTION_ERROR = "resolution-error"


class Rule(BaseModel):
    """One clause of a rule file.

    Imports selected by ``selector_regexp`` must start with one of the
    ``allowed_prefixes`` and must not start with any ``forbidden_prefixes``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    selector_regexp: str = Field(
        default="",
        validation_alias=AliasChoices("SelectorRegexp", "selector_regexp"),
    )
    allowed_prefixes: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("AllowedPrefixes", "allowed_prefixes"),
    )
    forbidden_prefixes: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("ForbiddenPrefixes", "forbidden_prefixes"),
    )

    @field_validator("selector_regexp", mode="before")
    @classmethod
    def _null_selector(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("allowed_prefixes", "forbidden_prefixes", mode="before")
    @classmethod
    def _null_prefixes(cls, value: object) -> object:
        return () if value is None else value


class RuleSet(BaseModel):
    """Ordered rules governing one directory, plus the file they came from."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    rules: tuple[Rule, ...] = Field(
        default=(),
        validation_alias=AliasChoices("Rules", "rules"),
    )
    source: str = ""

    @field_validator("rules", mode="before")
    @classmethod
    def _null_rules(cls, value: object) -> object:
        return () if value is None else value


class Package(BaseModel):
    """A loaded package: dotted path, directory on disk, distinct imports."""

    model_config = ConfigDict(frozen=True)

    path: str
    directory: Path
    imports: frozenset[str] = frozenset()


class Violation(BaseModel):
    reason: ViolationReason
    message: str
    import_path: str | None = None
    rule: Rule | None = None
    prefix: str | None = None  # the forbidden prefix that matched, if any

    def __str__(self) -> str:
        return self.message
