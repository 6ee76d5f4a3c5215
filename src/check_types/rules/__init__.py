"""Lint rules and diagnostic translation."""

from .check_types import (
    CATEGORY_NAMES,
    RuleContext,
    RuleListener,
    TypeCheckRule,
    build_rule,
    check_types,
)
from .diagnostics import (
    DiagnosticTranslator,
    LineMap,
    Location,
    Report,
    format_message,
)
from .registry import (
    DEFAULT_RULE,
    RULE_NAMES,
    RuleDispatchError,
    RuleRegistry,
    build_rule_registry,
)

__all__ = [
    "CATEGORY_NAMES",
    "DEFAULT_RULE",
    "RULE_NAMES",
    "DiagnosticTranslator",
    "LineMap",
    "Location",
    "Report",
    "RuleContext",
    "RuleDispatchError",
    "RuleListener",
    "RuleRegistry",
    "TypeCheckRule",
    "build_rule",
    "build_rule_registry",
    "check_types",
    "format_message",
]
