"""Deterministic rule registration primitives."""

from __future__ import annotations

from dataclasses import dataclass, field

from check_types.rules.check_types import TypeCheckRule, build_rule
from check_types.session.registry import SessionRegistry

DEFAULT_RULE = "check-types"
RULE_NAMES = (
    DEFAULT_RULE,
    "type-errors",
    "type-warnings",
    "type-suggestions",
    "type-messages",
)


@dataclass(slots=True, frozen=True)
class RuleDispatchError(Exception):
    """Represents deterministic rule lookup failures."""

    code: str
    message: str


@dataclass(slots=True)
class RuleRegistry:
    """In-memory rule registry preserving deterministic insertion order."""

    _rules: dict[str, TypeCheckRule] = field(default_factory=dict)

    def register(self, name: str, rule: TypeCheckRule) -> None:
        """Register a named rule."""
        self._rules[name] = rule

    def get(self, name: str) -> TypeCheckRule | None:
        """Return a rule by name."""
        return self._rules.get(name)

    def names(self) -> tuple[str, ...]:
        """Return registered rule names in deterministic order."""
        return tuple(self._rules.keys())

    def require(self, name: str) -> TypeCheckRule:
        """Return a registered rule, raising for unknown names."""
        rule = self.get(name)
        if rule is None:
            raise RuleDispatchError(code="UNKNOWN_RULE", message=f"Unknown rule: {name}")
        return rule


def build_rule_registry(sessions: SessionRegistry) -> RuleRegistry:
    """Register the type-checking rules, all sharing one session registry."""
    registry = RuleRegistry()
    registry.register(DEFAULT_RULE, build_rule(sessions))
    registry.register("type-errors", build_rule(sessions, categories=["errors"]))
    registry.register("type-warnings", build_rule(sessions, categories=["warnings"]))
    registry.register("type-suggestions", build_rule(sessions, categories=["suggestions"]))
    registry.register("type-messages", build_rule(sessions, categories=["messages"]))
    return registry
