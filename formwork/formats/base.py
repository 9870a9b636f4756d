"""Format Contract and Rule Pipeline

Every schema node implements one operation:

    extract(value, log, path=None) -> normalized value | None

``None`` is returned exactly when the log's error count grew during the call;
callers whose domain includes ``None`` must consult the log, not the return
value.

After structural extraction succeeds, a format hands its value through an
ordered pipeline of rules:

- test: passes the value through, fails when its predicate is false
- filter: may replace the value, fails when the input cannot be processed
  (the function raises ValueError, TypeError or ArithmeticError)

The pipeline stops at the first failing rule, and only that rule records a
diagnostic. Rules record nothing unless the caller's severity mask includes
Severity.ERROR, and message templates are only rendered then.

Leaf formats add a fast path, ``fast_apply(value, mask, log, path)``, returning
an Outcome without allocating a log. ``check(value)`` is the cheapest pass/fail test.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Mapping, NamedTuple, Self

from formwork.diagnostics import DiagnosticsLog, Severity
from formwork.errors import ErrorCode, misconfigured
from formwork.paths import is_index


class _Missing:
    """Marker for "no value"; distinct from None, which is a legitimate value."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Outcome(NamedTuple):
    """Result of a fast-path application: whether it passed, and the (possibly replaced) value."""
    ok: bool
    value: Any = None


FAILED = Outcome(False, None)


def lookup(container: Mapping | list | tuple, key: str | int) -> tuple[bool, Any]:
    """Whether ``key`` is present in ``container``, and its value.

    Mappings are looked up by key. Lists and tuples are looked up by index,
    so only integer-like keys ("0", "1", 2) can be present in them.
    """
    if isinstance(container, Mapping):
        return (True, container[key]) if key in container else (False, None)
    if is_index(key) and int(key) < len(container):
        return True, container[int(key)]
    return False, None


class RuleKind(str, Enum):
    TEST = "test"
    FILTER = "filter"


@dataclass(frozen=True, slots=True)
class Rule:
    """One pipeline step.

    ``message`` is a ``str.format`` template rendered with ``params`` (or a
    callable receiving the rejected value), evaluated only when recording.
    """
    name: str
    kind: RuleKind
    func: Callable[[Any], Any]
    message: str | Callable[[Any], str]
    code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not callable(self.func):
            raise misconfigured(f"Rule '{self.name}' needs a callable, got {type(self.func).__name__}.",
                code=ErrorCode.E9014_INVALID_RULE, rule=self.name)
        if not isinstance(self.message, str) and not callable(self.message):
            raise misconfigured(f"Rule '{self.name}' needs a message string or callable.",
                code=ErrorCode.E9014_INVALID_RULE, rule=self.name)

    @classmethod
    def test(cls, name: str, predicate: Callable[[Any], bool], message: str | Callable[[Any], str], *,
             code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION, **params: Any) -> Rule:
        return cls(name=name, kind=RuleKind.TEST, func=predicate, message=message, code=code, params=params)

    @classmethod
    def filter(cls, name: str, func: Callable[[Any], Any], message: str | Callable[[Any], str], *,
               code: ErrorCode = ErrorCode.E2002_INVALID_FORMAT, **params: Any) -> Rule:
        return cls(name=name, kind=RuleKind.FILTER, func=func, message=message, code=code, params=params)

    def render(self, value: Any) -> str:
        if callable(self.message):
            return self.message(value)
        return self.message.format(**self.params) if self.params else self.message

    def run(self, value: Any, mask: Severity, log: DiagnosticsLog | None, path: str | None) -> Outcome:
        if self.kind is RuleKind.TEST:
            if self.func(value):
                return Outcome(True, value)
        else:
            try:
                return Outcome(True, self.func(value))
            except (ValueError, TypeError, ArithmeticError):
                pass  # unprocessable input is a rule failure, recorded below

        if mask & Severity.ERROR:
            log.add_error(path, self.render(value), self.code)
        return FAILED


class RulePipeline:
    """Ordered, append-only list of rules, applied with first-failure short-circuit."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: list[Rule] = list(rules)

    def append(self, rule: Rule) -> None:
        self._rules.append(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self._rules]

    def apply(self, value: Any, mask: Severity = Severity.ALL, log: DiagnosticsLog | None = None,
              path: str | None = None) -> Outcome:
        for rule in self._rules:
            outcome = rule.run(value, mask, log, path)
            if not outcome.ok:
                return outcome
            value = outcome.value
        return Outcome(True, value)


class Format(ABC):
    """A schema node."""

    @abstractmethod
    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> Any:
        """Validate and normalize ``value``, recording problems in ``log`` at ``path``."""

    @property
    def missing_value(self) -> Any:
        """Stand-in for an absent required field, or MISSING when absence is an error.

        Form submissions cannot express an unchecked checkbox or an empty
        collection; formats for those shapes override this hook.
        """
        return MISSING


class AbstractFormat(Format):
    """Base for concrete formats: owns the rule pipeline and the fluent rule API."""

    def __init__(self) -> None:
        self._rules = RulePipeline()

    @property
    def rules(self) -> RulePipeline:
        return self._rules

    def test(self, predicate: Callable[[Any], bool], message: str | Callable[[Any], str] = "Please provide a valid value.",
             *, name: str = "test", code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION) -> Self:
        """Append a custom test rule."""
        return self._add_rule(Rule.test(name, predicate, message, code=code))

    def filter(self, func: Callable[[Any], Any], message: str | Callable[[Any], str] = "Please provide a valid value.",
               *, name: str = "filter", code: ErrorCode = ErrorCode.E2002_INVALID_FORMAT) -> Self:
        """Append a custom filter rule."""
        return self._add_rule(Rule.filter(name, func, message, code=code))

    def check(self, value: Any) -> bool:
        """Pass/fail check; the diagnostics are thrown away."""
        log = DiagnosticsLog()
        self.extract(value, log)
        return not log.has_errors()

    def _add_rule(self, rule: Rule) -> Self:
        self._rules.append(rule)
        return self

    def _ensure_no_rules(self, method: str) -> None:
        """Structural configuration is frozen once the first rule is appended."""
        if self._rules:
            raise misconfigured(f"You should call {method}() before any test or filter rules.",
                code=ErrorCode.E9011_BUILDER_ORDER, format=self, method=method)

    def _finish(self, value: Any, log: DiagnosticsLog, path: str | None) -> Any:
        """Run the pipeline in full mode and map the outcome onto the extract contract."""
        if not self._rules:
            return value
        outcome = self._rules.apply(value, Severity.ALL, log, path)
        return outcome.value if outcome.ok else None

    @staticmethod
    def _reject(mask: Severity, log: DiagnosticsLog | None, path: str | None, message: str,
                code: ErrorCode = ErrorCode.E2004_INVALID_TYPE) -> Outcome:
        if mask & Severity.ERROR:
            log.add_error(path, message, code)
        return FAILED


class LeafFormat(AbstractFormat):
    """A format that terminates recursion and supports the fast path."""

    @abstractmethod
    def _structure(self, value: Any, mask: Severity, log: DiagnosticsLog | None, path: str | None) -> Outcome:
        """Structural phase: type check and normalization before any rule runs."""

    def fast_apply(self, value: Any, mask: Severity = Severity.NONE, log: DiagnosticsLog | None = None,
                   path: str | None = None) -> Outcome:
        if mask & Severity.ERROR and log is None:
            raise misconfigured("A DiagnosticsLog is required when the mask records errors.", format=self)
        outcome = self._structure(value, mask, log, path)
        if not outcome.ok or not self._rules:
            return outcome
        return self._rules.apply(outcome.value, mask, log, path)

    def extract(self, value: Any, log: DiagnosticsLog, path: str | None = None) -> Any:
        outcome = self.fast_apply(value, Severity.ALL, log, path)
        return outcome.value if outcome.ok else None

    def check(self, value: Any) -> bool:
        return self.fast_apply(value).ok
