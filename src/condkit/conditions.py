"""Condition tree nodes.

A condition is either an `AtomicCondition` comparing the value at a path
against a literal, or a `LogicalCondition` combining child conditions with
``and`` / ``or``. Trees are immutable; children are stored as tuples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

LOGIC_AND = "and"
LOGIC_OR = "or"
LOGIC_VALUES = (LOGIC_AND, LOGIC_OR)


@dataclass(frozen=True)
class AtomicCondition:
    """Compare the value at `key` against `value` using `op`.

    Examples:
        AtomicCondition("$.age", "gte", 21)
        AtomicCondition("$.roles", "contains", "editor")
        AtomicCondition("$.posts", "hasSize", 2)
    """

    key: str
    op: str
    value: Any = None

    def __repr__(self) -> str:
        return f"Atomic({self.key!r} {self.op} {self.value!r})"


@dataclass(frozen=True)
class LogicalCondition:
    """Combine `conditions` with ``and`` (all true) or ``or`` (any true)."""

    logic: str
    conditions: Tuple["Condition", ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.conditions, tuple):
            object.__setattr__(self, "conditions", tuple(self.conditions))

    def __repr__(self) -> str:
        children = ", ".join(repr(c) for c in self.conditions)
        return f"{str(self.logic).capitalize()}({children})"


Condition = Union[AtomicCondition, LogicalCondition]


def all_of(*conditions: Condition) -> LogicalCondition:
    return LogicalCondition(LOGIC_AND, conditions)


def any_of(*conditions: Condition) -> LogicalCondition:
    return LogicalCondition(LOGIC_OR, conditions)


def iter_atomic(condition: Condition) -> Iterable[AtomicCondition]:
    """Yield every atomic leaf of a condition tree, left to right."""
    if isinstance(condition, LogicalCondition):
        for child in condition.conditions:
            yield from iter_atomic(child)
    elif isinstance(condition, AtomicCondition):
        yield condition
