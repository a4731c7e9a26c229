"""Condition tree evaluator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .conditions import LOGIC_AND, LOGIC_OR, AtomicCondition, Condition, LogicalCondition
from .operators import apply_operator
from .path import get_value


def evaluate_atomic_condition(obj: Any, condition: AtomicCondition) -> bool:
    key = condition.key
    if not isinstance(key, str):
        return False
    return apply_operator(condition.op, get_value(obj, key), condition.value)


def _eval_logical(obj: Any, logic: Any, children: Any) -> bool:
    if logic == LOGIC_AND:
        return all(evaluate_condition(obj, child) for child in children)
    if logic == LOGIC_OR:
        return any(evaluate_condition(obj, child) for child in children)
    return False


def _eval_mapping(obj: Any, cond: Mapping) -> bool:
    if "logic" in cond:
        children = cond.get("conditions")
        if not isinstance(children, (list, tuple)):
            children = ()
        return _eval_logical(obj, cond.get("logic"), children)
    return evaluate_atomic_condition(
        obj,
        AtomicCondition(cond.get("key"), cond.get("op"), cond.get("value")),
    )


def evaluate_condition(obj: Any, condition: Condition | Mapping) -> bool:
    """Evaluate ``condition`` against ``obj``.

    ``and`` stops at the first false child and is true when empty; ``or``
    stops at the first true child and is false when empty. Missing data and
    values of the wrong shape evaluate to ``False`` rather than raising.

    Trusted plain dicts in wire shape are accepted alongside the dataclasses;
    untrusted input should go through `condkit.validate.parse_condition`.
    """
    if isinstance(condition, LogicalCondition):
        return _eval_logical(obj, condition.logic, condition.conditions)
    if isinstance(condition, AtomicCondition):
        return evaluate_atomic_condition(obj, condition)
    if isinstance(condition, Mapping):
        return _eval_mapping(obj, condition)
    return False
