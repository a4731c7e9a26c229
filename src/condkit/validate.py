"""Validation and parsing of untyped condition input.

Input typically comes from storage or an API body. Validation and parsing are
one pass: a value that matches the grammar is rebuilt as an `AtomicCondition`
/ `LogicalCondition` tree without any other transformation.

Grammar:
    atomic:  {"key": str, "op": <operator>, "value"?: any}
    logical: {"logic": "and" | "or", "conditions": [condition, ...]}

A mapping carrying ``logic`` is checked as logical, anything else as atomic.
Unknown keys are rejected, so a misspelled field never validates. A missing
``value`` is read as None.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List

from .conditions import LOGIC_VALUES, AtomicCondition, Condition, LogicalCondition
from .errors import ConditionParsingError, Issue
from .evaluate import evaluate_condition
from .operators import OPERATORS, is_operator

logger = logging.getLogger("condkit")

ATOMIC_KEYS = frozenset({"key", "op", "value"})
ATOMIC_REQUIRED = frozenset({"key", "op"})
LOGICAL_KEYS = frozenset({"logic", "conditions"})


@dataclass
class ValidationResult:
    condition: Condition | None = None
    errors: List[Issue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _issue(code: str, message: str, path: str) -> Issue:
    return {"code": code, "message": message, "path": path}


def _check_keys(
    errors: List[Issue], node: Mapping, allowed: frozenset, path: str, required: frozenset | None = None
) -> bool:
    ok = True
    for key in node.keys():
        if key not in allowed:
            errors.append(_issue("CONDITION_UNKNOWN_KEY", f"Unknown key: {key}", f"{path}.{key}"))
            ok = False
    for key in sorted(allowed if required is None else required):
        if key not in node:
            errors.append(_issue("CONDITION_MISSING_KEY", f"Missing required field: {key}", f"{path}.{key}"))
            ok = False
    return ok


def _validate_atomic(node: Mapping, path: str, errors: List[Issue]) -> AtomicCondition | None:
    # a missing value reads as None
    ok = _check_keys(errors, node, ATOMIC_KEYS, path, ATOMIC_REQUIRED)
    key = node.get("key")
    op = node.get("op")
    if "key" in node and not isinstance(key, str):
        errors.append(_issue("CONDITION_KEY_INVALID", "key must be a string", f"{path}.key"))
        ok = False
    if "op" in node and not is_operator(op):
        errors.append(
            _issue(
                "CONDITION_OP_INVALID",
                f"op must be one of {', '.join(OPERATORS)}; got {op!r}",
                f"{path}.op",
            )
        )
        ok = False
    if not ok:
        return None
    return AtomicCondition(key, op, node.get("value"))


def _validate_logical(
    node: Mapping, path: str, errors: List[Issue], depth: int, limit: int | None
) -> LogicalCondition | None:
    ok = _check_keys(errors, node, LOGICAL_KEYS, path)
    logic = node.get("logic")
    if logic not in LOGIC_VALUES:
        errors.append(_issue("CONDITION_LOGIC_INVALID", f"logic must be 'and' or 'or'; got {logic!r}", f"{path}.logic"))
        ok = False
    if "conditions" not in node:
        return None
    items = node.get("conditions")
    if not isinstance(items, (list, tuple)):
        errors.append(_issue("CONDITION_LIST_INVALID", "conditions must be a list", f"{path}.conditions"))
        return None
    children = []
    for idx, item in enumerate(items):
        child = _validate_node(item, f"{path}.conditions[{idx}]", errors, depth + 1, limit)
        if child is None:
            ok = False
        children.append(child)
    if not ok:
        return None
    return LogicalCondition(logic, tuple(children))


def _validate_node(
    node: Any, path: str, errors: List[Issue], depth: int, limit: int | None
) -> Condition | None:
    if limit is not None and depth > limit:
        errors.append(_issue("CONDITION_DEPTH_EXCEEDED", "condition is nested too deeply", path))
        return None
    if not isinstance(node, Mapping):
        errors.append(_issue("CONDITION_INVALID", "condition must be an object", path))
        return None
    if "logic" in node:
        return _validate_logical(node, path, errors, depth, limit)
    return _validate_atomic(node, path, errors)


def validate_condition(raw: Any, depth_limit: int | None = None) -> ValidationResult:
    """Check ``raw`` against the condition grammar.

    Every structural issue in the tree is collected. ``depth_limit`` bounds
    nesting (the root is depth 1); ``None`` means unbounded.
    """
    errors: List[Issue] = []
    condition = _validate_node(raw, "$", errors, 1, depth_limit)
    if errors:
        return ValidationResult(None, errors)
    return ValidationResult(condition, [])


def parse_condition(raw: Any, depth_limit: int | None = None) -> Condition:
    result = validate_condition(raw, depth_limit=depth_limit)
    if not result.ok:
        raise ConditionParsingError(result.errors)
    return result.condition


def parse_and_evaluate(obj: Any, raw: Any, depth_limit: int | None = None) -> bool:
    """Validate an untyped condition and evaluate it against ``obj``.

    Raises:
        ConditionParsingError: ``raw`` does not match the condition grammar.
    """
    try:
        condition = parse_condition(raw, depth_limit=depth_limit)
    except ConditionParsingError as exc:
        logger.debug("condition_parse_failed errors=%s", exc.errors)
        raise
    return evaluate_condition(obj, condition)
