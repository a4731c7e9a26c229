"""Operator set and per-operator comparison semantics."""

from __future__ import annotations

from typing import Any, Callable, Dict

# Operators that apply to any value.
COMMON_OPERATORS = ("eq", "neq")

# Ordering operators, meaningful for scalars (numbers, strings, booleans).
SCALAR_OPERATORS = ("lt", "lte", "gt", "gte")

# Operators that expect the resolved value to be a sequence.
COLLECTION_OPERATORS = (
    "in",
    "nin",
    "hasSize",
    "containsAny",
    "containsAll",
    "contains",
)

OPERATORS = COMMON_OPERATORS + SCALAR_OPERATORS + COLLECTION_OPERATORS
OPERATOR_SET = frozenset(OPERATORS)


def is_operator(op: Any) -> bool:
    return isinstance(op, str) and op in OPERATOR_SET


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion.

    Booleans never equal numbers, numbers compare by value (``1 == 1.0``),
    and lists and dicts compare element by element under the same rule.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if _is_sequence(left) and _is_sequence(right):
        return len(left) == len(right) and all(
            strict_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            strict_equal(left[key], right[key]) for key in left
        )
    if type(left) is not type(right):
        return False
    try:
        return bool(left == right)
    except Exception:
        return False


def _includes(items: Any, needle: Any) -> bool:
    return any(strict_equal(item, needle) for item in items)


def _is_orderable(value: Any) -> bool:
    return not (value is None or _is_sequence(value) or isinstance(value, dict))


def _cmp(left: Any, right: Any, pred: Callable[[Any, Any], bool]) -> bool:
    if not (_is_orderable(left) and _is_orderable(right)):
        return False
    try:
        return bool(pred(left, right))
    except Exception:
        return False


def _eq(resolved: Any, expected: Any) -> bool:
    return strict_equal(resolved, expected)


def _neq(resolved: Any, expected: Any) -> bool:
    return not strict_equal(resolved, expected)


def _lt(resolved: Any, expected: Any) -> bool:
    return _cmp(resolved, expected, lambda a, b: a < b)


def _lte(resolved: Any, expected: Any) -> bool:
    return _cmp(resolved, expected, lambda a, b: a <= b)


def _gt(resolved: Any, expected: Any) -> bool:
    return _cmp(resolved, expected, lambda a, b: a > b)


def _gte(resolved: Any, expected: Any) -> bool:
    return _cmp(resolved, expected, lambda a, b: a >= b)


def _contains(resolved: Any, expected: Any) -> bool:
    return _is_sequence(resolved) and _includes(resolved, expected)


def _nin(resolved: Any, expected: Any) -> bool:
    # True for non-sequences: complement of "is a sequence and contains".
    return not _contains(resolved, expected)


def _has_size(resolved: Any, expected: Any) -> bool:
    return _is_sequence(resolved) and strict_equal(len(resolved), expected)


def _contains_any(resolved: Any, expected: Any) -> bool:
    if not (_is_sequence(resolved) and _is_sequence(expected)):
        return False
    return any(_includes(resolved, item) for item in expected)


def _contains_all(resolved: Any, expected: Any) -> bool:
    if not (_is_sequence(resolved) and _is_sequence(expected)):
        return False
    return all(_includes(resolved, item) for item in expected)


_HANDLERS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": _eq,
    "neq": _neq,
    "lt": _lt,
    "lte": _lte,
    "gt": _gt,
    "gte": _gte,
    "in": _contains,
    "contains": _contains,
    "nin": _nin,
    "hasSize": _has_size,
    "containsAny": _contains_any,
    "containsAll": _contains_all,
}


def apply_operator(op: Any, resolved: Any, expected: Any) -> bool:
    """Compare a resolved value against a condition's literal value.

    Never raises: a value of the wrong shape for ``op`` yields ``False``
    (``nin`` yields ``True``), as does an operator outside ``OPERATORS``.
    """
    handler = _HANDLERS.get(op) if isinstance(op, str) else None
    if handler is None:
        return False
    return handler(resolved, expected)
