"""Wire/storage form of conditions: plain dicts, canonical JSON, fingerprints."""

from __future__ import annotations

import hashlib
import json
import math
from typing import Any, Dict

from .conditions import AtomicCondition, Condition, LogicalCondition
from .errors import ConditionWireError
from .validate import parse_condition


def condition_to_wire(condition: Condition) -> Dict[str, Any]:
    """Return the plain structural value for a condition tree."""
    if isinstance(condition, LogicalCondition):
        return {
            "logic": condition.logic,
            "conditions": [condition_to_wire(child) for child in condition.conditions],
        }
    if isinstance(condition, AtomicCondition):
        return {"key": condition.key, "op": condition.op, "value": condition.value}
    raise ConditionWireError(f"Unsupported condition node: {type(condition).__name__}", "$")


def condition_from_wire(raw: Any) -> Condition:
    return parse_condition(raw)


def _check_json(obj: Any, path: str) -> None:
    if isinstance(obj, dict):
        for key, value in obj.items():
            if not isinstance(key, str):
                raise ConditionWireError(f"Unsupported key type: {type(key).__name__}", path)
            _check_json(value, f"{path}.{key}")
        return
    if isinstance(obj, (list, tuple)):
        for idx, item in enumerate(obj):
            _check_json(item, f"{path}[{idx}]")
        return
    if obj is None or isinstance(obj, (str, int, bool)):
        return
    if isinstance(obj, float):
        if not math.isfinite(obj):
            raise ConditionWireError(f"Non-finite float: {obj!r}", path)
        return
    raise ConditionWireError(f"Unsupported type: {type(obj).__name__}", path)


def dumps_condition(condition: Condition) -> str:
    """Serialize a condition to deterministic canonical JSON.

    Keys are sorted recursively, list order is kept, non-ASCII is preserved
    and no whitespace is emitted, so equal trees always give equal strings.
    """
    wire = condition_to_wire(condition)
    _check_json(wire, "$")
    return json.dumps(
        wire,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )


def condition_hash(condition: Condition) -> str:
    digest = hashlib.sha256(dumps_condition(condition).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"
