"""condkit: declarative condition evaluation over nested data."""

from .conditions import AtomicCondition, Condition, LogicalCondition, all_of, any_of
from .errors import ConditionError, ConditionParsingError, ConditionWireError
from .evaluate import evaluate_atomic_condition, evaluate_condition
from .operators import (
    COLLECTION_OPERATORS,
    COMMON_OPERATORS,
    OPERATORS,
    SCALAR_OPERATORS,
    apply_operator,
)
from .path import get_value, split_path
from .validate import ValidationResult, parse_and_evaluate, parse_condition, validate_condition
from .wire import condition_from_wire, condition_hash, condition_to_wire, dumps_condition

__all__ = [
    "AtomicCondition",
    "COLLECTION_OPERATORS",
    "COMMON_OPERATORS",
    "Condition",
    "ConditionError",
    "ConditionParsingError",
    "ConditionWireError",
    "LogicalCondition",
    "OPERATORS",
    "SCALAR_OPERATORS",
    "ValidationResult",
    "all_of",
    "any_of",
    "apply_operator",
    "condition_from_wire",
    "condition_hash",
    "condition_to_wire",
    "dumps_condition",
    "evaluate_atomic_condition",
    "evaluate_condition",
    "get_value",
    "parse_and_evaluate",
    "parse_condition",
    "split_path",
    "validate_condition",
]
