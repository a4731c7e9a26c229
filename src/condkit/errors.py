"""Exceptions raised by condkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List


Issue = Dict[str, Any]


@dataclass
class ConditionError(Exception):
    code: str
    message: str
    path: str | None = None

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        base = f"{self.code}: {self.message}"
        return f"{base} (path={self.path})" if self.path else base


class ConditionParsingError(ConditionError):
    """Raised when an untyped condition does not match the condition grammar.

    `errors` holds every structural issue found, each as a
    `{"code", "message", "path"}` dict.
    """

    def __init__(self, errors: List[Issue]) -> None:
        first = errors[0] if errors else {}
        summary = "; ".join(
            f"{item.get('path')}: {item.get('message')}" for item in errors
        )
        super().__init__(
            "CONDITION_PARSE_ERROR",
            f"Invalid condition format: {summary}" if summary else "Invalid condition format",
            first.get("path"),
        )
        self.errors = list(errors)


class ConditionWireError(ConditionError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__("CONDITION_WIRE_ERROR", message, path)
