import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from condkit.conditions import AtomicCondition, LogicalCondition
from condkit.errors import ConditionParsingError, ConditionWireError
from condkit.wire import condition_from_wire, condition_hash, condition_to_wire, dumps_condition


class TestConditionWire(unittest.TestCase):
    def setUp(self) -> None:
        self.condition = LogicalCondition(
            "and",
            (
                AtomicCondition("$.age", "gte", 21),
                LogicalCondition("or", (AtomicCondition("$.roles", "containsAny", ["admin", "editor"]),)),
            ),
        )

    def test_to_wire(self) -> None:
        self.assertEqual(
            condition_to_wire(self.condition),
            {
                "logic": "and",
                "conditions": [
                    {"key": "$.age", "op": "gte", "value": 21},
                    {
                        "logic": "or",
                        "conditions": [{"key": "$.roles", "op": "containsAny", "value": ["admin", "editor"]}],
                    },
                ],
            },
        )

    def test_from_wire_inverts_to_wire(self) -> None:
        self.assertEqual(condition_from_wire(condition_to_wire(self.condition)), self.condition)

    def test_from_wire_rejects_bad_shape(self) -> None:
        with self.assertRaises(ConditionParsingError):
            condition_from_wire({"logic": "and", "conditions": [{"key": "$.a"}]})

    def test_to_wire_rejects_other_nodes(self) -> None:
        with self.assertRaises(ConditionWireError):
            condition_to_wire({"key": "$.a", "op": "eq", "value": 1})

    def test_dumps_is_canonical(self) -> None:
        out = dumps_condition(AtomicCondition("$.name", "eq", {"b": 1, "a": "café"}))
        self.assertEqual(out, '{"key":"$.name","op":"eq","value":{"a":"café","b":1}}')

    def test_dumps_rejects_non_json_values(self) -> None:
        for value in (float("nan"), float("inf"), {1, 2}, {1: "a"}):
            with self.assertRaises(ConditionWireError):
                dumps_condition(AtomicCondition("$.a", "eq", value))

    def test_hash_format(self) -> None:
        digest = condition_hash(self.condition)
        self.assertTrue(digest.startswith("sha256:"))
        self.assertEqual(len(digest), len("sha256:") + 64)

    def test_hash_stable_and_content_sensitive(self) -> None:
        a = AtomicCondition("$.n", "eq", {"x": 1, "y": 2})
        b = AtomicCondition("$.n", "eq", {"y": 2, "x": 1})
        self.assertEqual(condition_hash(a), condition_hash(b))
        self.assertNotEqual(
            condition_hash(AtomicCondition("$.n", "eq", 1)),
            condition_hash(AtomicCondition("$.n", "eq", 1.0)),
        )


if __name__ == "__main__":
    unittest.main()
