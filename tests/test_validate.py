import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from condkit.conditions import AtomicCondition, LogicalCondition
from condkit.errors import ConditionError, ConditionParsingError
from condkit.evaluate import evaluate_condition
from condkit.validate import parse_and_evaluate, parse_condition, validate_condition


def _codes(result) -> list:
    return [e["code"] for e in result.errors]


class TestValidateCondition(unittest.TestCase):
    def test_atomic(self) -> None:
        result = validate_condition({"key": "$.age", "op": "gte", "value": 21})
        self.assertTrue(result.ok)
        self.assertEqual(result.condition, AtomicCondition("$.age", "gte", 21))

    def test_atomic_null_value(self) -> None:
        result = validate_condition({"key": "$.a", "op": "eq", "value": None})
        self.assertTrue(result.ok)
        self.assertIsNone(result.condition.value)

    def test_value_is_not_shape_checked(self) -> None:
        result = validate_condition({"key": "$.a", "op": "hasSize", "value": "two"})
        self.assertTrue(result.ok)

    def test_logical_nested(self) -> None:
        raw = {
            "logic": "or",
            "conditions": [
                {"key": "$.a", "op": "eq", "value": 1},
                {"logic": "and", "conditions": []},
            ],
        }
        condition = parse_condition(raw)
        self.assertEqual(
            condition,
            LogicalCondition(
                "or",
                (AtomicCondition("$.a", "eq", 1), LogicalCondition("and", ())),
            ),
        )

    def test_misspelled_fields(self) -> None:
        result = validate_condition({"key": "$.age", "ope": "gte", "val": 21})
        self.assertFalse(result.ok)
        self.assertIsNone(result.condition)
        self.assertIn("CONDITION_UNKNOWN_KEY", _codes(result))
        self.assertIn("CONDITION_MISSING_KEY", _codes(result))
        paths = {e["path"] for e in result.errors}
        self.assertIn("$.ope", paths)
        self.assertIn("$.op", paths)

    def test_extra_field_rejected(self) -> None:
        result = validate_condition({"key": "$.a", "op": "eq", "value": 1, "note": "x"})
        self.assertEqual(_codes(result), ["CONDITION_UNKNOWN_KEY"])

    def test_value_may_be_omitted(self) -> None:
        raw = {"key": "$.deleted", "op": "eq"}
        result = validate_condition(raw)
        self.assertTrue(result.ok, result.errors)
        self.assertEqual(result.condition, AtomicCondition("$.deleted", "eq", None))
        self.assertTrue(parse_and_evaluate({}, raw))
        self.assertFalse(parse_and_evaluate({"deleted": True}, raw))

    def test_unknown_operator(self) -> None:
        result = validate_condition({"key": "$.age", "op": "unknownOp", "value": 1})
        self.assertEqual(_codes(result), ["CONDITION_OP_INVALID"])
        self.assertEqual(result.errors[0]["path"], "$.op")

    def test_operator_case_sensitive(self) -> None:
        self.assertFalse(validate_condition({"key": "$.a", "op": "hassize", "value": 1}).ok)

    def test_key_must_be_string(self) -> None:
        result = validate_condition({"key": 3, "op": "eq", "value": 1})
        self.assertEqual(_codes(result), ["CONDITION_KEY_INVALID"])

    def test_bad_logic(self) -> None:
        result = validate_condition({"logic": "xor", "conditions": []})
        self.assertEqual(_codes(result), ["CONDITION_LOGIC_INVALID"])

    def test_conditions_must_be_list(self) -> None:
        result = validate_condition({"logic": "and", "conditions": {"key": "$.a"}})
        self.assertEqual(_codes(result), ["CONDITION_LIST_INVALID"])

    def test_missing_conditions(self) -> None:
        result = validate_condition({"logic": "and"})
        self.assertEqual(_codes(result), ["CONDITION_MISSING_KEY"])

    def test_non_object(self) -> None:
        for raw in (None, "x", 3, ["key"]):
            result = validate_condition(raw)
            self.assertEqual(_codes(result), ["CONDITION_INVALID"])

    def test_collects_nested_errors_with_paths(self) -> None:
        raw = {
            "logic": "or",
            "conditions": [
                {"key": "$.age", "operator": "gt", "value": 40},
                {"key": "$.name", "op": "equals", "value": "John"},
                {"key": "$.ok", "op": "eq", "value": True},
            ],
        }
        result = validate_condition(raw)
        paths = {e["path"] for e in result.errors}
        self.assertIn("$.conditions[0].operator", paths)
        self.assertIn("$.conditions[1].op", paths)
        self.assertFalse(any(p.startswith("$.conditions[2]") for p in paths))

    def test_depth_limit(self) -> None:
        raw = {"logic": "and", "conditions": [{"logic": "and", "conditions": [{"key": "$.a", "op": "eq", "value": 1}]}]}
        self.assertTrue(validate_condition(raw, depth_limit=3).ok)
        result = validate_condition(raw, depth_limit=2)
        self.assertEqual(_codes(result), ["CONDITION_DEPTH_EXCEEDED"])
        self.assertEqual(result.errors[0]["path"], "$.conditions[0].conditions[0]")

    def test_no_depth_limit_by_default(self) -> None:
        raw = {"key": "$.a", "op": "eq", "value": 1}
        for _ in range(100):
            raw = {"logic": "and", "conditions": [raw]}
        self.assertTrue(validate_condition(raw).ok)


class TestParseAndEvaluate(unittest.TestCase):
    def setUp(self) -> None:
        self.user = {"name": "John Doe", "age": 30, "isVerified": True}

    def test_valid(self) -> None:
        self.assertTrue(parse_and_evaluate({"age": 30}, {"key": "$.age", "op": "gte", "value": 21}))
        raw = {
            "logic": "and",
            "conditions": [
                {"key": "$.age", "op": "gte", "value": 21},
                {"key": "$.isVerified", "op": "eq", "value": True},
            ],
        }
        self.assertTrue(parse_and_evaluate(self.user, raw))

    def test_misspelled_fields_raise(self) -> None:
        with self.assertRaises(ConditionParsingError) as ctx:
            parse_and_evaluate({"age": 30}, {"key": "$.age", "ope": "gte", "val": 21})
        self.assertTrue(ctx.exception.errors)
        self.assertIn("Invalid condition format", str(ctx.exception))

    def test_unknown_operator_raises(self) -> None:
        with self.assertRaises(ConditionParsingError):
            parse_and_evaluate(self.user, {"key": "$.age", "op": "unknownOp", "value": 1})
        # The same shape handed over as a trusted condition evaluates to False.
        self.assertFalse(evaluate_condition(self.user, AtomicCondition("$.age", "unknownOp", 1)))

    def test_parsing_error_is_condition_error(self) -> None:
        with self.assertRaises(ConditionError) as ctx:
            parse_condition({"logic": "and", "conditions": [{"key": "$.age", "ope": "gte", "val": 30}]})
        self.assertEqual(ctx.exception.code, "CONDITION_PARSE_ERROR")

    def test_parsed_matches_hand_built(self) -> None:
        raw = {
            "logic": "and",
            "conditions": [
                {"key": "$.age", "op": "gt", "value": 18},
                {"logic": "or", "conditions": [{"key": "$.name", "op": "neq", "value": "x"}]},
            ],
        }
        hand_built = LogicalCondition(
            "and",
            (
                AtomicCondition("$.age", "gt", 18),
                LogicalCondition("or", (AtomicCondition("$.name", "neq", "x"),)),
            ),
        )
        for obj in (self.user, {"age": 10, "name": "x"}, {}, None):
            self.assertEqual(
                parse_and_evaluate(obj, raw),
                evaluate_condition(obj, hand_built),
            )


if __name__ == "__main__":
    unittest.main()
