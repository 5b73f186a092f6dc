import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from attribute_validation import describe_constraints, validate_attribute_value
from models import ConstraintHints, ParameterDescription, ValidationRule
from parameter_descriptions import parse_parameter_descriptions


DESCRIPTIONS = parse_parameter_descriptions({
    "Code": {"minLength": 2, "maxLength": 4},
    "Mode": {"options": ["X", "Y"]},
    "Level": {"type": "number", "min": 0, "max": 10},
    "Hex": {
        "minLength": 4,
        "maxLength": 4,
        "validation": {"pattern": "^[0-9A-F]+$", "message": "Use upper-case hex digits"},
        "example": "F190",
    },
    "Plain": {"validation": {"pattern": "^[a-z]+$"}},
    "Ordered": {"minLength": 2, "options": ["abc"], "type": "number"},
    "Ratio": {"type": "number", "min": 0.5},
})


class TestValidateAttributeValue(unittest.TestCase):
    def check(self, name, value):
        return validate_attribute_value(name, value, DESCRIPTIONS)

    def test_unknown_attribute_is_valid(self):
        result = self.check("Whatever", "")
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.error)

    def test_length_bounds(self):
        self.assertFalse(self.check("Code", "a").is_valid)
        self.assertTrue(self.check("Code", "ab").is_valid)
        self.assertTrue(self.check("Code", "abcd").is_valid)
        self.assertFalse(self.check("Code", "abcde").is_valid)
        self.assertEqual(self.check("Code", "a").error, "Minimum length is 2 characters")
        self.assertEqual(self.check("Code", "abcde").error, "Maximum length is 4 characters")

    def test_options(self):
        self.assertTrue(self.check("Mode", "X").is_valid)
        self.assertFalse(self.check("Mode", "Z").is_valid)
        self.assertFalse(self.check("Mode", "x").is_valid)
        self.assertEqual(self.check("Mode", "Z").error, "Must be one of: X, Y")

    def test_number(self):
        self.assertTrue(self.check("Level", "5").is_valid)
        self.assertTrue(self.check("Level", "10").is_valid)
        self.assertEqual(self.check("Level", "-1").error, "Minimum value is 0")
        self.assertEqual(self.check("Level", "10.5").error, "Maximum value is 10")
        self.assertEqual(self.check("Level", "abc").error, "Must be a valid number")
        self.assertEqual(self.check("Level", "nan").error, "Must be a valid number")
        self.assertEqual(self.check("Level", "").error, "Must be a valid number")

    def test_fractional_bound_in_message(self):
        self.assertEqual(self.check("Ratio", "0.1").error, "Minimum value is 0.5")

    def test_pattern_with_message(self):
        self.assertTrue(self.check("Hex", "F190").is_valid)
        self.assertEqual(self.check("Hex", "f190").error, "Use upper-case hex digits")

    def test_pattern_default_message(self):
        self.assertEqual(self.check("Plain", "ABC").error, "Invalid format")

    def test_length_checked_before_pattern(self):
        self.assertEqual(self.check("Hex", "f1").error, "Minimum length is 4 characters")

    def test_check_order(self):
        self.assertEqual(self.check("Ordered", "a").error, "Minimum length is 2 characters")
        self.assertEqual(self.check("Ordered", "xyz").error, "Must be one of: abc")
        self.assertEqual(self.check("Ordered", "abc").error, "Must be a valid number")

    def test_invalid_pattern(self):
        descriptions = {"Broken": ParameterDescription(validation=ValidationRule(pattern="(["))}
        result = validate_attribute_value("Broken", "x", descriptions)
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error, "Invalid validation pattern")


class TestDescribeConstraints(unittest.TestCase):
    def describe(self, **fields):
        return describe_constraints("P", {"P": ParameterDescription(**fields)})

    def test_unknown_attribute(self):
        self.assertEqual(describe_constraints("Nope", DESCRIPTIONS), ConstraintHints())

    def test_example_and_message(self):
        hints = describe_constraints("Hex", DESCRIPTIONS)
        self.assertEqual(hints.placeholder, "e.g., F190")
        self.assertEqual(hints.hint, "Use upper-case hex digits")
        self.assertEqual(hints.pattern, "^[0-9A-F]+$")

    def test_length_hints(self):
        self.assertEqual(self.describe(min_length=3, max_length=3).hint, "Must be exactly 3 character(s)")
        self.assertEqual(self.describe(min_length=2, max_length=4).hint, "Length: 2-4 characters")
        self.assertEqual(self.describe(min_length=2).hint, "Minimum 2 character(s)")
        self.assertEqual(self.describe(max_length=8).hint, "Maximum 8 character(s)")
        self.assertIsNone(self.describe().hint)


class TestParameterDescriptionFromDict(unittest.TestCase):
    def test_camel_case_keys(self):
        param = ParameterDescription.from_dict({
            "title": "Size",
            "type": "number",
            "minLength": "1",
            "maxLength": 3,
            "min": 0,
            "max": "255",
            "options": ["1", 2],
            "validation": {"pattern": "^\\d+$"},
        })
        self.assertEqual(param.min_length, 1)
        self.assertEqual(param.max_length, 3)
        self.assertEqual(param.min, 0.0)
        self.assertEqual(param.max, 255.0)
        self.assertEqual(param.options, ("1", "2"))
        self.assertEqual(param.validation, ValidationRule(pattern="^\\d+$"))

    def test_bad_numbers_are_ignored(self):
        param = ParameterDescription.from_dict({"minLength": "many", "max": True})
        self.assertIsNone(param.min_length)
        self.assertIsNone(param.max)


if __name__ == '__main__':
    unittest.main()
