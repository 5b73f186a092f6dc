"""
Attribute value validation against parameter descriptions
"""

import math
import re
from typing import Callable, List, Mapping, Optional

from models import AttributeValidationResult, ConstraintHints, ParameterDescription

ParameterDescriptions = Mapping[str, ParameterDescription]


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _check_length(value: str, param: ParameterDescription) -> Optional[str]:
    if param.min_length is not None and len(value) < param.min_length:
        return f"Minimum length is {param.min_length} characters"
    if param.max_length is not None and len(value) > param.max_length:
        return f"Maximum length is {param.max_length} characters"
    return None


def _check_pattern(value: str, param: ParameterDescription) -> Optional[str]:
    if param.validation is None or not param.validation.pattern:
        return None
    try:
        matched = re.search(param.validation.pattern, value)
    except re.error:
        return "Invalid validation pattern"
    if matched is None:
        return param.validation.message or "Invalid format"
    return None


def _check_options(value: str, param: ParameterDescription) -> Optional[str]:
    if param.options and value not in param.options:
        return f"Must be one of: {', '.join(param.options)}"
    return None


def _check_number(value: str, param: ParameterDescription) -> Optional[str]:
    if param.type != "number":
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return "Must be a valid number"
    if math.isnan(number):
        return "Must be a valid number"
    if param.min is not None and number < param.min:
        return f"Minimum value is {_format_number(param.min)}"
    if param.max is not None and number > param.max:
        return f"Maximum value is {_format_number(param.max)}"
    return None


# Applied in order; the first failure is reported
CHECKS: List[Callable[[str, ParameterDescription], Optional[str]]] = [
    _check_length,
    _check_pattern,
    _check_options,
    _check_number,
]


def validate_attribute_value(attribute_name: str, value: str,
                             descriptions: ParameterDescriptions) -> AttributeValidationResult:
    """Validate an attribute value against the description of that attribute.

    Attributes without a description accept any value.
    """
    param = descriptions.get(attribute_name)
    if param is None:
        return AttributeValidationResult(is_valid=True)

    for check in CHECKS:
        error = check(value, param)
        if error:
            return AttributeValidationResult(is_valid=False, error=error)

    return AttributeValidationResult(is_valid=True)


def describe_constraints(attribute_name: str, descriptions: ParameterDescriptions) -> ConstraintHints:
    """Placeholder, hint and pattern for an attribute's input field"""
    param = descriptions.get(attribute_name)
    if param is None:
        return ConstraintHints()

    placeholder = f"e.g., {param.example}" if param.example else None

    hint = None
    if param.validation is not None and param.validation.message:
        hint = param.validation.message
    elif param.min_length or param.max_length:
        if param.min_length == param.max_length:
            hint = f"Must be exactly {param.min_length} character(s)"
        elif param.min_length and param.max_length:
            hint = f"Length: {param.min_length}-{param.max_length} characters"
        elif param.min_length:
            hint = f"Minimum {param.min_length} character(s)"
        else:
            hint = f"Maximum {param.max_length} character(s)"

    pattern = param.validation.pattern if param.validation is not None else None

    return ConstraintHints(placeholder=placeholder, hint=hint, pattern=pattern or None)
