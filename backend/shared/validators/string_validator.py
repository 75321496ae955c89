"""
String validator for TABLEFORGE

Scalars are coerced to their display text; objects and arrays are rejected.
The "format" constraint doubles as the editor grid's cell input check.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.common import ColumnType
from .base_validator import BaseValidator, ValidationResult

_TEXT = re.compile(r"[a-zA-Z\s]*", re.ASCII)
_DIGITS = re.compile(r"[0-9]+")
_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]*")

# format name -> (check, failure message)
_FORMAT_CHECKS: Dict[str, Tuple[Callable[[str], bool], str]] = {
    "text": (lambda s: bool(_TEXT.fullmatch(s)), "String does not match format: text"),
    "number": (lambda s: bool(_DIGITS.fullmatch(s)), "String does not match format: number"),
    "alphanumeric": (lambda s: bool(_ALPHANUMERIC.fullmatch(s)), "String does not match format: alphanumeric"),
    "alpha": (lambda s: s.replace(" ", "").isalpha(), "String must contain only alphabetic characters"),
    "numeric": (lambda s: bool(_DIGITS.fullmatch(s)), "String must contain only numeric characters"),
    "lowercase": (lambda s: s == s.lower(), "String must be lowercase"),
    "uppercase": (lambda s: s == s.upper(), "String must be uppercase"),
}

CELL_INPUT_FORMATS = ("text", "number", "alphanumeric")


def stringify_scalar(value: Any) -> str:
    """
    Render a scalar the way JSON clients display it.

    Booleans become "true"/"false"; integral floats drop the trailing ".0".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class StringValidator(BaseValidator):
    """Validator for strings (format, length and allowed-value constraints)"""

    type_name = ColumnType.STRING.value

    def validate(self, value: Any, constraints: Optional[Dict[str, Any]] = None) -> ValidationResult:
        constraints = constraints or {}

        if value is None:
            return self.null_result(self.type_name)
        if isinstance(value, (bool, int, float)):
            value = stringify_scalar(value)
        elif not isinstance(value, str):
            return self.type_mismatch(self.type_name, value)

        failure = self._check_constraints(value, constraints)
        if failure:
            return ValidationResult(is_valid=False, message=failure, metadata={"type": self.type_name})
        return self.accepted(value, "String validation passed", length=len(value))

    @staticmethod
    def _check_constraints(value: str, constraints: Dict[str, Any]) -> Optional[str]:
        format_check = _FORMAT_CHECKS.get(constraints.get("format"))
        if format_check and not format_check[0](value):
            return format_check[1]

        min_length = constraints.get("minLength")
        if min_length is not None and len(value) < min_length:
            return f"String length {len(value)} is less than minimum {min_length}"
        max_length = constraints.get("maxLength")
        if max_length is not None and len(value) > max_length:
            return f"String length {len(value)} exceeds maximum {max_length}"

        allowed = constraints.get("whitelist")
        if allowed is not None and value not in allowed:
            return f"String must be one of: {allowed}"
        return None

    def normalize(self, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    def get_supported_types(self) -> List[str]:
        return [ColumnType.STRING.value]
