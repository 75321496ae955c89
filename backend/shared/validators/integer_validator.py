"""
Integer/BigInt validator for TABLEFORGE
"""

import re
from typing import Any, Dict, List, Optional

from ..models.common import ColumnType
from .base_validator import BaseValidator, ValidationResult

# Largest integer a JSON number carries without precision loss (2**53 - 1)
MAX_SAFE_INTEGER = 9007199254740991

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class IntegerValidator(BaseValidator):
    """Validator for whole numbers inside the safe JSON number range"""

    type_name = ColumnType.INTEGER.value
    unbounded = False

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate integer value"""
        if value is None:
            return self.null_result(self.type_name)

        if isinstance(value, bool):
            return self.type_mismatch(self.type_name, value)

        if isinstance(value, int):
            parsed = value
        elif isinstance(value, float):
            if not value.is_integer():
                return self.type_mismatch(self.type_name, value)
            parsed = int(value)
        elif isinstance(value, str):
            if not _INTEGER_PATTERN.fullmatch(value):
                return self.type_mismatch(self.type_name, value)
            parsed = int(value)
        else:
            return self.type_mismatch(self.type_name, value)

        if not self.unbounded and abs(parsed) > MAX_SAFE_INTEGER:
            return ValidationResult(
                is_valid=False,
                message=f"{self.type_name} out of safe range",
                metadata={"type": self.type_name, "limit": MAX_SAFE_INTEGER},
            )

        return ValidationResult(
            is_valid=True,
            message=f"{self.type_name.capitalize()} validation passed",
            normalized_value=parsed,
            metadata={"type": self.type_name},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize integer-like strings"""
        if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
            return int(value.strip())
        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.INTEGER.value]


class BigIntValidator(IntegerValidator):
    """Validator for arbitrary-precision integers"""

    type_name = ColumnType.BIGINT.value
    unbounded = True

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.BIGINT.value]
