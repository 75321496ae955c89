"""
Float validator for TABLEFORGE
"""

import re
from typing import Any, Dict, List, Optional

from ..models.common import ColumnType
from .base_validator import BaseValidator, ValidationResult

# Plain decimal notation only: exponents are not accepted
_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?")


class FloatValidator(BaseValidator):
    """Validator for floating point numbers"""

    type_name = ColumnType.FLOAT.value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate float value"""
        if value is None:
            return self.null_result(self.type_name)

        if isinstance(value, bool):
            return self.type_mismatch(self.type_name, value)

        if isinstance(value, (int, float)):
            parsed = float(value)
        elif isinstance(value, str) and _DECIMAL_PATTERN.fullmatch(value):
            parsed = float(value)
        else:
            return self.type_mismatch(self.type_name, value)

        return ValidationResult(
            is_valid=True,
            message="Float validation passed",
            normalized_value=parsed,
            metadata={"type": self.type_name},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize decimal strings"""
        if isinstance(value, str) and _DECIMAL_PATTERN.fullmatch(value.strip()):
            return float(value.strip())
        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.FLOAT.value]
