"""
Boolean validator for TABLEFORGE
"""

from typing import Any, Dict, List, Optional

from ..models.common import ColumnType
from .base_validator import BaseValidator, ValidationResult

BOOLEAN_LITERALS: Dict[str, bool] = {"true": True, "false": False}


class BooleanValidator(BaseValidator):
    """Validator for booleans and their "true"/"false" spellings"""

    type_name = ColumnType.BOOLEAN.value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Validate boolean value"""
        if value is None:
            return self.null_result(self.type_name)

        if isinstance(value, bool):
            parsed = value
        elif isinstance(value, str) and value.strip().lower() in BOOLEAN_LITERALS:
            parsed = BOOLEAN_LITERALS[value.strip().lower()]
        else:
            return self.type_mismatch(self.type_name, value)

        return ValidationResult(
            is_valid=True,
            message="Boolean validation passed",
            normalized_value=parsed,
            metadata={"type": self.type_name},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize boolean literals"""
        if isinstance(value, str):
            return BOOLEAN_LITERALS.get(value.strip().lower(), value)
        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.BOOLEAN.value]
