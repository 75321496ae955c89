"""
JSON validator for TABLEFORGE
"""

import json
from typing import Any, Dict, List, Optional
import logging

from ..models.common import ColumnType, describe_kind
from .base_validator import BaseValidator, ValidationResult

logger = logging.getLogger(__name__)


class JsonValidator(BaseValidator):
    """Validator for json columns (structured values or JSON text)"""

    type_name = ColumnType.JSON.value

    def validate(
        self, value: Any, constraints: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """
        Validate JSON value with constraints

        Constraints:
            structured_only: only accept objects/arrays (after decoding text)
        """
        if constraints is None:
            constraints = {}

        if value is None:
            return self.null_result(self.type_name)

        # Handle JSON text
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except json.JSONDecodeError as e:
                return ValidationResult(
                    is_valid=False,
                    message=f"invalid JSON: {e.msg}",
                    metadata={"type": self.type_name, "observed": "string"},
                )
            # Scalar strings keep their JSON text so re-validation still decodes
            normalized = value if isinstance(decoded, str) else decoded
        else:
            decoded = value
            normalized = value

        if constraints.get("structured_only") and not isinstance(decoded, (dict, list)):
            return self.type_mismatch(self.type_name, decoded)

        return ValidationResult(
            is_valid=True,
            message="JSON validation passed",
            normalized_value=normalized,
            metadata={"type": self.type_name, "kind": describe_kind(decoded)},
        )

    def normalize(self, value: Any) -> Any:
        """Normalize JSON text to its decoded document"""
        if isinstance(value, str):
            try:
                return json.loads(value)
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                logger.debug(f"Failed to parse JSON from string '{value}': {e}")
                return value

        return value

    def get_supported_types(self) -> List[str]:
        """Get supported types"""
        return [ColumnType.JSON.value]
