"""
Base validator interface for TABLEFORGE column types

A validator both checks and parses: a successful result carries the canonical
parsed value in normalized_value, a failed one carries the reason in message
("expected <type>, got <kind>" for kind mismatches).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.common import describe_kind


@dataclass
class ValidationResult:
    """Outcome of validating one cell"""

    is_valid: bool
    message: str = ""
    normalized_value: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def parsed(self) -> Any:
        """Parsed value, or None when validation failed"""
        return self.normalized_value if self.is_valid else None


class BaseValidator(ABC):
    """Abstract base class for column type validators"""

    type_name: str = ""

    @abstractmethod
    def validate(self, value: Any, constraints: Optional[Dict[str, Any]] = None) -> ValidationResult:
        """
        Validate and parse a value

        Args:
            value: Raw cell value
            constraints: Optional type-specific constraints

        Returns:
            ValidationResult object
        """

    @abstractmethod
    def normalize(self, value: Any) -> Any:
        """Light normalization applied to raw input (whitespace, literal spelling)"""

    def get_supported_types(self) -> List[str]:
        return [self.type_name]

    def accepted(self, value: Any, message: str = "", **metadata: Any) -> ValidationResult:
        """Successful result tagged with this validator's type"""
        return ValidationResult(
            is_valid=True, message=message, normalized_value=value, metadata={"type": self.type_name, **metadata}
        )

    @staticmethod
    def null_result(type_name: str) -> ValidationResult:
        """Null is accepted by every column type"""
        return ValidationResult(
            is_valid=True,
            message="Null value accepted",
            normalized_value=None,
            metadata={"type": type_name, "null": True},
        )

    @staticmethod
    def type_mismatch(type_name: str, value: Any) -> ValidationResult:
        """Standard failure naming the expected type and the observed kind"""
        observed = describe_kind(value)
        return ValidationResult(
            is_valid=False,
            message=f"expected {type_name}, got {observed}",
            metadata={"type": type_name, "observed": observed},
        )


class CompositeValidator(BaseValidator):
    """
    Dispatches to the validator registered for constraints["data_type"].

    Unknown types go to fallback_type when one is configured.
    """

    def __init__(self, validators: List[BaseValidator], fallback_type: Optional[str] = None):
        self.fallback_type = fallback_type
        self._by_type: Dict[str, BaseValidator] = {
            data_type: validator for validator in validators for data_type in validator.get_supported_types()
        }

    def validate(self, value: Any, constraints: Optional[Dict[str, Any]] = None) -> ValidationResult:
        constraints = dict(constraints or {})
        data_type = constraints.pop("data_type", None)
        if data_type is None:
            return ValidationResult(is_valid=False, message="data_type must be provided in constraints")

        validator = self._by_type.get(data_type)
        if validator is None and self.fallback_type:
            validator = self._by_type.get(self.fallback_type)
        if validator is None:
            return ValidationResult(is_valid=False, message=f"Unsupported data type: {data_type}")
        return validator.validate(value, constraints)

    def normalize(self, value: Any) -> Any:
        return value

    def get_supported_types(self) -> List[str]:
        return list(self._by_type)
