"""
Validators for TABLEFORGE column types
"""

from typing import Any, Dict, Optional, Type, Union

from ..exceptions.table import FieldTypeError
from ..models.common import ColumnType
from ..utils.column_type_normalization import normalize_column_type
from .base_validator import BaseValidator, CompositeValidator, ValidationResult
from .boolean_validator import BooleanValidator
from .date_validator import DateTimeValidator, DateValidator
from .float_validator import FloatValidator
from .integer_validator import BigIntValidator, IntegerValidator
from .json_validator import JsonValidator
from .string_validator import CELL_INPUT_FORMATS, StringValidator

# Registry of validators by canonical type
_VALIDATOR_REGISTRY: Dict[str, Type[BaseValidator]] = {
    ColumnType.INTEGER.value: IntegerValidator,
    ColumnType.BIGINT.value: BigIntValidator,
    ColumnType.FLOAT.value: FloatValidator,
    ColumnType.BOOLEAN.value: BooleanValidator,
    ColumnType.DATE.value: DateValidator,
    ColumnType.DATETIME.value: DateTimeValidator,
    ColumnType.JSON.value: JsonValidator,
    ColumnType.STRING.value: StringValidator,
}

_composite: Optional[CompositeValidator] = None


def get_validator(data_type: Union[str, ColumnType, None]) -> BaseValidator:
    """
    Get validator instance for a column type

    Labels outside the registry get the string validator.

    Args:
        data_type: Raw label or ColumnType

    Returns:
        Validator instance
    """
    label = data_type.value if isinstance(data_type, ColumnType) else normalize_column_type(data_type)
    validator_class = _VALIDATOR_REGISTRY.get(label, StringValidator)
    return validator_class()


def get_composite_validator() -> CompositeValidator:
    """
    Get a composite validator with all registered validators

    Returns:
        CompositeValidator instance
    """
    global _composite
    if _composite is None:
        validators = [validator_class() for validator_class in _VALIDATOR_REGISTRY.values()]
        _composite = CompositeValidator(validators, fallback_type=ColumnType.STRING.value)
    return _composite


def validate_value(
    value: Any,
    column_type: Union[str, ColumnType, None],
    constraints: Optional[Dict[str, Any]] = None,
) -> ValidationResult:
    """Validate and parse one cell value against a column type."""
    label = column_type.value if isinstance(column_type, ColumnType) else normalize_column_type(column_type)
    return get_composite_validator().validate(value, {**(constraints or {}), "data_type": label})


def parse_value_strict(value: Any, column_type: Union[str, ColumnType, None], column: str = "") -> Any:
    """Return the parsed value or raise FieldTypeError."""
    result = validate_value(value, column_type)
    if not result.is_valid:
        raise FieldTypeError(column=column, value=value, reason=result.message)
    return result.normalized_value


def check_cell_input(value: str, field_type: str) -> bool:
    """Check typed cell input against an editor format (text, number, alphanumeric)."""
    if field_type not in CELL_INPUT_FORMATS:
        return False
    return StringValidator().validate(value, {"format": field_type}).is_valid


__all__ = [
    "BaseValidator",
    "ValidationResult",
    "CompositeValidator",
    "IntegerValidator",
    "BigIntValidator",
    "FloatValidator",
    "BooleanValidator",
    "DateValidator",
    "DateTimeValidator",
    "JsonValidator",
    "StringValidator",
    "get_validator",
    "get_composite_validator",
    "validate_value",
    "parse_value_strict",
    "check_cell_input",
]
