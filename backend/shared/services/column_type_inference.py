"""
🔥 THINK ULTRA! Column Type Inference
Classifies columns of a schema-less row set

Two modes:
- heuristic: integer if every non-blank value is a whole number the integer validator accepts, else string
- sniff: probes each column with the column validators (attempt-parse-without-committing)
  in priority order and picks the first type that accepts every non-blank value

Both modes are stateless and re-scan the rows on every call.
"""

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from shared.models.common import ColumnType, is_blank
from shared.models.table_data import ColumnTypeInferenceResult
from shared.utils.app_logger import get_logger
from shared.validators import get_validator

logger = get_logger(__name__)

INFERENCE_MODES = ("heuristic", "sniff")

# (column type, validator constraints) probed in order; string is the fallback
SNIFF_ORDER: Tuple[Tuple[ColumnType, Dict[str, Any]], ...] = (
    (ColumnType.INTEGER, {}),
    (ColumnType.FLOAT, {}),
    (ColumnType.BOOLEAN, {}),
    (ColumnType.DATE, {}),
    (ColumnType.DATETIME, {}),
    (ColumnType.JSON, {"structured_only": True}),
)


class ColumnTypeInference:
    """Column type inference over materialized rows."""

    @classmethod
    def infer_column_types(
        cls, rows: Sequence[Mapping[str, Any]], mode: str = "sniff"
    ) -> List[ColumnTypeInferenceResult]:
        """
        Infer a type for every column named in the first row.

        Args:
            rows: Row mappings (column -> value)
            mode: "heuristic" or "sniff"

        Returns:
            One result per column, in first-row key order
        """
        if mode not in INFERENCE_MODES:
            raise ValueError(f"Unknown inference mode: {mode}")
        if not rows:
            return []

        results = []
        for column in rows[0].keys():
            values = [row.get(column) for row in rows]
            if mode == "heuristic":
                results.append(cls.classify_heuristic(column, values))
            else:
                results.append(cls.classify_sniff(column, values))

        logger.debug(f"Inferred column types ({mode}): {[(r.column_name, r.type) for r in results]}")
        return results

    @classmethod
    def infer_schema(cls, rows: Sequence[Mapping[str, Any]], mode: str = "sniff") -> Dict[str, str]:
        """Column -> canonical type tag"""
        return {result.column_name: result.type for result in cls.infer_column_types(rows, mode=mode)}

    @classmethod
    def classify_heuristic(cls, column: str, values: Sequence[Any]) -> ColumnTypeInferenceResult:
        """integer/string classification; a column with no non-blank values counts as integer"""
        non_blank = [value for value in values if not is_blank(value)]
        for value in non_blank:
            if not cls._is_integer_like(value):
                return ColumnTypeInferenceResult(
                    column_name=column,
                    type=ColumnType.STRING.value,
                    non_empty_count=len(non_blank),
                    reason=f"Non-integer value found: {value!r}",
                )
        return ColumnTypeInferenceResult(
            column_name=column,
            type=ColumnType.INTEGER.value,
            non_empty_count=len(non_blank),
            reason=f"{len(non_blank)}/{len(non_blank)} non-empty values are whole numbers",
        )

    @classmethod
    def classify_sniff(cls, column: str, values: Sequence[Any]) -> ColumnTypeInferenceResult:
        """Pick the first validator that accepts every non-blank value"""
        non_blank = [value for value in values if not is_blank(value)]
        if not non_blank:
            return ColumnTypeInferenceResult(
                column_name=column,
                type=ColumnType.STRING.value,
                non_empty_count=0,
                reason="No non-empty values; defaulting to string",
            )

        for column_type, constraints in SNIFF_ORDER:
            validator = get_validator(column_type)
            if all(validator.validate(value, constraints).is_valid for value in non_blank):
                return ColumnTypeInferenceResult(
                    column_name=column,
                    type=column_type.value,
                    non_empty_count=len(non_blank),
                    reason=f"{len(non_blank)}/{len(non_blank)} non-empty values accepted as {column_type.value}",
                )

        return ColumnTypeInferenceResult(
            column_name=column,
            type=ColumnType.STRING.value,
            non_empty_count=len(non_blank),
            reason="No narrower type accepts every value",
        )

    @staticmethod
    def _is_integer_like(value: Any) -> bool:
        # accepts exactly what the integer column validator accepts
        return get_validator(ColumnType.INTEGER).validate(value).is_valid
