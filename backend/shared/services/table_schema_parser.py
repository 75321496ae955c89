"""
Table schema parser.

This module converts a raw table fetch result into parsed rows plus a per-row validation report:
- schema path: data[0] is a column -> type map, data[1:] are raw rows
- schema-less path: data are raw rows, column types are inferred first

Design principles:
- One failing column never aborts the rest of the row (partial-row parsing).
- Non-object rows are reported but excluded from the parsed rows.
- Keys absent from the schema pass through unmodified.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from shared.exceptions.table import InvalidResponseShapeError
from shared.models.common import is_blank
from shared.models.table_data import ParsedTable, RowValidationOutcome, TableDataResponse
from shared.services.column_type_inference import ColumnTypeInference
from shared.utils.app_logger import get_logger
from shared.utils.column_type_normalization import normalize_schema_map
from shared.validators import validate_value

logger = get_logger(__name__)

RawResponse = Union[TableDataResponse, Mapping[str, Any], Sequence[Any]]

ROW_NOT_OBJECT = "row is not an object"
SUCCESS_STATUS = "success"


def _check_status(status: Optional[str], table_name: Optional[str]) -> None:
    if status is not None and status != SUCCESS_STATUS:
        raise InvalidResponseShapeError(f"response status is {status!r}", table_name=table_name)


class TableSchemaParser:
    """Parses fetched table payloads into validated rows."""

    @classmethod
    def parse_response(cls, response: RawResponse, *, table_name: Optional[str] = None) -> ParsedTable:
        """
        Parse a [SchemaMap, *rows] payload.

        Raises:
            InvalidResponseShapeError: data is missing/empty or data[0] is not an object
        """
        name, data = cls._unwrap(response, table_name)
        if not data:
            raise InvalidResponseShapeError("data is empty; expected a schema row", table_name=name)

        raw_schema = data[0]
        if not isinstance(raw_schema, dict):
            raise InvalidResponseShapeError(
                f"schema row must be an object, got {type(raw_schema).__name__}", table_name=name
            )

        column_schema = normalize_schema_map(raw_schema)
        rows, outcomes = cls.validate_rows(data[1:], column_schema)
        cls._log_summary(name, rows, outcomes)
        return ParsedTable(table_name=name, column_schema=column_schema, rows=rows, outcomes=outcomes)

    @classmethod
    def parse_schemaless_response(
        cls,
        response: RawResponse,
        *,
        table_name: Optional[str] = None,
        mode: str = "sniff",
        id_field: Optional[str] = "id",
    ) -> ParsedTable:
        """
        Parse a plain rows payload, inferring the column schema from the rows themselves.

        An empty data list is a valid, empty table on this path. Blank cells were skipped
        by inference, so they are kept as-is instead of being validated. When id_field is
        an inferred column, rows with a null id get their 1-based position.
        """
        name, data = cls._unwrap(response, table_name)
        object_rows = [row for row in data if isinstance(row, dict)]
        inferred = ColumnTypeInference.infer_column_types(object_rows, mode=mode)
        column_schema = {result.column_name: result.type for result in inferred}
        if id_field and id_field in column_schema:
            data = cls._fill_missing_ids(data, id_field)
        rows, outcomes = cls.validate_rows(data, column_schema, keep_blank=True)
        cls._log_summary(name, rows, outcomes)
        return ParsedTable(table_name=name, column_schema=column_schema, rows=rows, outcomes=outcomes)

    @classmethod
    def validate_rows(
        cls, raw_rows: Sequence[Any], column_schema: Mapping[str, str], keep_blank: bool = False
    ) -> Tuple[List[Dict[str, Any]], List[RowValidationOutcome]]:
        """Validate every raw row against the schema (1-based outcome indices)."""
        rows: List[Dict[str, Any]] = []
        outcomes: List[RowValidationOutcome] = []

        for index, raw_row in enumerate(raw_rows, start=1):
            if not isinstance(raw_row, dict):
                logger.warning(f"Row {index} excluded: {ROW_NOT_OBJECT}")
                outcomes.append(
                    RowValidationOutcome(row=index, is_valid=False, errors=[ROW_NOT_OBJECT])
                )
                continue

            parsed, errors = cls.validate_row(raw_row, column_schema, keep_blank=keep_blank)
            rows.append(parsed)
            outcomes.append(
                RowValidationOutcome(row=index, is_valid=not errors, errors=errors, parsed_row=parsed)
            )

        return rows, outcomes

    @staticmethod
    def validate_row(
        raw_row: Mapping[str, Any], column_schema: Mapping[str, str], keep_blank: bool = False
    ) -> Tuple[Dict[str, Any], List[str]]:
        """Parse one row; failed columns become None and add "<column>: <reason>"."""
        parsed: Dict[str, Any] = dict(raw_row)
        errors: List[str] = []

        for column, column_type in column_schema.items():
            if keep_blank and is_blank(raw_row.get(column)):
                continue
            result = validate_value(raw_row.get(column), column_type)
            if result.is_valid:
                parsed[column] = result.normalized_value
            else:
                parsed[column] = None
                errors.append(f"{column}: {result.message}")
                logger.debug(f"Column '{column}' rejected value {raw_row.get(column)!r}: {result.message}")

        return parsed, errors

    @staticmethod
    def _fill_missing_ids(data: Sequence[Any], id_field: str) -> List[Any]:
        filled = []
        for position, row in enumerate(data, start=1):
            if isinstance(row, dict) and row.get(id_field) is None:
                row = {**row, id_field: position}
            filled.append(row)
        return filled

    @staticmethod
    def _unwrap(response: RawResponse, table_name: Optional[str]) -> Tuple[Optional[str], List[Any]]:
        if isinstance(response, TableDataResponse):
            name = table_name or response.table_name
            _check_status(response.status, name)
            return name, list(response.data)
        if isinstance(response, Mapping):
            data = response.get("data")
            name = table_name or response.get("table_name")
            _check_status(response.get("status"), name)
            if not isinstance(data, list):
                raise InvalidResponseShapeError("data must be an array", table_name=name)
            return name, data
        if isinstance(response, (list, tuple)):
            return table_name, list(response)
        raise InvalidResponseShapeError(
            f"unsupported payload type {type(response).__name__}", table_name=table_name
        )

    @staticmethod
    def _log_summary(
        table_name: Optional[str], rows: List[Dict[str, Any]], outcomes: List[RowValidationOutcome]
    ) -> None:
        invalid = sum(1 for outcome in outcomes if not outcome.is_valid)
        logger.info(
            f"Parsed table '{table_name}': {len(rows)} rows kept, "
            f"{len(outcomes) - len(rows)} excluded, {invalid} invalid"
        )
