"""
🔥 THINK ULTRA! Table Editor Service
Independent edit sessions over remote tables

Load: fetch -> parse/validate -> TableEditSession (shape errors open an empty session)
Edit: cell, row and column commands, paste and bulk entry on the working buffer
Save: transmit copy -> bulk replace -> commit only after the transport succeeds
"""

from datetime import date
from typing import Any, Dict, List, Optional

from shared.config.settings import EditorSettings, get_settings
from shared.exceptions.table import (
    FieldTypeError,
    InvalidResponseShapeError,
    RowOperationError,
    SessionNotFoundError,
    TransportError,
)
from shared.models.common import CellValue, Row
from shared.models.table_data import (
    BulkReplaceResponse,
    ColumnTypeInferenceResult,
    MonthTotal,
    ParsedTable,
    ReconciliationReport,
    TableInfo,
)
from shared.services.bulk_save_reconciler import prepare_bulk_replace_payload
from shared.services.column_type_inference import ColumnTypeInference
from shared.services.edit_buffer import TableEditSession
from shared.services.paste_reconciler import PasteReconciler
from shared.services.table_metrics import calculate_month_total
from shared.services.table_schema_parser import TableSchemaParser
from shared.utils.app_logger import get_editor_logger
from shared.validators import check_cell_input

from grid_editor.services.table_data_client import UNKNOWN_ERROR, TableDataClient

logger = get_editor_logger("table_editor_service")


class TableEditorService:
    """Registry of edit sessions plus load/save orchestration"""

    def __init__(self, client: TableDataClient, editor_settings: Optional[EditorSettings] = None):
        self.client = client
        self.settings = editor_settings or get_settings().editor
        self.reconciler = PasteReconciler(max_lines=self.settings.max_reconcile_lines)
        self._sessions: Dict[str, TableEditSession] = {}

    # ------------------------------------------------------------------
    # Catalogue and session lifecycle
    # ------------------------------------------------------------------

    async def list_tables(self) -> List[TableInfo]:
        return await self.client.list_tables()

    async def load_table(
        self, table_name: str, schema_source: Optional[str] = None, inference_mode: Optional[str] = None
    ) -> ParsedTable:
        """
        Fetch and parse a table.

        Raises:
            InvalidResponseShapeError: schema-first payload without a schema row
            TransportError: fetch failed
        """
        source = schema_source or self.settings.schema_source
        if source == "first_row":
            body = await self.client.fetch_table_with_schema(table_name)
            return TableSchemaParser.parse_response(body, table_name=table_name)
        if source == "infer":
            response = await self.client.fetch_table_data(table_name)
            return TableSchemaParser.parse_schemaless_response(
                response,
                table_name=table_name,
                mode=inference_mode or self.settings.inference_mode,
                id_field=self.settings.id_field,
            )
        raise ValueError(f"Unknown schema source: {source}")

    async def open_session(
        self, table_name: str, schema_source: Optional[str] = None, inference_mode: Optional[str] = None
    ) -> TableEditSession:
        """Open a new session; a malformed payload yields an empty table with load_error set."""
        try:
            parsed = await self.load_table(table_name, schema_source, inference_mode)
        except InvalidResponseShapeError as e:
            logger.warning(f"Table '{table_name}' opened empty: {e.message}")
            session = TableEditSession(
                table_name, empty_value=self.settings.empty_cell_value, load_error=e.message
            )
        else:
            session = TableEditSession(
                table_name,
                parsed.rows,
                parsed.column_schema,
                parsed.outcomes,
                empty_value=self.settings.empty_cell_value,
            )

        self._sessions[session.session_id] = session
        logger.info(
            f"Opened session {session.session_id} for '{table_name}' "
            f"({len(session.buffer)} rows, {len(session.buffer.columns)} columns)"
        )
        return session

    def get_session(self, session_id: str) -> TableEditSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> None:
        self.get_session(session_id)
        del self._sessions[session_id]
        logger.info(f"Closed session {session_id}")

    def list_sessions(self) -> List[TableEditSession]:
        return list(self._sessions.values())

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Buffer commands
    # ------------------------------------------------------------------

    def update_cell(
        self,
        session_id: str,
        row_index: int,
        column: str,
        value: CellValue,
        input_format: Optional[str] = None,
    ) -> Optional[Row]:
        """Write one cell, optionally checking typed input against an editor format."""
        session = self.get_session(session_id)
        if input_format and isinstance(value, str) and not check_cell_input(value, input_format):
            raise FieldTypeError(
                column=column, value=value, reason=f"input does not match {input_format} format", row=row_index
            )
        return session.buffer.update_cell(row_index, column, value)

    def add_rows(self, session_id: str, count: int = 1) -> List[Row]:
        """Append blank rows; one command adds at most max_reconcile_lines rows."""
        session = self.get_session(session_id)
        limit = self.settings.max_reconcile_lines
        if count > limit:
            raise RowOperationError(f"Cannot add {count} rows at once (limit {limit})")
        return session.buffer.add_rows(count)

    def delete_row(self, session_id: str, row_index: int) -> Optional[Row]:
        return self.get_session(session_id).buffer.delete_row(row_index)

    def add_column(self, session_id: str, name: str) -> List[str]:
        return self.get_session(session_id).buffer.add_column(name)

    def rename_column(self, session_id: str, old_name: str, new_name: str) -> List[str]:
        return self.get_session(session_id).buffer.rename_column(old_name, new_name)

    def paste(self, session_id: str, text: str, start_row: int, start_column: str) -> ReconciliationReport:
        session = self.get_session(session_id)
        return self.reconciler.apply_paste(session.buffer, text, start_row, start_column)

    def bulk_add(self, session_id: str, text: str) -> ReconciliationReport:
        session = self.get_session(session_id)
        return self.reconciler.apply_bulk_rows(session.buffer, text)

    def reset(self, session_id: str) -> List[Row]:
        return self.get_session(session_id).reset()

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def prepare_save_payload(self, session_id: str) -> List[Row]:
        session = self.get_session(session_id)
        return prepare_bulk_replace_payload(
            session.buffer.rows,
            session.table_name,
            id_field=self.settings.id_field,
            tables_without_id=self.settings.tables_without_id,
        )

    async def save(self, session_id: str) -> BulkReplaceResponse:
        """
        Bulk-replace the remote table with the working buffer.

        The session is committed only when the transport reports success; on failure the
        working buffer keeps its edits for a retry.
        """
        session = self.get_session(session_id)
        payload = self.prepare_save_payload(session_id)

        try:
            response = await self.client.bulk_replace(session.table_name, payload)
            if not response.success:
                raise TransportError(response.message or UNKNOWN_ERROR, operation="bulk_replace")
        except TransportError as e:
            logger.error(f"Save failed for session {session_id} ('{session.table_name}'): {e.detail}")
            raise

        session.commit()
        logger.info(f"Saved '{session.table_name}': {len(payload)} rows")
        return response

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def column_types(self, session_id: str, mode: Optional[str] = None) -> List[ColumnTypeInferenceResult]:
        """Re-infer column types from the current working rows"""
        session = self.get_session(session_id)
        return ColumnTypeInference.infer_column_types(
            session.buffer.rows, mode=mode or self.settings.inference_mode
        )

    def month_total(self, session_id: str, reference: Optional[date] = None) -> MonthTotal:
        return calculate_month_total(self.get_session(session_id).buffer.rows, reference)

    async def close(self) -> None:
        self._sessions.clear()
        await self.client.close()


def summarize_session(session: TableEditSession) -> Dict[str, Any]:
    """Compact session description for list-style responses"""
    return {
        "session_id": session.session_id,
        "table_name": session.table_name,
        "row_count": len(session.buffer),
        "columns": session.buffer.columns,
        "is_dirty": session.is_dirty,
    }
