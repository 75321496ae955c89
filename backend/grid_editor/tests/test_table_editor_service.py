from __future__ import annotations

from datetime import date

import httpx
import pytest

from grid_editor.services.table_data_client import TableDataClient
from grid_editor.services.table_editor_service import TableEditorService, summarize_session
from shared.config.settings import EditorSettings
from shared.exceptions.table import FieldTypeError, RowOperationError, SessionNotFoundError, TransportError
from shared.models.table_data import BulkReplaceResponse, TableDataResponse, TableInfo

PEOPLE = {
    "status": "success",
    "table_name": "people",
    "data": [
        {"id": "integer", "name": "string", "age": "integer"},
        {"id": 1, "name": "Ann", "age": "31"},
        {"id": 2, "name": "Bo", "age": "old"},
    ],
}


class _FakeClient:
    def __init__(self, body=None, plain=None, replace=None, replace_error=None) -> None:  # noqa: ANN001
        self.body = body if body is not None else PEOPLE
        self.plain = plain
        self.replace = replace or BulkReplaceResponse(success=True, message="ok")
        self.replace_error = replace_error
        self.replaced = []
        self.closed = False

    async def list_tables(self):
        return [TableInfo(table_name="people")]

    async def fetch_table_with_schema(self, table_name: str):
        return self.body

    async def fetch_table_data(self, table_name: str, limit=None, offset: int = 0):  # noqa: ANN001
        return TableDataResponse(table_name=table_name, data=self.plain or [])

    async def bulk_replace(self, table_name: str, rows):  # noqa: ANN001
        self.replaced.append((table_name, rows))
        if self.replace_error:
            raise self.replace_error
        return self.replace

    async def close(self) -> None:
        self.closed = True


def _service(client: _FakeClient | None = None, **settings) -> TableEditorService:  # noqa: ANN003
    return TableEditorService(client or _FakeClient(), editor_settings=EditorSettings(**settings))


@pytest.mark.asyncio
async def test_open_session_parses_and_validates() -> None:
    service = _service()
    session = await service.open_session("people")

    assert service.get_session(session.session_id) is session
    assert session.buffer.columns == ["id", "name", "age"]
    assert session.buffer.rows == [{"id": 1, "name": "Ann", "age": 31}, {"id": 2, "name": "Bo", "age": None}]
    assert session.validation[1].errors == ["age: expected integer, got string"]
    assert session.column_schema == {"id": "integer", "name": "string", "age": "integer"}
    assert session.load_error is None


@pytest.mark.asyncio
async def test_malformed_payload_opens_empty_session() -> None:
    service = _service(_FakeClient(body={"data": []}))
    session = await service.open_session("broken")

    assert session.buffer.is_empty
    assert session.load_error.startswith("Invalid response shape:")
    assert service.session_count == 1
    # every command on the empty table is a no-op
    assert service.add_rows(session.session_id, 2) == []
    assert not service.paste(session.session_id, "1,2", 0, "a").success


@pytest.mark.asyncio
async def test_infer_schema_source() -> None:
    client = _FakeClient(plain=[{"id": "1", "active": "true"}, {"id": "2", "active": "no"}])
    service = _service(client, schema_source="infer")

    session = await service.open_session("flags")

    assert session.column_schema == {"id": "integer", "active": "string"}
    assert session.buffer.rows[0] == {"id": 1, "active": "true"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"status": "success", "data": None},
        {"status": "error", "data": [{"a": 1}]},
    ],
)
async def test_malformed_plain_fetch_opens_an_empty_session(body) -> None:  # noqa: ANN001
    client = TableDataClient(
        base_url="http://tables.test", transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    )
    service = TableEditorService(client, editor_settings=EditorSettings(schema_source="infer"))

    session = await service.open_session("orders")

    assert session.buffer.rows == []
    assert session.load_error.startswith("Invalid response shape:")
    await service.close()


@pytest.mark.asyncio
async def test_load_table_rejects_unknown_source() -> None:
    with pytest.raises(ValueError):
        await _service().load_table("people", schema_source="header")


@pytest.mark.asyncio
async def test_sessions_are_independent() -> None:
    service = _service()
    first = await service.open_session("people")
    second = await service.open_session("people")

    service.update_cell(first.session_id, 0, "name", "Changed")

    assert second.buffer.rows[0]["name"] == "Ann"
    assert first.is_dirty and not second.is_dirty
    assert {s.session_id for s in service.list_sessions()} == {first.session_id, second.session_id}


def test_unknown_session() -> None:
    service = _service()
    with pytest.raises(SessionNotFoundError):
        service.get_session("missing")
    with pytest.raises(SessionNotFoundError):
        service.close_session("missing")


@pytest.mark.asyncio
async def test_close_session() -> None:
    service = _service()
    session = await service.open_session("people")
    service.close_session(session.session_id)
    assert service.session_count == 0


@pytest.mark.asyncio
async def test_update_cell_input_format() -> None:
    service = _service()
    session = await service.open_session("people")

    with pytest.raises(FieldTypeError) as exc_info:
        service.update_cell(session.session_id, 0, "age", "3a", input_format="number")
    assert exc_info.value.details["row"] == 0
    assert session.buffer.rows[0]["age"] == 31

    assert service.update_cell(session.session_id, 0, "age", "40", input_format="number")["age"] == "40"


@pytest.mark.asyncio
async def test_structural_commands() -> None:
    service = _service()
    sid = (await service.open_session("people")).session_id

    assert len(service.add_rows(sid, 2)) == 2
    assert service.add_column(sid, "email") == ["id", "name", "age", "email"]
    assert service.rename_column(sid, "email", "mail") == ["id", "name", "age", "mail"]
    assert service.delete_row(sid, 0)["name"] == "Ann"
    assert len(service.get_session(sid).buffer) == 3

    with pytest.raises(RowOperationError):
        service.add_rows(sid, 501)
    assert len(service.get_session(sid).buffer) == 3

    rows = service.reset(sid)
    assert len(rows) == 2
    assert service.get_session(sid).buffer.columns == ["id", "name", "age"]


@pytest.mark.asyncio
async def test_paste_and_bulk_follow_line_cap() -> None:
    service = _service(max_reconcile_lines=2)
    sid = (await service.open_session("people")).session_id

    assert service.paste(sid, "9\tZed", 0, "id").success
    assert service.get_session(sid).buffer.rows[0]["name"] == "Zed"

    report = service.bulk_add(sid, "a\nb\nc")
    assert not report.success
    assert report.error == "You can paste up to 2 rows at once."


@pytest.mark.asyncio
async def test_save_assigns_ids_and_commits() -> None:
    client = _FakeClient()
    service = _service(client)
    session = await service.open_session("people")
    service.add_rows(session.session_id, 1)
    service.update_cell(session.session_id, 2, "name", "Cy")

    result = await service.save(session.session_id)

    assert result.success
    table_name, sent = client.replaced[0]
    assert table_name == "people"
    assert [row["id"] for row in sent] == [1, 2, 3]
    assert not session.is_dirty
    # the buffer itself keeps the blank id
    assert session.buffer.rows[2]["id"] == ""


@pytest.mark.asyncio
async def test_save_strips_ids_for_excluded_tables() -> None:
    client = _FakeClient()
    service = _service(client, tables_without_id=["people"])
    session = await service.open_session("people")

    await service.save(session.session_id)

    assert all("id" not in row for row in client.replaced[0][1])


@pytest.mark.asyncio
async def test_failed_save_keeps_edits() -> None:
    client = _FakeClient(replace_error=TransportError("Table not found", status_code=404, operation="bulk_replace"))
    service = _service(client)
    session = await service.open_session("people")
    service.update_cell(session.session_id, 0, "name", "Edited")

    with pytest.raises(TransportError):
        await service.save(session.session_id)

    assert session.is_dirty
    assert session.buffer.rows[0]["name"] == "Edited"
    assert session.original_rows[0]["name"] == "Ann"


@pytest.mark.asyncio
async def test_unsuccessful_response_is_not_committed() -> None:
    client = _FakeClient(replace=BulkReplaceResponse(success=False, message="conflict"))
    service = _service(client)
    session = await service.open_session("people")
    service.update_cell(session.session_id, 0, "name", "Edited")

    with pytest.raises(TransportError) as exc_info:
        await service.save(session.session_id)

    assert exc_info.value.detail == "conflict"
    assert session.is_dirty


@pytest.mark.asyncio
async def test_prepare_save_payload_leaves_buffer_untouched() -> None:
    service = _service()
    session = await service.open_session("people")
    service.add_rows(session.session_id, 1)

    payload = service.prepare_save_payload(session.session_id)

    assert payload[-1]["id"] == 3
    assert session.buffer.rows[-1]["id"] == ""


@pytest.mark.asyncio
async def test_column_types_reflect_current_rows() -> None:
    service = _service()
    sid = (await service.open_session("people")).session_id

    service.update_cell(sid, 1, "age", "unknown")
    types = {result.column_name: result.type for result in service.column_types(sid, mode="sniff")}

    assert types["id"] == "integer"
    assert types["age"] == "string"


@pytest.mark.asyncio
async def test_month_total() -> None:
    body = {
        "data": [
            {"id": "integer", "order_date": "date", "amount": "float"},
            {"id": 1, "order_date": "2024-05-02", "amount": "10"},
            {"id": 2, "order_date": "2024-06-01", "amount": "5"},
        ]
    }
    service = _service(_FakeClient(body=body))
    sid = (await service.open_session("orders")).session_id

    result = service.month_total(sid, date(2024, 5, 20))

    assert result.total == 10
    assert result.rows_counted == 1


@pytest.mark.asyncio
async def test_summary_and_close() -> None:
    client = _FakeClient()
    service = _service(client)
    session = await service.open_session("people")

    summary = summarize_session(session)
    assert summary["row_count"] == 2
    assert summary["is_dirty"] is False

    assert [table.table_name for table in await service.list_tables()] == ["people"]

    await service.close()
    assert client.closed
    assert service.session_count == 0
