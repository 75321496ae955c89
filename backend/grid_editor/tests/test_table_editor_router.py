from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from grid_editor.models import (
    AddColumnRequest,
    AddRowsRequest,
    BulkEntryRequest,
    CellUpdateRequest,
    OpenSessionRequest,
    PasteRequest,
    RenameColumnRequest,
)
from grid_editor.routers import table_editor_router as router
from grid_editor.services.table_editor_service import TableEditorService
from shared.config.settings import EditorSettings
from shared.exceptions.table import TransportError
from shared.models.table_data import BulkReplaceResponse, TableDataResponse, TableInfo

ORDERS = {
    "data": [
        {"id": "integer", "item": "string", "order_date": "date", "amount": "float"},
        {"id": 1, "item": "pen", "order_date": "2024-05-02", "amount": "2.5"},
        {"id": 2, "item": "ink", "order_date": "2024-05-09", "amount": "4"},
    ]
}


class _FakeClient:
    def __init__(self, body=None, replace_error=None) -> None:  # noqa: ANN001
        self.body = ORDERS if body is None else body
        self.replace_error = replace_error

    async def list_tables(self):
        return [TableInfo(table_name="orders", description="Orders")]

    async def fetch_table_with_schema(self, table_name: str):
        return self.body

    async def fetch_table_data(self, table_name: str, limit=None, offset: int = 0):  # noqa: ANN001
        return TableDataResponse(table_name=table_name, data=[])

    async def bulk_replace(self, table_name: str, rows):  # noqa: ANN001
        if self.replace_error:
            raise self.replace_error
        return BulkReplaceResponse(success=True, message=f"{len(rows)} rows")

    async def close(self) -> None:
        return None


def _service(**kwargs) -> TableEditorService:  # noqa: ANN003
    return TableEditorService(_FakeClient(**kwargs), editor_settings=EditorSettings())


async def _open(service: TableEditorService) -> str:
    response = await router.open_session(OpenSessionRequest(table_name="orders"), service=service)
    return response["data"]["session_id"]


def test_editor_service_dependency_requires_initialized_state() -> None:
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    with pytest.raises(HTTPException) as exc_info:
        router.get_editor_service(request)
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_open_session_and_snapshot() -> None:
    service = _service()
    response = await router.open_session(OpenSessionRequest(table_name="orders"), service=service)

    assert response["status"] == "created"
    assert response["data"]["columns"] == ["id", "item", "order_date", "amount"]
    assert len(response["data"]["validation"]) == 2

    snapshot = await router.get_session(response["data"]["session_id"], service=service)
    assert snapshot["data"]["rows"][1]["amount"] == 4.0


@pytest.mark.asyncio
async def test_open_session_with_bad_payload_is_a_warning() -> None:
    service = _service(body={"data": [["not", "a", "schema"]]})
    response = await router.open_session(OpenSessionRequest(table_name="orders"), service=service)

    assert response["status"] == "warning"
    assert response["data"]["rows"] == []
    assert response["errors"][0].startswith("Invalid response shape:")


@pytest.mark.asyncio
async def test_edit_endpoints() -> None:
    service = _service()
    sid = await _open(service)

    updated = await router.update_cell(sid, CellUpdateRequest(row=0, column="item", value="pencil"), service=service)
    assert updated["data"]["values"]["item"] == "pencil"

    added = await router.add_rows(sid, AddRowsRequest(count=2), service=service)
    assert added["data"] == {"rows_added": 2, "row_count": 4}

    added_default = await router.add_rows(sid, None, service=service)
    assert added_default["data"]["rows_added"] == 1

    deleted = await router.delete_row(sid, 4, service=service)
    assert deleted["data"]["deleted"]["id"] == ""

    columns = await router.add_column(sid, AddColumnRequest(name="note"), service=service)
    assert columns["data"]["columns"][-1] == "note"

    renamed = await router.rename_column(sid, "note", RenameColumnRequest(new_name="memo"), service=service)
    assert renamed["message"] == 'Column "note" renamed to "memo".'

    reset = await router.reset_session(sid, service=service)
    assert reset["data"]["row_count"] == 2


@pytest.mark.asyncio
async def test_paste_and_bulk_reports() -> None:
    service = _service()
    sid = await _open(service)

    pasted = await router.paste(sid, PasteRequest(text="7,cup,2024-05-20,1,extra", start_row=2, start_column="id"), service=service)
    assert pasted["status"] == "success"
    assert pasted["data"]["truncated_cells"] == 1
    assert pasted["data"]["rows_added"] == 1

    failed = await router.bulk_add(sid, BulkEntryRequest(text="\n"), service=service)
    assert failed["status"] == "warning"
    assert failed["errors"] == ["No valid data found to paste."]


@pytest.mark.asyncio
async def test_save_preview_and_save() -> None:
    service = _service()
    sid = await _open(service)
    await router.add_rows(sid, None, service=service)

    preview = await router.save_preview(sid, service=service)
    assert [row["id"] for row in preview["data"]["rows"]] == [1, 2, 3]

    saved = await router.save_session(sid, service=service)
    assert saved["message"] == "Data updated successfully!"
    assert saved["data"]["message"] == "3 rows"


@pytest.mark.asyncio
async def test_save_failure_maps_to_bad_gateway() -> None:
    service = _service(replace_error=TransportError("Table not found", status_code=404))
    sid = await _open(service)

    with pytest.raises(HTTPException) as exc_info:
        await router.save_session(sid, service=service)

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail["code"] == "TRANSPORT_ERROR"
    assert exc_info.value.detail["message"] == "Table not found"


@pytest.mark.asyncio
async def test_analysis_endpoints() -> None:
    service = _service()
    sid = await _open(service)

    types = await router.column_types(sid, mode="sniff", service=service)
    by_name = {column["column_name"]: column["type"] for column in types["data"]["columns"]}
    assert by_name["id"] == "integer"
    assert by_name["amount"] == "float"

    total = await router.month_total(sid, reference=date(2024, 5, 1), service=service)
    assert total["data"]["total"] == 6.5
    assert total["message"] == "Total for this month: 6.5"


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.include_router(router.router, prefix="/api/v1")
    app.state.editor_service = _service()
    return TestClient(app)


def test_http_status_mapping(client: TestClient) -> None:
    assert client.get("/api/v1/editor/sessions/missing").status_code == 404

    opened = client.post("/api/v1/editor/sessions", json={"table_name": "orders"})
    assert opened.status_code == 201
    sid = opened.json()["data"]["session_id"]

    bad_column = client.put(f"/api/v1/editor/sessions/{sid}/cells", json={"row": 0, "column": "ghost", "value": 1})
    assert bad_column.status_code == 400
    assert bad_column.json()["detail"]["code"] == "COLUMN_OPERATION_ERROR"

    bad_row = client.delete(f"/api/v1/editor/sessions/{sid}/rows/99")
    assert bad_row.status_code == 400
    assert bad_row.json()["detail"]["code"] == "ROW_OPERATION_ERROR"

    too_many = client.post(f"/api/v1/editor/sessions/{sid}/rows", json={"count": 100000})
    assert too_many.status_code == 400
    assert too_many.json()["detail"]["code"] == "ROW_OPERATION_ERROR"

    bad_input = client.put(
        f"/api/v1/editor/sessions/{sid}/cells",
        json={"row": 0, "column": "item", "value": "pen 2", "input_format": "alphanumeric"},
    )
    assert bad_input.status_code == 422
    assert bad_input.json()["detail"]["code"] == "FIELD_TYPE_ERROR"

    listed = client.get("/api/v1/editor/sessions")
    assert listed.json()["data"]["sessions"][0]["table_name"] == "orders"

    assert client.delete(f"/api/v1/editor/sessions/{sid}").status_code == 200
    assert client.delete(f"/api/v1/editor/sessions/{sid}").status_code == 404


def test_list_tables_route(client: TestClient) -> None:
    response = client.get("/api/v1/editor/tables")
    assert response.status_code == 200
    assert response.json()["data"]["tables"] == [{"table_name": "orders", "description": "Orders"}]
