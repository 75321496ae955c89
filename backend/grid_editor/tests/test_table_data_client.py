from __future__ import annotations

import json

import httpx
import pytest

from grid_editor.services.table_data_client import UNKNOWN_ERROR, TableDataClient, format_error_detail
from shared.exceptions.table import InvalidResponseShapeError, TransportError

BASE_URL = "http://tables.test"


def _client(handler) -> TableDataClient:  # noqa: ANN001
    return TableDataClient(base_url=BASE_URL, timeout=1.0, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "body,expected",
    [
        ({"detail": "Table not found"}, "Table not found"),
        ({"detail": [{"msg": "field required"}, {"msg": "value is not a valid integer"}]}, "field required, value is not a valid integer"),
        ({"detail": [{"loc": ["body"]}]}, UNKNOWN_ERROR),
        ({"detail": ""}, UNKNOWN_ERROR),
        ({"error": "x"}, UNKNOWN_ERROR),
        (None, UNKNOWN_ERROR),
        ("plain text", UNKNOWN_ERROR),
    ],
)
def test_format_error_detail(body, expected) -> None:  # noqa: ANN001
    assert format_error_detail(body) == expected


@pytest.mark.asyncio
async def test_list_tables() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/simulator/tables"
        return httpx.Response(200, json={"tables": [{"table_name": "people"}, {"table_name": "orders", "extra": 1}, "bad"]})

    client = _client(handler)
    tables = await client.list_tables()
    assert [table.table_name for table in tables] == ["people", "orders"]
    await client.close()


@pytest.mark.asyncio
async def test_fetch_table_with_schema_returns_raw_body() -> None:
    body = {"status": "success", "table_name": "people", "data": [{"id": "integer"}, {"id": 1}]}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/simulator/table/people/data"
        return httpx.Response(200, json=body)

    client = _client(handler)
    assert await client.fetch_table_with_schema("people") == body
    await client.close()


@pytest.mark.asyncio
async def test_fetch_table_data_sends_paging_params() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": [{"id": 1}], "total_count": 1})

    client = _client(handler)
    response = await client.fetch_table_data("orders", limit=50, offset=100)

    assert seen["path"] == "/api/tables/orders/data"
    assert seen["params"] == {"limit": "50", "offset": "100"}
    assert response.table_name == "orders"
    assert response.data == [{"id": 1}]
    assert response.total_count == 1
    await client.close()


@pytest.mark.asyncio
async def test_fetch_table_data_uses_configured_page_size() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["limit"] == str(client.fetch_limit)
        assert request.url.params["offset"] == "0"
        return httpx.Response(200, json={"data": []})

    client = _client(handler)
    await client.fetch_table_data("orders")
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"status": "success", "data": None}, {"data": {"id": 1}}, {"data": "rows"}])
async def test_fetch_table_data_malformed_body_is_a_shape_error(body) -> None:  # noqa: ANN001
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(InvalidResponseShapeError) as exc_info:
        await client.fetch_table_data("orders")
    assert exc_info.value.details == {"table_name": "orders"}
    await client.close()


@pytest.mark.asyncio
async def test_bulk_replace_payload() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["json"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "message": "replaced"})

    client = _client(handler)
    result = await client.bulk_replace("people", [{"id": 1, "name": "Ann"}])

    assert captured["method"] == "PUT"
    assert captured["path"] == "/api/tables/people/bulk-replace"
    assert captured["json"] == {"table_name": "people", "data": [{"id": 1, "name": "Ann"}]}
    assert result.success is True
    assert result.message == "replaced"
    await client.close()


@pytest.mark.asyncio
async def test_error_status_carries_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"detail": [{"msg": "bad id"}, {"msg": "bad name"}]})

    client = _client(handler)
    with pytest.raises(TransportError) as exc_info:
        await client.bulk_replace("people", [])
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == "bad id, bad name"
    assert exc_info.value.details["operation"] == "bulk_replace"
    await client.close()


@pytest.mark.asyncio
async def test_error_status_without_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    client = _client(handler)
    with pytest.raises(TransportError) as exc_info:
        await client.list_tables()
    assert exc_info.value.detail == UNKNOWN_ERROR
    await client.close()


@pytest.mark.asyncio
async def test_success_with_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    client = _client(handler)
    with pytest.raises(TransportError) as exc_info:
        await client.fetch_table_with_schema("people")
    assert exc_info.value.detail == "Received an invalid data format from the server."
    await client.close()


@pytest.mark.asyncio
async def test_connection_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(TransportError) as exc_info:
        await client.list_tables()
    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.detail
    await client.close()
