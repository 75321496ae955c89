"""
Table API 클라이언트
Grid Editor에서 원격 테이블 API와 통신하기 위한 HTTP 클라이언트
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from shared.config.settings import get_settings
from shared.exceptions.table import InvalidResponseShapeError, TransportError
from shared.models.table_data import BulkReplaceRequest, BulkReplaceResponse, TableDataResponse, TableInfo

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred."


def format_error_detail(body: Any) -> str:
    """
    Render an error body's detail for display.

    A string detail is used as-is; a validation list contributes its msg fields joined by ", ".
    """
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list):
        messages = [str(item.get("msg")) for item in detail if isinstance(item, dict) and item.get("msg")]
        if messages:
            return ", ".join(messages)
    return UNKNOWN_ERROR


class TableDataClient:
    """Table API HTTP 클라이언트"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        table_api = get_settings().table_api
        self.base_url = base_url or table_api.base_url
        self.fetch_limit = table_api.fetch_limit

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else table_api.timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

        logger.info(f"Table API Client initialized with base URL: {self.base_url}")

    async def close(self):
        """클라이언트 연결 종료"""
        await self.client.aclose()

    async def _request(self, method: str, path: str, operation: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{operation} 요청 실패: {e}")
            raise TransportError(str(e) or type(e).__name__, operation=operation) from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = format_error_detail(body)
            logger.error(f"{operation} 실패 ({response.status_code}): {detail}")
            raise TransportError(detail, status_code=response.status_code, operation=operation)

        if not response.text:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Received an invalid data format from the server.",
                status_code=response.status_code,
                operation=operation,
            ) from e

    async def list_tables(self) -> List[TableInfo]:
        """테이블 목록 조회"""
        body = await self._request("GET", "/api/simulator/tables", "list_tables")
        tables = body.get("tables", []) if isinstance(body, dict) else []
        return [TableInfo.model_validate(table) for table in tables if isinstance(table, dict)]

    async def fetch_table_with_schema(self, table_name: str) -> Dict[str, Any]:
        """Schema-first fetch: data[0] is the column type map"""
        path = f"/api/simulator/table/{quote(table_name, safe='')}/data"
        return await self._request("GET", path, "fetch_table_with_schema")

    async def fetch_table_data(
        self, table_name: str, limit: Optional[int] = None, offset: int = 0
    ) -> TableDataResponse:
        """Paginated plain-rows fetch"""
        path = f"/api/tables/{quote(table_name, safe='')}/data"
        params = {"limit": limit or self.fetch_limit, "offset": offset}
        body = await self._request("GET", path, "fetch_table_data", params=params)
        if not isinstance(body, dict):
            raise TransportError("Received an invalid data format from the server.", operation="fetch_table_data")
        try:
            return TableDataResponse.model_validate({"table_name": table_name, **body})
        except ValidationError as e:
            logger.warning(f"fetch_table_data returned a malformed body for '{table_name}': {e.error_count()} errors")
            raise InvalidResponseShapeError("data must be an array", table_name=table_name) from e

    async def bulk_replace(self, table_name: str, rows: Sequence[Dict[str, Any]]) -> BulkReplaceResponse:
        """테이블 전체 데이터 교체"""
        payload = BulkReplaceRequest(table_name=table_name, data=list(rows))
        path = f"/api/tables/{quote(table_name, safe='')}/bulk-replace"
        logger.info(f"Bulk replace '{table_name}' with {len(payload.data)} rows")
        body = await self._request("PUT", path, "bulk_replace", json=payload.model_dump())
        return BulkReplaceResponse.model_validate(body if isinstance(body, dict) else {})
