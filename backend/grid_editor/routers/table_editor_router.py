"""
🔥 THINK ULTRA! Grid Editor Router
테이블 편집 세션 API 엔드포인트
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from grid_editor.models import (
    AddColumnRequest,
    AddRowsRequest,
    BulkEntryRequest,
    CellUpdateRequest,
    OpenSessionRequest,
    PasteRequest,
    RenameColumnRequest,
)
from grid_editor.services.table_editor_service import TableEditorService, summarize_session
from shared.exceptions.base import DomainException
from shared.exceptions.table import (
    ColumnOperationError,
    FieldTypeError,
    RowOperationError,
    SessionNotFoundError,
    TransportError,
)
from shared.models.responses import ApiResponse
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/editor", tags=["Edit Sessions"])

_STATUS_BY_ERROR = (
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (ColumnOperationError, status.HTTP_400_BAD_REQUEST),
    (RowOperationError, status.HTTP_400_BAD_REQUEST),
    (FieldTypeError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
)


def get_editor_service(request: Request) -> TableEditorService:
    """편집 서비스 의존성"""
    service = getattr(request.app.state, "editor_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Editor service is not initialized"
        )
    return service


def _http_error(e: DomainException) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=e.to_dict())
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.to_dict())


@router.get("/tables", tags=["Tables"])
async def list_tables(service: TableEditorService = Depends(get_editor_service)) -> Dict[str, Any]:
    """편집 가능한 테이블 목록"""
    try:
        tables = await service.list_tables()
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(
        f"{len(tables)} tables", data={"tables": [table.model_dump() for table in tables]}
    ).to_dict()


@router.get("/sessions")
async def list_sessions(service: TableEditorService = Depends(get_editor_service)) -> Dict[str, Any]:
    sessions = [summarize_session(session) for session in service.list_sessions()]
    return ApiResponse.success(f"{len(sessions)} open sessions", data={"sessions": sessions}).to_dict()


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def open_session(
    request: OpenSessionRequest, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    """
    테이블을 불러와 편집 세션을 엽니다.

    - 응답 형식이 잘못된 경우 빈 테이블로 열리고 load_error에 사유가 담깁니다
    - 행 단위 검증 결과(validation)가 함께 반환됩니다
    """
    try:
        session = await service.open_session(
            request.table_name, schema_source=request.schema_source, inference_mode=request.inference_mode
        )
    except DomainException as e:
        raise _http_error(e) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    snapshot = session.to_snapshot().model_dump()
    if session.load_error:
        return ApiResponse.warning(
            f"Table '{session.table_name}' opened empty", data=snapshot, errors=[session.load_error]
        ).to_dict()
    return ApiResponse.created(f"Session opened for '{session.table_name}'", data=snapshot).to_dict()


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, service: TableEditorService = Depends(get_editor_service)) -> Dict[str, Any]:
    try:
        session = service.get_session(session_id)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success("Session snapshot", data=session.to_snapshot().model_dump()).to_dict()


@router.delete("/sessions/{session_id}")
async def close_session(
    session_id: str, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        service.close_session(session_id)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(f"Session {session_id} closed").to_dict()


@router.put("/sessions/{session_id}/cells")
async def update_cell(
    session_id: str, request: CellUpdateRequest, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        row = service.update_cell(
            session_id, request.row, request.column, request.value, input_format=request.input_format
        )
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success("Cell updated", data={"row": request.row, "values": row}).to_dict()


@router.post("/sessions/{session_id}/rows")
async def add_rows(
    session_id: str,
    request: Optional[AddRowsRequest] = None,
    service: TableEditorService = Depends(get_editor_service),
) -> Dict[str, Any]:
    count = request.count if request else 1
    try:
        added = service.add_rows(session_id, count)
        row_count = len(service.get_session(session_id).buffer)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(
        f"Added {len(added)} rows.", data={"rows_added": len(added), "row_count": row_count}
    ).to_dict()


@router.delete("/sessions/{session_id}/rows/{row_index}")
async def delete_row(
    session_id: str, row_index: int, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        deleted = service.delete_row(session_id, row_index)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(f"Row {row_index} deleted", data={"deleted": deleted}).to_dict()


@router.post("/sessions/{session_id}/columns")
async def add_column(
    session_id: str, request: AddColumnRequest, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        columns = service.add_column(session_id, request.name)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(f"Column '{request.name}' added", data={"columns": columns}).to_dict()


@router.patch("/sessions/{session_id}/columns/{column_name}")
async def rename_column(
    session_id: str,
    column_name: str,
    request: RenameColumnRequest,
    service: TableEditorService = Depends(get_editor_service),
) -> Dict[str, Any]:
    try:
        columns = service.rename_column(session_id, column_name, request.new_name)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(
        f'Column "{column_name}" renamed to "{request.new_name}".', data={"columns": columns}
    ).to_dict()


@router.post("/sessions/{session_id}/paste")
async def paste(
    session_id: str, request: PasteRequest, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    """
    클립보드 텍스트를 대상 셀부터 붙여넣습니다.

    - 첫 줄에 탭이 있으면 탭, 없으면 쉼표로 구분
    - 필요한 행은 자동으로 추가되고, 마지막 열을 넘는 셀은 잘린 것으로 집계됩니다
    """
    try:
        report = service.paste(session_id, request.text, request.start_row, request.start_column)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.from_report(report).to_dict()


@router.post("/sessions/{session_id}/bulk")
async def bulk_add(
    session_id: str, request: BulkEntryRequest, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        report = service.bulk_add(session_id, request.text)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.from_report(report).to_dict()


@router.post("/sessions/{session_id}/reset")
async def reset_session(
    session_id: str, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    try:
        rows = service.reset(session_id)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success("Changes discarded", data={"row_count": len(rows)}).to_dict()


@router.get("/sessions/{session_id}/save-preview")
async def save_preview(
    session_id: str, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    """저장 시 전송될 행 (ID 보정 및 제외 테이블 처리 후)"""
    try:
        payload = service.prepare_save_payload(session_id)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(f"{len(payload)} rows ready", data={"rows": payload}).to_dict()


@router.post("/sessions/{session_id}/save")
async def save_session(
    session_id: str, service: TableEditorService = Depends(get_editor_service)
) -> Dict[str, Any]:
    """
    편집 버퍼로 원격 테이블을 일괄 교체합니다.

    전송이 실패하면 커밋하지 않으며 편집 내용은 그대로 유지됩니다 (502).
    """
    try:
        result = await service.save(session_id)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success("Data updated successfully!", data=result.model_dump()).to_dict()


@router.get("/sessions/{session_id}/column-types")
async def column_types(
    session_id: str,
    mode: Optional[str] = Query(default=None, pattern="^(heuristic|sniff)$"),
    service: TableEditorService = Depends(get_editor_service),
) -> Dict[str, Any]:
    try:
        results = service.column_types(session_id, mode)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(
        "Column types inferred", data={"columns": [result.model_dump() for result in results]}
    ).to_dict()


@router.get("/sessions/{session_id}/month-total")
async def month_total(
    session_id: str,
    reference: Optional[date] = Query(default=None, description="Any day of the target month"),
    service: TableEditorService = Depends(get_editor_service),
) -> Dict[str, Any]:
    try:
        result = service.month_total(session_id, reference)
    except DomainException as e:
        raise _http_error(e) from e
    return ApiResponse.success(f"Total for this month: {result.total:g}", data=result.model_dump()).to_dict()
