"""
테이블 편집 엔진 예외 정의
"""

from typing import Any, Optional

from .base import DomainException


class InvalidResponseShapeError(DomainException):
    """Payload does not match the schema-plus-rows envelope"""

    def __init__(self, message: str, table_name: Optional[str] = None):
        super().__init__(
            message=f"Invalid response shape: {message}",
            code="INVALID_RESPONSE_SHAPE",
            details={"table_name": table_name} if table_name else {},
        )


class FieldTypeError(DomainException):
    """A single cell failed type validation"""

    def __init__(self, column: str, value: Any, reason: str, row: Optional[int] = None):
        details = {"column": column, "value": value, "reason": reason}
        if row is not None:
            details["row"] = row
        super().__init__(
            message=f"{column}: {reason}" if column else reason,
            code="FIELD_TYPE_ERROR",
            details=details,
        )


class ReconciliationError(DomainException):
    """Pasted or bulk text cannot be applied to the grid"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message=message, code="RECONCILIATION_ERROR", details=details or {})


class ColumnOperationError(DomainException):
    """Structural column command is not applicable"""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(
            message=message,
            code="COLUMN_OPERATION_ERROR",
            details={"column": column} if column else {},
        )


class SessionNotFoundError(DomainException):
    """편집 세션을 찾을 수 없을 때 발생하는 예외"""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Edit session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )


class TransportError(DomainException):
    """Table API request failed"""

    def __init__(self, detail: str, status_code: Optional[int] = None, operation: Optional[str] = None):
        details = {"detail": detail}
        if status_code is not None:
            details["status_code"] = status_code
        if operation:
            details["operation"] = operation
        super().__init__(message=detail, code="TRANSPORT_ERROR", details=details)
        self.status_code = status_code
        self.detail = detail


class RowOperationError(DomainException):
    """Row command targets a row outside the buffer"""

    def __init__(self, message: str, row: Optional[int] = None):
        super().__init__(
            message=message,
            code="ROW_OPERATION_ERROR",
            details={"row": row} if row is not None else {},
        )
