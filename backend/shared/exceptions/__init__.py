"""
도메인 예외 정의
도메인별로 구체적인 예외를 정의하여 명확한 에러 처리
"""

from .base import DomainException
from .table import (
    ColumnOperationError,
    FieldTypeError,
    InvalidResponseShapeError,
    ReconciliationError,
    RowOperationError,
    SessionNotFoundError,
    TransportError,
)

__all__ = [
    "DomainException",
    "InvalidResponseShapeError",
    "FieldTypeError",
    "ReconciliationError",
    "ColumnOperationError",
    "RowOperationError",
    "SessionNotFoundError",
    "TransportError",
]
