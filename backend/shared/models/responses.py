"""
Response envelope for the grid editor endpoints

    {"status": "success" | "created" | "warning", "message": ..., "data": {...}, "errors": [...]}

"warning" means the request was handled but the operation did not fully apply
(a rejected paste, a table opened empty after a shape error).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .table_data import ReconciliationReport


@dataclass
class ApiResponse:
    status: str
    message: str
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON body; data and errors are omitted when unset"""
        body: Dict[str, Any] = {"status": self.status, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        if self.errors is not None:
            body["errors"] = self.errors
        return body

    @classmethod
    def success(cls, message: str, data: Optional[Dict[str, Any]] = None) -> "ApiResponse":
        return cls("success", message, data)

    @classmethod
    def created(cls, message: str, data: Optional[Dict[str, Any]] = None) -> "ApiResponse":
        return cls("created", message, data)

    @classmethod
    def warning(
        cls, message: str, data: Optional[Dict[str, Any]] = None, errors: Optional[List[str]] = None
    ) -> "ApiResponse":
        return cls("warning", message, data, errors)

    @classmethod
    def from_report(cls, report: ReconciliationReport) -> "ApiResponse":
        """Paste/bulk outcome: summary text as message, failed reports as warnings"""
        data = report.model_dump()
        if report.success:
            return cls.success(report.summary(), data)
        return cls.warning(report.summary(), data, [report.error or report.summary()])

    @classmethod
    def health_check(cls, service_name: str, version: str, open_sessions: Optional[int] = None) -> "ApiResponse":
        """헬스 체크 응답 (편집 서비스가 준비된 경우 열린 세션 수 포함)"""
        health: Dict[str, Any] = {"service": service_name, "version": version, "status": "healthy"}
        if open_sessions is not None:
            health["open_sessions"] = open_sessions
        return cls("success", "Service is healthy", health)
