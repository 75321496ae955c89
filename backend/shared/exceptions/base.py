"""
기본 도메인 예외 정의
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """도메인 기본 예외 - 메시지, 오류 코드, 상세 정보를 함께 전달"""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """HTTP error detail body"""
        return {"code": self.code, "message": self.message, "details": self.details}
