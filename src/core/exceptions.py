"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class AvailabilityServiceException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 카탈로그(WebOPAC) 관련 예외
class CatalogException(AvailabilityServiceException):
    """카탈로그 통신 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "CATALOG_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CATALOG_ERROR", details)


class SessionFailureException(CatalogException):
    """세션 핸드셰이크 실패 (접속 불가 / non-2xx)"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Could not establish catalog session: {reason}"
        super().__init__(message, "SESSION_FAILURE", details or {"reason": reason})


class SessionExpiredException(CatalogException):
    """검색 도중 세션 만료 응답을 받은 경우"""
    def __init__(self, attempts: int, details: Optional[dict[str, Any]] = None):
        message = "Session expired"
        super().__init__(message, "SESSION_EXPIRED", details or {"attempts": attempts})


class BackendErrorException(CatalogException):
    """카탈로그가 오류 페이지 또는 non-2xx 상태를 반환한 경우"""
    def __init__(self, reason: str, status_code: Optional[int] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(reason, "BACKEND_ERROR", details or {"status_code": status_code})
        self.status_code = status_code


class TransportException(CatalogException):
    """네트워크 오류 / 요청 타임아웃"""
    def __init__(self, operation: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"{operation} failed: {reason}"
        super().__init__(message, "TRANSPORT_ERROR",
                        details or {"operation": operation, "reason": reason})


class QueryTimeoutException(CatalogException):
    """호출자 데드라인 초과"""
    def __init__(self, timeout_s: float, details: Optional[dict[str, Any]] = None):
        message = f"Request timeout after {timeout_s}s"
        super().__init__(message, "TIMEOUT", details or {"timeout_s": timeout_s})


# 유효성 검증 관련 예외
class ValidationException(AvailabilityServiceException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """유효하지 않은 검색어"""
    def __init__(self, reason: str, field: str = "title", details: Optional[dict[str, Any]] = None):
        super().__init__(field, reason, details)
