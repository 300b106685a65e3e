from typing import Any, Dict, Optional


class ServiceError(ValueError):
    """Базовая ошибка бизнес-логики. Превращается в {success: false, message} на границе API."""

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class ValidationError(ServiceError):
    pass


class NotFoundError(ServiceError):
    pass


class AuthError(ServiceError):
    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID = "invalid"
    CREDENTIALS = "credentials"

    def __init__(self, message: str, kind: str = CREDENTIALS):
        super().__init__(message)
        self.kind = kind


class ConflictError(ServiceError):
    pass


class InsufficientCreditsError(ServiceError):
    def __init__(self, credit_balance: int, message: str = "Insufficient credits"):
        super().__init__(message, extra={"creditBalance": credit_balance})
        self.credit_balance = credit_balance


class ConfigError(ServiceError):
    pass


class UpstreamError(ServiceError):
    """Ошибка внешнего сервиса (платёжный шлюз или генератор изображений)."""

    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    QUOTA = "quota"
    HTTP = "http"
    CONNECTIVITY = "connectivity"
    TIMEOUT = "timeout"
    EMPTY = "empty"

    def __init__(
        self,
        message: str,
        kind: str = HTTP,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, extra={"details": details} if details is not None else None)
        self.kind = kind
        self.status_code = status_code
        self.details = details
