"""Taxonomía de errores del cliente.

Por qué un módulo propio:
- Los adaptadores HTTP traducen respuestas/excepciones de httpx a un único tipo
  (`ApiError`) que la CLI y los servicios pueden tratar sin conocer httpx.
- El código (`ErrorCode`) es estable aunque el backend cambie sus mensajes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    TENANT_ERROR = "TENANT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"


STATUS_CODE_MAP: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTH_ERROR,
    403: ErrorCode.PERMISSION_ERROR,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    429: ErrorCode.RATE_LIMIT_ERROR,
}


def code_for_status(status_code: int) -> ErrorCode:
    return STATUS_CODE_MAP.get(status_code, ErrorCode.SERVER_ERROR)


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ApiError(Exception):
    """Error normalizado de una llamada al backend."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
        request_id: str | None = None,
        timestamp: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.request_id = request_id
        self.timestamp = timestamp or _utcnow_iso()

    @classmethod
    def from_status(cls, status_code: int, body: Any, *, default_message: str | None = None) -> "ApiError":
        """Construye el error a partir del status HTTP y el cuerpo (JSON o texto)."""

        message: str | None = None
        details: Any = None
        request_id: str | None = None
        if isinstance(body, dict):
            raw_message = body.get("message") or body.get("error")
            if isinstance(raw_message, list):
                # class-validator devuelve una lista de mensajes
                message = "; ".join(str(m) for m in raw_message)
            elif raw_message:
                message = str(raw_message)
            details = body.get("details")
            request_id = body.get("requestId")
        elif isinstance(body, str) and body.strip():
            message = body.strip()[:500]

        return cls(
            code_for_status(status_code),
            message or default_message or f"Request failed with status {status_code}",
            status_code=status_code,
            details=details,
            request_id=request_id,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        if self.details is not None:
            data["details"] = self.details
        if self.request_id:
            data["requestId"] = self.request_id
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value}, status={self.status_code}, message={self.message!r})"


class SessionExpiredError(ApiError):
    """La sesión no se pudo renovar: hay que volver a hacer login."""

    def __init__(self, message: str = "Session expired, please log in again") -> None:
        super().__init__(ErrorCode.AUTH_ERROR, message, status_code=401)


class UnexpectedResponseError(ApiError):
    """El backend devolvió una forma de respuesta que no sabemos interpretar."""

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(ErrorCode.SERVER_ERROR, message, details=details)
