"""
Error taxonomy for the HeyBeauty MCP server.

The remote client and the handler layer raise these typed exceptions; the
handler boundary wraps them in a single ``HandlerError`` naming the failed
operation before they reach the MCP caller.

Key features:
- Error code enums (avoid typos)
- Severity levels (fatal, transient, user_error)
- Pydantic model for structured error details
- Boundary translation function
"""

from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Error Codes and Severity
# ============================================================================


class ErrorCode(str, Enum):
    """Enumeration of all error codes in the system."""

    AUTH_ERROR = "AUTH_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"

    # Remote API failures
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    REMOTE_ERROR = "REMOTE_ERROR"

    # Lookup failures
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    UNKNOWN_PROMPT = "UNKNOWN_PROMPT"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity, used for alerting and by callers deciding to retry."""

    FATAL = "fatal"  # Unrecoverable, requires intervention
    TRANSIENT = "transient"  # Temporary, caller may try again
    USER_ERROR = "user_error"  # Caller mistake, not retryable


# ============================================================================
# Pydantic Error Models
# ============================================================================


class ErrorDetails(BaseModel):
    """Structured error details for serialization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: ErrorCode = Field(..., description="Error code enum")
    message: str = Field(..., description="Human-readable error message")
    context: dict[str, Any] = Field(default_factory=dict, description="Additional context")
    severity: ErrorSeverity = Field(default=ErrorSeverity.FATAL, description="Error severity")


# ============================================================================
# Base Exception Class
# ============================================================================


class TryOnError(Exception):
    """Base class for all HeyBeauty MCP errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
        severity: ErrorSeverity = ErrorSeverity.FATAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.severity = severity

    def to_details(self) -> ErrorDetails:
        """Convert to structured ErrorDetails."""
        return ErrorDetails(
            code=self.code, message=self.message, context=self.details, severity=self.severity
        )


# ============================================================================
# Caller Errors
# ============================================================================


class AuthError(TryOnError):
    """No API key available for the request."""

    def __init__(self, message: str = "HEYBEAUTY_API_KEY is not set") -> None:
        super().__init__(message, ErrorCode.AUTH_ERROR, severity=ErrorSeverity.USER_ERROR)


class ValidationError(TryOnError):
    """A required argument is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {}
        if field:
            details["field"] = field
        super().__init__(
            message, ErrorCode.VALIDATION_ERROR, details, severity=ErrorSeverity.USER_ERROR
        )


class NotFoundError(TryOnError):
    """Resource not found."""

    def __init__(
        self, message: str, resource_type: str | None = None, resource_id: str | None = None
    ) -> None:
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, ErrorCode.NOT_FOUND, details, severity=ErrorSeverity.USER_ERROR)


class UnknownToolError(TryOnError):
    """Tool name is not one this server exposes."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(
            f"Unknown tool: {tool_name}",
            ErrorCode.UNKNOWN_TOOL,
            {"tool": tool_name},
            severity=ErrorSeverity.USER_ERROR,
        )


class UnknownPromptError(TryOnError):
    """Prompt name is not one this server exposes."""

    def __init__(self, prompt_name: str) -> None:
        super().__init__(
            f"Unknown prompt: {prompt_name}",
            ErrorCode.UNKNOWN_PROMPT,
            {"prompt": prompt_name},
            severity=ErrorSeverity.USER_ERROR,
        )


class ConfigError(TryOnError):
    """Invalid server configuration."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, ErrorCode.CONFIG_ERROR, details, severity=ErrorSeverity.FATAL)


# ============================================================================
# Remote API Errors
# ============================================================================


class TransportError(TryOnError):
    """HTTP exchange with the remote API failed.

    ``status_code`` is set for non-2xx responses and ``None`` when no
    response was received (connection refused, timeout, ...).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(
            message, ErrorCode.TRANSPORT_ERROR, details, severity=ErrorSeverity.TRANSIENT
        )
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int) -> "TransportError":
        return cls(f"request failed with status {status_code}", status_code=status_code)


class RemoteError(TryOnError):
    """Remote API answered with a non-zero envelope code or a malformed body.

    The message is the remote ``message`` verbatim.
    """

    def __init__(self, message: str, remote_code: int | None = None) -> None:
        details = {"remote_code": remote_code} if remote_code is not None else {}
        super().__init__(message, ErrorCode.REMOTE_ERROR, details, severity=ErrorSeverity.FATAL)
        self.remote_code = remote_code


# ============================================================================
# Boundary Errors
# ============================================================================


class InternalError(TryOnError):
    """Internal server error (unexpected condition)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        details = {}
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__
        super().__init__(message, ErrorCode.INTERNAL_ERROR, details, severity=ErrorSeverity.FATAL)


class HandlerError(TryOnError):
    """An MCP handler failed; message is ``"<operation> failed: <cause>"``.

    Keeps the code and severity of the underlying error so transports and
    logs can still tell a bad argument from a remote outage.
    """

    def __init__(self, operation: str, cause: TryOnError) -> None:
        super().__init__(
            f"{operation} failed: {cause.message}",
            cause.code,
            {"operation": operation, **cause.details},
            severity=cause.severity,
        )
        self.operation = operation
        self.cause = cause


# ============================================================================
# Boundary Translation Functions
# ============================================================================


def to_tryon_error(exc: Exception) -> TryOnError:
    """
    Translate arbitrary exceptions to TryOnError at boundaries.

    Args:
        exc: Any exception

    Returns:
        TryOnError instance

    Example:
        try:
            await client.list_clothes()
        except Exception as e:
            raise HandlerError("list resources", to_tryon_error(e)) from e
    """
    if isinstance(exc, TryOnError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        return TransportError.from_status(exc.response.status_code)
    if isinstance(exc, httpx.HTTPError):
        return TransportError(f"request failed: {exc}")
    return InternalError(message=f"Unexpected error: {exc}", cause=exc)
