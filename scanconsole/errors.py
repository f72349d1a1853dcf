"""Module errors: error taxonomy and platform result codes for the console."""
#
from enum import Enum, IntEnum
from typing import Dict, Any, Optional
# PURPOSE:
# Gives every failure the console can hit a name and a code, and mirrors the
# application-level result codes the platform puts in every response body.
#
# ERROR CLASSES:
# - AuthExpired: the server says the bearer token is no longer valid
# - TransportFailure: no usable response (timeout, refused connection, DNS)
# - ApplicationFailure: any other non-zero result code; left to the caller
#
# USAGE:
#   from scanconsole.errors import ConsoleError, ErrorCode
#
#   raise ConsoleError(
#       ErrorCode.STORAGE_FAILED,
#       "Could not write session state",
#       details={"key": "token"}
#   )
#


class ResultCode(IntEnum):
    """Application-level `code` values carried in every response envelope."""

    OK = 0
    PARAM_ERROR = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    SERVER_ERROR = 500

    # Business codes (10000+)
    USER_NOT_FOUND = 10001
    USER_PASSWORD_ERROR = 10002
    USER_DISABLED = 10003
    TASK_NOT_FOUND = 10101
    PROFILE_NOT_FOUND = 10102
    TASK_STATUS_ERROR = 10103
    WORKSPACE_NOT_FOUND = 10201
    ASSET_NOT_FOUND = 10301
    VUL_NOT_FOUND = 10401
    FINGERPRINT_NOT_FOUND = 10501
    POC_NOT_FOUND = 10601


_RESULT_MESSAGES: Dict[int, str] = {
    ResultCode.OK: "success",
    ResultCode.PARAM_ERROR: "invalid parameters",
    ResultCode.UNAUTHORIZED: "unauthorized",
    ResultCode.FORBIDDEN: "forbidden",
    ResultCode.NOT_FOUND: "resource not found",
    ResultCode.SERVER_ERROR: "server error",
    ResultCode.USER_NOT_FOUND: "user not found",
    ResultCode.USER_PASSWORD_ERROR: "wrong username or password",
    ResultCode.USER_DISABLED: "user disabled",
    ResultCode.TASK_NOT_FOUND: "task not found",
    ResultCode.PROFILE_NOT_FOUND: "task profile not found",
    ResultCode.TASK_STATUS_ERROR: "task status does not allow this operation",
    ResultCode.WORKSPACE_NOT_FOUND: "workspace not found",
    ResultCode.ASSET_NOT_FOUND: "asset not found",
    ResultCode.VUL_NOT_FOUND: "vulnerability not found",
    ResultCode.FINGERPRINT_NOT_FOUND: "fingerprint not found",
    ResultCode.POC_NOT_FOUND: "POC not found",
}


def describe(code: int) -> str:
    """Return the human-readable message for a result code."""
    return _RESULT_MESSAGES.get(code, "unknown error")


class ErrorCode(Enum):
    # Auth Errors
    AUTH_EXPIRED = "AUTH_001"

    # Transport Errors
    TRANSPORT_FAILED = "NET_001"
    TRANSPORT_TIMEOUT = "NET_002"
    TRANSPORT_BAD_STATUS = "NET_003"

    # Application Errors
    APPLICATION_FAILED = "APP_001"

    # Storage Errors
    STORAGE_FAILED = "STORE_001"

    # Config Errors
    CONFIG_INVALID = "CONFIG_001"


class ConsoleError(Exception):
    """
    Base exception class for the console with structured error information.

    Attributes:
        code: ErrorCode enum value (e.g., "NET_001")
        message: Human-readable error message
        details: Optional dictionary with additional context
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}

        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class AuthExpiredError(ConsoleError):
    """The server rejected the session; it has already been cleared."""

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.AUTH_EXPIRED, message, details)


class TransportFailureError(ConsoleError):
    """
    No usable response came back.

    The underlying httpx exception is chained as __cause__ and kept on
    `original`.
    """

    def __init__(
        self,
        message: str,
        original: Optional[BaseException] = None,
        code: ErrorCode = ErrorCode.TRANSPORT_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if original is not None:
            details.setdefault("original_type", type(original).__name__)
        super().__init__(code, message, details)
        self.original = original


class ApplicationError(ConsoleError):
    """A non-zero result code a caller chose to turn into an exception."""

    def __init__(self, result_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details["result_code"] = result_code
        super().__init__(ErrorCode.APPLICATION_FAILED, message, details)
        self.result_code = result_code


class StorageError(ConsoleError):
    """Local state could not be read or written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.STORAGE_FAILED, message, details)


__all__ = [
    "ResultCode",
    "describe",
    "ErrorCode",
    "ConsoleError",
    "AuthExpiredError",
    "TransportFailureError",
    "ApplicationError",
    "StorageError",
]
