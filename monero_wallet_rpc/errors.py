"""
Wallet RPC error taxonomy.

Every failed call is classified into exactly one of four kinds:

    - TRANSPORT: the HTTP exchange itself failed (DNS, refused connection,
      timeout, non-2xx status, body that is not a JSON object).
    - PROTOCOL: the daemon answered with a JSON-RPC ``error`` object
      (wrong password, wallet not found, ...). Code and message are
      carried verbatim.
    - MALFORMED_RESPONSE: the daemon answered with neither ``result``
      nor ``error``.
    - INVALID_ARGUMENT: the caller passed input that cannot be turned into
      a request (destination without an address or amount, negative
      amount). Detected before any network I/O.

Errors are returned inside ``Err`` rather than raised. They are still
exceptions so ``Result.unwrap()`` can raise them and so transport errors
can chain the underlying cause.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx

MALFORMED_RESPONSE_MESSAGE = "Found corrupted Monero JSON RPC response."


class ErrorCode(StrEnum):
    """Top-level failure kind."""

    TRANSPORT = "TRANSPORT"
    PROTOCOL = "PROTOCOL"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


class TransportReason(StrEnum):
    """Finer classification of a transport failure."""

    TIMEOUT = "TIMEOUT"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    HTTP_ERROR = "HTTP_ERROR"
    INVALID_JSON = "INVALID_JSON"
    UNKNOWN = "UNKNOWN"


class WalletRpcError(Exception):
    """Base class for all wallet RPC failures.

    Args:
        message: Human-readable description.
        error_code: Failure kind.
        details: Structured diagnostics. Never contains credentials.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class TransportError(WalletRpcError):
    """The HTTP round-trip failed before a usable envelope was received."""

    def __init__(
        self,
        message: str,
        *,
        reason: TransportReason = TransportReason.UNKNOWN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.TRANSPORT,
            details={"reason": str(reason), **(details or {})},
        )
        self.reason = reason


class ProtocolError(WalletRpcError):
    """The daemon reported an error in the JSON-RPC envelope."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.PROTOCOL,
            details={"code": code},
        )
        self.code = code


class MalformedResponseError(WalletRpcError):
    """The envelope carried neither ``result`` nor ``error``."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            MALFORMED_RESPONSE_MESSAGE,
            error_code=ErrorCode.MALFORMED_RESPONSE,
            details=details,
        )


class InvalidArgumentError(WalletRpcError):
    """Caller input was rejected before a request was sent."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.INVALID_ARGUMENT,
            details=details,
        )


# ---------------------------------------------------------------------------
# httpx exception -> TransportReason
# ---------------------------------------------------------------------------


def classify_transport_exception(exc: BaseException) -> TransportReason:
    """Map a transport-level exception to a TransportReason.

    Order matters: httpx timeouts are also ``httpx.TransportError``
    subclasses, so they are checked first.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportReason.TIMEOUT
    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return TransportReason.CONNECTION_FAILED
    if isinstance(exc, httpx.HTTPStatusError):
        return TransportReason.HTTP_ERROR
    if isinstance(exc, ValueError):
        # json.JSONDecodeError and non-object bodies
        return TransportReason.INVALID_JSON
    if isinstance(exc, httpx.HTTPError):
        return TransportReason.HTTP_ERROR
    return TransportReason.UNKNOWN


def transport_error_from(exc: BaseException, url: str) -> TransportError:
    """Wrap an arbitrary transport exception into a TransportError.

    The original exception is chained as ``__cause__`` and kept in
    ``details["cause"]`` for callers that inspect details only.
    """
    reason = classify_transport_exception(exc)
    details: dict[str, Any] = {"url": url, "cause": repr(exc)}
    if isinstance(exc, httpx.HTTPStatusError):
        details["status_code"] = exc.response.status_code
    error = TransportError(
        f"Wallet RPC transport failure ({reason}): {exc}",
        reason=reason,
        details=details,
    )
    error.__cause__ = exc
    return error
