"""
Result type returned by every wallet operation.

A call either succeeds with a payload (``Ok``) or fails with a
``WalletRpcError`` (``Err``). Failures are values, not exceptions:
callers inspect the variant before touching the payload.

    result = await wallet.get_height()
    match result:
        case Ok(height):
            ...
        case Err(error):
            ...

``unwrap()`` is available for callers that prefer exceptions; it raises
the carried error on ``Err``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Literal, NoReturn, TypeAlias, TypeVar, Union

from monero_wallet_rpc.errors import WalletRpcError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful call carrying the daemon's payload."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: object) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Transform the payload, keeping the Ok variant."""
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    """Failed call carrying the classified error."""

    error: WalletRpcError

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_or(self, default: U) -> U:
        return default

    def map(self, fn: Callable[..., object]) -> Err:
        """Errors pass through untouched."""
        return self


Result: TypeAlias = Union[Ok[T], Err]
