"""
monero-wallet-rpc JSON-RPC client.

Every public coroutine is one JSON-RPC call. ``request()`` is the single
dispatch primitive: it builds the envelope, performs the round-trip
through the injected transport and classifies the outcome into a
``Result``. Public operations are rows in ``OPERATIONS`` executed by
``_call()``, which optionally unwraps one field of the success payload.

No retry loops. No caching. No secrets in logs. Nothing raises out of a
public operation for a failed call; failures come back as ``Err``.

Response conventions (monero-wallet-rpc):
    - Success: {"id": "0", "jsonrpc": "2.0", "result": {...}}
    - Failure: {"id": "0", "jsonrpc": "2.0", "error": {"code": -1, "message": "..."}}
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from monero_wallet_rpc.config import (
    DEFAULT_HOSTNAME,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT_S,
    WalletConfig,
)
from monero_wallet_rpc.errors import (
    InvalidArgumentError,
    MalformedResponseError,
    ProtocolError,
    transport_error_from,
)
from monero_wallet_rpc.models import (
    Balance,
    Destination,
    EmptyResult,
    IncomingTransfer,
    Payment,
    SplitIntegratedAddress,
    SweepAll,
    Transfer,
    TransferSplit,
)
from monero_wallet_rpc.result import Err, Ok, Result
from monero_wallet_rpc.transport import DeferredAuth, HttpxTransport, JsonRpcTransport
from monero_wallet_rpc.units import to_atomic_units

log = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
REQUEST_ID = "0"

# Defaults shared with earlier clients of this API; changing them changes
# what gets sent to the daemon.
DEFAULT_WALLET_FILENAME = "monero_wallet"
DEFAULT_WALLET_PASSWORD = ""
DEFAULT_LANGUAGE = "English"
DEFAULT_MIXIN = 4
DEFAULT_UNLOCK_TIME = 0
DEFAULT_PRIORITY = 0
DEFAULT_TRANSFER_TYPE = "all"


# =====================================================================
# Operation table
# =====================================================================


@dataclass(frozen=True)
class RpcOperation:
    """One public operation: the RPC method it calls and the result field
    it unwraps (None returns the whole ``result`` object).

    ``empty`` builds the value returned when the daemon omits the unwrap
    field. monero-wallet-rpc drops list fields that would be empty, so
    "no payments" arrives as ``{"result": {}}``.
    """

    method: str
    unwrap: str | None = None
    empty: Callable[[], Any] | None = None


OPERATIONS: dict[str, RpcOperation] = {
    "create_wallet": RpcOperation("create_wallet"),
    "open_wallet": RpcOperation("open_wallet"),
    "stop_wallet": RpcOperation("stop_wallet"),
    "get_balance": RpcOperation("get_balance"),
    "address": RpcOperation("get_address", unwrap="address"),
    "transfer": RpcOperation("transfer"),
    "transfer_split": RpcOperation("transfer_split"),
    "sweep_dust": RpcOperation("sweep_dust", unwrap="tx_hash_list", empty=list),
    "sweep_all": RpcOperation("sweep_all"),
    "get_payments": RpcOperation("get_payments", unwrap="payments", empty=list),
    "get_bulk_payments": RpcOperation(
        "get_bulk_payments", unwrap="payments", empty=list
    ),
    "incoming_transfers": RpcOperation(
        "incoming_transfers", unwrap="transfers", empty=list
    ),
    "query_key": RpcOperation("query_key", unwrap="key"),
    "make_integrated_address": RpcOperation(
        "make_integrated_address", unwrap="integrated_address"
    ),
    "split_integrated_address": RpcOperation("split_integrated_address"),
    "get_height": RpcOperation("getheight", unwrap="height"),
}


# =====================================================================
# Envelope handling (pure functions, no I/O)
# =====================================================================


def build_envelope(method: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build the outbound JSON-RPC envelope. ``params`` is omitted when None."""
    envelope: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "id": REQUEST_ID,
        "method": method,
    }
    if params is not None:
        envelope["params"] = dict(params)
    return envelope


def parse_envelope(response: Mapping[str, Any]) -> Result[Any]:
    """Classify an inbound envelope.

    ``error`` wins over ``result`` when both are present. An error object
    without a usable code or message still yields a ProtocolError, with
    the missing parts defaulted.
    """
    error = response.get("error")
    if error is not None:
        if isinstance(error, Mapping):
            code = error.get("code", 0)
            message = error.get("message", "")
        else:
            code, message = 0, str(error)
        return Err(ProtocolError(code, message))

    if "result" not in response:
        return Err(MalformedResponseError(details={"keys": sorted(response)}))

    return Ok(response["result"])


def unwrap_field(result: Result[Any], key: str, default: Any = None) -> Result[Any]:
    """Replace an Ok payload with ``payload[key]``. Err passes through.

    An absent key yields ``default``. Only a payload that is not an object
    at all is reported as a malformed response.
    """
    if isinstance(result, Err):
        return result
    payload = result.value
    if not isinstance(payload, Mapping):
        return Err(
            MalformedResponseError(
                details={"field": key, "payload_type": type(payload).__name__}
            )
        )
    return Ok(payload.get(key, default))


def convert_destinations(destinations: Iterable[Destination]) -> list[dict[str, Any]]:
    """Copy destinations with XMR amounts converted to atomic units.

    The caller's objects are not modified, so passing the same list to a
    second call converts from the original XMR amounts again rather than
    from already-converted integers.

    Raises:
        ValueError: a destination is not a mapping, lacks an address or
            amount, or has an invalid amount.
    """
    converted: list[dict[str, Any]] = []
    for dest in destinations:
        if not isinstance(dest, Mapping):
            raise ValueError(f"destination must be a mapping, got: {dest!r}")
        address = dest.get("address")
        if not address:
            raise ValueError(f"destination must have an address, got: {dest!r}")
        if "amount" not in dest:
            raise ValueError(f"destination must have an amount, got: {dest!r}")
        converted.append({"amount": to_atomic_units(dest["amount"]), "address": address})
    if not converted:
        raise ValueError("at least one destination is required")
    return converted


# =====================================================================
# Client
# =====================================================================


class WalletClient:
    """Async client for a monero-wallet-rpc daemon.

    Args:
        hostname: Daemon host. Defaults to 127.0.0.1.
        port: Daemon RPC port. Defaults to 18082.
        username: RPC login user. Empty disables authentication.
        password: RPC login password.
        timeout: Per-request timeout in seconds.
        config: A ready WalletConfig; overrides the four fields above.
        transport: Injectable transport. Defaults to HttpxTransport with
            challenge-driven auth when a username is configured.
        warm_up: Fire one background ``get_balance`` on construction so
            the first real call does not hit a cold daemon connection.
            Built outside a running event loop, the warm-up is scheduled
            by the first request instead.
    """

    def __init__(
        self,
        hostname: str | None = None,
        port: int | None = None,
        username: str = "",
        password: str = "",
        *,
        timeout: float | None = None,
        config: WalletConfig | None = None,
        transport: JsonRpcTransport | None = None,
        warm_up: bool = True,
    ) -> None:
        if config is None:
            config = WalletConfig(
                hostname=hostname or DEFAULT_HOSTNAME,
                port=port or DEFAULT_PORT,
                username=username or "",
                password=password or "",
                timeout=timeout or DEFAULT_TIMEOUT_S,
            )
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(
            timeout=config.timeout,
            auth=DeferredAuth(config.username, config.password) if config.has_auth else None,
        )
        self._warm_up_task: asyncio.Task[None] | None = None
        self._warm_up_pending = False
        if warm_up:
            self._warm_up_task = self._start_warm_up()
            self._warm_up_pending = self._warm_up_task is None

    @property
    def config(self) -> WalletConfig:
        return self._config

    @property
    def url(self) -> str:
        """The JSON-RPC endpoint URL."""
        return self._config.url

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def _start_warm_up(self) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("no running event loop, deferring warm-up to first request")
            return None
        return loop.create_task(self._warm_up())

    async def _warm_up(self) -> None:
        result = await self.request("get_balance")
        if isinstance(result, Err):
            log.debug("warm-up call failed: %s", result.error)
        else:
            log.debug("warm-up call succeeded")

    async def aclose(self) -> None:
        """Cancel a pending warm-up call and close the owned transport."""
        task = self._warm_up_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> WalletClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    # -----------------------------------------------------------------
    # Dispatch primitive
    # -----------------------------------------------------------------

    async def request(self, method: str, params: Mapping[str, Any] | None = None) -> Result[Any]:
        """Perform one JSON-RPC round-trip and classify the outcome.

        Returns:
            Ok(result) on success, Err(TransportError) when the exchange
            failed, Err(ProtocolError) when the daemon reported an error,
            Err(MalformedResponseError) when the envelope had neither.
        """
        if self._warm_up_pending:
            self._warm_up_pending = False
            self._warm_up_task = asyncio.get_running_loop().create_task(self._warm_up())

        payload = build_envelope(method, params)
        log.debug("calling %s at %s", method, self._config.url)
        try:
            response = await self._transport.post_json(self._config.url, payload)
        except Exception as exc:
            log.debug("%s transport failure: %r", method, exc)
            return Err(transport_error_from(exc, self._config.url))

        if not isinstance(response, Mapping):
            return Err(
                transport_error_from(
                    ValueError(f"Response JSON was not an object: {type(response).__name__}"),
                    self._config.url,
                )
            )

        result = parse_envelope(response)
        if isinstance(result, Err):
            log.debug("%s failed: %s", method, result.error.error_code)
        return result

    async def _call(
        self, operation: str, params: Mapping[str, Any] | None = None
    ) -> Result[Any]:
        op = OPERATIONS[operation]
        result = await self.request(op.method, params)
        if op.unwrap is None:
            return result
        default = op.empty() if op.empty is not None else None
        return unwrap_field(result, op.unwrap, default)

    # -----------------------------------------------------------------
    # Wallet management
    # -----------------------------------------------------------------

    async def create_wallet(
        self,
        filename: str | None = None,
        password: str | None = None,
        language: str | None = None,
    ) -> Result[EmptyResult]:
        """Create a new wallet file on the daemon host."""
        return await self._call(
            "create_wallet",
            {
                "filename": filename or DEFAULT_WALLET_FILENAME,
                "password": password or DEFAULT_WALLET_PASSWORD,
                "language": language or DEFAULT_LANGUAGE,
            },
        )

    async def open_wallet(
        self,
        filename: str | None = None,
        password: str | None = None,
    ) -> Result[EmptyResult]:
        """Open an existing wallet file."""
        return await self._call(
            "open_wallet",
            {
                "filename": filename or DEFAULT_WALLET_FILENAME,
                "password": password or DEFAULT_WALLET_PASSWORD,
            },
        )

    async def stop_wallet(self) -> Result[EmptyResult]:
        """Store the open wallet and stop the daemon."""
        return await self._call("stop_wallet")

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    async def get_balance(self) -> Result[Balance]:
        return await self._call("get_balance")

    async def address(self) -> Result[str]:
        """The wallet's primary address."""
        return await self._call("address")

    async def get_height(self) -> Result[int]:
        """Block height the wallet is synced to."""
        return await self._call("get_height")

    async def get_payments(self, payment_id: str) -> Result[list[Payment]]:
        return await self._call("get_payments", {"payment_id": payment_id})

    async def get_bulk_payments(
        self, payment_ids: list[str], min_block_height: int
    ) -> Result[list[Payment]]:
        """Payments for any of ``payment_ids`` at or above ``min_block_height``."""
        return await self._call(
            "get_bulk_payments",
            {"payment_ids": payment_ids, "min_block_height": min_block_height},
        )

    async def incoming_transfers(
        self, transfer_type: str = DEFAULT_TRANSFER_TYPE
    ) -> Result[list[IncomingTransfer]]:
        """Incoming transfers; ``transfer_type`` is "all", "available" or "unavailable"."""
        return await self._call("incoming_transfers", {"transfer_type": transfer_type})

    async def query_key(self, key_type: str) -> Result[str]:
        """Return the mnemonic seed (``"mnemonic"``) or private view key (``"view_key"``)."""
        return await self._call("query_key", {"key_type": key_type})

    # -----------------------------------------------------------------
    # Integrated addresses
    # -----------------------------------------------------------------

    async def make_integrated_address(self, payment_id: str) -> Result[str]:
        return await self._call("make_integrated_address", {"payment_id": payment_id})

    async def split_integrated_address(
        self, integrated_address: str
    ) -> Result[SplitIntegratedAddress]:
        return await self._call(
            "split_integrated_address", {"integrated_address": integrated_address}
        )

    # -----------------------------------------------------------------
    # Spending
    # -----------------------------------------------------------------

    async def transfer(
        self,
        destinations: Iterable[Destination],
        *,
        mixin: int | None = None,
        unlock_time: int | None = None,
        payment_id: str | None = None,
        do_not_relay: bool = False,
        priority: int | None = None,
        get_tx_hex: bool = False,
        get_tx_key: bool = False,
    ) -> Result[Transfer]:
        """Send XMR to one or more recipients in a single transaction.

        Destination amounts are in XMR and are converted to atomic units
        here; amounts in the response are atomic units.

        A destination without an address or amount, or with a negative or
        non-numeric amount, returns Err(InvalidArgumentError) before any
        network I/O.
        """
        try:
            params = _transfer_params(
                destinations,
                mixin=mixin,
                unlock_time=unlock_time,
                payment_id=payment_id,
                do_not_relay=do_not_relay,
                priority=priority,
                get_tx_hex=get_tx_hex,
                get_tx_key=get_tx_key,
            )
        except (TypeError, ValueError) as exc:
            return _invalid_argument("transfer", exc)
        return await self._call("transfer", params)

    async def transfer_split(
        self,
        destinations: Iterable[Destination],
        *,
        mixin: int | None = None,
        unlock_time: int | None = None,
        payment_id: str | None = None,
        do_not_relay: bool = False,
        priority: int | None = None,
        get_tx_hex: bool = False,
        get_tx_key: bool = False,
        new_algorithm: bool = False,
    ) -> Result[TransferSplit]:
        """Like ``transfer`` but lets the daemon split into several transactions."""
        try:
            params = _transfer_params(
                destinations,
                mixin=mixin,
                unlock_time=unlock_time,
                payment_id=payment_id,
                do_not_relay=do_not_relay,
                priority=priority,
                get_tx_hex=get_tx_hex,
                get_tx_key=get_tx_key,
            )
        except (TypeError, ValueError) as exc:
            return _invalid_argument("transfer_split", exc)
        params["new_algorithm"] = new_algorithm
        return await self._call("transfer_split", params)

    async def sweep_dust(self) -> Result[list[str]]:
        """Send all dust outputs back to the wallet. Returns the tx hashes."""
        return await self._call("sweep_dust")

    async def sweep_all(self, address: str) -> Result[SweepAll]:
        """Send the whole unlocked balance to ``address``."""
        return await self._call("sweep_all", {"address": address})


def _invalid_argument(operation: str, exc: Exception) -> Err:
    log.debug("%s rejected caller input: %s", operation, exc)
    error = InvalidArgumentError(str(exc), details={"operation": operation})
    error.__cause__ = exc
    return Err(error)


def _transfer_params(
    destinations: Iterable[Destination],
    *,
    mixin: int | None,
    unlock_time: int | None,
    payment_id: str | None,
    do_not_relay: bool,
    priority: int | None,
    get_tx_hex: bool,
    get_tx_key: bool,
) -> dict[str, Any]:
    return {
        "destinations": convert_destinations(destinations),
        "mixin": DEFAULT_MIXIN if mixin is None else mixin,
        "unlock_time": DEFAULT_UNLOCK_TIME if unlock_time is None else unlock_time,
        "payment_id": payment_id or None,
        "do_not_relay": do_not_relay,
        "priority": DEFAULT_PRIORITY if priority is None else priority,
        "get_tx_hex": get_tx_hex,
        "get_tx_key": get_tx_key,
    }
