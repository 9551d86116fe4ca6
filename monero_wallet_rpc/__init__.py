"""
Async client for the monero-wallet-rpc JSON-RPC interface.

Public API:

    Client:
        - ``WalletClient``: one coroutine per wallet operation.
        - ``WalletConfig``: immutable connection settings.

    Results:
        - ``Ok``, ``Err``, ``Result``: every operation returns a Result.

    Errors (carried inside ``Err``):
        - ``WalletRpcError``: base class.
        - ``TransportError``, ``ProtocolError``, ``MalformedResponseError``,
          ``InvalidArgumentError``.
        - ``ErrorCode``, ``TransportReason``: classification enums.

    Transport:
        - ``JsonRpcTransport``: injectable transport protocol.
        - ``HttpxTransport``: default pooled httpx transport.
        - ``DeferredAuth``: credentials sent only after a 401 challenge.

    Units:
        - ``to_atomic_units``, ``from_atomic_units``.
"""

from monero_wallet_rpc.client import OPERATIONS, RpcOperation, WalletClient
from monero_wallet_rpc.config import WalletConfig
from monero_wallet_rpc.errors import (
    ErrorCode,
    InvalidArgumentError,
    MalformedResponseError,
    ProtocolError,
    TransportError,
    TransportReason,
    WalletRpcError,
)
from monero_wallet_rpc.models import (
    Balance,
    Destination,
    IncomingTransfer,
    Payment,
    SplitIntegratedAddress,
    SweepAll,
    Transfer,
    TransferSplit,
)
from monero_wallet_rpc.result import Err, Ok, Result
from monero_wallet_rpc.transport import DeferredAuth, HttpxTransport, JsonRpcTransport
from monero_wallet_rpc.units import ATOMIC_UNITS_PER_XMR, from_atomic_units, to_atomic_units

__all__ = [
    "ATOMIC_UNITS_PER_XMR",
    "OPERATIONS",
    "Balance",
    "DeferredAuth",
    "Destination",
    "Err",
    "ErrorCode",
    "HttpxTransport",
    "IncomingTransfer",
    "InvalidArgumentError",
    "JsonRpcTransport",
    "MalformedResponseError",
    "Ok",
    "Payment",
    "ProtocolError",
    "Result",
    "RpcOperation",
    "SplitIntegratedAddress",
    "SweepAll",
    "Transfer",
    "TransferSplit",
    "TransportError",
    "TransportReason",
    "WalletClient",
    "WalletConfig",
    "WalletRpcError",
    "from_atomic_units",
    "to_atomic_units",
]
__version__ = "0.1.0"
