"""Connection configuration for a wallet RPC client."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HOSTNAME = "127.0.0.1"
DEFAULT_PORT = 18082
DEFAULT_TIMEOUT_S = 30.0
JSON_RPC_PATH = "/json_rpc"


@dataclass(frozen=True)
class WalletConfig:
    """Immutable connection settings.

    Attributes:
        hostname: Host running monero-wallet-rpc.
        port: RPC port.
        username: RPC login user. Empty means no authentication.
        password: RPC login password.
        timeout: Per-request timeout in seconds, enforced by the transport.
    """

    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    username: str = ""
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        if not self.hostname:
            raise ValueError("hostname must be non-empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got: {self.port}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got: {self.timeout}")

    @property
    def url(self) -> str:
        """The JSON-RPC endpoint URL."""
        return f"http://{self.hostname}:{self.port}{JSON_RPC_PATH}"

    @property
    def has_auth(self) -> bool:
        return bool(self.username)

    def __repr__(self) -> str:
        # keep the password out of logs and tracebacks
        return (
            f"WalletConfig(hostname={self.hostname!r}, port={self.port}, "
            f"username={self.username!r}, password={'***' if self.password else ''!r}, "
            f"timeout={self.timeout})"
        )
