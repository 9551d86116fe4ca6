"""
Transport protocol for wallet JSON-RPC calls.

Defines the seam where the HTTP implementation plugs in. The client
depends on this protocol, not on httpx directly, so tests can swap in a
fake transport without touching dispatch or unwrapping logic.

Concrete implementations:
    - HttpxTransport (default, pooled httpx.AsyncClient)
    - FakeTransport (tests, returns canned envelopes)

Authentication:
    monero-wallet-rpc only asks for credentials when started with
    ``--rpc-login``. ``DeferredAuth`` never sends credentials up front:
    the first attempt goes out bare, and credentials are attached only
    after a ``401`` challenge names a scheme we support (Basic or Digest).
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Generator
from typing import Any, Protocol, runtime_checkable

import httpx

log = logging.getLogger(__name__)


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Async transport for JSON-RPC POST requests."""

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a JSON-RPC request and return the parsed response envelope.

        Args:
            url: The JSON-RPC endpoint URL.
            payload: The JSON-RPC request body.

        Returns:
            Parsed JSON response object.

        Raises:
            Exception: On transport-level failures (connection refused,
                timeout, non-2xx status without an envelope, body that is
                not a JSON object). The client maps these to TransportError.
        """
        ...


# =========================================================================
# Challenge-driven authentication
# =========================================================================


def _challenge_schemes(response: httpx.Response) -> list[str]:
    return [
        header.split(" ", 1)[0].lower()
        for header in response.headers.get_list("www-authenticate")
        if header.strip()
    ]


class DeferredAuth(httpx.Auth):
    """HTTP auth that only sends credentials after the server challenges.

    Basic challenges are answered with a Basic ``Authorization`` header.
    Digest challenges (what monero-wallet-rpc issues with ``--rpc-login``)
    are answered by ``httpx.DigestAuth``. Any other response, including a
    401 without a supported challenge, is returned to the caller as is.
    """

    def __init__(self, username: str, password: str) -> None:
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        self._basic_header = f"Basic {token}"
        self._digest = httpx.DigestAuth(username, password)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        response = yield request
        if response.status_code != 401:
            return

        schemes = _challenge_schemes(response)
        if "digest" in schemes:
            log.debug("answering digest challenge from %s", request.url.host)
            flow = self._digest.auth_flow(request)
            next(flow)
            try:
                request = flow.send(response)
            except StopIteration:
                return
            yield request
        elif "basic" in schemes:
            log.debug("answering basic challenge from %s", request.url.host)
            request.headers["Authorization"] = self._basic_header
            yield request


# =========================================================================
# Default transport
# =========================================================================


class HttpxTransport:
    """Default transport using a pooled httpx.AsyncClient.

    The underlying client is created on first use and kept alive so
    consecutive calls reuse the daemon connection. Call ``aclose()`` (or
    close the owning WalletClient) to release it.

    Args:
        timeout: Request timeout in seconds.
        auth: Optional httpx auth, typically ``DeferredAuth``.
    """

    def __init__(self, timeout: float = 30.0, auth: httpx.Auth | None = None) -> None:
        self._timeout = timeout
        self._auth = auth
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, auth=self._auth)
        return self._client

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send JSON-RPC request via httpx.

        A non-2xx status is tolerated only when the body is still a
        JSON-RPC envelope (``result`` or ``error``); otherwise the status
        error is raised.
        """
        response = await self._get_client().post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

        if response.is_error:
            envelope = _try_envelope(response)
            if envelope is not None:
                return envelope
            response.raise_for_status()

        result = response.json()
        if not isinstance(result, dict):
            raise ValueError(f"Response JSON was not an object: {type(result).__name__}")
        return result

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _try_envelope(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and ("error" in body or "result" in body):
        return body
    return None
