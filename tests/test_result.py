"""Tests for the Ok/Err result type and the error taxonomy."""

import httpx
import pytest

from monero_wallet_rpc.errors import (
    MALFORMED_RESPONSE_MESSAGE,
    ErrorCode,
    MalformedResponseError,
    ProtocolError,
    TransportError,
    TransportReason,
    classify_transport_exception,
    transport_error_from,
)
from monero_wallet_rpc.result import Err, Ok


class TestOk:
    def test_flags(self) -> None:
        result = Ok(5)
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self) -> None:
        assert Ok("4abc").unwrap() == "4abc"

    def test_unwrap_or_ignores_default(self) -> None:
        assert Ok(1).unwrap_or(2) == 1

    def test_map(self) -> None:
        assert Ok(2).map(lambda v: v * 10) == Ok(20)

    def test_pattern_match(self) -> None:
        match Ok({"height": 7}):
            case Ok(value):
                assert value == {"height": 7}
            case Err():
                pytest.fail("matched Err")


class TestErr:
    def test_flags(self) -> None:
        result = Err(ProtocolError(-1, "boom"))
        assert result.is_ok() is False
        assert result.is_err() is True

    def test_unwrap_raises_carried_error(self) -> None:
        error = ProtocolError(-13, "No wallet file")
        with pytest.raises(ProtocolError) as excinfo:
            Err(error).unwrap()
        assert excinfo.value is error

    def test_unwrap_or_returns_default(self) -> None:
        assert Err(MalformedResponseError()).unwrap_or(0) == 0

    def test_map_passes_through(self) -> None:
        result = Err(MalformedResponseError())
        assert result.map(lambda v: v) is result

    def test_pattern_match(self) -> None:
        match Err(ProtocolError(-2, "nope")):
            case Ok():
                pytest.fail("matched Ok")
            case Err(error):
                assert isinstance(error, ProtocolError)
                assert error.code == -2


class TestErrors:
    def test_protocol_error_fields(self) -> None:
        error = ProtocolError(-21, "Wallet already exists.")
        assert error.code == -21
        assert error.message == "Wallet already exists."
        assert error.error_code is ErrorCode.PROTOCOL
        assert str(error) == "Wallet already exists."

    def test_malformed_message_is_fixed(self) -> None:
        error = MalformedResponseError()
        assert error.message == MALFORMED_RESPONSE_MESSAGE
        assert error.error_code is ErrorCode.MALFORMED_RESPONSE

    def test_transport_error_records_reason(self) -> None:
        error = TransportError("down", reason=TransportReason.TIMEOUT)
        assert error.error_code is ErrorCode.TRANSPORT
        assert error.details["reason"] == "TIMEOUT"

    def test_all_errors_share_base(self) -> None:
        from monero_wallet_rpc.errors import WalletRpcError

        for error in (
            ProtocolError(1, "x"),
            MalformedResponseError(),
            TransportError("x"),
        ):
            assert isinstance(error, WalletRpcError)


class TestClassifyTransportException:
    def test_timeout(self) -> None:
        assert classify_transport_exception(httpx.ReadTimeout("slow")) is TransportReason.TIMEOUT

    def test_connect_error(self) -> None:
        assert (
            classify_transport_exception(httpx.ConnectError("refused"))
            is TransportReason.CONNECTION_FAILED
        )

    def test_status_error(self) -> None:
        request = httpx.Request("POST", "http://127.0.0.1:18082/json_rpc")
        response = httpx.Response(500, request=request)
        exc = httpx.HTTPStatusError("500", request=request, response=response)
        assert classify_transport_exception(exc) is TransportReason.HTTP_ERROR

    def test_invalid_json(self) -> None:
        assert classify_transport_exception(ValueError("bad json")) is TransportReason.INVALID_JSON

    def test_unknown(self) -> None:
        assert classify_transport_exception(RuntimeError("?")) is TransportReason.UNKNOWN


class TestTransportErrorFrom:
    def test_chains_cause(self) -> None:
        cause = httpx.ConnectError("refused")
        error = transport_error_from(cause, "http://127.0.0.1:18082/json_rpc")
        assert error.__cause__ is cause
        assert error.reason is TransportReason.CONNECTION_FAILED
        assert error.details["url"] == "http://127.0.0.1:18082/json_rpc"
        assert "refused" in error.details["cause"]

    def test_status_code_in_details(self) -> None:
        request = httpx.Request("POST", "http://127.0.0.1:18082/json_rpc")
        response = httpx.Response(503, request=request)
        exc = httpx.HTTPStatusError("503", request=request, response=response)
        error = transport_error_from(exc, str(request.url))
        assert error.details["status_code"] == 503
