from __future__ import annotations

from elasticsearch import ApiError
from elasticsearch import ConnectionError as ESConnectionError

from esrollup.errors import ConnectivityFailure, describe_backend_error
from tests.in_memory_backend import api_error


def test_describe_backend_error_keeps_transport_message():
    exc = ESConnectionError("connection refused")

    assert describe_backend_error(exc) == "connection refused"


def test_describe_backend_error_appends_transport_causes():
    exc = ESConnectionError("connection refused", errors=(OSError("port 9200 closed"),))

    detail = describe_backend_error(exc)

    assert detail.startswith("connection refused")
    assert "port 9200 closed" in detail


def test_describe_backend_error_includes_status_for_api_errors():
    exc = api_error(ApiError, 400, "illegal_argument_exception")

    assert describe_backend_error(exc).startswith("400 illegal_argument_exception")


def test_rollup_error_message_names_operation_and_detail():
    err = ConnectivityFailure("ping", describe_backend_error(ESConnectionError("refused")))

    assert str(err) == "ping failed: refused"
    assert err.operation == "ping"
