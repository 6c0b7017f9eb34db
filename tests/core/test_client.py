"""Tests for the OpenTSDB HTTP client."""

from unittest.mock import MagicMock

import pytest
import requests

from tsgraph.client import TsdbClient
from tsgraph.exceptions import TransportError

URL = "http://tsdb.test:4242/q?start=2024/01/01-00:00:00&end=2024/01/01-01:00:00&m=sum:cpu.load&ascii"


@pytest.fixture
def client():
    tsdb_client = TsdbClient(timeout=12.5)
    tsdb_client.session = MagicMock()
    return tsdb_client


def test_fetch_returns_body(client):
    client.session.get.return_value = MagicMock(ok=True, text="cpu.load 1 1\n")

    assert client.fetch(URL) == "cpu.load 1 1\n"
    client.session.get.assert_called_once_with(URL, timeout=12.5)


def test_error_status_raises_with_body(client):
    client.session.get.return_value = MagicMock(ok=False, status_code=400, reason="Bad Request", text="No such name for 'metrics'")

    with pytest.raises(TransportError) as exc_info:
        client.fetch(URL)

    assert exc_info.value.status_code == 400
    assert exc_info.value.url == URL
    assert "No such name" in str(exc_info.value)


def test_error_status_without_body(client):
    client.session.get.return_value = MagicMock(ok=False, status_code=502, reason="Bad Gateway", text="")

    with pytest.raises(TransportError, match="HTTP 502 Bad Gateway"):
        client.fetch(URL)


@pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("too slow")])
def test_request_exception_raises_transport_error(client, error):
    client.session.get.side_effect = error

    with pytest.raises(TransportError) as exc_info:
        client.fetch(URL)

    assert exc_info.value.__cause__ is error
