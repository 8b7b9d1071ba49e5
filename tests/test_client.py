"""
Tests for SheetClient.

The HTTP session is mocked; no network access is needed.
"""

from unittest.mock import patch

import pytest
import requests

from api.client import (
    DEFAULT_SHEET_URLS,
    PermanentError,
    SheetClient,
    SheetFetchError,
    TransientError,
)
from api.models import Category


def _response(status_code=200, body="AB\tvalue\n", reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def sheet_client(monkeypatch):
    monkeypatch.delenv("CORNER_SHEET_URL", raising=False)
    monkeypatch.delenv("EDGE_SHEET_URL", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
    client = SheetClient()
    yield client
    client.close()


class TestConfiguration:
    """Test URL and timeout resolution."""

    def test_defaults(self, sheet_client):
        assert sheet_client.urls == DEFAULT_SHEET_URLS
        assert sheet_client.timeout == 15.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CORNER_SHEET_URL", "https://example.test/corners")
        monkeypatch.setenv("REQUEST_TIMEOUT", "3")

        client = SheetClient()
        assert client.urls[Category.CORNER] == "https://example.test/corners"
        assert client.urls[Category.EDGE] == DEFAULT_SHEET_URLS[Category.EDGE]
        assert client.timeout == 3.0

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setenv("EDGE_SHEET_URL", "https://example.test/from-env")

        client = SheetClient(urls={Category.EDGE: "https://example.test/edges"}, timeout=2)
        assert client.urls[Category.EDGE] == "https://example.test/edges"
        assert client.timeout == 2


class TestFetchSheet:
    """Test response handling."""

    def test_success_returns_text(self, sheet_client):
        with patch.object(sheet_client.session, "get", return_value=_response(body="n\tAB\tR U\n")) as get:
            text = sheet_client.fetch_sheet(Category.CORNER)

        assert text == "n\tAB\tR U\n"
        get.assert_called_once_with(DEFAULT_SHEET_URLS[Category.CORNER], timeout=15.0)

    def test_uses_category_url(self, sheet_client):
        with patch.object(sheet_client.session, "get", return_value=_response()) as get:
            sheet_client.fetch_sheet(Category.EDGE)

        assert get.call_args[0][0] == DEFAULT_SHEET_URLS[Category.EDGE]

    def test_client_error_is_permanent(self, sheet_client):
        with patch.object(sheet_client.session, "get", return_value=_response(404, "", "Not Found")):
            with pytest.raises(PermanentError):
                sheet_client.fetch_sheet(Category.CORNER)

    def test_server_error_is_transient(self, sheet_client):
        with patch.object(sheet_client.session, "get", return_value=_response(503, "", "Unavailable")):
            with pytest.raises(TransientError):
                sheet_client.fetch_sheet(Category.CORNER)

    @pytest.mark.parametrize("error", [
        requests.exceptions.Timeout("slow"),
        requests.exceptions.ConnectionError("down"),
        requests.exceptions.TooManyRedirects("loop"),
    ])
    def test_transport_errors_are_transient(self, sheet_client, error):
        with patch.object(sheet_client.session, "get", side_effect=error):
            with pytest.raises(TransientError):
                sheet_client.fetch_sheet(Category.EDGE)

    def test_errors_share_base_class(self):
        assert issubclass(TransientError, SheetFetchError)
        assert issubclass(PermanentError, SheetFetchError)

    def test_failed_request_is_not_retried(self, sheet_client):
        with patch.object(sheet_client.session, "get", side_effect=requests.exceptions.ConnectionError()) as get:
            with pytest.raises(TransientError):
                sheet_client.fetch_sheet(Category.CORNER)

        assert get.call_count == 1
