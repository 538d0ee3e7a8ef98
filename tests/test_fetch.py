"""Tests for tgconfig.utils.fetch: fetch_text, fetch_yaml, fetch_doc."""

from unittest.mock import patch

import httpx
import pytest

from tgconfig.errors import FetchError
from tgconfig.utils.fetch import fetch_doc, fetch_text, fetch_yaml

API = "https://config.example.com/api"


def _response(status: int, text: str = "", url: str = f"{API}/x") -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("GET", url))


class TestFetchText:
    @patch("tgconfig.utils.fetch.httpx.get")
    def test_returns_body(self, mock_get, mock_config):
        mock_get.return_value = _response(200, "$.templates")
        assert fetch_text(API, "/config-prepare") == "$.templates"
        assert mock_get.call_args[0][0] == f"{API}/config-prepare"

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_not_found_raises_without_retry(self, mock_get, mock_config):
        mock_get.return_value = _response(404)
        with pytest.raises(FetchError, match="404"):
            fetch_text(API, "/config-prepare")
        assert mock_get.call_count == 1

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_retries_on_connect_error(self, mock_get, mock_config):
        mock_get.side_effect = [httpx.ConnectError("connection refused"), _response(200, "ok")]
        assert fetch_text(API, "/dialog-flow") == "ok"
        assert mock_get.call_count == 2

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_retries_on_503(self, mock_get, mock_config):
        mock_get.side_effect = [_response(503), _response(200, "ok")]
        assert fetch_text(API, "/dialog-flow") == "ok"
        assert mock_get.call_count == 2

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_raises_after_max_retries(self, mock_get, mock_config):
        mock_get.side_effect = httpx.ConnectError("down")
        with pytest.raises(FetchError, match="Failed to fetch"):
            fetch_text(API, "/dialog-flow")
        assert mock_get.call_count == 2  # 1 initial + 1 retry


class TestFetchYaml:
    @patch("tgconfig.utils.fetch.httpx.get")
    def test_parses_yaml(self, mock_get, mock_config):
        mock_get.return_value = _response(200, "flow:\n  start: platform\n")
        assert fetch_yaml(API, "/dialog-flow") == {"flow": {"start": "platform"}}

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_invalid_yaml_raises(self, mock_get, mock_config):
        mock_get.return_value = _response(200, "flow: [unclosed")
        with pytest.raises(FetchError, match="Invalid YAML"):
            fetch_yaml(API, "/dialog-flow")


class TestFetchDoc:
    @patch("tgconfig.utils.fetch.httpx.get")
    def test_returns_fragment(self, mock_get, mock_config):
        mock_get.return_value = _response(200, "Run `docker compose up`.")
        assert fetch_doc(API, "docker/start.md") == "Run `docker compose up`."
        assert mock_get.call_args[0][0] == f"{API}/docs/docker/start.md"

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_missing_returns_placeholder(self, mock_get, mock_config):
        mock_get.return_value = _response(404)
        assert fetch_doc(API, "nope.md") == "*Documentation file not found: nope.md*"

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_transport_error_returns_placeholder(self, mock_get, mock_config):
        mock_get.side_effect = httpx.ConnectError("down")
        assert fetch_doc(API, "nope.md") == "*Documentation file not found: nope.md*"

    @patch("tgconfig.utils.fetch.httpx.get")
    def test_invalid_url_returns_placeholder(self, mock_get, mock_config):
        mock_get.side_effect = httpx.InvalidURL("Invalid non-printable ASCII character in URL")
        assert fetch_doc(API, "bad\x00.md") == "*Documentation file not found: bad\x00.md*"

    def test_unparseable_path_returns_placeholder(self, mock_config):
        assert fetch_doc(API, "bad\x00.md") == "*Documentation file not found: bad\x00.md*"


class TestRetryBackoff:
    @patch("tgconfig.utils.fetch.httpx.get")
    def test_backoff_read_from_config(self, mock_get, mock_config):
        mock_get.side_effect = [httpx.ConnectError("refused"), _response(200, "ok")]
        with patch("time.sleep") as mock_sleep:
            assert fetch_text(API, "/dialog-flow") == "ok"
        assert mock_sleep.call_count == 1
        assert all(call.args[0] == 0 for call in mock_sleep.call_args_list)
