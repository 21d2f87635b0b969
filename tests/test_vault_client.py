"""Tests for VaultClient request building, response mapping and audit logging."""
import json
from unittest import mock

import pytest

from conftest import ScriptedTransport, make_response
from vault_params.secrets.domains.errors import (
    ClientError,
    KeyNotFoundError,
    ResponseParsingError,
    TransportError,
)
from vault_params.secrets.domains.models import VaultConfig
from vault_params.secrets.domains.vault_client import VaultClient

EXPECTED_HEADERS = {
    "X-Vault-Token": "bar",
    "Content-Type": "application/json",
}


def request_log(url, request):
    return "VAULT-REQUEST: " + json.dumps([url, str(request)])


class TestGetValue:
    """Test suite for VaultClient.get_value."""

    def test_get_value_returns_envelope_value(self, config):
        transport = ScriptedTransport(make_response(200, {"data": {"data": {"value": "baz"}}}))
        client = VaultClient(transport, config)

        assert client.get_value("some_key") == "baz"

        request = transport.sent[0]
        assert request.method == "GET"
        assert request.url == "foo/some_key"
        assert request.headers == EXPECTED_HEADERS
        assert request.body is None

    def test_get_value_logs_request_and_response(self, config):
        body = json.dumps({"data": {"data": {"value": "baz"}}})
        transport = ScriptedTransport(make_response(200, body, reason="OK", location="foo/some_key"))
        logger = mock.Mock()
        client = VaultClient(transport, config, logger)

        client.get_value("some_key")

        request = transport.sent[0]
        assert logger.info.call_args_list == [
            mock.call(request_log("foo/some_key", request)),
            mock.call("VAULT-RESPONSE: " + json.dumps(["foo/some_key", 200, "OK", body])),
        ]

    def test_get_value_not_found(self, config):
        transport = ScriptedTransport(make_response(404, "response_body", reason="ERROR"))
        logger = mock.Mock()
        client = VaultClient(transport, config, logger)

        with pytest.raises(KeyNotFoundError) as exc_info:
            client.get_value("some_key")

        assert exc_info.value.key == "some_key"
        assert str(exc_info.value) == 'Value with key "some_key" is not found'
        assert logger.info.call_count == 2
        assert logger.info.call_args_list[1] == mock.call(
            "VAULT-RESPONSE: " + json.dumps([None, 404, "ERROR", "response_body"])
        )

    def test_get_value_not_found_ignores_valid_body(self, config):
        transport = ScriptedTransport(make_response(404, {"data": {"data": {"value": "baz"}}}))
        client = VaultClient(transport, config)

        with pytest.raises(KeyNotFoundError):
            client.get_value("some_key")

    @pytest.mark.parametrize("body", [
        {"data": {"metadata": {}}},
        {"data": {"data": {}}},
        {"errors": ["permission denied"]},
        ["data"],
        {"data": None},
        {"data": {"data": {"value": 42}}},
    ])
    def test_get_value_incomplete_envelope(self, config, body):
        client = VaultClient(ScriptedTransport(make_response(200, body)), config)

        with pytest.raises(ResponseParsingError) as exc_info:
            client.get_value("some_key")

        assert str(exc_info.value) == "Could not parse response"

    def test_get_value_invalid_json(self, config):
        client = VaultClient(ScriptedTransport(make_response(200, "<html>oops</html>")), config)

        with pytest.raises(ResponseParsingError):
            client.get_value("some_key")

    def test_get_value_invalid_utf8_body(self, config):
        body = b'{"data": {"data": {"value": "s3\xffcr3t"}}}'
        logger = mock.Mock()
        client = VaultClient(ScriptedTransport(make_response(200, body)), config, logger)

        with pytest.raises(ResponseParsingError) as exc_info:
            client.get_value("some_key")

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        # The response line is still logged, with the bad byte replaced
        assert "s3�cr3t" in json.loads(logger.info.call_args_list[1].args[0][len("VAULT-RESPONSE: "):])[3]

    def test_get_value_empty_body(self, config):
        client = VaultClient(ScriptedTransport(make_response(200, "")), config)

        with pytest.raises(ResponseParsingError):
            client.get_value("some_key")

    def test_get_value_transport_failure(self, config, transport_failure):
        transport = ScriptedTransport(error=transport_failure)
        logger = mock.Mock()
        client = VaultClient(transport, config, logger)

        with pytest.raises(TransportError) as exc_info:
            client.get_value("some_key")

        assert exc_info.value.code == 800
        assert exc_info.value.__cause__ is transport_failure
        logger.info.assert_called_once_with(request_log("foo/some_key", transport.sent[0]))

    def test_large_body_is_read_in_full(self, config):
        value = "x" * (3 * 1048576)
        client = VaultClient(ScriptedTransport(make_response(200, {"data": {"data": {"value": value}}})), config)

        assert client.get_value("big") == value


class TestSetValue:
    """Test suite for VaultClient.set_value."""

    def test_set_value_posts_envelope(self, config):
        transport = ScriptedTransport(make_response(200, "response_body"))
        client = VaultClient(transport, config)

        client.set_value("some_key", "some_value")

        request = transport.sent[0]
        assert request.method == "POST"
        assert request.url == "foo/some_key"
        assert request.headers == EXPECTED_HEADERS
        assert json.loads(request.body) == {"data": {"value": "some_value"}}

    def test_set_value_logs_request_and_response(self, config):
        transport = ScriptedTransport(make_response(200, "response_body", reason="OK", location="foo/some_key"))
        logger = mock.Mock()
        client = VaultClient(transport, config, logger)

        client.set_value("some_key", "some_value")

        assert logger.info.call_args_list == [
            mock.call(request_log("foo/some_key", transport.sent[0])),
            mock.call("VAULT-RESPONSE: " + json.dumps(["foo/some_key", 200, "OK", "response_body"])),
        ]

    @pytest.mark.parametrize("status_code", [400, 403, 404, 500, 503])
    def test_set_value_does_not_check_status(self, config, status_code):
        client = VaultClient(ScriptedTransport(make_response(status_code, "nope")), config)

        assert client.set_value("some_key", "some_value") is None

    def test_set_value_transport_failure(self, config, transport_failure):
        transport = ScriptedTransport(error=transport_failure)
        logger = mock.Mock()
        client = VaultClient(transport, config, logger)

        with pytest.raises(TransportError) as exc_info:
            client.set_value("some_key", "some_value")

        assert str(exc_info.value) == "Transport exception: exception_message"
        assert logger.info.call_count == 1

    def test_set_value_encoding_error(self, config):
        transport = ScriptedTransport(make_response(200))
        client = VaultClient(transport, config)

        with pytest.raises(ClientError) as exc_info:
            client.set_value("some_key", object())

        assert str(exc_info.value) == "Request body encoding error"
        assert transport.sent == []


class TestRequestDetails:
    """Headers, namespace and token handling."""

    def test_namespace_header_sent_when_configured(self):
        transport = ScriptedTransport(make_response(200, {"data": {"data": {"value": "v"}}}))
        client = VaultClient(transport, VaultConfig("foo", "bar", namespace="team-a"))

        client.get_value("k")

        assert transport.sent[0].headers["X-Vault-Namespace"] == "team-a"

    def test_token_not_logged(self, config):
        transport = ScriptedTransport(make_response(200, {"data": {"data": {"value": "v"}}}))
        logger = mock.Mock()
        client = VaultClient(transport, VaultConfig("foo", "t0k3n-secret"), logger)

        client.get_value("k")

        for logged in logger.info.call_args_list:
            assert "t0k3n-secret" not in logged.args[0]

    def test_no_logger_is_silent(self, config):
        client = VaultClient(ScriptedTransport(make_response(200, {"data": {"data": {"value": "v"}}})), config)

        assert client.logger is None
        assert client.get_value("k") == "v"


class TestRoundTrip:
    """set then get against an in-memory server."""

    def test_set_then_get(self, fake_server):
        client = VaultClient(fake_server, VaultConfig("http://vault.local", "t0k3n"))

        client.set_value("db/pass", "s3cr3t")
        result = client.get_value("db/pass")

        assert result == "s3cr3t"
        post, get = fake_server.sent
        assert (post.method, post.url) == ("POST", "http://vault.local/db/pass")
        assert json.loads(post.body) == {"data": {"value": "s3cr3t"}}
        assert (get.method, get.url) == ("GET", "http://vault.local/db/pass")
        assert get.headers["X-Vault-Token"] == "t0k3n"

    def test_unknown_key_is_not_found(self, fake_server):
        client = VaultClient(fake_server, VaultConfig("http://vault.local", "t0k3n"))

        with pytest.raises(KeyNotFoundError) as exc_info:
            client.get_value("missing")

        assert exc_info.value.key == "missing"
