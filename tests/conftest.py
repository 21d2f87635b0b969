"""Shared fixtures: in-memory transports standing in for a Vault server."""
import io
import json

import pytest

from vault_params.secrets.domains.errors import TransportFailure
from vault_params.secrets.domains.models import VaultConfig
from vault_params.secrets.domains.transport import HttpRequest, HttpResponse


class OneShotStream:
    """Binary stream that fails if read again after reaching EOF."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)
        self._exhausted = False

    def read(self, size=-1):
        if self._exhausted:
            raise AssertionError("response body read after it was consumed")
        chunk = self._buffer.read(size)
        if not chunk:
            self._exhausted = True
        return chunk


def make_response(status_code=200, body="", reason="OK", location=None):
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    return HttpResponse(
        status_code=status_code,
        reason=reason,
        body=OneShotStream(body if isinstance(body, bytes) else body.encode("utf-8")),
        location=location,
    )


class ScriptedTransport:
    """Returns a fixed response (or raises) and records every request sent."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.sent = []

    def create_request(self, method, url, headers, body=None):
        return HttpRequest(method=method, url=url, headers=headers, body=body, sender=self._send)

    def _send(self, request):
        self.sent.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class FakeVaultServer:
    """Minimal KV server: POST stores data.value, GET returns the envelope or 404."""

    def __init__(self, base_url):
        self.base_url = base_url
        self.store = {}
        self.sent = []

    def create_request(self, method, url, headers, body=None):
        return HttpRequest(method=method, url=url, headers=headers, body=body, sender=self._handle)

    def _handle(self, request):
        self.sent.append(request)
        key = request.url[len(self.base_url) + 1:]

        if request.method == "POST":
            self.store[key] = json.loads(request.body)["data"]["value"]
            return make_response(204, "", reason="No Content")

        if key not in self.store:
            return make_response(404, {"errors": []}, reason="Not Found")
        return make_response(200, {"data": {"data": {"value": self.store[key]}, "metadata": {"version": 1}}})


@pytest.fixture
def config():
    return VaultConfig(base_url="foo", token="bar")


@pytest.fixture
def fake_server():
    return FakeVaultServer("http://vault.local")


@pytest.fixture
def transport_failure():
    return TransportFailure("exception_message")
