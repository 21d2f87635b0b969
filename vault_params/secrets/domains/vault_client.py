"""Vault KV client: one HTTP request per operation, typed errors on failure."""
import json
import logging
from typing import Dict, Optional

from .errors import (
    ClientError,
    KeyNotFoundError,
    ResponseParsingError,
    TransportError,
    TransportFailure,
)
from .models import VaultConfig
from .transport import HttpRequest, HttpResponse, Transport

TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"

# Response bodies are drained in chunks of this size
READ_BUFFER = 1048576


class VaultClient:
    """
    Read and write single values in a Vault-compatible KV store.

    Args:
        transport: Builds and sends requests (see ``Transport``)
        config: Base URL, token and optional namespace
        logger: Optional sink for request/response audit lines. Nothing is
            logged when omitted.
    """

    def __init__(self, transport: Transport, config: VaultConfig, logger: Optional[logging.Logger] = None):
        self.transport = transport
        self.config = config
        self.logger = logger

    def get_value(self, key: str) -> str:
        """
        Fetch the value stored under ``key``.

        Returns:
            The string found at ``data.data.value`` in the response

        Raises:
            TransportError: If the transport failed
            KeyNotFoundError: If the store answered 404
            ResponseParsingError: If the body is not the expected envelope
        """
        response, raw_body = self._request("GET", key)

        if response.status_code == 404:
            raise KeyNotFoundError(key)

        try:
            data = json.loads(raw_body.decode("utf-8"))
        except ValueError as e:
            raise ResponseParsingError("Could not parse response") from e

        try:
            value = data["data"]["data"]["value"]
        except (KeyError, TypeError) as e:
            raise ResponseParsingError("Could not parse response") from e

        if not isinstance(value, str):
            raise ResponseParsingError("Could not parse response")

        return value

    def set_value(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``.

        The response status is not checked: any response that arrives without
        a transport failure counts as success.

        Raises:
            ClientError: If the request body cannot be encoded
            TransportError: If the transport failed
        """
        try:
            data = json.dumps({"data": {"value": value}})
        except (TypeError, ValueError) as e:
            raise ClientError("Request body encoding error") from e

        self._request("POST", key, data)

    def _headers(self) -> Dict[str, str]:
        headers = {
            TOKEN_HEADER: self.config.token,
            "Content-Type": "application/json",
        }
        if self.config.namespace:
            headers[NAMESPACE_HEADER] = self.config.namespace
        return headers

    def _request(self, method: str, route: str, data: Optional[str] = None):
        """Send one request and return ``(response, raw_body)`` with the body as bytes."""
        url = f"{self.config.base_url}/{route}"

        request = self.transport.create_request(method, url, self._headers(), data)

        self._write_request_log(request)

        try:
            response = request.send()
        except TransportFailure as e:
            code = e.code if e.code is not None else TransportError.CODE
            raise TransportError(f"Transport exception: {e}", code) from e

        raw_body = _read_body(response)
        self._write_response_log(response, raw_body)

        return response, raw_body

    def _write_request_log(self, request: HttpRequest) -> None:
        if self.logger is not None:
            request_data = json.dumps([request.url, str(request)])
            self.logger.info(f"VAULT-REQUEST: {request_data}")

    def _write_response_log(self, response: HttpResponse, raw_body: bytes) -> None:
        if self.logger is not None:
            response_data = json.dumps([
                response.location,
                response.status_code,
                response.reason,
                raw_body.decode("utf-8", errors="replace"),
            ])
            self.logger.info(f"VAULT-RESPONSE: {response_data}")


def _read_body(response: HttpResponse) -> bytes:
    """Drain the response body exactly once."""
    body = response.body
    if body is None:
        return b""

    chunks = []
    while True:
        chunk = body.read(READ_BUFFER)
        if not chunk:
            break
        chunks.append(chunk)

    return b"".join(chunks)
