"""HTTP transport capability used by VaultClient, plus a requests-backed default."""
import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, Optional, Protocol

import requests

from .errors import TransportFailure

logger = logging.getLogger(__name__)

# Header values replaced with a mask when a request is rendered as text
MASKED_HEADERS = frozenset({"x-vault-token"})


@dataclass
class HttpResponse:
    """
    Response handed back by a transport.

    ``body`` is a one-shot binary stream: it may not be rewindable, so callers
    read it once.
    """
    status_code: int
    reason: str
    body: BinaryIO
    location: Optional[str] = None


@dataclass
class HttpRequest:
    """A request built by a transport and ready to be sent once."""
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str] = None
    sender: Optional[Callable[["HttpRequest"], HttpResponse]] = field(
        default=None, repr=False, compare=False
    )

    def send(self) -> HttpResponse:
        """
        Send the request through the transport that created it.

        Raises:
            TransportFailure: If no response could be obtained
        """
        if self.sender is None:
            raise TransportFailure(f"Request {self.method} {self.url} is not bound to a transport")
        return self.sender(self)

    def __str__(self) -> str:
        lines = [f"{self.method} {self.url} HTTP/1.1"]
        for name, value in self.headers.items():
            if name.lower() in MASKED_HEADERS:
                value = "***"
            lines.append(f"{name}: {value}")
        text = "\r\n".join(lines) + "\r\n\r\n"
        if self.body:
            text += self.body
        return text


class Transport(Protocol):
    """Anything that can build a sendable request."""

    def create_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None,
    ) -> HttpRequest: ...


class RequestsTransport:
    """Transport backed by a requests Session."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self._session = session
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        """Lazy-initialize session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def create_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None,
    ) -> HttpRequest:
        return HttpRequest(method=method, url=url, headers=dict(headers), body=body, sender=self._send)

    def _send(self, request: HttpRequest) -> HttpResponse:
        data = request.body.encode("utf-8") if request.body is not None else None
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"{request.method} {request.url} failed: {e}")
            raise TransportFailure(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            body=io.BytesIO(response.content),
            location=response.headers.get("Location"),
        )
