"""Error types raised by the Vault client and the parameter provider."""
from typing import Optional


class ClientError(Exception):
    """Base error for every failure surfaced by VaultClient."""

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


class TransportError(ClientError):
    """The underlying transport failed before a response was obtained."""

    CODE = 800

    def __init__(self, message: str, code: int = CODE):
        super().__init__(message, code)


class KeyNotFoundError(ClientError):
    """The store answered 404 for the requested key."""

    def __init__(self, key: str):
        super().__init__(f'Value with key "{key}" is not found')
        self.key = key


class ResponseParsingError(ClientError):
    """The response body is not the expected JSON envelope."""
    pass


class ParameterStorageError(Exception):
    """
    Raised by a parameter provider when a value cannot be read or written.

    The originating error is kept as ``__cause__``.
    """

    CODE = 1

    def __init__(self, key: str, message: str, code: int = CODE):
        super().__init__(message)
        self.key = key
        self.code = code


class TransportFailure(Exception):
    """Raised by a transport when a request cannot be sent or answered."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code
