"""Parameter provider capability and its Vault-backed implementation."""
from typing import Any, Protocol

from .errors import ClientError, ParameterStorageError
from .vault_client import VaultClient


class ParameterProvider(Protocol):
    """Store-independent access to named parameters."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class VaultParameterProvider:
    """ParameterProvider that reads and writes through a VaultClient."""

    def __init__(self, vault_client: VaultClient):
        self.vault_client = vault_client

    def get(self, key: str) -> str:
        try:
            return self.vault_client.get_value(key)
        except ClientError as e:
            raise ParameterStorageError(key, f'Could not get value for key "{key}"') from e

    def set(self, key: str, value: str) -> None:
        try:
            self.vault_client.set_value(key, value)
        except ClientError as e:
            raise ParameterStorageError(key, f'Could not set value for key "{key}"') from e
