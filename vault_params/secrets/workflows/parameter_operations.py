"""Workflows wiring config, transport and client into a parameter provider."""
import logging
from typing import Optional

from ..domains.config_loader import get_vault_config
from ..domains.models import VaultConfig
from ..domains.parameter_provider import VaultParameterProvider
from ..domains.transport import RequestsTransport, Transport
from ..domains.vault_client import VaultClient

logger = logging.getLogger(__name__)

# Receives the VAULT-REQUEST / VAULT-RESPONSE audit lines in verbose mode
HTTP_LOGGER_NAME = "vault_params.http"


def build_provider(
    config: Optional[VaultConfig] = None,
    transport: Optional[Transport] = None,
    verbose: bool = False,
) -> VaultParameterProvider:
    """
    Create a VaultParameterProvider.

    Args:
        config: Connection settings (resolved from env/config file if omitted)
        transport: Request transport (a RequestsTransport if omitted)
        verbose: If True, request/response lines are logged to
            ``vault_params.http``

    Raises:
        FileNotFoundError: If no configuration can be found
        ConfigError: If the config file is invalid
    """
    if config is None:
        config = get_vault_config()
    if transport is None:
        transport = RequestsTransport()

    http_logger = logging.getLogger(HTTP_LOGGER_NAME) if verbose else None
    logger.debug(f"Building Vault provider for {config.base_url}")

    return VaultParameterProvider(VaultClient(transport, config, http_logger))


def get_parameter(key: str, config: Optional[VaultConfig] = None,
                  transport: Optional[Transport] = None, verbose: bool = False) -> str:
    """
    Fetch a single parameter.

    Raises:
        ParameterStorageError: If the value could not be read
    """
    return build_provider(config, transport, verbose).get(key)


def set_parameter(key: str, value: str, config: Optional[VaultConfig] = None,
                  transport: Optional[Transport] = None, verbose: bool = False) -> None:
    """
    Store a single parameter.

    Raises:
        ParameterStorageError: If the value could not be written
    """
    build_provider(config, transport, verbose).set(key, value)
