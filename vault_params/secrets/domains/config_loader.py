"""Configuration loading for vault-params."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import VaultConfig
from .preferences import get_preference

logger = logging.getLogger(__name__)

ENV_ADDR = "VAULT_ADDR"
ENV_TOKEN = "VAULT_TOKEN"
ENV_NAMESPACE = "VAULT_NAMESPACE"


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    return Path.home() / ".config" / "vault-params" / "config.yml"


def _get_config_path() -> str:
    """
    Resolve the config file path.

    Priority order:
    1. ``config_path`` user preference (set with 'vault-params config set-path')
    2. ~/.config/vault-params/config.yml

    Raises:
        FileNotFoundError: If neither location holds a file
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return str(config_path)
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    raise FileNotFoundError(
        "Configuration file not found. Set up vault-params using one of these methods:\n\n"
        "1. Export the connection settings:\n"
        f"   export {ENV_ADDR}=http://vault.local/v1/secret/data\n"
        f"   export {ENV_TOKEN}=<token>\n\n"
        "2. Create the default config file:\n"
        f"   mkdir -p {default_config.parent}\n"
        f"   $EDITOR {default_config}\n\n"
        "3. Point to an existing config file:\n"
        "   vault-params config set-path /path/to/config.yml\n"
    )


def load_config() -> Dict[str, Any]:
    """
    Load and validate the YAML configuration file.

    Expected format::

        vault:
          base_url: http://vault.local/v1/secret/data
          token: <token>
          namespace: team-a   # optional

    Returns:
        The parsed configuration

    Raises:
        FileNotFoundError: If no config file exists
        ConfigError: If the file is unreadable, empty or incomplete
    """
    return load_config_file(_get_config_path())


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load and validate the config file at ``config_path`` (see ``load_config``)."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    if not config:
        raise ConfigError(f"Config file at {config_path} is empty")

    if not isinstance(config, dict) or not isinstance(config.get('vault'), dict):
        raise ConfigError(
            f"Missing 'vault' section in config at {config_path}\n"
            f"Required format:\n"
            f"vault:\n"
            f"  base_url: http://vault.local/v1/secret/data\n"
            f"  token: <token>"
        )

    vault = config['vault']
    for field_name in ('base_url', 'token'):
        if not vault.get(field_name):
            raise ConfigError(f"Missing 'vault.{field_name}' in config at {config_path}")

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Using Vault at: {vault['base_url']}")

    return config


def get_vault_config() -> VaultConfig:
    """
    Build the connection settings from the environment and/or config file.

    If VAULT_ADDR and VAULT_TOKEN are both set, no file is read. Otherwise the
    config file is loaded and any of VAULT_ADDR, VAULT_TOKEN, VAULT_NAMESPACE
    that are set override the file values.

    Raises:
        FileNotFoundError: If the environment is incomplete and no file exists
        ConfigError: If the config file is invalid
    """
    env_addr = os.getenv(ENV_ADDR)
    env_token = os.getenv(ENV_TOKEN)
    env_namespace = os.getenv(ENV_NAMESPACE)

    if env_addr and env_token:
        logger.debug(f"Using {ENV_ADDR} and {ENV_TOKEN} from environment")
        return _build(env_addr, env_token, env_namespace)

    vault = load_config()['vault']
    return _build(
        env_addr or vault['base_url'],
        env_token or vault['token'],
        env_namespace or vault.get('namespace'),
    )


def _build(base_url: str, token: str, namespace: Optional[str]) -> VaultConfig:
    return VaultConfig(
        base_url=str(base_url).rstrip('/'),
        token=str(token),
        namespace=str(namespace) if namespace else None,
    )
