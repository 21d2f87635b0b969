"""CLI entrypoint for vault-params."""
import argparse
import logging
import os
import sys
from pathlib import Path

from .validators import validate_key, validate_value

VERSION = "0.1.0"

logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def cmd_version(args):
    """Show version information."""
    print(f"vault-params {VERSION}")


def _env_overrides():
    """Names of the VAULT_* variables currently set (values are never printed)."""
    from vault_params.secrets.domains.config_loader import ENV_ADDR, ENV_NAMESPACE, ENV_TOKEN

    return [name for name in (ENV_ADDR, ENV_TOKEN, ENV_NAMESPACE) if os.getenv(name)]


def cmd_config_set_path(args):
    """Point vault-params at a config file after checking its 'vault' section."""
    from vault_params.secrets.domains.config_loader import ConfigError, load_config_file
    from vault_params.secrets.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.is_file():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        vault = load_config_file(str(config_path))['vault']
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")
    print(f"Vault base URL: {vault['base_url']}")


def cmd_config_show(args):
    """Show where the Vault connection settings come from."""
    from vault_params.secrets.domains.config_loader import (
        ENV_ADDR,
        ENV_TOKEN,
        ConfigError,
        default_config_path,
        load_config_file,
    )
    from vault_params.secrets.domains.preferences import get_preference

    overrides = _env_overrides()
    if ENV_ADDR in overrides and ENV_TOKEN in overrides:
        print(f"Source: environment ({', '.join(overrides)})")
        print("Config file: not read")
        return

    config_path_pref = get_preference("config_path")
    if config_path_pref and Path(config_path_pref).exists():
        config_path, source = Path(config_path_pref), "preference"
    else:
        if config_path_pref:
            print(f"Preferred config path not found: {config_path_pref}")
        config_path, source = default_config_path(), "default"

    print(f"Config path: {config_path}")
    if not config_path.exists():
        print(f"Source: {source} (file not found)")
        return
    print(f"Source: {source}")

    try:
        vault = load_config_file(str(config_path))['vault']
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Vault base URL: {vault['base_url']}")
    print(f"Namespace: {vault.get('namespace') or '(none)'}")
    if overrides:
        print(f"Overridden by environment: {', '.join(overrides)}")


def cmd_config_clear(args):
    """Forget the preferred config path."""
    from vault_params.secrets.domains.config_loader import default_config_path
    from vault_params.secrets.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")

    overrides = _env_overrides()
    if overrides:
        print(f"Still taking precedence over the file: {', '.join(overrides)}")


def cmd_params_get(args):
    """Read a parameter from Vault."""
    from vault_params.secrets.domains.errors import ParameterStorageError
    from vault_params.secrets.workflows.parameter_operations import get_parameter

    validate_key(args.key)

    try:
        value = get_parameter(args.key, verbose=args.verbose)
    except ParameterStorageError as e:
        print(f"Error: {e}: {e.__cause__}", file=sys.stderr)
        sys.exit(1)

    if args.quiet:
        print(value)
    else:
        print(f"Parameter '{args.key}': {value}")


def cmd_params_set(args):
    """Write a parameter to Vault."""
    from vault_params.secrets.domains.errors import ParameterStorageError
    from vault_params.secrets.workflows.parameter_operations import set_parameter

    validate_key(args.key)
    validate_value(args.value)

    try:
        set_parameter(args.key, args.value, verbose=args.verbose)
    except ParameterStorageError as e:
        print(f"Error: {e}: {e.__cause__}", file=sys.stderr)
        sys.exit(1)

    print(f"Parameter '{args.key}' stored")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="vault-params",
        description="vault-params CLI - read and write single values in a Vault KV store",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (transport failure, key not found, bad response, etc.)
  2 - Usage error (invalid arguments, invalid key format, etc.)

Environment variables:
  VAULT_ADDR      - Base URL of the KV mount (overrides config file)
  VAULT_TOKEN     - Auth token (overrides config file)
  VAULT_NAMESPACE - Namespace sent as X-Vault-Namespace (overrides config file)

Configuration:
  Default location: ~/.config/vault-params/config.yml
  Custom path: Set with 'vault-params config set-path <path>'
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log requests and responses to stderr (token is masked)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("version", help="Show version information")

    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage vault-params configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="Store the absolute path to your config file in ~/.config/vault-params/preferences.json"
    )
    config_set_path_parser.add_argument("path", help="Path to config file")
    config_subparsers.add_parser("show", help="Show current config path")
    config_subparsers.add_parser("clear", help="Clear config path preference")

    params_parser = subparsers.add_parser(
        "params",
        help="Parameter operations",
        description="Read and write parameters stored in Vault"
    )
    params_subparsers = params_parser.add_subparsers(dest="params_command")

    get_parser = params_subparsers.add_parser(
        "get",
        help="Get a parameter value",
        description="""
Fetch a parameter from Vault and print it to stdout. In quiet mode (-q),
only the value is printed.

Exit codes:
  0 - Value printed
  1 - Value could not be read (not found, transport failure, bad response)
  2 - Invalid key format
        """
    )
    get_parser.add_argument("key", help="Parameter key, e.g. db/pass")
    get_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Output only the value (useful for scripts)"
    )

    set_parser = params_subparsers.add_parser(
        "set",
        help="Set a parameter value",
        description="Store a parameter in Vault. The response status is not checked."
    )
    set_parser.add_argument("key", help="Parameter key, e.g. db/pass")
    set_parser.add_argument("value", help="Value to store")

    return parser, config_parser, params_parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors
        2 - Usage errors
    """
    parser, config_parser, params_parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("vault_params").setLevel(logging.INFO)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "config":
            if args.config_command == "set-path":
                cmd_config_set_path(args)
            elif args.config_command == "show":
                cmd_config_show(args)
            elif args.config_command == "clear":
                cmd_config_clear(args)
            else:
                config_parser.print_help()
                sys.exit(2)
        elif args.command == "params":
            if args.params_command == "get":
                cmd_params_get(args)
            elif args.params_command == "set":
                cmd_params_set(args)
            else:
                params_parser.print_help()
                sys.exit(2)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
