"""Input validation for CLI arguments."""
import re
import sys

# Slash-separated path segments of letters, digits, '_', '-', '.'
KEY_PATTERN = r'^[A-Za-z0-9_.\-]+(/[A-Za-z0-9_.\-]+)*$'


def validate_key(key: str) -> None:
    """
    Validate a parameter key.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not key:
        print("Error: Key cannot be empty", file=sys.stderr)
        sys.exit(2)

    if not re.match(KEY_PATTERN, key):
        print(f"Error: Invalid key '{key}'", file=sys.stderr)
        print("\nKeys are slash-separated segments of letters, numbers, '_', '-' and '.'", file=sys.stderr)
        print("\nExamples of valid keys:", file=sys.stderr)
        print("  ✓ db/pass", file=sys.stderr)
        print("  ✓ payments/api-key.prod", file=sys.stderr)
        print("\nExamples of invalid keys:", file=sys.stderr)
        print("  ✗ /db/pass (leading slash)", file=sys.stderr)
        print("  ✗ db//pass (empty segment)", file=sys.stderr)
        print("  ✗ db pass (contains space)", file=sys.stderr)
        sys.exit(2)


def validate_value(value: str) -> None:
    """
    Validate a parameter value is not empty.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not value or value.strip() == "":
        print("Error: Value cannot be empty", file=sys.stderr)
        sys.exit(2)
