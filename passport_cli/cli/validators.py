"""Input validation for CLI arguments."""
import re
import sys


def validate_secret_name(name: str) -> None:
    """
    Validate a secret name can be referenced from a script.

    Scripts refer to secrets with <secrets.NAME>, where NAME is [a-zA-Z0-9_-]+.

    Args:
        name: Secret name to validate

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name:
        print("Error: Secret name cannot be empty", file=sys.stderr)
        print("\nSecret names must match: [a-zA-Z0-9_-]", file=sys.stderr)
        sys.exit(2)

    pattern = r'^[a-zA-Z0-9_-]+$'

    if not re.match(pattern, name):
        print(f"Error: Invalid secret name '{name}'", file=sys.stderr)
        print("\nAllowed characters: letters, numbers, underscores (_), hyphens (-)", file=sys.stderr)
        print("Not allowed: dots (.), spaces, special characters (@, $, !, etc.)", file=sys.stderr)
        print("\nScripts reference secrets as <secrets.NAME>, for example:", file=sys.stderr)
        print("  passport scripts add deploy \"deploy.sh --token <secrets.api-token>\"", file=sys.stderr)
        sys.exit(2)


def validate_secret_value(value: str) -> None:
    """
    Validate secret value is not empty.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not value:
        print("Error: Secret value cannot be empty", file=sys.stderr)
        sys.exit(2)


def validate_script(name: str, command: str) -> None:
    """
    Validate a script name and command are present.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name or not name.strip():
        print("Error: Script name cannot be empty", file=sys.stderr)
        sys.exit(2)

    if not command or not command.strip():
        print("Error: Script command cannot be empty", file=sys.stderr)
        sys.exit(2)
