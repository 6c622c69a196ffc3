"""CLI entrypoint for passport."""
import sys
import argparse
import logging

from .validators import validate_script, validate_secret_name, validate_secret_value

VERSION = "0.1.0"

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def cmd_version(args):
    """Show version information."""
    print(f"passport {VERSION}")


def cmd_config_set_path(args):
    """Set store file path preference."""
    from passport_cli.vault.domains.errors import ConfigError
    from passport_cli.vault.domains.preferences import set_store_path

    try:
        store_path = set_store_path(args.path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Store path set to: {store_path}")


def cmd_config_show(args):
    """Show the store file in use and where the choice came from."""
    from passport_cli.vault.domains.config_loader import resolve_store_path

    store_path, source = resolve_store_path()

    if store_path.exists():
        print(f"Store path: {store_path}")
        print(f"Source: {source}")
    else:
        print(f"Store path: {store_path}")
        print(f"Source: {source} (file not found, it will be created on first use)")


def cmd_config_clear(args):
    """Clear store path preference."""
    from passport_cli.vault.domains.preferences import clear_store_path
    from passport_cli.vault.domains.config_loader import default_store_path

    if clear_store_path():
        print(f"Store path preference cleared. Will use default: {default_store_path()}")
    else:
        print(f"No store path preference set. Using default: {default_store_path()}")


def cmd_secrets_ls(args):
    """List secret names."""
    from passport_cli.vault.workflows.secret_operations import list_secrets

    print("Secrets:")
    for secret in list_secrets():
        marker = "secure" if secret.secure else "plain"
        print(f"> {secret.name} [{marker}]")


def cmd_secrets_get(args):
    """Show a single secret with its plain text value."""
    from passport_cli.vault.workflows.secret_operations import get_secret
    from passport_cli.vault.domains.crypto import HostCryptoProvider

    secret = get_secret(args.name)

    print(f"Name: {secret.name}")
    print(f"Value: {secret.resolve_value(HostCryptoProvider())}")
    print(f"Secure: {str(secret.secure).lower()}")


def cmd_secrets_add(args):
    """Add a secret, encrypted unless --plain-text is given."""
    from passport_cli.vault.workflows.secret_operations import add_secret

    validate_secret_name(args.name)
    validate_secret_value(args.value)

    add_secret(args.name, args.value, encrypt=not args.plain_text)
    print(f"Successfully added secret '{args.name}'!")


def cmd_secrets_rm(args):
    """Remove a secret."""
    from passport_cli.vault.workflows.secret_operations import remove_secret

    validate_secret_name(args.name)

    remove_secret(args.name)
    print(f"Successfully removed secret '{args.name}'!")


def cmd_scripts_ls(args):
    """List scripts in the current directory's workspace."""
    from passport_cli.vault.workflows.script_operations import get_workspace

    workspace = get_workspace()

    print(f"Workspace: {workspace.name}")
    print("Scripts:")
    for script in workspace.scripts:
        print(f"> {script.name}")


def cmd_scripts_get(args):
    """Show a script's command template."""
    from passport_cli.vault.workflows.script_operations import get_script

    script = get_script(args.name)
    print(f"Command: {script.command}")


def cmd_scripts_add(args):
    """Add a script to the current directory's workspace."""
    from passport_cli.vault.workflows.script_operations import add_script

    validate_script(args.name, args.command)

    add_script(args.name, args.command)
    print("Successfully added new script!")


def cmd_scripts_rm(args):
    """Remove a script from the current directory's workspace."""
    from passport_cli.vault.workflows.script_operations import remove_script

    remove_script(args.name)
    print("Successfully removed the script!")


def cmd_run(args):
    """Run a script and exit with its exit code."""
    from passport_cli.vault.workflows.script_operations import run_script

    exit_code = run_script(args.name)

    print(f"Exited with code {exit_code}", file=sys.stderr)
    sys.exit(exit_code)


def build_parser():
    """Build the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="passport",
        description="Passport - local secret vault and workspace script runner",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (store unreadable, secret not found, script failed to start, etc.)
  2 - Usage error (invalid arguments, invalid secret name format, etc.)
  N - 'passport run' exits with the script's own exit code

Environment variables:
  PASSPORT_STORE - Path to the store file (overrides preference and default)

Configuration:
  Default store: ~/.config/passport/config.yaml
  Custom path: Set with 'passport config set-path <path>'
  View current: Run 'passport config show'
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress information to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    _version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of passport"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage where the passport store is kept"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set store file path",
        description="""
Set the store file path preference.

This stores the absolute path to your store file in:
~/.config/passport/preferences.json

The file must already exist.
        """
    )
    config_set_path_parser.add_argument("path", help="Path to store file")

    _config_show_parser = config_subparsers.add_parser(
        "show",
        help="Show current store path",
        description="""
Display the store file path and its source.

Sources:
  - env: PASSPORT_STORE environment variable
  - preference: Path set via 'config set-path'
  - default: ~/.config/passport/config.yaml
        """
    )

    _config_clear_parser = config_subparsers.add_parser(
        "clear",
        help="Clear store path preference",
        description="Remove the store path preference and go back to the default location"
    )

    # secrets command
    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Secret management operations",
        description="Manage and view stored secrets"
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")

    _secrets_ls_parser = secrets_subparsers.add_parser(
        "ls",
        help="List secrets",
        description="List the names of all stored secrets"
    )

    secrets_get_parser = secrets_subparsers.add_parser(
        "get",
        help="Show a secret",
        description="""
Print a secret's name, plain text value and whether it is stored encrypted.

A secure value that cannot be decrypted on this machine is shown as empty.
        """
    )
    secrets_get_parser.add_argument("name", help="Name of the secret")

    secrets_add_parser = secrets_subparsers.add_parser(
        "add",
        help="Add a secret",
        description="""
Add a new secret. Values are encrypted with a key bound to this machine
unless --plain-text is given. Encrypted values cannot be read on another
machine.
        """
    )
    secrets_add_parser.add_argument(
        "name",
        help="Name of the secret (format: [a-zA-Z0-9_-]+, referenced in scripts as <secrets.NAME>)"
    )
    secrets_add_parser.add_argument("value", help="Value of the secret")
    secrets_add_parser.add_argument(
        "--plain-text",
        action="store_true",
        help="Store the value in plain text instead of encrypting it"
    )

    secrets_rm_parser = secrets_subparsers.add_parser(
        "rm",
        help="Remove a secret",
        description="Remove a secret from the store"
    )
    secrets_rm_parser.add_argument("name", help="Name of the secret to remove")

    # scripts command
    scripts_parser = subparsers.add_parser(
        "scripts",
        help="Workspace script operations",
        description="Manage scripts of the workspace for the current directory"
    )
    scripts_subparsers = scripts_parser.add_subparsers(dest="scripts_command")

    _scripts_ls_parser = scripts_subparsers.add_parser(
        "ls",
        help="List scripts",
        description="List the scripts of the workspace for the current directory"
    )

    scripts_get_parser = scripts_subparsers.add_parser(
        "get",
        help="Show a script",
        description="Print a script's command template"
    )
    scripts_get_parser.add_argument("name", help="Name of the script")

    scripts_add_parser = scripts_subparsers.add_parser(
        "add",
        help="Add a script",
        description="""
Add a script to the workspace for the current directory. The workspace is
created if the directory does not have one yet.

The command may reference secrets as <secrets.NAME>; they are substituted
when the script is run.
        """
    )
    scripts_add_parser.add_argument("name", help="Name of the new script")
    scripts_add_parser.add_argument("command", help="The command to execute")

    scripts_rm_parser = scripts_subparsers.add_parser(
        "rm",
        help="Remove a script",
        description="Remove a script from the workspace for the current directory"
    )
    scripts_rm_parser.add_argument("name", help="Name of the script to remove")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a workspace script",
        description="""
Run a script from the workspace for the current directory. Secret references
are substituted, output is streamed as it is produced, and passport exits
with the script's exit code.
        """
    )
    run_parser.add_argument("name", help="Name of the script to run")

    return parser, {
        "config": config_parser,
        "secrets": secrets_parser,
        "scripts": scripts_parser,
    }


HANDLERS = {
    ("config", "set-path"): cmd_config_set_path,
    ("config", "show"): cmd_config_show,
    ("config", "clear"): cmd_config_clear,
    ("secrets", "ls"): cmd_secrets_ls,
    ("secrets", "get"): cmd_secrets_get,
    ("secrets", "add"): cmd_secrets_add,
    ("secrets", "rm"): cmd_secrets_rm,
    ("scripts", "ls"): cmd_scripts_ls,
    ("scripts", "get"): cmd_scripts_get,
    ("scripts", "add"): cmd_scripts_add,
    ("scripts", "rm"): cmd_scripts_rm,
}


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (store unreadable, secret not found, spawn failure, etc.)
        2 - Usage errors (invalid arguments, invalid secret name format, etc.)
        N - Exit code of the script started by 'passport run'
    """
    parser, group_parsers = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    # Route to command handlers
    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "run":
            cmd_run(args)
        elif args.command in group_parsers:
            sub_command = getattr(args, f"{args.command}_command")
            handler = HANDLERS.get((args.command, sub_command))
            if handler is None:
                group_parsers[args.command].print_help()
                sys.exit(2)
            handler(args)
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
