"""Command-line front door for kmip-explorer.

Resolves connection parameters from flags, environment and saved preferences,
optionally checks for a newer release, then runs the interactive explorer.
"""

from __future__ import annotations

import argparse
import logging
import os
import platform
import sys

from . import __version__
from .errors import ExplorerError
from .kmip.client import KmipClient
from .logging_setup import setup_logging
from .runtime import run_explorer
from .runtime.app import ExplorerOptions
from .runtime.config import load_connection_defaults, load_theme_name, save_theme_name
from .ui_theme import available_theme_names, normalize_theme_name
from .version_check import check_latest_version

logger = logging.getLogger(__name__)

MISSING_ARGUMENTS = "Missing one of arguments --addr, --cert or --key"
ENV_DEFAULTS = {"addr": "KMIP_ADDR", "cert": "KMIP_CERT", "key": "KMIP_KEY", "ca": "KMIP_CA"}


def connection_defaults(environ: dict[str, str] | None = None) -> dict[str, str]:
    """Environment variables first, then persisted preferences."""
    environ = os.environ if environ is None else environ
    saved = load_connection_defaults()
    out: dict[str, str] = {}
    for name, variable in ENV_DEFAULTS.items():
        value = environ.get(variable) or saved.get(name, "")
        out[name] = value
    return out


def build_parser(defaults: dict[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kmip-explorer",
        description="Browse and manage the objects stored on a KMIP server.",
    )
    parser.add_argument("--addr", default=defaults.get("addr", ""), help="Address and port of the KMIP Server")
    parser.add_argument("--cert", default=defaults.get("cert", ""), help="Path to the client certificate")
    parser.add_argument("--key", default=defaults.get("key", ""), help="Path to the client private key")
    parser.add_argument("--ca", default=defaults.get("ca", ""), help="Server's CA (optional)")
    parser.add_argument(
        "--no-ccv",
        action="store_true",
        help="Do not add client correlation value to requests",
    )
    parser.add_argument("--version", action="store_true", help="Display version information")
    parser.add_argument("--no-check-update", action="store_true", help="Do not check for update")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", default=None, help="Write logs to this file instead of the default location.")
    parser.add_argument("--verbose", action="store_true", help="Log at debug level.")
    return parser


def version_text(version: str, latest_version: str | None) -> str:
    lines = [
        f"Version: {version}",
        f"Python Version: {platform.python_version()}",
        f"OS: {platform.system().lower()}",
        f"Arch: {platform.machine()}",
    ]
    if latest_version:
        lines.append(f"New version available: {latest_version}")
    return "\n".join(lines)


def open_client(args: argparse.Namespace) -> KmipClient:
    """Connect with PyKMIP; imported lazily so the rest of the CLI stays light."""
    from .kmip.pykmip_client import connect

    return connect(args.addr, args.cert, args.key, args.ca or None, correlation=not args.no_ccv)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the explorer.

    Missing connection parameters print the usage and return normally.
    Connection or runtime failures print ``ERROR: ...`` and exit with status 1.
    """
    parser = build_parser(connection_defaults())
    args = parser.parse_args(argv)
    setup_logging(args.log_file, verbose=args.verbose)

    latest_version = None if args.no_check_update else check_latest_version(__version__)
    if args.version:
        print(version_text(__version__, latest_version))
        return

    if not (args.addr and args.cert and args.key):
        print(MISSING_ARGUMENTS, file=sys.stderr)
        parser.print_help(sys.stderr)
        return

    theme_name = args.theme
    if theme_name:
        theme_name = normalize_theme_name(theme_name)
        save_theme_name(theme_name)
    else:
        theme_name = load_theme_name()

    try:
        client = open_client(args)
    except ExplorerError as exc:
        logger.error("connection failed: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    options = ExplorerOptions(
        version=__version__,
        latest_version=latest_version,
        theme_name=theme_name,
        no_color=args.no_color,
    )
    try:
        run_explorer(client, options)
    except ExplorerError as exc:
        logger.error("explorer failed: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    finally:
        client.close()


if __name__ == "__main__":
    main()
