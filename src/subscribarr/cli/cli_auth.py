from __future__ import annotations

import argparse

from rich.text import Text

from subscribarr import config
from subscribarr.auth import AuthHealthStatus, check
from subscribarr.cli.common import console
from subscribarr.env import get_env
from subscribarr.logger import get_logger


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_auth_parser(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser(
        "auth",
        help="Check OAuth health and reauthenticate if required",
    )

    auth.add_argument("--verbose", action="store_true", help="Verbose console output")
    auth.add_argument("--quiet", action="store_true", help="Suppress console output")
    auth.add_argument(
        "--provider",
        default="youtube",
        help="Auth provider to check (default: youtube)",
    )


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_auth(args: argparse.Namespace) -> int:
    logger = get_logger("subscribarr.auth")
    env = get_env()
    out = console()

    logger.debug(f"Checking auth provider: {args.provider}")
    try:
        result = check(args.provider)
    except ValueError as e:
        logger.error(str(e))
        return config.EXIT_CONFIG_ERROR

    if result.status == AuthHealthStatus.OK:
        if not env.quiet:
            msg = Text("OAuth OK", style="green")
            if env.verbose:
                msg.append(" (token valid and usable)", style="dim")
            out.print(msg)
        return config.EXIT_OK

    if result.status == AuthHealthStatus.OK_API_QUOTA:
        if not env.quiet:
            msg = Text("OAuth OK", style="green")
            msg.append(" (API quota exhausted)", style="yellow")
            out.print(msg)
        return config.EXIT_OK

    if not env.quiet:
        out.print(Text(result.message, style="red"))

    if result.status == AuthHealthStatus.AUTH_INVALID:
        return config.EXIT_AUTH_INVALID
    return config.EXIT_FAILED
