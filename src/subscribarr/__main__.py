#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import Optional, Sequence

from subscribarr.bootstrap import bootstrap_base_env, bootstrap_run_context


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="subscribarr",
        description="Add recent uploads from your YouTube subscriptions to a playlist.",
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")

    # Keep imports inside builder to avoid early side effects.
    from subscribarr.cli.cli_auth import build_auth_parser
    from subscribarr.cli.cli_env import build_env_parser
    from subscribarr.cli.cli_sync import build_sync_parser

    build_sync_parser(sub)
    build_auth_parser(sub)
    build_env_parser(sub)

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    # Load .env and base environment early
    bootstrap_base_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "help":
        from subscribarr.cli.common import dispatch_subparser_help

        return dispatch_subparser_help(parser, list(args.path))

    # Stamp run context before logging so the log file lands in the right place
    bootstrap_run_context(
        command=args.command,
        playlist_id=getattr(args, "playlist_id", None),
        window_days=getattr(args, "days", None),
        dry_run=bool(getattr(args, "dry_run", False)),
        max_retries=getattr(args, "max_retries", None),
        verbose=getattr(args, "verbose", False) or None,
        quiet=getattr(args, "quiet", False) or None,
    )

    from subscribarr.logger import get_logger, init_logging

    logfile = init_logging()

    log = get_logger("subscribarr")
    log.debug(f"Command: {args.command} | log file: {logfile}")

    if args.command == "sync":
        from subscribarr.cli.cli_sync import handle_sync

        return handle_sync(args)

    if args.command == "auth":
        from subscribarr.cli.cli_auth import handle_auth

        return handle_auth(args)

    if args.command == "env":
        from subscribarr.cli.cli_env import handle_env

        return handle_env(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
