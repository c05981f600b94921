"""Command-line entry point: resolve configuration and serve over stdio.

Usage:
    aistudio-mcp
    aistudio-mcp --env-file .env --log-level DEBUG
    aistudio-mcp --check-config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from aistudio_mcp.config import FrozenConfig, resolve_config
from aistudio_mcp.core.exceptions import ConfigurationError

log = logging.getLogger("aistudio_mcp")


def _configure_logging(level: str) -> None:
    # stdout carries the protocol stream; logs must go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def _log_config_summary(config: FrozenConfig) -> None:
    log.info("AI Studio MCP Server configuration:")
    for key, value in config.summary().items():
        log.info("- %s: %s", key, value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aistudio-mcp",
        description="Serve Gemini content generation as MCP tools over stdio",
    )
    parser.add_argument("--env-file", help="Load GEMINI_* settings from a .env file")
    parser.add_argument(
        "--log-level",
        help="Logging level (overrides GEMINI_LOG_LEVEL; default INFO)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Print the resolved configuration as JSON and exit "
        "(exit code 0=valid, 1=invalid)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the server; returns the process exit code."""
    args = build_parser().parse_args(argv)
    overrides = {"log_level": args.log_level} if args.log_level else None

    try:
        config = resolve_config(overrides, env_file=args.env_file)
    except ConfigurationError as e:
        _configure_logging("INFO")
        log.error("%s", e)
        return 1
    _configure_logging(config.log_level)

    if args.check_config:
        print(json.dumps(config.summary(), indent=2))  # noqa: T201
        return 0 if config.api_key else 1

    try:
        config.require_api_key()
    except ConfigurationError as e:
        log.error("%s", e)
        return 1

    _log_config_summary(config)

    from aistudio_mcp.server import AIStudioServer

    try:
        server = AIStudioServer(config)
    except Exception:
        log.exception("Failed to initialize server")
        return 1

    try:
        asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        log.info("Interrupted; shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
