"""Command line entry point: ``sysmon serve`` and ``sysmon top``."""

import argparse
import logging
from collections.abc import Sequence

import uvicorn

from sysmon.api import build_cache, create_app
from sysmon.app import SysmonApp
from sysmon.config import Settings
from sysmon.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sysmon", description="System metrics monitor")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Serve the metrics HTTP API")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    subparsers.add_parser("top", help="Show the terminal dashboard")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)

    if args.command == "top":
        SysmonApp(build_cache(settings)).run()
        return

    setup_logging(settings.log_level)
    host = getattr(args, "host", settings.host)
    port = getattr(args, "port", settings.port)
    logger.info("Serving metrics API on http://%s:%d (%s)", host, port, settings.environment)
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
