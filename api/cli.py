"""Command-line launcher: mirrors the board controller and serves the live view."""

import argparse
import os
from typing import List, Optional

import uvicorn

from infra.logger import configure_logging, get_logger
from infra.settings import Settings


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mirror a remote hex board and serve the live view.")
    parser.add_argument("--remote", default=defaults.remote_url, help=f"Board controller URL (default: {defaults.remote_url})")
    parser.add_argument("--poll-interval", type=float, default=defaults.poll_interval, help="Seconds between polls (default: %(default)s)")
    parser.add_argument("--host", default=defaults.host, help="Host to bind (default: %(default)s)")
    parser.add_argument("--port", type=int, default=defaults.port, help="Port for the API/view (default: %(default)s)")
    parser.add_argument("--log-level", default=defaults.log_level, help="Log level (default: %(default)s)")
    parser.add_argument(
        "--json-logs",
        dest="json_logs",
        action="store_true",
        default=defaults.log_json,
        help="Emit JSON log lines (default: %(default)s)",
    )
    parser.add_argument(
        "--no-json-logs",
        dest="json_logs",
        action="store_false",
        help="Emit plain text log lines",
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser(Settings.from_env()).parse_args(argv)

    # api.app builds its settings from the environment when uvicorn imports it
    os.environ.update(
        {
            "HEXBOARD_REMOTE_URL": args.remote,
            "HEXBOARD_POLL_INTERVAL": str(args.poll_interval),
            "HEXBOARD_HOST": args.host,
            "HEXBOARD_PORT": str(args.port),
            "HEXBOARD_LOG_LEVEL": args.log_level,
            "HEXBOARD_LOG_JSON": "1" if args.json_logs else "0",
        }
    )

    # Configure logging once at startup (console + file).
    configure_logging(level=args.log_level, json=args.json_logs)
    log = get_logger(__name__)

    log.info("Mirroring %s, view at http://%s:%d", args.remote, args.host, args.port)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
        log_config=None,  # keep the handlers configured above
    )
