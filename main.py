#!/usr/bin/env python3
"""
US GDP Bar Chart — serve the quarterly GDP bar chart as a web page.

The page fetches the freeCodeCamp GDP-data.json document once (on startup
unless --no-preload), draws one bar per quarter and shows a tooltip with the
year and GDP in billions of dollars.

Usage:
    python main.py                          # http://localhost:8000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 127.0.0.1         # bind to localhost only
    python main.py --url http://host/GDP-data.json
    python main.py --timeout 10 --retries 2 # bound and retry the data fetch
    python main.py --no-preload             # fetch on the first page view
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from collections.abc import MutableMapping

from utils.config import GDP_DATA_URL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve the US GDP bar chart web page.",
    )
    parser.add_argument(
        "--host", default="0.0.0.0",
        help="Bind address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--url", default=None,
        help="GDP JSON document to chart (default: GDP_DATA_URL env var or the public dataset)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Seconds to wait for the GDP document (default: GDP_FETCH_TIMEOUT, else no limit)",
    )
    parser.add_argument(
        "--retries", type=int, default=None,
        help="Retries on connection errors and 5xx responses (default: GDP_FETCH_RETRIES or 0)",
    )
    parser.add_argument(
        "--no-preload", action="store_true",
        help="Fetch the GDP data on the first request instead of at startup",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    return parser


def apply_settings(args: argparse.Namespace, environ: MutableMapping[str, str]) -> str:
    """Copy command-line overrides into *environ* and return the data URL.

    The app reads its settings from the environment at import time, so this
    must run before ``api.app`` is imported.
    """
    if args.url is not None:
        environ["GDP_DATA_URL"] = args.url
    if args.timeout is not None:
        environ["GDP_FETCH_TIMEOUT"] = str(args.timeout)
    if args.retries is not None:
        environ["GDP_FETCH_RETRIES"] = str(args.retries)
    if args.no_preload:
        environ["APP_PRELOAD"] = "0"
    return environ.get("GDP_DATA_URL", GDP_DATA_URL)


def main() -> None:
    args = build_parser().parse_args()
    data_url = apply_settings(args, os.environ)

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"US GDP Bar Chart: {url}")
    print(f"  GDP data:  {data_url}")
    print(f"  Fetch:     {'on first request' if args.no_preload else 'at startup'}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
