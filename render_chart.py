#!/usr/bin/env python3
"""
Render the US GDP bar chart to a file without starting the web server.

Fetches the GDP document once, draws it, and writes either the bare SVG or
a standalone HTML page (title + chart + hidden tooltip element).

Usage:
    python render_chart.py                          # SVG to stdout
    python render_chart.py -o gdp.svg               # SVG to a file
    python render_chart.py --format html -o gdp.html
    python render_chart.py --width 1000 --height 600 --padding 80
    python render_chart.py --retries 3 --timeout 20

Exit status is 1 when the data could not be fetched or decoded.
"""

from __future__ import annotations

import argparse
import html
import logging
import sys
from pathlib import Path

from chart.loader import DataLoader
from chart.pipeline import ChartPipeline
from utils.config import GDP_DATA_URL, ChartConfig
from utils.http import RetryStrategy, SessionManager

logger = logging.getLogger("render_chart")


def render_page(pipeline: ChartPipeline) -> str:
    """Standalone HTML page equivalent to the web app's index."""
    title = html.escape(pipeline.config.title)
    if pipeline.error is not None:
        body = f'<p style="color: red">{html.escape(pipeline.error)}</p>'
    else:
        body = pipeline.surface.to_html()
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="en"><head><meta charset="utf-8"><title>{title}</title></head>\n'
        f'<body><div id="main"><h1 id="title">{title}</h1>{body}</div>'
        f"{pipeline.tooltip.to_html()}</body></html>\n"
    )


def run(args: argparse.Namespace) -> int:
    config = ChartConfig(width=args.width, height=args.height, padding=args.padding)
    config.validate()

    with SessionManager(retry_strategy=RetryStrategy(max_retries=args.retries)) as sessions:
        loader = DataLoader(url=args.url, session=sessions.session, timeout=args.timeout)
        pipeline = ChartPipeline(loader, config)
        result = pipeline.run()

    if not result.ok:
        print(f"Error: {result.error} ({result.detail})", file=sys.stderr)
        if args.format == "svg":
            return 1
    elif len(result.dataset) == 0:
        print("Error: the GDP dataset is empty", file=sys.stderr)
        return 1

    output = pipeline.surface.to_svg() + "\n" if args.format == "svg" else render_page(pipeline)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        logger.info("Wrote %s (%d bars)", args.output, len(pipeline.surface.rects()))
    else:
        sys.stdout.write(output)
    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fetch the US GDP dataset and render it as an SVG bar chart.",
    )
    parser.add_argument("--url", default=GDP_DATA_URL,
                        help="GDP JSON document (default: public freeCodeCamp dataset)")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Write to this file instead of stdout")
    parser.add_argument("--format", choices=("svg", "html"), default="svg",
                        help="Bare SVG or a standalone HTML page (default: svg)")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=500)
    parser.add_argument("--padding", type=int, default=100)
    parser.add_argument("--retries", type=int, default=0,
                        help="Retry attempts on connection errors and 5xx (default: 0)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Request timeout in seconds (default: none)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        return run(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
