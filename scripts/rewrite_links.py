#!/usr/bin/env python3
"""Run ad-hoc affiliate rewrites for debugging.

Codes are read from the environment, e.g. ``AFFILIATE_AMAZON_COM=mytag-20``.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from affiliate.document import rewrite_html
from affiliate.processor import apply

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rewrite merchant links with affiliate codes")
    parser.add_argument("urls", nargs="*", help="URLs to rewrite")
    parser.add_argument(
        "--html",
        type=Path,
        help="HTML fragment file whose anchors should be rewritten",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG shows every rewrite)",
    )
    return parser


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if not args.urls and args.html is None:
        parser.error("provide at least one URL or --html")
    for url in args.urls:
        print(apply(url))
    if args.html is not None:
        if not args.html.exists():
            LOGGER.error("Missing HTML file %s", args.html)
            return 1
        sys.stdout.write(rewrite_html(args.html.read_text(encoding="utf-8")))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
