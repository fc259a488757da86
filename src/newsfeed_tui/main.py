#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .app import FeedApp
from .config import FeedSettings, load_config, load_settings, setup_logging
from .exceptions import InvalidConfigurationError
from .query import validate_base_url

logger = logging.getLogger("newsfeed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="newsfeed", description="Page through a news search API in the terminal"
    )
    parser.add_argument("--debug", action="store_true", help="Log debug output to /tmp")
    parser.add_argument("--log-file", help="Write the log to this file")
    parser.add_argument("--theme", help="Textual theme for this run")
    parser.add_argument(
        "--section",
        help="Start on a section, e.g. news, sport, culture (default: all)",
    )
    parser.add_argument("--api-key", help="Content API key")
    parser.add_argument("--base-url", help="Search endpoint to query")
    return parser


def resolve_settings(args: argparse.Namespace, config: dict) -> FeedSettings:
    """Config file settings with command-line overrides applied."""
    settings = load_settings(config)
    if args.api_key:
        settings = dataclasses.replace(settings, api_key=args.api_key)
    if args.base_url:
        settings = dataclasses.replace(
            settings, base_url=validate_base_url(args.base_url)
        )
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    log_path = setup_logging(args.debug, args.log_file)
    if log_path:
        print(f"Logging to {log_path}", file=sys.stderr)

    config = load_config()
    try:
        settings = resolve_settings(args, config)
    except InvalidConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logger.info("Feed endpoint %s, start section %s", settings.base_url, args.section or "all")
    app = FeedApp(
        settings,
        theme=args.theme or config.get("theme"),
        config=config,
        initial_section=args.section,
    )
    try:
        app.run()
    except Exception:
        logger.exception("Application crashed")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
