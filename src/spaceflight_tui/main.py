#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import SpaceflightApp
from .config import load_config, setup_logging
from .themes import load_themes

logger = logging.getLogger("spaceflight")


# --- Entrypoint ---
def main() -> None:
    config = load_config()
    available_themes = load_themes(config)

    parser = argparse.ArgumentParser(description="Spaceflight News TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--theme",
        type=str,
        help=f"Set theme for this run. Available: {', '.join(available_themes.keys())}",
    )
    parser.add_argument("--search", type=str, help="Search term for the first page")
    parser.add_argument(
        "--no-splash", action="store_true", help="Skip the splash animation"
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    theme_name = args.theme or config.get("theme") or "spaceflight-dark"
    if theme_name not in available_themes:
        print(
            f"Theme '{theme_name}' not found, falling back to spaceflight-dark.",
            file=sys.stderr,
        )
        theme_name = "spaceflight-dark"

    logger.info("Using theme: %s", theme_name)

    try:
        app = SpaceflightApp(
            theme=theme_name,
            config=config,
            search=args.search,
            splash=not args.no_splash,
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
