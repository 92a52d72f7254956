#!/usr/bin/env python3
"""Enhancer Genie - Web entry point with structured logging."""

import argparse
import logging
from functools import partial
from pathlib import Path

import flet as ft

from .config.app_config import AppConfig
from .config.runtime import get_logs_dir

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Ensure structured logging is configured once for the web entry point."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Respect existing configuration (e.g., when invoked from tests)
        return

    logs_dir = get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(
        logs_dir / "enhancer_genie.log", encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Flet and urllib3 are chatty at DEBUG
    for name in ("flet", "flet_core", "flet_web", "urllib3"):
        logging.getLogger(name).setLevel(logging.INFO)


def main(page: ft.Page, config: AppConfig):
    """Main entry point for one browser session."""
    from .ui.main_gui import EnhancerGenieGUI

    try:
        logger.info("Initializing EnhancerGenieGUI for Flet page")
        app = EnhancerGenieGUI(page, config)
        logger.debug("EnhancerGenieGUI instantiated: %s", app)
    except Exception as e:
        logger.exception("Error while initializing the GUI page")
        page.add(ft.Text(f"Error loading application: {e}", color="red"))
        page.update()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Enhancer Genie web client')
    parser.add_argument('--port', type=int, default=None, help='Port to run on (default: 8080)')
    parser.add_argument('--no-browser', action='store_true', help='Run without opening a browser')
    parser.add_argument('--api-url', default=None, help='Base URL of the analysis API')
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Environment first, command line flags on top."""
    config = AppConfig.from_env(port=args.port, api_base_url=args.api_url)
    if args.no_browser:
        config.open_browser = False
    return config


def run(argv=None):
    _configure_logging()
    config = build_config(parse_args(argv))

    logger.info("Starting Enhancer Genie Web Application")
    logger.info(f"API: {config.api_base_url}")
    logger.info(f"Application will be served at http://localhost:{config.port}")

    Path(config.upload_dir).mkdir(parents=True, exist_ok=True)
    view_mode = ft.AppView.WEB_BROWSER if config.open_browser else None

    try:
        ft.app(
            target=partial(main, config=config),
            port=config.port,
            view=view_mode,
            upload_dir=config.upload_dir,
        )
    except Exception:
        logger.exception("Error starting web application")
        raise
    finally:
        from .ui.main_gui import shutdown
        shutdown()


if __name__ == "__main__":
    run()
