"""Command-line front door for devdash.

Parses CLI options, sets up file logging and launches a dashboard that
shows the built-in shortcuts tab.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .logsetup import DEFAULT_LOG_FILE, setup_logger
from .runtime.config import DashboardConfig, load_debug, load_theme_name, save_debug, save_theme_name
from .ui_theme import available_theme_names, normalize_theme_name

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tabbed terminal dashboard for developer tools.")
    parser.add_argument("--app-name", default="DevDash", help="Name shown in the header.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); remembered for next time.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show every log line as a new entry instead of updating lines in place; remembered for next time.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help=f"Diagnostics log file (default: {DEFAULT_LOG_FILE}).",
    )
    parser.add_argument("--log-level", default=None, help="Diagnostics log level (default: $DEVDASH_LOG_LEVEL or INFO).")
    parser.add_argument("--list-themes", action="store_true", help="Print available themes and exit.")
    return parser


def config_from_args(args: argparse.Namespace) -> DashboardConfig:
    """Merge CLI options over persisted preferences."""
    theme = args.theme if args.theme is not None else load_theme_name()
    debug = args.debug if args.debug is not None else load_debug()
    return DashboardConfig(
        app_name=args.app_name,
        theme=normalize_theme_name(theme),
        no_color=args.no_color,
        debug=bool(debug),
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.list_themes:
        sys.stdout.write("\n".join(available_theme_names()) + "\n")
        return

    setup_logger("devdash", args.log_level, args.log_file)
    config = config_from_args(args)
    if args.theme is not None:
        save_theme_name(config.theme or "")
    if args.debug is not None:
        save_debug(args.debug)

    from .runtime.app import DevDash

    logger.info("starting %s (theme=%s, debug=%s)", config.app_name, config.theme, config.debug)
    try:
        DevDash(config).run()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
