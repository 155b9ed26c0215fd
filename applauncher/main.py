#!/usr/bin/env python3
import argparse
import logging
import sys
import threading
from rich.console import Console
from rich.table import Table
from applauncher.core.context import build_context
from applauncher.core.errors import LaunchError
from applauncher.core.log_setup import set_level, setup_logging
from applauncher.discovery.registry import filter_records, find_by_name
from applauncher.shared.config_handler import ConfigHandler


def global_exception_handler(exc_type, exc_value, exc_traceback):
    """Logs uncaught exceptions, leaving KeyboardInterrupt to the default handler."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger = logging.getLogger("applauncher")
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback),
        extra={"thread_name": threading.current_thread().name},
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="applauncher",
        description="Search installed desktop applications and launch them.",
    )
    parser.add_argument(
        "--list",
        nargs="?",
        const="",
        metavar="TERM",
        help="Print the discovered applications (optionally only those whose name contains TERM) and exit.",
    )
    parser.add_argument(
        "--launch",
        metavar="NAME",
        help="Launch the application whose name matches NAME (case-insensitive) without opening the window.",
    )
    parser.add_argument(
        "--config", metavar="PATH", help="Use PATH instead of the default config.toml."
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log at DEBUG level."
    )
    return parser


def print_records(records, console=None) -> None:
    console = console or Console()
    table = Table(title=f"{len(records)} applications")
    table.add_column("Name")
    table.add_column("Command")
    table.add_column("Icon")
    for record in records:
        table.add_row(record.name, record.command, record.icon or "")
    console.print(table)


def run_headless(args, context) -> int:
    context.loader.load()
    records = context.registry.snapshot()
    if args.launch:
        record = find_by_name(records, args.launch)
        if record is None:
            context.logger.error(f"No application named '{args.launch}'")
            return 1
        try:
            context.runner.launch(record.command)
        except LaunchError as e:
            context.logger.error(str(e))
            return 1
        return 0
    print_records(filter_records(records, args.list))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(level=logging.DEBUG if args.debug else logging.INFO)
    sys.excepthook = global_exception_handler
    config_handler = ConfigHandler(logger, config_file=args.config)
    if not args.debug:
        set_level(config_handler.get_root_setting(["logging", "level"], "INFO"))

    if args.list is not None or args.launch:
        return run_headless(args, build_context(config_handler, logger))

    try:
        from applauncher.ui.window import LauncherApplication
    except (ImportError, ValueError):
        logger.critical("GTK 4 bindings are not available; install the 'gui' extra.", exc_info=True)
        return 1
    app = LauncherApplication(config_handler, logger)
    return app.run([sys.argv[0]])


if __name__ == "__main__":
    sys.exit(main())
