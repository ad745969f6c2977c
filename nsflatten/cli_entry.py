"""
Command-line interface for nsflatten

Converts namespaced global JavaScript modules to CommonJS from the command
line, with rich terminal summaries.
"""

import argparse
import logging
import sys
from typing import List, Optional

from nsflatten import __version__
from nsflatten.cli.commands import cmd_config, cmd_convert
from nsflatten.cli.rich_output import get_rich_output, set_rich_enabled
from nsflatten.config import ConfigurationError, load_config


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="nsflatten",
        description="nsflatten - Convert namespaced global JavaScript modules to CommonJS",
        epilog='Use "nsflatten <command> --help" for detailed command help.',
    )

    # Global options
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )

    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert", help="Convert JavaScript files or directories to CommonJS modules"
    )
    convert_parser.add_argument("paths", nargs="+", help="Files or directories to convert")
    convert_parser.add_argument(
        "--root",
        "-r",
        dest="roots",
        action="append",
        metavar="NAME",
        help="Namespace root to flatten (repeatable), e.g. --root my",
    )
    convert_parser.add_argument(
        "--source-root",
        help="Directory the namespace layout starts from; enables class flattening",
    )
    convert_parser.add_argument(
        "--class-name", help="Class name to export (defaults to each file's name)"
    )
    convert_parser.add_argument(
        "--no-export", action="store_true", help="Do not add a module.exports statement"
    )
    convert_parser.add_argument(
        "--no-class-flatten",
        action="store_true",
        help="Do not flatten the module's own namespaced class name",
    )
    convert_parser.add_argument(
        "--require",
        dest="requires",
        action="append",
        metavar="GLOBAL=MODULE",
        help="Add a require for a library global, e.g. --require jQuery=jquery",
    )
    convert_parser.add_argument("--output-dir", "-o", help="Write converted files here")
    convert_parser.add_argument(
        "--dry-run", action="store_true", help="Convert without writing any file"
    )
    convert_parser.add_argument(
        "--backup", action="store_true", help="Keep a .bak copy of every overwritten file"
    )
    convert_parser.add_argument(
        "--stdout", action="store_true", help="Print converted modules instead of writing them"
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_action")

    show_parser = config_subparsers.add_parser("show", help="Show current configuration")
    show_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )

    init_parser = config_subparsers.add_parser("init", help="Initialize configuration file")
    init_parser.add_argument(
        "--path", default="nsflatten.json", help="Path for configuration file"
    )
    init_parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Configuration file format",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    set_rich_enabled(not args.no_rich and sys.stdout.isatty())

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        get_rich_output().print_error(f"Invalid configuration: {e}")
        return 2

    if args.command == "config":
        return cmd_config(args, config)

    if args.command == "convert":
        return cmd_convert(args, config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
