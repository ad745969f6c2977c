"""
Configuration management commands for nsflatten CLI.
"""

from nsflatten.cli.rich_output import get_rich_output
from nsflatten.config import ConfigurationError, NsFlattenConfig


def cmd_config(args, config: NsFlattenConfig) -> int:
    """Handle config command."""
    output = get_rich_output()

    if args.config_action == "show":
        output.print_header("Current nsflatten Configuration")
        if args.format == "json":
            output.print_json(config.to_dict())
        else:
            output.print_info(config.get_config_summary())
        return 0

    if args.config_action == "init":
        try:
            NsFlattenConfig.default().to_file(args.path, args.format)
        except ConfigurationError as e:
            output.print_error(str(e))
            return 1
        output.print_success(f"Default configuration file created at {args.path}")
        output.print_info("Edit the file to customize your nsflatten settings.")
        return 0

    output.print_error("Specify a config action: show or init")
    return 2
