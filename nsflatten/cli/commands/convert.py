"""
Conversion command for nsflatten CLI.
"""

import logging
from typing import List

from nsflatten.api import NamespaceFlattener
from nsflatten.cli.rich_output import get_rich_output
from nsflatten.config import ConfigurationError, ConfigurationManager, NsFlattenConfig

logger = logging.getLogger(__name__)


def _parse_requires(values: List[str]) -> dict:
    requires = {}
    for value in values or []:
        identifier, sep, module_id = value.partition("=")
        if not sep or not identifier.strip() or not module_id.strip():
            raise ConfigurationError(f"--require expects GLOBAL=module, got '{value}'")
        requires[identifier.strip()] = module_id.strip()
    return requires


def apply_cli_overrides(config: NsFlattenConfig, args) -> NsFlattenConfig:
    """Command line flags win over file and environment configuration."""
    namespaces = config.namespace_settings
    if getattr(args, "roots", None):
        namespaces.namespace_roots = list(args.roots)
    if getattr(args, "no_export", False):
        namespaces.insert_export = False
    if getattr(args, "no_class_flatten", False):
        namespaces.flatten_class = False
    namespaces.global_requires.update(_parse_requires(getattr(args, "requires", None)))

    output = config.output_settings
    if getattr(args, "output_dir", None):
        output.output_directory = args.output_dir
    if getattr(args, "dry_run", False):
        output.dry_run = True
    if getattr(args, "backup", False):
        output.backup_enabled = True

    ConfigurationManager.validate_config(config.to_dict())
    return config


def cmd_convert(args, config: NsFlattenConfig) -> int:
    """Handle convert command. Returns the process exit code."""
    output = get_rich_output()

    try:
        config = apply_cli_overrides(config, args)
    except ConfigurationError as e:
        output.print_error(str(e))
        return 2

    if not config.namespace_settings.namespace_roots:
        output.print_warning("No namespace roots given, use --root to name at least one")

    flattener = NamespaceFlattener(config)

    if args.stdout:
        results = [
            flattener.convert_file(path, args.source_root, args.class_name)
            for path in flattener.collect_files(args.paths)
        ]
        for result in results:
            if result.success and result.output is not None and output.use_rich:
                output.print_code(result.output, "javascript", title=result.file_path)
            elif result.success and result.output is not None:
                # piped output must stay valid JavaScript
                print(result.output, end="")
            else:
                output.print_error(f"{result.file_path}: {'; '.join(result.errors)}")
        return 0 if all(r.success for r in results) else 1

    try:
        results = flattener.convert_paths(args.paths, args.source_root, args.class_name)
    except OSError as e:
        output.print_error(f"Writing failed, all changes rolled back: {e}")
        return 1

    if not results:
        output.print_warning("No JavaScript files found")
        return 0

    if config.output_settings.dry_run:
        output.print_info("Dry run: no files were written")
    output.print_conversion_summary(results)
    return 0 if all(r.success for r in results) else 1
