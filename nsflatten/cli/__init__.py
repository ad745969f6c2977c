"""
Command-line interface package for nsflatten.

The entry point lives in ``nsflatten.cli_entry``; command handlers are in
``nsflatten.cli.commands`` and terminal rendering in ``rich_output``.
"""

__all__ = ["RichOutputManager", "get_rich_output", "set_rich_enabled"]


def __getattr__(name: str):
    if name in {"RichOutputManager", "get_rich_output", "set_rich_enabled"}:
        from . import rich_output

        return getattr(rich_output, name)

    raise AttributeError(name)
