"""
Rich terminal output utilities for nsflatten CLI.

Provides formatted terminal output with panels, tables and highlighted
JavaScript, with a plain text mode for ``--no-rich`` and piped output.
"""

import json
from typing import Any, Dict, List, Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table


class RichOutputManager:
    """Manages terminal output with rich formatting or plain text."""

    def __init__(self, use_rich: bool = True, console: Optional[Console] = None):
        self.use_rich = use_rich
        if console is not None:
            self.console = console
        elif use_rich:
            self.console = Console()
        else:
            self.console = Console(no_color=True, highlight=False, markup=False, emoji=False)

    def print_header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Print a formatted header."""
        if self.use_rich:
            if subtitle:
                header_text = f"[bold blue]{title}[/bold blue]\n[dim]{subtitle}[/dim]"
            else:
                header_text = f"[bold blue]{title}[/bold blue]"

            self.console.print(Panel(header_text, border_style="blue", padding=(1, 2)))
        else:
            self.console.print(f"\n=== {title} ===")
            if subtitle:
                self.console.print(subtitle)
            self.console.print()

    def print_section(self, title: str) -> None:
        """Print a section separator."""
        if self.use_rich:
            self.console.rule(f"[bold]{title}[/bold]", style="blue")
        else:
            self.console.print(f"\n--- {title} ---")

    def print_success(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {message}")
        else:
            self.console.print(f"OK {message}")

    def print_warning(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
        else:
            self.console.print(f"WARNING {message}")

    def print_error(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[red]✗[/red] {message}")
        else:
            self.console.print(f"ERROR {message}")

    def print_info(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[blue]ℹ[/blue] {message}")
        else:
            self.console.print(message)

    def create_table(self, title: str, columns: List[str]) -> Union[Table, Dict]:
        """Create a table; plain mode collects rows in a dict."""
        if self.use_rich:
            table = Table(title=title, show_header=True, header_style="bold blue")
            for column in columns:
                table.add_column(column)
            return table
        return {"title": title, "columns": columns, "rows": []}

    def add_table_row(self, table: Union[Table, Dict], *values) -> None:
        if isinstance(table, dict):
            table["rows"].append(values)
        else:
            table.add_row(*[str(v) for v in values])

    def print_table(self, table: Union[Table, Dict]) -> None:
        if not isinstance(table, dict):
            self.console.print(table)
            return

        self.console.print(f"\n{table['title']}")
        self.console.print("-" * len(table["title"]))

        header = " | ".join(table["columns"])
        self.console.print(header)
        self.console.print("-" * len(header))

        for row in table["rows"]:
            self.console.print(" | ".join(str(v) for v in row))
        self.console.print()

    def print_json(self, data: Any, title: Optional[str] = None) -> None:
        """Print JSON data with syntax highlighting."""
        if title:
            self.print_section(title)

        json_str = json.dumps(data, indent=2, default=str)
        if self.use_rich:
            self.console.print(Syntax(json_str, "json", theme="monokai", line_numbers=True))
        else:
            self.console.print(json_str)

    def print_code(self, code: str, language: str = "javascript", title: Optional[str] = None) -> None:
        """Print code with syntax highlighting."""
        if title:
            self.print_section(title)

        if self.use_rich:
            self.console.print(Syntax(code, language, theme="monokai", line_numbers=True))
        else:
            self.console.print(code)

    def print_conversion_summary(self, results: List[Any]) -> None:
        """Print one row per converted file and a totals line."""
        table = self.create_table(
            "Conversion Summary", ["File", "Status", "Requires", "Export", "Notes"]
        )
        for result in results:
            if not result.success:
                status = "failed"
            elif result.changed:
                status = "converted"
            else:
                status = "unchanged"
            requires = len(result.metadata.get("module_variable_ids", {}))
            export = "added" if result.metadata.get("export_added") else "-"
            notes = "; ".join(result.errors or result.warnings)
            self.add_table_row(table, result.file_path or "<source>", status, requires, export, notes)
        self.print_table(table)

        failed = sum(1 for r in results if not r.success)
        if failed:
            self.print_error(f"{failed} of {len(results)} files failed")
        else:
            self.print_success(f"{len(results)} files processed")


# Global instance
rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
