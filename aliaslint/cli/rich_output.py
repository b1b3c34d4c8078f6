"""
Rich terminal output utilities for the AliasLint CLI.

Provides terminal output with panels, tables and highlighted snippets, with a
plain-text mode for pipes and CI logs.
"""

from typing import Any, IO, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class RichOutputManager:
    """Manages rich terminal output with a plain-text mode."""

    def __init__(self, use_rich: bool = True, file: Optional[IO[str]] = None):
        """Initialize the output manager."""
        self.use_rich = use_rich
        if use_rich:
            self.console = Console(file=file)
        else:
            self.console = Console(
                file=file, no_color=True, highlight=False, markup=False, emoji=False
            )

    def print_plain(self, message: str) -> None:
        """Print text verbatim, without markup or highlighting."""
        self.console.print(Text(message))

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
                self.console.print(f"{subtitle}")
            self.console.print()

    def print_section(self, title: str) -> None:
        """Print a section separator."""
        if self.use_rich:
            self.console.rule(f"[bold]{title}[/bold]", style="blue")
        else:
            self.console.print(f"\n--- {title} ---")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {message}")
        else:
            self.console.print(f"✓ {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        if self.use_rich:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
        else:
            self.console.print(f"⚠ {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        if self.use_rich:
            self.console.print(f"[red]✗[/red] {message}")
        else:
            self.console.print(f"✗ {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        if self.use_rich:
            self.console.print(f"[blue]ℹ[/blue] {message}")
        else:
            self.console.print(f"ℹ {message}")

    def create_table(self, title: str, columns: List[str]) -> Table:
        """Create a table."""
        table = Table(title=title, show_header=True, header_style="bold blue" if self.use_rich else None)
        for column in columns:
            table.add_column(column)
        return table

    def add_table_row(self, table: Table, *values: Any) -> None:
        """Add a row to the table; cells are never parsed as markup."""
        table.add_row(*[Text(str(v)) for v in values])

    def print_table(self, table: Table) -> None:
        self.console.print(table)

    def print_code(self, code: str, language: str = "python", title: Optional[str] = None) -> None:
        """Print code with syntax highlighting."""
        if title:
            self.print_section(title)

        if self.use_rich:
            syntax = Syntax(code, language, theme="monokai", line_numbers=True)
            self.console.print(syntax)
        else:
            self.console.print(code)


# Global instance
rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
