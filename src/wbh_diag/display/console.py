"""Console output utilities using Rich."""

from typing import Optional
from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.theme import Theme

WBH_THEME = Theme({
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red bold",
    "muted": "dim",
    "header": "bold blue",
})


class Console:
    """Console output for the wbh-diag CLI."""

    def __init__(self, rich_console: Optional[RichConsole] = None):
        self._console = rich_console or RichConsole(theme=WBH_THEME)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def info(self, message: str, prefix: str = "INFO") -> None:
        """Print info message."""
        self._console.print(f"[info][{prefix}][/info] {message}")

    def success(self, message: str, prefix: str = "OK") -> None:
        """Print success message."""
        self._console.print(f"[success][{prefix}][/success] {message}")

    def warning(self, message: str, prefix: str = "WARN") -> None:
        """Print warning message."""
        self._console.print(f"[warning][{prefix}][/warning] {message}")

    def error(self, message: str, prefix: str = "ERROR") -> None:
        """Print error message."""
        self._console.print(f"[error][{prefix}][/error] {message}")

    def header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Print a section header."""
        self._console.print()
        self._console.print(f"[header]{title}[/header]")
        if subtitle:
            self._console.print(f"[muted]{subtitle}[/muted]")
        self._console.print()

    def status_panel(self, title: str, items: dict, style: str = "cyan") -> None:
        """Print a status panel with key-value pairs."""
        lines = []
        for key, value in items.items():
            lines.append(f"[bold]{key}:[/bold] {value if value is not None else '-'}")
        self._console.print(Panel("\n".join(lines), title=title, style=style, expand=False))


# Global console instance
console = Console()
