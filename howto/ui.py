from typing import List, Sequence

from rich.console import Console
from rich.table import Table

from .providers import ProviderStatus

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Prints an error message on stderr."""
    err_console.print(f"✗ {message}", style="red", markup=False, highlight=False)


def print_info(message: str) -> None:
    console.print(f"ℹ {message}", style="cyan", markup=False, highlight=False)


def print_header(title: str) -> None:
    console.print(f"\n=== {title} ===\n", style="cyan", markup=False, highlight=False)


def print_table(headers: Sequence[str], rows: List[Sequence[str]]) -> None:
    """Prints a simple table."""
    table = Table(show_header=True, header_style="bold magenta", box=None, pad_edge=False)
    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*row)

    console.print(table)


def display_providers(providers: List[ProviderStatus]) -> None:
    """Displays every provider and whether it is ready to use."""
    print_header("Available Providers")

    headers = ["Provider", "Status", "Default Model", "Env Variable"]
    rows = []
    for provider in providers:
        status = "[green]Ready[/green]" if provider.configured else "[red]Not configured[/red]"
        rows.append([provider.name, status, provider.default_model, provider.env_var])

    print_table(headers, rows)
