"""Admin commands for config initialization and API key issuance."""

import sys

from rich.console import Console

from wallosctl.client import client_from_settings
from wallosctl.config import create_default_config, get_config_path, load_settings, save_api_key
from wallosctl.errors import WallosError

console = Console()


def init_command(force: bool = False) -> None:
    """Create the wallosctl config file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'wallosctl init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Config file created (permissions: 600)")
    console.print("\n[dim]Add your server URL and credentials under [server], or set WALLOS_* variables.[/dim]")


def api_key_command(save: bool = True) -> None:
    """Issue an API key through a login session and optionally store it."""
    try:
        settings = load_settings()
        if settings.api_key:
            console.print("[yellow]An API key is already configured[/yellow]")
            return
        api_key = client_from_settings(settings).auth.ensure_api_key()
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)

    if not save:
        console.print(api_key)
        return

    try:
        save_api_key(api_key)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] API key saved to {get_config_path()}")
