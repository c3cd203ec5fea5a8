"""Subscription commands (list, create, edit)."""

import sys
from typing import Any, NoReturn

from rich.console import Console
from rich.table import Table

from wallosctl.client import client_from_settings
from wallosctl.config import load_settings
from wallosctl.domain.models import Subscription, SubscriptionFilters
from wallosctl.errors import WallosError
from wallosctl.subscriptions import MutationResult, SubscriptionInput, SubscriptionService

console = Console()

CYCLE_LABELS = {1: "day", 2: "week", 3: "month", 4: "year"}


def format_billing(subscription: Subscription) -> str:
    """Format cycle/frequency as e.g. 'every 3 months'."""
    unit = CYCLE_LABELS.get(subscription.cycle or 0)
    if unit is None:
        return "-"
    frequency = subscription.frequency or 1
    if frequency == 1:
        return f"every {unit}"
    return f"every {frequency} {unit}s"


def render_subscription(subscription: Subscription) -> None:
    """Print one subscription as a key/value table."""
    table = Table(title=f"{subscription.name} (ID: {subscription.id})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    status = "[red]Inactive[/red]" if subscription.inactive else "[green]Active[/green]"
    table.add_row("Status", status)
    table.add_row("Price", f"{subscription.price:,.2f} (Currency ID: {subscription.currency_id})")
    table.add_row("Billing", format_billing(subscription))
    table.add_row("Next payment", subscription.next_payment or "-")
    table.add_row("Category", subscription.category_name or "-")
    table.add_row("Payment method", subscription.payment_method_name or "-")
    table.add_row("Payer", subscription.payer_user_name or "-")
    table.add_row("Auto-renew", "✓" if subscription.auto_renew else "✗")
    table.add_row("Notify", "✓" if subscription.notify else "✗")
    if subscription.url:
        table.add_row("URL", subscription.url)
    if subscription.notes:
        table.add_row("Notes", subscription.notes)

    console.print(table)


def render_result(result: MutationResult, verb: str) -> None:
    """Print the acknowledgement and the fresh record."""
    console.print(f"[green]✓[/green] Subscription {verb}", style="bold")
    if result.ack.message:
        console.print(f"[dim]{result.ack.message}[/dim]")
    render_subscription(result.subscription)


def fail(error: WallosError) -> NoReturn:
    """Print an engine error and exit."""
    console.print(f"[red]{error.kind}: {error.message}[/red]", style="bold")
    sys.exit(1)


def list_command(filters: SubscriptionFilters) -> None:
    """List subscriptions."""
    try:
        client = client_from_settings(load_settings())
        listing = client.get_subscriptions(filters)
    except WallosError as e:
        fail(e)

    if not listing.subscriptions:
        console.print("[yellow]No subscriptions found matching the specified filters[/yellow]")
        return

    table = Table(title=f"Subscriptions ({len(listing.subscriptions)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Price", justify="right")
    table.add_column("Billing")
    table.add_column("Next Payment", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Payer")
    table.add_column("Status", justify="center")

    for sub in listing.subscriptions:
        status = "[red]○[/red]" if sub.inactive else "[green]●[/green]"
        table.add_row(
            str(sub.id),
            sub.name,
            f"{sub.price:,.2f}",
            format_billing(sub),
            sub.next_payment or "-",
            sub.category_name or "-",
            sub.payer_user_name or "-",
            status,
        )

    console.print(table)

    for note in listing.notes:
        console.print(f"[dim]{note}[/dim]")


def create_command(values: dict[str, Any]) -> None:
    """Create a subscription from CLI options."""
    try:
        client = client_from_settings(load_settings())
        result = SubscriptionService(client).create(SubscriptionInput.from_mapping(values))
    except WallosError as e:
        fail(e)

    render_result(result, "created")


def edit_command(subscription_id: int, values: dict[str, Any]) -> None:
    """Edit a subscription, sending only the options that were given."""
    changes = {key: value for key, value in values.items() if value is not None}
    try:
        client = client_from_settings(load_settings())
        result = SubscriptionService(client).edit(subscription_id, SubscriptionInput.from_mapping(changes))
    except WallosError as e:
        fail(e)

    render_result(result, "updated")
