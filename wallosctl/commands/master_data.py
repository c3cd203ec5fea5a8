"""Master data and reference entity commands."""

import sys

from rich.columns import Columns
from rich.console import Console
from rich.table import Table

from wallosctl.client import WallosClient, client_from_settings
from wallosctl.config import load_settings
from wallosctl.domain.envelope import MutationAck
from wallosctl.domain.models import MasterData
from wallosctl.errors import WallosError

console = Console()


def _client() -> WallosClient:
    return client_from_settings(load_settings())


def _report(ack: MutationAck, fallback: str) -> None:
    console.print(f"[green]✓[/green] {ack.message or fallback}")


def render_master_data(data: MasterData) -> None:
    """Print every reference list side by side."""
    categories = Table(title=f"Categories ({len(data.categories)})")
    categories.add_column("ID", justify="right", style="dim")
    categories.add_column("Name")
    for category in data.categories:
        categories.add_row(str(category.id), category.name)

    currencies = Table(title=f"Currencies ({len(data.currencies.currencies)})")
    currencies.add_column("ID", justify="right", style="dim")
    currencies.add_column("Code", style="cyan")
    currencies.add_column("Symbol")
    for currency in data.currencies.currencies:
        code = currency.code
        if currency.id == data.currencies.main_currency_id:
            code = f"{code} [green](main)[/green]"
        currencies.add_row(str(currency.id), code, currency.symbol)

    methods = Table(title=f"Payment Methods ({len(data.payment_methods)})")
    methods.add_column("ID", justify="right", style="dim")
    methods.add_column("Name")
    for method in data.payment_methods:
        methods.add_row(str(method.id), method.name if method.enabled else f"[dim]{method.name}[/dim]")

    household = Table(title=f"Household ({len(data.household)})")
    household.add_column("ID", justify="right", style="dim")
    household.add_column("Name")
    household.add_column("Email", style="dim")
    for member in data.household:
        household.add_row(str(member.id), member.name, member.email)

    console.print(Columns([categories, currencies, methods, household]))
    console.print(f"[dim]Fetched at {data.fetched_at.isoformat(timespec='seconds')}[/dim]")


def master_data_command() -> None:
    """Show all master data."""
    try:
        data = _client().get_master_data()
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)

    render_master_data(data)


def add_category_command(name: str | None) -> None:
    try:
        ack = _client().add_category(name)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Category added (ID: {ack.entity_id('categoryId', 'id')})")


def rename_category_command(category_id: int, name: str) -> None:
    try:
        ack = _client().update_category(category_id, name)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Category {category_id} renamed to {name}")


def delete_category_command(category_id: int) -> None:
    try:
        ack = _client().delete_category(category_id)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Category {category_id} deleted")


def add_payment_method_command(name: str | None) -> None:
    try:
        ack = _client().add_payment_method(name)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Payment method added (ID: {ack.entity_id('payment_method_id', 'id')})")


def rename_payment_method_command(payment_method_id: int, name: str) -> None:
    try:
        ack = _client().update_payment_method(payment_method_id, name)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Payment method {payment_method_id} renamed to {name}")


def delete_payment_method_command(payment_method_id: int) -> None:
    try:
        ack = _client().delete_payment_method(payment_method_id)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Payment method {payment_method_id} deleted")


def add_currency_command(code: str, name: str | None, symbol: str | None) -> None:
    try:
        ack = _client().add_currency(code, name, symbol)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Currency {code.upper()} added (ID: {ack.entity_id('currency_id', 'id')})")


def add_member_command(name: str, email: str | None) -> None:
    try:
        ack = _client().add_household_member(name, email)
    except WallosError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]", style="bold")
        sys.exit(1)
    _report(ack, f"Household member {name} added (ID: {ack.entity_id('household_member_id', 'id')})")
