"""CLI entry point for wallosctl."""

import typer

from wallosctl.commands.admin import api_key_command, init_command
from wallosctl.commands.master_data import (
    add_category_command,
    add_currency_command,
    add_member_command,
    add_payment_method_command,
    delete_category_command,
    delete_payment_method_command,
    master_data_command,
    rename_category_command,
    rename_payment_method_command,
)
from wallosctl.commands.subscriptions import create_command, edit_command, list_command
from wallosctl.domain.models import SubscriptionFilters
from wallosctl.logging_setup import configure_logging

app = typer.Typer(
    name="wallosctl",
    help="Manage subscriptions on a self-hosted Wallos instance",
    add_completion=False,
)

SORT_KEYS = (
    "name",
    "id",
    "next_payment",
    "price",
    "payer_user_id",
    "category_id",
    "payment_method_id",
    "inactive",
    "alphanumeric",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and resolution steps"),
) -> None:
    """Manage subscriptions on a self-hosted Wallos instance."""
    configure_logging("DEBUG" if verbose else None)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Create the wallosctl config file."""
    init_command(force)


@app.command(name="api-key")
def api_key(
    save: bool = typer.Option(True, help="Store the issued key in the config file"),
) -> None:
    """Issue an API key using your username and password."""
    api_key_command(save)


@app.command(name="master-data")
def master_data() -> None:
    """Show categories, currencies, payment methods and household members."""
    master_data_command()


@app.command(name="list")
def list_subscriptions(
    member: list[int] = typer.Option(None, "--member", help="Payer member ID (repeatable)"),
    category: list[int] = typer.Option(None, "--category", help="Category ID (repeatable)"),
    payment: list[int] = typer.Option(None, "--payment", help="Payment method ID (repeatable)"),
    state: str = typer.Option(None, "--state", help="'active' or 'inactive'"),
    sort: str = typer.Option(None, "--sort", help=f"Sort key: {', '.join(SORT_KEYS)}"),
    disabled_to_bottom: bool = typer.Option(None, "--disabled-to-bottom/--disabled-inline", help="Order inactive last"),
    convert_currency: bool = typer.Option(None, "--convert-currency/--no-convert-currency", help="Convert prices"),
) -> None:
    """List your subscriptions."""
    if state is not None and state not in ("active", "inactive"):
        raise typer.BadParameter("state must be 'active' or 'inactive'", param_hint="--state")
    if sort is not None and sort not in SORT_KEYS:
        raise typer.BadParameter(f"sort must be one of: {', '.join(SORT_KEYS)}", param_hint="--sort")

    filters = SubscriptionFilters(
        member_ids=tuple(member or ()),
        category_ids=tuple(category or ()),
        payment_method_ids=tuple(payment or ()),
        state=state,
        sort=sort,
        disabled_to_bottom=disabled_to_bottom,
        convert_currency=convert_currency,
    )
    list_command(filters)


@app.command()
def create(
    name: str,
    price: float,
    currency: str = typer.Option(None, "--currency", help="Currency code, e.g. EUR (default: main currency)"),
    currency_id: int = typer.Option(None, "--currency-id", help="Currency ID"),
    period: str = typer.Option(None, "--period", help="Billing period, e.g. 'monthly' or '3 months'"),
    frequency: int = typer.Option(None, "--frequency", help="Bill every N periods"),
    category: str = typer.Option(None, "--category", help="Category name (created if missing)"),
    category_id: int = typer.Option(None, "--category-id", help="Category ID"),
    payment_method: str = typer.Option(None, "--payment-method", help="Payment method name (created if missing)"),
    payment_method_id: int = typer.Option(None, "--payment-method-id", help="Payment method ID"),
    payer: str = typer.Option(None, "--payer", help="Household member name"),
    payer_id: int = typer.Option(None, "--payer-id", help="Household member ID"),
    start_date: str = typer.Option(None, "--start", help="Start date"),
    next_payment: str = typer.Option(None, "--next-payment", help="Next payment date"),
    auto_renew: bool = typer.Option(None, "--auto-renew/--no-auto-renew", help="Renew automatically"),
    notify: bool = typer.Option(None, "--notify/--no-notify", help="Send payment reminders"),
    notify_days_before: int = typer.Option(None, "--notify-days", help="Days before payment to notify"),
    notes: str = typer.Option(None, "--notes", help="Free-form notes"),
    url: str = typer.Option(None, "--url", help="Subscription URL"),
) -> None:
    """Create a subscription."""
    create_command(
        {
            "name": name,
            "price": price,
            "currency_code": currency,
            "currency_id": currency_id,
            "billing_period": period,
            "billing_frequency": frequency,
            "category_name": category,
            "category_id": category_id,
            "payment_method_name": payment_method,
            "payment_method_id": payment_method_id,
            "payer_user_name": payer,
            "payer_user_id": payer_id,
            "start_date": start_date,
            "next_payment": next_payment,
            "auto_renew": auto_renew,
            "notify": notify,
            "notify_days_before": notify_days_before,
            "notes": notes,
            "url": url,
        }
    )


@app.command()
def edit(
    subscription_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    price: float = typer.Option(None, "--price", help="New price"),
    currency: str = typer.Option(None, "--currency", help="Currency code"),
    currency_id: int = typer.Option(None, "--currency-id", help="Currency ID"),
    period: str = typer.Option(None, "--period", help="Billing period"),
    frequency: int = typer.Option(None, "--frequency", help="Bill every N periods"),
    category: str = typer.Option(None, "--category", help="Category name (created if missing)"),
    category_id: int = typer.Option(None, "--category-id", help="Category ID"),
    payment_method: str = typer.Option(None, "--payment-method", help="Payment method name (created if missing)"),
    payment_method_id: int = typer.Option(None, "--payment-method-id", help="Payment method ID"),
    payer: str = typer.Option(None, "--payer", help="Household member name"),
    payer_id: int = typer.Option(None, "--payer-id", help="Household member ID"),
    start_date: str = typer.Option(None, "--start", help="Start date"),
    next_payment: str = typer.Option(None, "--next-payment", help="Next payment date"),
    auto_renew: bool = typer.Option(None, "--auto-renew/--no-auto-renew", help="Renew automatically"),
    notify: bool = typer.Option(None, "--notify/--no-notify", help="Send payment reminders"),
    notify_days_before: int = typer.Option(None, "--notify-days", help="Days before payment to notify"),
    notes: str = typer.Option(None, "--notes", help="Free-form notes"),
    url: str = typer.Option(None, "--url", help="Subscription URL"),
) -> None:
    """Edit a subscription. Only the options you pass are changed."""
    edit_command(
        subscription_id,
        {
            "name": name,
            "price": price,
            "currency_code": currency,
            "currency_id": currency_id,
            "billing_period": period,
            "billing_frequency": frequency,
            "category_name": category,
            "category_id": category_id,
            "payment_method_name": payment_method,
            "payment_method_id": payment_method_id,
            "payer_user_name": payer,
            "payer_user_id": payer_id,
            "start_date": start_date,
            "next_payment": next_payment,
            "auto_renew": auto_renew,
            "notify": notify,
            "notify_days_before": notify_days_before,
            "notes": notes,
            "url": url,
        },
    )


@app.command(name="add-category")
def add_category(name: str = typer.Argument(None, help="Category name")) -> None:
    """Add a category."""
    add_category_command(name)


@app.command(name="rename-category")
def rename_category(category_id: int, name: str) -> None:
    """Rename a category."""
    rename_category_command(category_id, name)


@app.command(name="delete-category")
def delete_category(category_id: int) -> None:
    """Delete a category."""
    delete_category_command(category_id)


@app.command(name="add-payment-method")
def add_payment_method(name: str = typer.Argument(None, help="Payment method name")) -> None:
    """Add a payment method."""
    add_payment_method_command(name)


@app.command(name="rename-payment-method")
def rename_payment_method(payment_method_id: int, name: str) -> None:
    """Rename a payment method."""
    rename_payment_method_command(payment_method_id, name)


@app.command(name="delete-payment-method")
def delete_payment_method(payment_method_id: int) -> None:
    """Delete a payment method."""
    delete_payment_method_command(payment_method_id)


@app.command(name="add-currency")
def add_currency(
    code: str,
    name: str = typer.Option(None, "--name", help="Display name (default: known name or code)"),
    symbol: str = typer.Option(None, "--symbol", help="Symbol (default: known symbol or code)"),
) -> None:
    """Add a currency by ISO code."""
    add_currency_command(code, name, symbol)


@app.command(name="add-member")
def add_member(
    name: str,
    email: str = typer.Option(None, "--email", help="Email (default: synthesized from name)"),
) -> None:
    """Add a household member."""
    add_member_command(name, email)


if __name__ == "__main__":
    app()
