"""Subscription create/edit.

Builds the form the Wallos web UI posts, after resolving every referenced
entity and normalizing billing and dates, then re-reads the subscription so
callers get the backend's own view of the record.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Callable

from wallosctl.client import WallosClient
from wallosctl.dates import compute_payment_dates, local_today, normalize_date
from wallosctl.domain.billing import parse_billing_period
from wallosctl.domain.envelope import MutationAck
from wallosctl.domain.models import Cycle, Subscription
from wallosctl.errors import InvalidRequestError, UnknownEntityError
from wallosctl.resolver import EntityResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionInput:
    """Fields accepted by create and edit.

    ``None`` means "not supplied". Create requires ``name`` and ``price``;
    edit sends only the fields that are not ``None``.
    """

    name: str | None = None
    price: float | None = None
    currency_id: int | None = None
    currency_code: str | None = None
    billing_period: str | int | None = None
    billing_frequency: int | float | None = None
    category_name: str | None = None
    category_id: int | None = None
    payment_method_name: str | None = None
    payment_method_id: int | None = None
    payer_user_name: str | None = None
    payer_user_id: int | None = None
    start_date: str | None = None
    next_payment: str | None = None
    auto_renew: bool | None = None
    notes: str | None = None
    url: str | None = None
    notify: bool | None = None
    notify_days_before: int | None = None

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "SubscriptionInput":
        """Build from tool arguments, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidRequestError(f"Unknown subscription fields: {', '.join(unknown)}")
        return cls(**values)


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a subscription write."""

    ack: MutationAck
    subscription: Subscription

    def to_dict(self) -> dict[str, Any]:
        """The raw acknowledgement merged with the fresh record."""
        return {**self.ack.raw, "subscription": dict(self.subscription.raw)}


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SubscriptionService:
    """Creates and edits subscriptions against one client."""

    def __init__(
        self,
        client: WallosClient,
        resolver: EntityResolver | None = None,
        today: Callable[[], date] = local_today,
    ) -> None:
        self.client = client
        self.resolver = resolver or client.resolver
        self.today = today

    def create(self, request: SubscriptionInput) -> MutationResult:
        """Create a subscription, creating referenced entities as needed.

        Raises:
            InvalidRequestError: If name or price is missing.
            WallosError: On any resolution, submission or re-read failure.
        """
        if not request.name or not request.name.strip():
            raise InvalidRequestError("Subscription name is required")
        if request.price is None:
            raise InvalidRequestError("Subscription price is required")

        # Validate caller input before touching the network
        schedule = parse_billing_period(request.billing_period, request.billing_frequency)
        start, next_payment = compute_payment_dates(
            request.start_date, request.next_payment, schedule, today=self.today()
        )

        self.client.auth.ensure_session()

        currency_id = self.resolver.currency(code=request.currency_code, currency_id=request.currency_id)
        category_id = self.resolver.category(name=request.category_name, category_id=request.category_id)
        payment_method_id = self.resolver.payment_method(
            name=request.payment_method_name, payment_method_id=request.payment_method_id
        )
        payer_id = self.resolver.payer(name=request.payer_user_name, payer_id=request.payer_user_id)

        form = {
            "name": request.name.strip(),
            "price": _number(request.price),
            "currency_id": str(currency_id),
            "cycle": str(int(schedule.cycle)),
            "frequency": str(schedule.frequency),
            "payer_user_id": str(payer_id),
            "start_date": start.isoformat(),
            "next_payment": next_payment.isoformat(),
            "auto_renew": _flag(True if request.auto_renew is None else request.auto_renew),
        }
        if category_id is not None:
            form["category_id"] = str(category_id)
        if payment_method_id is not None:
            form["payment_method_id"] = str(payment_method_id)
        form.update(self._optional_fields(request))

        ack = self.client.submit_subscription(form)
        logger.info("Created subscription '%s'", form["name"])
        return MutationResult(ack=ack, subscription=self._latest_by_name(form["name"], ack))

    def edit(self, subscription_id: int, changes: SubscriptionInput) -> MutationResult:
        """Apply a partial update. Only supplied fields are sent.

        Raises:
            WallosError: On any resolution, submission or re-read failure.
        """
        form = {"id": str(subscription_id)}

        if changes.name is not None:
            form["name"] = changes.name
        if changes.price is not None:
            form["price"] = _number(changes.price)

        if changes.billing_period is not None:
            schedule = parse_billing_period(changes.billing_period, changes.billing_frequency)
            form["cycle"] = str(int(schedule.cycle))
            form["frequency"] = str(schedule.frequency)
        elif changes.billing_frequency is not None:
            form["frequency"] = str(parse_billing_period(Cycle.MONTHLY, changes.billing_frequency).frequency)

        if changes.start_date is not None:
            form["start_date"] = normalize_date(changes.start_date).isoformat()
        if changes.next_payment is not None:
            form["next_payment"] = normalize_date(changes.next_payment).isoformat()
        if changes.auto_renew is not None:
            form["auto_renew"] = _flag(changes.auto_renew)
        form.update(self._optional_fields(changes))

        self.client.auth.ensure_session()

        if changes.currency_id is not None or changes.currency_code:
            form["currency_id"] = str(self.resolver.currency(code=changes.currency_code, currency_id=changes.currency_id))
        if changes.category_name or changes.category_id is not None:
            category_id = self.resolver.category(name=changes.category_name, category_id=changes.category_id)
            form["category_id"] = str(category_id)
        if changes.payment_method_name or changes.payment_method_id is not None:
            payment_method_id = self.resolver.payment_method(
                name=changes.payment_method_name, payment_method_id=changes.payment_method_id
            )
            form["payment_method_id"] = str(payment_method_id)
        if changes.payer_user_name or changes.payer_user_id is not None:
            payer_id = self.resolver.payer(name=changes.payer_user_name, payer_id=changes.payer_user_id)
            form["payer_user_id"] = str(payer_id)

        ack = self.client.submit_subscription(form, edit=True)
        logger.info("Edited subscription %s (%d field(s))", subscription_id, len(form) - 1)
        return MutationResult(ack=ack, subscription=self._by_id(subscription_id, ack))

    @staticmethod
    def _optional_fields(request: SubscriptionInput) -> dict[str, str]:
        form = {}
        if request.notes is not None:
            form["notes"] = request.notes
        if request.url is not None:
            form["url"] = request.url
        if request.notify is not None:
            form["notify"] = _flag(request.notify)
        if request.notify_days_before is not None:
            form["notify_days_before"] = str(request.notify_days_before)
        return form

    def _latest_by_name(self, name: str, ack: MutationAck) -> Subscription:
        wanted = name.casefold()
        matches = [s for s in self.client.get_subscriptions().subscriptions if s.name.casefold() == wanted]
        if not matches:
            raise UnknownEntityError(
                f"Subscription '{name}' was created but could not be found afterwards", entity="subscription", ack=ack
            )
        return max(matches, key=lambda s: s.id)

    def _by_id(self, subscription_id: int, ack: MutationAck) -> Subscription:
        for subscription in self.client.get_subscriptions().subscriptions:
            if subscription.id == int(subscription_id):
                return subscription
        raise UnknownEntityError(
            f"Subscription {subscription_id} was updated but could not be found afterwards",
            entity="subscription",
            ack=ack,
        )
