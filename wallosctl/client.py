"""Wallos API interactions.

Reads go through the /api/ endpoints with an API key. Writes go through the
/endpoints/ pages the web UI uses and need a session cookie. Every payload is
decoded into the typed models before it leaves this module.
"""

import logging
from datetime import datetime
from typing import Any, Callable

from wallosctl.auth import Authenticator, Credentials
from wallosctl.domain.currencies import currency_defaults
from wallosctl.domain.envelope import MutationAck, check_read, decode_ack
from wallosctl.domain.models import (
    PROTECTED_CATEGORY_ID,
    Category,
    Currency,
    CurrencyList,
    EntityId,
    HouseholdMember,
    MasterData,
    PaymentMethod,
    Subscription,
    SubscriptionFilters,
    SubscriptionList,
    decode_items,
)
from wallosctl.errors import ProtectedEntityError, RemoteValidationError, WallosError
from wallosctl.resolver import EntityResolver
from wallosctl.transport import DEFAULT_TIMEOUT, Transport

CATEGORIES_PATH = "/api/categories/get_categories.php"
CURRENCIES_PATH = "/api/currencies/get_currencies.php"
PAYMENT_METHODS_PATH = "/api/payment_methods/get_payment_methods.php"
HOUSEHOLD_PATH = "/api/household/get_household.php"
SUBSCRIPTIONS_PATH = "/api/subscriptions/get_subscriptions.php"

CATEGORY_ENDPOINT = "/endpoints/categories/category.php"
PAYMENT_METHOD_ADD_ENDPOINT = "/endpoints/payments/add.php"
PAYMENT_METHOD_ENDPOINT = "/endpoints/payments/payment.php"
CURRENCY_ENDPOINT = "/endpoints/currency/currency.php"
HOUSEHOLD_ENDPOINT = "/endpoints/household/household.php"
SUBSCRIPTION_ADD_ENDPOINT = "/endpoints/subscription/add.php"
SUBSCRIPTION_EDIT_ENDPOINT = "/endpoints/subscription/edit.php"

HOUSEHOLD_EMAIL_DOMAIN = "household.local"

logger = logging.getLogger(__name__)


def default_member_email(name: str) -> str:
    """Synthesize an email for a household member created without one."""
    local_part = ".".join(name.lower().split())
    return f"{local_part}@{HOUSEHOLD_EMAIL_DOMAIN}"


def guard_category(category_id: int, action: str) -> None:
    """Refuse to touch the default category.

    Raises:
        ProtectedEntityError: If ``category_id`` is the default category.
    """
    if int(category_id) == PROTECTED_CATEGORY_ID:
        raise ProtectedEntityError(
            f"Cannot {action} the default category (ID: {PROTECTED_CATEGORY_ID})", entity="category"
        )


class WallosClient:
    """Client for a single Wallos instance."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http: Any = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.transport = Transport(base_url, timeout=timeout, http=http)
        self.auth = Authenticator(
            self.transport,
            Credentials(api_key=api_key, username=username, password=password),
            clock=clock,
        )
        self.resolver = EntityResolver(self)

    # Reads

    def _read(self, path: str, resource: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        api_key = self.auth.ensure_api_key()
        session = self.auth.session
        payload = self.transport.send_json(
            "GET",
            path,
            params={**(params or {}), "api_key": api_key},
            session_token=session.token if session else None,
        )
        return check_read(payload, resource)

    def get_categories(self) -> list[Category]:
        payload = self._read(CATEGORIES_PATH, "Categories")
        return decode_items(payload, "categories", Category.from_payload, "category")

    def get_currencies(self) -> CurrencyList:
        payload = self._read(CURRENCIES_PATH, "Currencies")
        main_currency = payload.get("main_currency")
        try:
            main_currency_id = EntityId(int(main_currency))
        except (TypeError, ValueError) as e:
            raise RemoteValidationError(
                f"Currencies payload has no usable main_currency: {main_currency!r}", entity="currency"
            ) from e
        return CurrencyList(
            main_currency_id=main_currency_id,
            currencies=decode_items(payload, "currencies", Currency.from_payload, "currency"),
        )

    def get_payment_methods(self) -> list[PaymentMethod]:
        payload = self._read(PAYMENT_METHODS_PATH, "Payment methods")
        return decode_items(payload, "payment_methods", PaymentMethod.from_payload, "payment method")

    def get_household(self) -> list[HouseholdMember]:
        payload = self._read(HOUSEHOLD_PATH, "Household")
        return decode_items(payload, "household", HouseholdMember.from_payload, "household member")

    def get_subscriptions(self, filters: SubscriptionFilters | None = None) -> SubscriptionList:
        params = filters.to_params() if filters else None
        payload = self._read(SUBSCRIPTIONS_PATH, "Subscriptions", params)
        notes = payload.get("notes") or []
        return SubscriptionList(
            subscriptions=decode_items(payload, "subscriptions", Subscription.from_payload, "subscription"),
            notes=[str(note) for note in notes] if isinstance(notes, list) else [str(notes)],
        )

    def get_master_data(self) -> MasterData:
        """Fetch categories, currencies, payment methods and household in one go."""
        return MasterData(
            categories=self.get_categories(),
            currencies=self.get_currencies(),
            payment_methods=self.get_payment_methods(),
            household=self.get_household(),
            fetched_at=datetime.now().astimezone(),
        )

    def test_connection(self) -> bool:
        """Check that the API answers with the configured credentials."""
        try:
            self.get_categories()
        except WallosError as e:
            logger.warning("Wallos connection check failed: %s", e.message)
            return False
        return True

    # Writes

    def _write(self, path: str, params: dict[str, Any], action: str, entity: str) -> MutationAck:
        session = self.auth.ensure_session()
        payload = self.transport.send_json("GET", path, params=params, session_token=session.token)
        ack = decode_ack(payload)
        ack.raise_for_failure(action, entity)
        return ack

    def add_category(self, name: str | None = None) -> MutationAck:
        params = {"action": "add"}
        if name:
            params["name"] = name
        return self._write(CATEGORY_ENDPOINT, params, "create", "category")

    def update_category(self, category_id: int, name: str) -> MutationAck:
        guard_category(category_id, "modify")
        params = {"action": "edit", "categoryId": str(category_id), "name": name}
        return self._write(CATEGORY_ENDPOINT, params, "update", "category")

    def delete_category(self, category_id: int) -> MutationAck:
        guard_category(category_id, "delete")
        params = {"action": "delete", "categoryId": str(category_id)}
        return self._write(CATEGORY_ENDPOINT, params, "delete", "category")

    def add_payment_method(self, name: str | None = None) -> MutationAck:
        params = {"action": "add"}
        if name:
            params["name"] = name
        return self._write(PAYMENT_METHOD_ADD_ENDPOINT, params, "create", "payment method")

    def update_payment_method(self, payment_method_id: int, name: str) -> MutationAck:
        params = {"action": "edit", "paymentMethodId": str(payment_method_id), "name": name}
        return self._write(PAYMENT_METHOD_ENDPOINT, params, "update", "payment method")

    def delete_payment_method(self, payment_method_id: int) -> MutationAck:
        params = {"action": "delete", "paymentMethodId": str(payment_method_id)}
        return self._write(PAYMENT_METHOD_ENDPOINT, params, "delete", "payment method")

    def add_currency(self, code: str, name: str | None = None, symbol: str | None = None) -> MutationAck:
        default_name, default_symbol = currency_defaults(code)
        params = {
            "action": "add",
            "code": code.strip().upper(),
            "name": name or default_name,
            "symbol": symbol or default_symbol,
        }
        return self._write(CURRENCY_ENDPOINT, params, "create", "currency")

    def add_household_member(self, name: str, email: str | None = None) -> MutationAck:
        params = {"action": "add", "name": name, "email": email or default_member_email(name)}
        return self._write(HOUSEHOLD_ENDPOINT, params, "create", "household member")

    def submit_subscription(self, form: dict[str, str], *, edit: bool = False) -> MutationAck:
        """Post a subscription form and decode the acknowledgement.

        Raises:
            RemoteValidationError: If the backend rejects the subscription.
        """
        session = self.auth.ensure_session()
        path = SUBSCRIPTION_EDIT_ENDPOINT if edit else SUBSCRIPTION_ADD_ENDPOINT
        payload = self.transport.send_json("POST", path, data=form, session_token=session.token)
        ack = decode_ack(payload)
        ack.raise_for_failure("edit" if edit else "create", "subscription")
        return ack


def client_from_settings(settings: Any, http: Any = None) -> WallosClient:
    """Build a client from resolved ``config.Settings``."""
    return WallosClient(
        base_url=settings.url,
        api_key=settings.api_key,
        username=settings.username,
        password=settings.password,
        timeout=settings.timeout,
        http=http,
    )
