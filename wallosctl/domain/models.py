"""Typed views of Wallos payloads.

The backend is PHP: ids may arrive as strings, flags as 0/1 integers and
optional values as empty strings. Payloads are decoded here, at the network
boundary, so everything downstream works with plain dataclasses:
- Category, Currency, PaymentMethod, HouseholdMember: master data
- Subscription: one billing record
- Cycle: the backend's billing-unit ordinal
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Literal, NewType, TypeVar

from wallosctl.errors import RemoteValidationError

# Backend identifiers are positive integers
EntityId = NewType("EntityId", int)

# The default category, reserved by the backend
PROTECTED_CATEGORY_ID = EntityId(1)

SortKey = Literal[
    "name",
    "id",
    "next_payment",
    "price",
    "payer_user_id",
    "category_id",
    "payment_method_id",
    "inactive",
    "alphanumeric",
]

T = TypeVar("T")


class Cycle(IntEnum):
    """Billing unit, encoded as the ordinal the backend stores."""

    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3
    YEARLY = 4


def _require(payload: dict[str, Any], key: str, kind: str) -> Any:
    try:
        return payload[key]
    except KeyError as e:
        raise RemoteValidationError(f"{kind} payload is missing '{key}'", entity=kind) from e


def _as_int(value: Any, key: str, kind: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise RemoteValidationError(f"{kind} field '{key}' is not an integer: {value!r}", entity=kind) from e


def _as_optional_int(value: Any, key: str, kind: str) -> int | None:
    if value is None or value == "":
        return None
    return _as_int(value, key, kind)


def _as_float(value: Any, key: str, kind: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise RemoteValidationError(f"{kind} field '{key}' is not a number: {value!r}", entity=kind) from e


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on", "yes")
    return bool(value)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def decode_items(payload: dict[str, Any], key: str, factory: Callable[[dict[str, Any]], T], kind: str) -> list[T]:
    """Decode the list stored under ``key`` with ``factory``.

    Raises:
        RemoteValidationError: If the list or one of its items has the wrong shape.
    """
    items = payload.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise RemoteValidationError(f"{kind} payload field '{key}' is not a list", entity=kind)

    decoded = []
    for item in items:
        if not isinstance(item, dict):
            raise RemoteValidationError(f"{kind} entry is not an object: {item!r}", entity=kind)
        decoded.append(factory(item))
    return decoded


@dataclass(frozen=True)
class Category:
    """Subscription category."""

    id: EntityId
    name: str
    order: int = 0
    in_use: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Category":
        return cls(
            id=EntityId(_as_int(_require(payload, "id", "category"), "id", "category")),
            name=_as_text(_require(payload, "name", "category")),
            order=_as_optional_int(payload.get("order"), "order", "category") or 0,
            in_use=_as_flag(payload.get("in_use")),
        )


@dataclass(frozen=True)
class Currency:
    """Currency known to the backend."""

    id: EntityId
    name: str
    code: str
    symbol: str
    rate: str | None = None
    in_use: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Currency":
        return cls(
            id=EntityId(_as_int(_require(payload, "id", "currency"), "id", "currency")),
            name=_as_text(payload.get("name")),
            code=_as_text(_require(payload, "code", "currency")),
            symbol=_as_text(payload.get("symbol")),
            rate=None if payload.get("rate") is None else str(payload["rate"]),
            in_use=_as_flag(payload.get("in_use")),
        )


@dataclass(frozen=True)
class PaymentMethod:
    """Payment method such as a card or PayPal."""

    id: EntityId
    name: str
    icon: str = ""
    enabled: bool = True
    order: int = 0
    in_use: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PaymentMethod":
        return cls(
            id=EntityId(_as_int(_require(payload, "id", "payment method"), "id", "payment method")),
            name=_as_text(_require(payload, "name", "payment method")),
            icon=_as_text(payload.get("icon")),
            enabled=_as_flag(payload.get("enabled", 1)),
            order=_as_optional_int(payload.get("order"), "order", "payment method") or 0,
            in_use=_as_flag(payload.get("in_use")),
        )


@dataclass(frozen=True)
class HouseholdMember:
    """Household member who can pay for subscriptions."""

    id: EntityId
    name: str
    email: str = ""
    in_use: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "HouseholdMember":
        return cls(
            id=EntityId(_as_int(_require(payload, "id", "household member"), "id", "household member")),
            name=_as_text(_require(payload, "name", "household member")),
            email=_as_text(payload.get("email")),
            in_use=_as_flag(payload.get("in_use")),
        )


@dataclass(frozen=True)
class Subscription:
    """Subscription record as returned by the subscriptions read endpoint."""

    id: EntityId
    name: str
    price: float = 0.0
    currency_id: int | None = None
    cycle: int | None = None
    frequency: int | None = None
    category_id: int | None = None
    payment_method_id: int | None = None
    payer_user_id: int | None = None
    start_date: str = ""
    next_payment: str = ""
    auto_renew: bool = False
    notify: bool = False
    notify_days_before: int | None = None
    notes: str = ""
    url: str = ""
    inactive: bool = False
    category_name: str = ""
    payment_method_name: str = ""
    payer_user_name: str = ""
    replacement_subscription_id: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Subscription":
        kind = "subscription"
        return cls(
            id=EntityId(_as_int(_require(payload, "id", kind), "id", kind)),
            name=_as_text(_require(payload, "name", kind)),
            price=_as_float(payload.get("price", 0), "price", kind),
            currency_id=_as_optional_int(payload.get("currency_id"), "currency_id", kind),
            cycle=_as_optional_int(payload.get("cycle"), "cycle", kind),
            frequency=_as_optional_int(payload.get("frequency"), "frequency", kind),
            category_id=_as_optional_int(payload.get("category_id"), "category_id", kind),
            payment_method_id=_as_optional_int(payload.get("payment_method_id"), "payment_method_id", kind),
            payer_user_id=_as_optional_int(payload.get("payer_user_id"), "payer_user_id", kind),
            start_date=_as_text(payload.get("start_date")),
            next_payment=_as_text(payload.get("next_payment")),
            auto_renew=_as_flag(payload.get("auto_renew")),
            notify=_as_flag(payload.get("notify")),
            notify_days_before=_as_optional_int(payload.get("notify_days_before"), "notify_days_before", kind),
            notes=_as_text(payload.get("notes")),
            url=_as_text(payload.get("url")),
            inactive=_as_flag(payload.get("inactive")),
            category_name=_as_text(payload.get("category_name")),
            payment_method_name=_as_text(payload.get("payment_method_name")),
            payer_user_name=_as_text(payload.get("payer_user_name")),
            replacement_subscription_id=_as_optional_int(
                payload.get("replacement_subscription_id"), "replacement_subscription_id", kind
            ),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class CurrencyList:
    """Currencies plus the backend's configured main currency."""

    main_currency_id: EntityId
    currencies: list[Currency]


@dataclass(frozen=True)
class SubscriptionList:
    """Subscriptions read together with the backend's notes."""

    subscriptions: list[Subscription]
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MasterData:
    """All reference data in one snapshot."""

    categories: list[Category]
    currencies: CurrencyList
    payment_methods: list[PaymentMethod]
    household: list[HouseholdMember]
    fetched_at: datetime


@dataclass(frozen=True)
class SubscriptionFilters:
    """Filters accepted by the subscriptions read endpoint."""

    member_ids: tuple[int, ...] = ()
    category_ids: tuple[int, ...] = ()
    payment_method_ids: tuple[int, ...] = ()
    state: Literal["active", "inactive"] | None = None
    sort: SortKey | None = None
    disabled_to_bottom: bool | None = None
    convert_currency: bool | None = None

    def to_params(self) -> dict[str, str]:
        """Encode as query parameters, omitting unset filters."""
        params: dict[str, str] = {}
        if self.member_ids:
            params["member"] = ",".join(str(i) for i in self.member_ids)
        if self.category_ids:
            params["category"] = ",".join(str(i) for i in self.category_ids)
        if self.payment_method_ids:
            params["payment"] = ",".join(str(i) for i in self.payment_method_ids)
        if self.state is not None:
            params["state"] = "0" if self.state == "active" else "1"
        if self.sort is not None:
            params["sort"] = self.sort
        if self.disabled_to_bottom is not None:
            params["disabled_to_bottom"] = "true" if self.disabled_to_bottom else "false"
        if self.convert_currency is not None:
            params["convert_currency"] = "true" if self.convert_currency else "false"
        return params
