"""Resolution of name-or-id references into backend ids.

Each entity kind follows the same find-or-create sequence:
1. an explicit id is used as-is
2. a name is looked up case-insensitively in the full list
3. a name that isn't found is created, and the new id used

Category and payment method names win over a simultaneously supplied id.
Payers are never created: an unknown payer name falls back to the first
household member, the account's main user.

Each find-or-create runs under a lock keyed by entity kind and name, so two
concurrent resolutions of the same missing name create it once.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Protocol

from wallosctl.domain.envelope import MutationAck
from wallosctl.domain.models import EntityId
from wallosctl.errors import RemoteValidationError, UnknownEntityError

if TYPE_CHECKING:
    from wallosctl.client import WallosClient

logger = logging.getLogger(__name__)


class _Named(Protocol):
    id: EntityId
    name: str


def find_by_name(items: Iterable[_Named], name: str) -> EntityId | None:
    """Find the id of the first item whose name matches, ignoring case."""
    wanted = name.strip().casefold()
    for item in items:
        if item.name.strip().casefold() == wanted:
            return item.id
    return None


@dataclass
class _NamedLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class EntityResolver:
    """Turns entity references into ids, creating entities when missing.

    Each client owns one resolver (``WallosClient.resolver``) so every
    caller on that client shares the same named locks.
    """

    def __init__(self, client: "WallosClient") -> None:
        self.client = client
        self._locks: dict[tuple[str, str], _NamedLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _locked(self, kind: str, key: str) -> Iterator[None]:
        lock_key = (kind, key.strip().casefold())
        with self._locks_guard:
            entry = self._locks.setdefault(lock_key, _NamedLock())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            # Drop the lock once nobody holds or waits on it
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[lock_key]

    def _find_or_create(
        self,
        kind: str,
        key: str,
        find: Callable[[], EntityId | None],
        create: Callable[[], MutationAck],
        id_keys: tuple[str, ...],
    ) -> EntityId:
        with self._locked(kind, key):
            found = find()
            if found is not None:
                return found

            ack = create()
            new_id = ack.entity_id(*id_keys, "id")
            if new_id is None:
                # Some versions acknowledge without echoing the id
                new_id = find()
            if new_id is None:
                raise RemoteValidationError(f"Failed to create {kind}: no id returned for '{key}'", entity=kind)

            logger.info("Created %s '%s' (ID: %s)", kind, key, new_id)
            return EntityId(new_id)

    def category(self, name: str | None = None, category_id: int | None = None) -> EntityId | None:
        """Resolve a category reference. Returns None if neither is given."""
        if name:
            return self._find_or_create(
                "category",
                name,
                lambda: find_by_name(self.client.get_categories(), name),
                lambda: self.client.add_category(name),
                ("categoryId", "category_id"),
            )
        if category_id is not None:
            return EntityId(int(category_id))
        return None

    def payment_method(self, name: str | None = None, payment_method_id: int | None = None) -> EntityId | None:
        """Resolve a payment method reference. Returns None if neither is given."""
        if name:
            return self._find_or_create(
                "payment method",
                name,
                lambda: find_by_name(self.client.get_payment_methods(), name),
                lambda: self.client.add_payment_method(name),
                ("payment_method_id", "paymentMethodId"),
            )
        if payment_method_id is not None:
            return EntityId(int(payment_method_id))
        return None

    def currency_by_code(self, code: str) -> EntityId:
        """Resolve a currency code, creating the currency if missing."""
        normalized = code.strip().upper()

        def find() -> EntityId | None:
            for currency in self.client.get_currencies().currencies:
                if currency.code.strip().upper() == normalized:
                    return currency.id
            return None

        return self._find_or_create(
            "currency",
            normalized,
            find,
            lambda: self.client.add_currency(normalized),
            ("currency_id", "currencyId"),
        )

    def currency(self, code: str | None = None, currency_id: int | None = None) -> EntityId:
        """Resolve a currency: explicit id, else code, else the main currency."""
        if currency_id is not None:
            return EntityId(int(currency_id))
        if code:
            return self.currency_by_code(code)
        return self.client.get_currencies().main_currency_id

    def household_member(self, name: str, email: str | None = None) -> EntityId:
        """Resolve a household member by name, creating it if missing."""
        return self._find_or_create(
            "household member",
            name,
            lambda: find_by_name(self.client.get_household(), name),
            lambda: self.client.add_household_member(name, email),
            ("household_member_id", "householdMemberId"),
        )

    def payer(self, name: str | None = None, payer_id: int | None = None) -> EntityId:
        """Resolve the paying household member.

        A name that matches nobody falls back to the main user rather than
        creating a new member.

        Raises:
            UnknownEntityError: If the household has no members at all.
        """
        if not name and payer_id is not None:
            return EntityId(int(payer_id))

        members = self.client.get_household()
        if name:
            found = find_by_name(members, name)
            if found is not None:
                return found
            logger.info("Payer '%s' not found, using the main user", name)

        if not members:
            raise UnknownEntityError("Household has no members to use as payer", entity="household member")
        return members[0].id
