"""Tests for wallosctl.client reads and entity writes."""

import pytest
import requests

from tests.fakes import FakeHttp, FakeResponse, read_envelope
from wallosctl.client import (
    CATEGORIES_PATH,
    CATEGORY_ENDPOINT,
    CURRENCIES_PATH,
    CURRENCY_ENDPOINT,
    HOUSEHOLD_ENDPOINT,
    PAYMENT_METHOD_ADD_ENDPOINT,
    PAYMENT_METHOD_ENDPOINT,
    SUBSCRIPTIONS_PATH,
    WallosClient,
    default_member_email,
)
from wallosctl.domain.models import SubscriptionFilters
from wallosctl.errors import NetworkError, ProtectedEntityError, RemoteValidationError


class TestReads:
    """Tests for the /api/ read endpoints."""

    def test_categories_use_api_key(self, client: WallosClient, http: FakeHttp) -> None:
        """Should send the API key and decode categories."""
        http.route("GET", CATEGORIES_PATH, read_envelope(categories=[{"id": 1, "name": "No category"}]))

        categories = client.get_categories()

        assert [c.name for c in categories] == ["No category"]
        (call,) = http.calls_to(CATEGORIES_PATH)
        assert call.params == {"api_key": "key-123"}
        assert call.timeout == 10.0

    def test_read_does_not_log_in(self, client: WallosClient, http: FakeHttp) -> None:
        """Should not need a session when an API key is configured."""
        http.route("GET", CATEGORIES_PATH, read_envelope(categories=[]))

        client.get_categories()

        assert http.calls_to("/login.php") == []

    def test_currencies_main_currency(self, client: WallosClient, http: FakeHttp) -> None:
        """Should expose the main currency id."""
        http.route(
            "GET",
            CURRENCIES_PATH,
            read_envelope(main_currency="2", currencies=[{"id": 2, "code": "EUR", "name": "Euro", "symbol": "€"}]),
        )

        currencies = client.get_currencies()

        assert currencies.main_currency_id == 2
        assert currencies.currencies[0].code == "EUR"

    def test_currencies_without_main_currency(self, client: WallosClient, http: FakeHttp) -> None:
        """Should reject a currencies payload with no main currency."""
        http.route("GET", CURRENCIES_PATH, read_envelope(currencies=[]))

        with pytest.raises(RemoteValidationError, match="main_currency"):
            client.get_currencies()

    def test_subscription_filters(self, client: WallosClient, http: FakeHttp) -> None:
        """Should encode filters as query parameters."""
        http.route(
            "GET",
            SUBSCRIPTIONS_PATH,
            read_envelope(subscriptions=[{"id": 3, "name": "Netflix", "price": 9.99}], notes=["converted"]),
        )

        listing = client.get_subscriptions(SubscriptionFilters(category_ids=(2, 3), state="active", sort="price"))

        assert listing.subscriptions[0].name == "Netflix"
        assert listing.notes == ["converted"]
        (call,) = http.calls_to(SUBSCRIPTIONS_PATH)
        assert call.params == {"category": "2,3", "state": "0", "sort": "price", "api_key": "key-123"}

    def test_read_failure_title(self, client: WallosClient, http: FakeHttp) -> None:
        """Should surface the backend title on failure."""
        http.route("GET", CATEGORIES_PATH, {"success": False, "title": "Invalid API key"})

        with pytest.raises(RemoteValidationError, match="Categories API error: Invalid API key"):
            client.get_categories()

    def test_http_error_with_title(self, client: WallosClient, http: FakeHttp) -> None:
        """Should map an error status with a title to RemoteValidationError."""
        http.route("GET", CATEGORIES_PATH, FakeResponse({"title": "Forbidden"}, status_code=403))

        with pytest.raises(RemoteValidationError, match="Forbidden"):
            client.get_categories()

    def test_http_error_without_title(self, client: WallosClient, http: FakeHttp) -> None:
        """Should map a bare error status to NetworkError."""
        http.route("GET", CATEGORIES_PATH, FakeResponse("<html>", status_code=500))

        with pytest.raises(NetworkError, match="HTTP 500"):
            client.get_categories()

    def test_timeout(self, client: WallosClient, http: FakeHttp) -> None:
        """Should map timeouts to NetworkError."""
        http.route("GET", CATEGORIES_PATH, requests.Timeout("slow"))

        with pytest.raises(NetworkError, match="timed out"):
            client.get_categories()

    def test_connection_error(self, client: WallosClient, http: FakeHttp) -> None:
        """Should map connection failures to NetworkError."""
        http.route("GET", CATEGORIES_PATH, requests.ConnectionError("refused"))

        with pytest.raises(NetworkError):
            client.get_categories()

    def test_non_json_body(self, client: WallosClient, http: FakeHttp) -> None:
        """Should reject HTML where JSON was expected."""
        http.route("GET", CATEGORIES_PATH, FakeResponse("<html>login</html>"))

        with pytest.raises(RemoteValidationError, match="non-JSON"):
            client.get_categories()

    def test_connection_check(self, client: WallosClient, http: FakeHttp) -> None:
        """Should report reachability as a bool."""
        http.route("GET", CATEGORIES_PATH, read_envelope(categories=[]), FakeResponse("<html>", status_code=500))

        assert client.test_connection() is True
        assert client.test_connection() is False


class TestProtectedCategory:
    """Tests for the default category guard."""

    @pytest.mark.parametrize("category_id", [1, "1"])
    def test_delete_default_category(self, client: WallosClient, http: FakeHttp, category_id: int) -> None:
        """Should refuse before any network call."""
        with pytest.raises(ProtectedEntityError, match=r"default category \(ID: 1\)"):
            client.delete_category(category_id)

        assert http.calls == []

    def test_edit_default_category(self, client: WallosClient, http: FakeHttp) -> None:
        """Should refuse to rename the default category."""
        with pytest.raises(ProtectedEntityError):
            client.update_category(1, "Other")

        assert http.calls == []

    def test_other_categories_allowed(self, client: WallosClient, http: FakeHttp) -> None:
        """Should delete any other category."""
        http.route("GET", CATEGORY_ENDPOINT, {"success": True, "message": "Category removed"})

        ack = client.delete_category(5)

        assert ack.ok is True
        call = http.calls_to(CATEGORY_ENDPOINT)[0]
        assert call.params == {"action": "delete", "categoryId": "5"}
        assert call.cookies == {"PHPSESSID": "sess-1"}


class TestEntityWrites:
    """Tests for category, payment method, currency and household writes."""

    def test_add_category(self, client: WallosClient, http: FakeHttp) -> None:
        """Should pass the name and return the ack with the new id."""
        http.route("GET", CATEGORY_ENDPOINT, {"success": True, "categoryId": 8})

        ack = client.add_category("Streaming")

        assert ack.entity_id("categoryId") == 8
        assert http.calls_to(CATEGORY_ENDPOINT)[0].params == {"action": "add", "name": "Streaming"}

    def test_add_category_failure(self, client: WallosClient, http: FakeHttp) -> None:
        """Should raise with the backend message."""
        http.route("GET", CATEGORY_ENDPOINT, {"success": False, "errorMessage": "Name taken"})

        with pytest.raises(RemoteValidationError, match="Failed to create category: Name taken"):
            client.add_category("Streaming")

    def test_writes_share_one_login(self, client: WallosClient, http: FakeHttp) -> None:
        """Should reuse the session across writes."""
        http.route("GET", CATEGORY_ENDPOINT, {"success": True, "categoryId": 8})
        http.route("GET", PAYMENT_METHOD_ADD_ENDPOINT, {"success": True, "payment_method_id": 4})

        client.add_category("Streaming")
        client.add_payment_method("PayPal")

        assert len(http.calls_to("/login.php")) == 1

    def test_payment_method_edit_and_delete(self, client: WallosClient, http: FakeHttp) -> None:
        """Should target the payment method endpoint."""
        http.route("GET", PAYMENT_METHOD_ENDPOINT, {"status": "Success"})

        client.update_payment_method(4, "Card")
        client.delete_payment_method(4)

        edit, delete = http.calls_to(PAYMENT_METHOD_ENDPOINT)
        assert edit.params == {"action": "edit", "paymentMethodId": "4", "name": "Card"}
        assert delete.params == {"action": "delete", "paymentMethodId": "4"}

    def test_add_known_currency(self, client: WallosClient, http: FakeHttp) -> None:
        """Should fill name and symbol from the known currency table."""
        http.route("GET", CURRENCY_ENDPOINT, {"success": True, "currency_id": 5})

        client.add_currency("eur")

        assert http.calls_to(CURRENCY_ENDPOINT)[0].params == {
            "action": "add",
            "code": "EUR",
            "name": "Euro",
            "symbol": "€",
        }

    def test_add_unknown_currency(self, client: WallosClient, http: FakeHttp) -> None:
        """Should use the code as name and symbol."""
        http.route("GET", CURRENCY_ENDPOINT, {"success": True, "currency_id": 6})

        client.add_currency("XYZ")

        params = http.calls_to(CURRENCY_ENDPOINT)[0].params
        assert params is not None
        assert params["name"] == "XYZ"
        assert params["symbol"] == "XYZ"

    def test_add_household_member_default_email(self, client: WallosClient, http: FakeHttp) -> None:
        """Should synthesize an email from the name."""
        http.route("GET", HOUSEHOLD_ENDPOINT, {"success": True, "household_member_id": 3})

        client.add_household_member("Jane Smith")

        params = http.calls_to(HOUSEHOLD_ENDPOINT)[0].params
        assert params == {"action": "add", "name": "Jane Smith", "email": "jane.smith@household.local"}

    def test_default_member_email_collapses_whitespace(self) -> None:
        """Should dot-join lower-cased words."""
        assert default_member_email("  Mary  Ann Lee ") == "mary.ann.lee@household.local"
