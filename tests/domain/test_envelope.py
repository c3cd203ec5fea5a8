"""Tests for wallosctl.domain.envelope."""

import pytest

from wallosctl.domain.envelope import AckConvention, check_read, decode_ack
from wallosctl.errors import RemoteValidationError


class TestDecodeAck:
    """Tests for decode_ack."""

    def test_status_success(self) -> None:
        """Should accept the legacy status string."""
        ack = decode_ack({"status": "Success", "message": "Subscription added"})

        assert ack.ok is True
        assert ack.convention is AckConvention.STATUS
        assert ack.message == "Subscription added"

    def test_success_flag(self) -> None:
        """Should accept the boolean success flag."""
        ack = decode_ack({"success": True, "message": "Category added", "categoryId": 7})

        assert ack.ok is True
        assert ack.convention is AckConvention.SUCCESS_FLAG
        assert ack.entity_id("categoryId") == 7

    def test_status_is_case_insensitive(self) -> None:
        """Should treat 'success' in any case as success."""
        assert decode_ack({"status": "success"}).ok is True

    def test_either_convention_signals_success(self) -> None:
        """Should succeed when only one of the two conventions says so."""
        assert decode_ack({"status": "Error", "success": True}).ok is True
        assert decode_ack({"status": "Success", "success": False}).ok is True

    def test_status_error_message(self) -> None:
        """Should carry the message of a legacy failure."""
        ack = decode_ack({"status": "Error", "message": "Name already exists"})

        assert ack.ok is False
        assert ack.message == "Name already exists"

    def test_error_message_field_preferred(self) -> None:
        """Should prefer errorMessage over message on failure."""
        ack = decode_ack({"success": False, "errorMessage": "Invalid price", "message": "Error"})

        assert ack.message == "Invalid price"

    def test_missing_both_conventions(self) -> None:
        """Should reject a payload following neither convention."""
        with pytest.raises(RemoteValidationError, match="Invalid response format"):
            decode_ack({"message": "?"})

    def test_non_object_payload(self) -> None:
        """Should reject lists and scalars."""
        with pytest.raises(RemoteValidationError):
            decode_ack(["Success"])


class TestMutationAck:
    """Tests for MutationAck helpers."""

    def test_raise_for_failure_message(self) -> None:
        """Should format the uniform failure message."""
        ack = decode_ack({"success": False, "errorMessage": "Duplicate"})

        with pytest.raises(RemoteValidationError, match="Failed to create category: Duplicate") as exc_info:
            ack.raise_for_failure("create", "category")

        assert exc_info.value.entity == "category"

    def test_raise_for_failure_without_message(self) -> None:
        """Should fall back to 'Unknown error'."""
        ack = decode_ack({"success": False})

        with pytest.raises(RemoteValidationError, match="Unknown error"):
            ack.raise_for_failure("edit", "subscription")

    def test_raise_for_failure_noop_on_success(self) -> None:
        """Should not raise for a successful ack."""
        decode_ack({"status": "Success"}).raise_for_failure("create", "category")

    def test_entity_id_first_present_key(self) -> None:
        """Should return the first key holding a value."""
        ack = decode_ack({"success": True, "id": "", "currency_id": "12"})

        assert ack.entity_id("id", "currency_id") == 12
        assert ack.entity_id("missing") is None

    def test_entity_id_not_numeric(self) -> None:
        """Should reject ids that aren't integers."""
        ack = decode_ack({"success": True, "id": "abc"})

        with pytest.raises(RemoteValidationError):
            ack.entity_id("id")


class TestCheckRead:
    """Tests for check_read."""

    def test_returns_successful_payload(self) -> None:
        """Should pass through a successful envelope."""
        payload = {"success": True, "categories": []}

        assert check_read(payload, "Categories") is payload

    def test_failure_uses_title(self) -> None:
        """Should surface the backend title."""
        with pytest.raises(RemoteValidationError, match="Categories API error: Invalid API key"):
            check_read({"success": False, "title": "Invalid API key"}, "Categories")

    def test_non_object(self) -> None:
        """Should reject non-object payloads."""
        with pytest.raises(RemoteValidationError):
            check_read("<html>", "Categories")
