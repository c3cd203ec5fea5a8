"""Tests for wallosctl.domain.billing pure functions."""

import logging

import pytest

from wallosctl.domain.billing import PERIOD_ALIASES, BillingSchedule, parse_billing_period
from wallosctl.domain.models import Cycle
from wallosctl.errors import InvalidRequestError


class TestParseBillingPeriodAliases:
    """Tests for alias lookup."""

    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            ("daily", (Cycle.DAILY, 1)),
            ("d", (Cycle.DAILY, 1)),
            ("weekly", (Cycle.WEEKLY, 1)),
            ("bi-weekly", (Cycle.WEEKLY, 2)),
            ("fortnightly", (Cycle.WEEKLY, 2)),
            ("monthly", (Cycle.MONTHLY, 1)),
            ("m", (Cycle.MONTHLY, 1)),
            ("quarterly", (Cycle.MONTHLY, 3)),
            ("q", (Cycle.MONTHLY, 3)),
            ("semi-annually", (Cycle.MONTHLY, 6)),
            ("half-yearly", (Cycle.MONTHLY, 6)),
            ("yearly", (Cycle.YEARLY, 1)),
            ("annually", (Cycle.YEARLY, 1)),
            ("y", (Cycle.YEARLY, 1)),
        ],
    )
    def test_documented_aliases(self, period: str, expected: tuple[Cycle, int]) -> None:
        """Should map each documented alias to its cycle and multiplier."""
        assert parse_billing_period(period) == BillingSchedule(*expected)

    def test_every_alias_parses_without_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should recognize every entry of the alias table."""
        with caplog.at_level(logging.WARNING, logger="wallosctl.domain.billing"):
            for alias, (cycle, frequency) in PERIOD_ALIASES.items():
                assert parse_billing_period(alias) == (cycle, frequency)

        assert caplog.records == []

    def test_case_and_whitespace_insensitive(self) -> None:
        """Should normalize case and surrounding whitespace."""
        assert parse_billing_period("  Quarterly ") == (Cycle.MONTHLY, 3)

    def test_explicit_frequency_overrides_alias(self) -> None:
        """Should replace the multiplier implied by the alias."""
        assert parse_billing_period("quarterly", 2) == (Cycle.MONTHLY, 2)

    def test_cycle_is_plain_int_ordinal(self) -> None:
        """Should encode monthly as the backend ordinal 3."""
        schedule = parse_billing_period("monthly")

        assert int(schedule.cycle) == 3


class TestParseBillingPeriodQuantities:
    """Tests for '<N> <unit>' quantities."""

    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            ("3 months", (Cycle.MONTHLY, 3)),
            ("1 month", (Cycle.MONTHLY, 1)),
            ("2 weeks", (Cycle.WEEKLY, 2)),
            ("10 days", (Cycle.DAILY, 10)),
            ("2 years", (Cycle.YEARLY, 2)),
            ("6months", (Cycle.MONTHLY, 6)),
        ],
    )
    def test_quantities(self, period: str, expected: tuple[Cycle, int]) -> None:
        """Should use the unit as cycle and the number as frequency."""
        assert parse_billing_period(period) == expected

    def test_frequency_overrides_quantity(self) -> None:
        """Should prefer the explicit multiplier."""
        assert parse_billing_period("3 months", 4) == (Cycle.MONTHLY, 4)


class TestParseBillingPeriodFallbacks:
    """Tests for missing and unrecognized periods."""

    def test_no_period_is_monthly(self) -> None:
        """Should default to monthly x1."""
        assert parse_billing_period() == (Cycle.MONTHLY, 1)

    def test_no_period_keeps_frequency(self) -> None:
        """Should apply the multiplier to the monthly default."""
        assert parse_billing_period(None, 4) == (Cycle.MONTHLY, 4)

    def test_unrecognized_period_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should fall back to monthly x1 and log a warning instead of raising."""
        with caplog.at_level(logging.WARNING, logger="wallosctl.domain.billing"):
            schedule = parse_billing_period("not-a-period")

        assert schedule == (Cycle.MONTHLY, 1)
        assert 'Unable to parse billing period "not-a-period"' in caplog.text

    def test_zero_quantity_is_unrecognized(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should not accept '0 months'."""
        with caplog.at_level(logging.WARNING, logger="wallosctl.domain.billing"):
            assert parse_billing_period("0 months") == (Cycle.MONTHLY, 1)

        assert "defaulting to monthly" in caplog.text

    def test_unknown_unit_is_unrecognized(self) -> None:
        """Should fall back for units it doesn't know."""
        assert parse_billing_period("3 decades") == (Cycle.MONTHLY, 1)


class TestParseBillingPeriodOrdinals:
    """Tests for cycle ordinals passed directly."""

    @pytest.mark.parametrize("ordinal", [1, 2, 3, 4])
    def test_int_ordinal(self, ordinal: int) -> None:
        """Should use an in-range ordinal as the cycle."""
        assert parse_billing_period(ordinal) == (Cycle(ordinal), 1)

    def test_string_ordinal(self) -> None:
        """Should accept the ordinal as a digit string."""
        assert parse_billing_period("4", 2) == (Cycle.YEARLY, 2)

    def test_out_of_range_ordinal_falls_back(self) -> None:
        """Should treat ordinals outside 1-4 as unrecognized."""
        assert parse_billing_period(7) == (Cycle.MONTHLY, 1)

    def test_integral_float_ordinal(self) -> None:
        """Should accept whole-number floats from JSON callers."""
        assert parse_billing_period(4.0) == (Cycle.YEARLY, 1)

    @pytest.mark.parametrize("period", [2.5, 9.0, float("nan")])
    def test_other_floats_fall_back(self, period: float, caplog: pytest.LogCaptureFixture) -> None:
        """Should warn and fall back instead of raising."""
        with caplog.at_level(logging.WARNING, logger="wallosctl.domain.billing"):
            assert parse_billing_period(period) == (Cycle.MONTHLY, 1)

        assert "defaulting to monthly" in caplog.text


class TestParseBillingPeriodFrequencyValidation:
    """Tests for the explicit frequency argument."""

    @pytest.mark.parametrize("frequency", [0, -1, 2.5, True])
    def test_rejects_non_positive_or_non_integer(self, frequency: object) -> None:
        """Should reject bad multipliers with InvalidRequestError."""
        with pytest.raises(InvalidRequestError):
            parse_billing_period("monthly", frequency)  # type: ignore[arg-type]

    def test_accepts_integral_float(self) -> None:
        """Should treat 2.0 as 2."""
        schedule = parse_billing_period("weekly", 2.0)

        assert schedule == (Cycle.WEEKLY, 2)
        assert isinstance(schedule.frequency, int)
