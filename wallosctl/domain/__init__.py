"""Domain models and pure functions for wallosctl.

This package contains the functional core:
- Typed payload decoding
- Billing period normalization
- Response envelope decoding
- No network access, no console output
"""

from wallosctl.domain.billing import BillingSchedule, parse_billing_period
from wallosctl.domain.envelope import AckConvention, MutationAck, decode_ack
from wallosctl.domain.models import (
    Category,
    Currency,
    CurrencyList,
    Cycle,
    EntityId,
    HouseholdMember,
    MasterData,
    PaymentMethod,
    Subscription,
    SubscriptionFilters,
    SubscriptionList,
)

__all__ = [
    "AckConvention",
    "BillingSchedule",
    "Category",
    "Currency",
    "CurrencyList",
    "Cycle",
    "EntityId",
    "HouseholdMember",
    "MasterData",
    "MutationAck",
    "PaymentMethod",
    "Subscription",
    "SubscriptionFilters",
    "SubscriptionList",
    "decode_ack",
    "parse_billing_period",
]
