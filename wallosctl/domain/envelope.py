"""Decoding of Wallos response envelopes.

Read endpoints answer with ``{success, title, notes, <payload>}``.

Mutation endpoints come in two generations:
- legacy: keyed by a ``status`` string (``"Success"`` / ``"Error"``) plus ``message``
- current: keyed by a boolean ``success`` plus ``message`` or ``errorMessage``

Both are decoded once, here, into a ``MutationAck``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wallosctl.errors import RemoteValidationError


class AckConvention(str, Enum):
    """Which envelope generation an acknowledgement used."""

    STATUS = "status"
    SUCCESS_FLAG = "success"


@dataclass(frozen=True)
class MutationAck:
    """Decoded acknowledgement of a write."""

    convention: AckConvention
    ok: bool
    message: str | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def entity_id(self, *keys: str) -> int | None:
        """Return the first id found under ``keys``, if any."""
        for key in keys:
            value = self.raw.get(key)
            if value is None or value == "":
                continue
            try:
                return int(value)
            except (TypeError, ValueError) as e:
                raise RemoteValidationError(f"Acknowledgement field '{key}' is not an id: {value!r}") from e
        return None

    def raise_for_failure(self, action: str, entity: str) -> None:
        """Raise ``RemoteValidationError`` unless the backend signalled success."""
        if not self.ok:
            raise RemoteValidationError(f"Failed to {action} {entity}: {self.message or 'Unknown error'}", entity=entity)


def decode_ack(payload: Any) -> MutationAck:
    """Decode a mutation response in either envelope convention.

    Success is signalled by either ``status == "Success"`` or ``success is true``.

    Raises:
        RemoteValidationError: If the payload follows neither convention.
    """
    if not isinstance(payload, dict):
        raise RemoteValidationError(f"Invalid response format: expected an object, got {type(payload).__name__}")

    has_status = "status" in payload
    has_flag = "success" in payload
    if not has_status and not has_flag:
        raise RemoteValidationError("Invalid response format: neither 'status' nor 'success' present")

    status_ok = has_status and str(payload["status"]).strip().lower() == "success"
    flag_ok = has_flag and _truthy(payload["success"])
    ok = status_ok or flag_ok

    if ok:
        message = payload.get("message")
    else:
        message = payload.get("errorMessage") or payload.get("message") or payload.get("title")

    return MutationAck(
        convention=AckConvention.STATUS if has_status else AckConvention.SUCCESS_FLAG,
        ok=ok,
        message=None if message is None else str(message),
        raw=dict(payload),
    )


def check_read(payload: Any, resource: str) -> dict[str, Any]:
    """Validate a read envelope and return it.

    Raises:
        RemoteValidationError: If the payload is malformed or reports failure.
    """
    if not isinstance(payload, dict):
        raise RemoteValidationError(f"{resource} API returned an unexpected payload", entity=resource)
    if not _truthy(payload.get("success")):
        raise RemoteValidationError(f"{resource} API error: {payload.get('title') or 'Unknown error'}", entity=resource)
    return payload


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true")
    return value is True or value == 1
