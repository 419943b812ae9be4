"""Input Validation — rejects registration numbers that cannot be looked up.

Invariants:
    - None, "" and whitespace-only values raise InvalidInputError
    - Accepted values are returned stripped; content is otherwise untouched
      (it only ever travels as a URL-encoded query value)
"""

from vehicle_relay.core.errors import InvalidInputError


def validate_registration_number(raw: str | None) -> str:
    """Return the cleaned registration number or raise InvalidInputError."""
    if raw is None or not raw.strip():
        raise InvalidInputError()
    return raw.strip()
