from __future__ import annotations

import re

from ..core.constants import IDENTITY_ALPHABET, IDENTITY_LENGTH
from ..core.exceptions import ValidationError

_IDENTITY_RE = re.compile(rf"^[{IDENTITY_ALPHABET}]{{{IDENTITY_LENGTH}}}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_positive(value: float, field_name: str) -> float:
    if value is None or value <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return value


def is_plausible_identity(address: str | None) -> bool:
    """Weak identity sanity check: length and charset of a wallet address.

    This is not a security boundary. It only rejects strings that cannot be
    an account address at all; it proves nothing about who holds the key.
    """
    if not address:
        return False
    return bool(_IDENTITY_RE.match(address))
