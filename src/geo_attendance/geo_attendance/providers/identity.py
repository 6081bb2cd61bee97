from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from flask import has_request_context, request


class IdentityProvider(Protocol):
    """Wallet layer: supplies the connected account address, if any."""

    def current_identity(self) -> Optional[str]:
        raise NotImplementedError


@dataclass
class StaticIdentityProvider(IdentityProvider):
    """Fixed identity, for scripts and tests."""

    address: Optional[str] = None

    def current_identity(self) -> Optional[str]:
        return self.address


class HeaderIdentityProvider(IdentityProvider):
    """Identity taken from the ``X-Wallet-Address`` header of the current Flask request."""

    HEADER = "X-Wallet-Address"

    def current_identity(self) -> Optional[str]:
        if not has_request_context():
            return None
        value = (request.headers.get(self.HEADER) or "").strip()
        return value or None
