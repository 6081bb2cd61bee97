from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from flask import request

from ..core.exceptions import AuthorizationError, ValidationError
from ..providers.identity import IdentityProvider
from ..verification.proximity import GeoPoint
from .datetime_utils import parse_iso_datetime


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_identity(identity: IdentityProvider) -> str:
    address = identity.current_identity()
    if not address:
        raise AuthorizationError("No wallet connected")
    return address


def parse_datetime_field(data: dict, key: str) -> datetime:
    value = data.get(key)
    if not value or not isinstance(value, str):
        raise ValidationError(f"{key} is required")
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 timestamp")


def parse_location(data: Any, *, label: Optional[str] = None) -> GeoPoint:
    if not isinstance(data, dict):
        raise ValidationError("location is required")
    try:
        latitude = float(data["latitude"])
        longitude = float(data["longitude"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("location needs numeric latitude and longitude")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValidationError("location is out of range")
    return GeoPoint(latitude=latitude, longitude=longitude, label=label or data.get("address"))


def optional_int(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")
