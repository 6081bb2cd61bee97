"""Constants and defaults.

Note: Keep policy numbers here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

REQUIRED_ATTENDANCE_PERCENTAGE = 75
AT_RISK_FACTOR = 0.8
DEFAULT_LATE_THRESHOLD_MINUTES = 5

DEFAULT_ALLOWED_RADIUS_METERS = 50
DEFAULT_CHECK_IN_WINDOW_MINUTES = 10
DEFAULT_EXCUSE_DEADLINE_HOURS = 48

# Algorand-style account address: 58 chars of RFC 4648 base32.
IDENTITY_LENGTH = 58
IDENTITY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
