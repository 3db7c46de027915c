"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_GEOFENCE_TOLERANCE_METERS = 20.0
DEFAULT_STALE_AFTER_MINUTES = 10
DEFAULT_LIVE_WINDOW_MINUTES = 120

DEFAULT_TRACKING_INTERVAL_SECONDS = 15.0
DEFAULT_POSITION_TIMEOUT_SECONDS = 20.0
DEFAULT_LIVE_REFRESH_SECONDS = 10.0

DEFAULT_HISTORY_LIMIT = 15
DEFAULT_SESSION_DAYS = 7

VOUCHER_BUCKET = "expense-vouchers"
