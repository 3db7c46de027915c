import os

GEOFENCE_TOLERANCE_METERS = float(os.getenv("GEOFENCE_TOLERANCE_METERS", "20"))
# reevaluate: checkout re-tests the position against the fence; keep: status from check-in stays
CHECKOUT_STATUS_POLICY = os.getenv("CHECKOUT_STATUS_POLICY", "reevaluate")

STALE_AFTER_MINUTES = int(os.getenv("STALE_AFTER_MINUTES", "10"))
LIVE_WINDOW_MINUTES = int(os.getenv("LIVE_WINDOW_MINUTES", "120"))
TRACKING_INTERVAL_SECONDS = float(os.getenv("TRACKING_INTERVAL_SECONDS", "15"))
POSITION_TIMEOUT_SECONDS = float(os.getenv("POSITION_TIMEOUT_SECONDS", "20"))
LIVE_REFRESH_SECONDS = float(os.getenv("LIVE_REFRESH_SECONDS", "10"))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "15"))

BLOB_ROOT = os.getenv("BLOB_ROOT", "var/blobs")
BLOB_BASE_URL = os.getenv("BLOB_BASE_URL", "/blobs")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
