"""Environment-selected settings modules.

APP_ENV picks `development` (default), `production` or `testing`; every value
comes from the environment with a default in the module.
"""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from datetime import timedelta
from types import ModuleType
from typing import Optional



def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "fieldforce.config.production"

    if env in {"test", "testing"}:
        return "fieldforce.config.testing"

    return "fieldforce.config.development"


@dataclass(frozen=True)
class FieldForceSettings:
    """Tuning values of the attendance and tracking engine."""

    geofence_tolerance_meters: float = 20.0
    checkout_status_policy: str = "reevaluate"
    stale_after_minutes: int = 10
    live_window_minutes: int = 120
    tracking_interval_seconds: float = 15.0
    position_timeout_seconds: float = 20.0
    live_refresh_seconds: float = 10.0
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    ai_timeout_seconds: float = 15.0
    blob_root: str = "var/blobs"
    blob_base_url: str = "/blobs"

    @property
    def stale_after(self) -> timedelta:
        return timedelta(minutes=self.stale_after_minutes)

    @property
    def live_window(self) -> timedelta:
        return timedelta(minutes=self.live_window_minutes)

    @classmethod
    def from_module(cls, settings: ModuleType) -> "FieldForceSettings":
        defaults = cls()
        return cls(
            geofence_tolerance_meters=float(getattr(settings, "GEOFENCE_TOLERANCE_METERS", defaults.geofence_tolerance_meters)),
            checkout_status_policy=str(getattr(settings, "CHECKOUT_STATUS_POLICY", defaults.checkout_status_policy)),
            stale_after_minutes=int(getattr(settings, "STALE_AFTER_MINUTES", defaults.stale_after_minutes)),
            live_window_minutes=int(getattr(settings, "LIVE_WINDOW_MINUTES", defaults.live_window_minutes)),
            tracking_interval_seconds=float(
                getattr(settings, "TRACKING_INTERVAL_SECONDS", defaults.tracking_interval_seconds)
            ),
            position_timeout_seconds=float(
                getattr(settings, "POSITION_TIMEOUT_SECONDS", defaults.position_timeout_seconds)
            ),
            live_refresh_seconds=float(getattr(settings, "LIVE_REFRESH_SECONDS", defaults.live_refresh_seconds)),
            gemini_api_key=str(getattr(settings, "GEMINI_API_KEY", "") or ""),
            gemini_model=str(getattr(settings, "GEMINI_MODEL", defaults.gemini_model)),
            ai_timeout_seconds=float(getattr(settings, "AI_TIMEOUT_SECONDS", defaults.ai_timeout_seconds)),
            blob_root=str(getattr(settings, "BLOB_ROOT", defaults.blob_root)),
            blob_base_url=str(getattr(settings, "BLOB_BASE_URL", defaults.blob_base_url)),
        )


def load_settings(module_name: Optional[str] = None) -> ModuleType:
    return importlib.import_module(module_name or get_settings_module())
