from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CheckoutStatusPolicy
from ..core.exceptions import ConfigurationError
from .strategies.base import CheckoutStatusStrategy
from .strategies.keep_strategy import KeepStatusStrategy
from .strategies.reevaluate_strategy import GeofenceReevaluateStrategy


@dataclass
class CheckoutStrategyFactory:
    """Factory Pattern: choose the checkout status strategy from configuration."""

    policy: CheckoutStatusPolicy = CheckoutStatusPolicy.REEVALUATE

    @classmethod
    def from_setting(cls, value: str) -> "CheckoutStrategyFactory":
        try:
            return cls(policy=CheckoutStatusPolicy(str(value).strip().lower()))
        except ValueError:
            raise ConfigurationError(f"Unknown checkout status policy: {value!r}") from None

    def for_checkout(self) -> CheckoutStatusStrategy:
        if self.policy == CheckoutStatusPolicy.KEEP:
            return KeepStatusStrategy()
        return GeofenceReevaluateStrategy()
