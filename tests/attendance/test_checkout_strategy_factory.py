import pytest

from fieldforce.attendance.factory import CheckoutStrategyFactory
from fieldforce.attendance.strategies.base import StatusDecision
from fieldforce.attendance.strategies.keep_strategy import KeepStatusStrategy
from fieldforce.attendance.strategies.reevaluate_strategy import GeofenceReevaluateStrategy
from fieldforce.core.enums import AttendanceStatus
from fieldforce.core.exceptions import ConfigurationError
from fieldforce.geo.model import Coordinate, GeoFence


def test_default_policy_is_reevaluate():
    assert isinstance(CheckoutStrategyFactory().for_checkout(), GeofenceReevaluateStrategy)


@pytest.mark.parametrize("value", ["keep", " KEEP "])
def test_keep_from_setting(value):
    assert isinstance(CheckoutStrategyFactory.from_setting(value).for_checkout(), KeepStatusStrategy)


def test_unknown_policy_is_configuration_error():
    with pytest.raises(ConfigurationError):
        CheckoutStrategyFactory.from_setting("sometimes")


def test_reevaluate_inside_is_present():
    fence = GeoFence(center=Coordinate(0.0, 0.0), radius_meters=250)
    decision = GeofenceReevaluateStrategy().decide_checkout(
        current=AttendanceStatus.ON_FIELD,
        position=Coordinate(0.0, 0.0),
        fence=fence,
        tolerance_meters=20,
    )
    assert decision.status == AttendanceStatus.PRESENT


@pytest.mark.parametrize(
    "position,fence,note",
    [
        (None, GeoFence(center=Coordinate(0.0, 0.0), radius_meters=250), "checkout without position"),
        (Coordinate(0.0, 0.0), None, "checkout without geofence"),
    ],
)
def test_reevaluate_keeps_status_and_names_what_was_missing(position, fence, note):
    decision = GeofenceReevaluateStrategy().decide_checkout(
        current=AttendanceStatus.ON_FIELD,
        position=position,
        fence=fence,
        tolerance_meters=20,
    )
    assert decision == StatusDecision(status=AttendanceStatus.ON_FIELD, note=note)
