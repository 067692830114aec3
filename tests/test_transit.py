import logging
import math

import pytest

from salahtime.models import GeoCoordinate, SolarPosition, SolarWindow
from salahtime.transit import (
    AltitudeUnreachableError,
    altitude_of_celestial_body,
    approximate_transit,
    asr_altitude,
    corrected_hour_angle,
    corrected_transit,
    interpolate,
    interpolate_angles,
)

# Meeus, Astronomical Algorithms, example 15.a: Venus at Boston, 1988 March 20.
BOSTON = GeoCoordinate(lat=42.3333, lng=-71.0833)
SIDEREAL_TIME = 177.74208


@pytest.fixture
def venus_window():
    return SolarWindow(
        previous=SolarPosition(18.04761, 40.68021, SIDEREAL_TIME),
        current=SolarPosition(18.44092, 41.73129, SIDEREAL_TIME),
        following=SolarPosition(18.82742, 42.78204, SIDEREAL_TIME),
    )


def test_approximate_transit_meeus_example_15a():
    m0 = approximate_transit(BOSTON.lng, SIDEREAL_TIME, 41.73129)
    assert m0 == pytest.approx(0.81965, abs=1e-5)


def test_approximate_transit_is_a_day_fraction():
    for right_ascension in (0.0, 90.0, 200.0, 359.9):
        m0 = approximate_transit(-80.0, 300.0, right_ascension)
        assert 0.0 <= m0 < 1.0


def test_corrected_transit_meeus_example_15a(venus_window):
    m0 = approximate_transit(BOSTON.lng, SIDEREAL_TIME, 41.73129)
    assert corrected_transit(m0, BOSTON.lng, venus_window) / 24 == pytest.approx(
        0.81980, abs=1e-4
    )


def test_corrected_hour_angle_rising_meeus_example_15a(venus_window):
    m0 = approximate_transit(BOSTON.lng, SIDEREAL_TIME, 41.73129)
    rising = corrected_hour_angle(m0, -0.5667, BOSTON, False, venus_window)
    assert rising / 24 == pytest.approx(0.51766, abs=1e-4)


def test_setting_is_not_reduced_to_the_same_day(venus_window):
    m0 = approximate_transit(BOSTON.lng, SIDEREAL_TIME, 41.73129)
    setting = corrected_hour_angle(m0, -0.5667, BOSTON, True, venus_window)
    assert setting > 24


def test_interpolate_meeus_example_3a():
    # Earth–Moon distances, interpolated 4h21m past the middle value
    assert interpolate(0.877366, 0.884226, 0.870531, 0.18125) == pytest.approx(
        0.876125, abs=1e-6
    )


def test_interpolate_angles_crosses_zero():
    assert interpolate_angles(0.5, 359.5, 1.5, 0.5) == pytest.approx(1.0)
    # The unwrapped variant is wrong across the 360° boundary
    assert interpolate(0.5, 359.5, 1.5, 0.5) != pytest.approx(1.0)


def test_interpolate_angles_matches_plain_interpolation_away_from_wrap():
    assert interpolate_angles(41.73129, 40.68021, 42.78204, 0.3) == pytest.approx(
        interpolate(41.73129, 40.68021, 42.78204, 0.3)
    )


def test_altitude_of_celestial_body():
    assert altitude_of_celestial_body(0.0, 0.0, 0.0) == pytest.approx(90.0)
    assert altitude_of_celestial_body(45.0, 0.0, 90.0) == pytest.approx(0.0, abs=1e-9)
    assert altitude_of_celestial_body(45.0, 20.0, 0.0) == pytest.approx(65.0)


def test_unreachable_altitude_in_polar_day():
    window = SolarWindow(
        previous=SolarPosition(23.43, 89.0, 270.0),
        current=SolarPosition(23.44, 90.0, 270.0),
        following=SolarPosition(23.43, 91.0, 270.0),
    )
    arctic = GeoCoordinate(lat=70.0, lng=25.0)
    m0 = approximate_transit(arctic.lng, 270.0, 90.0)

    with pytest.raises(AltitudeUnreachableError) as excinfo:
        corrected_hour_angle(m0, -18.0, arctic, False, window)

    assert excinfo.value.ratio < -1
    assert excinfo.value.altitude == -18.0
    assert "polar day" in str(excinfo.value)


def test_unreachable_altitude_in_polar_night():
    window = SolarWindow(
        previous=SolarPosition(-23.43, 269.0, 90.0),
        current=SolarPosition(-23.44, 270.0, 90.0),
        following=SolarPosition(-23.43, 271.0, 90.0),
    )
    arctic = GeoCoordinate(lat=70.0, lng=25.0)
    m0 = approximate_transit(arctic.lng, 90.0, 270.0)

    with pytest.raises(AltitudeUnreachableError, match="polar night"):
        corrected_hour_angle(m0, -0.833, arctic, False, window)


def test_unreachable_error_names_the_event():
    error = AltitudeUnreachableError(-18.0, -2.1, event="fajr")
    assert error.event == "fajr"
    assert str(error).startswith("fajr: ")


def test_asr_altitude_standard_and_hanafi():
    assert asr_altitude(1.0, 20.0, 20.0) == pytest.approx(45.0)
    assert asr_altitude(2.0, 20.0, 20.0) == pytest.approx(math.degrees(math.atan(0.5)))
    # Shadow at noon equal to the object: altitude atan(1/2)
    assert asr_altitude(1.0, 45.0, 0.0) == pytest.approx(math.degrees(math.atan(0.5)))


def test_asr_altitude_when_sun_stays_below_horizon():
    with pytest.raises(AltitudeUnreachableError):
        asr_altitude(1.0, 70.0, -23.44)


def test_degenerate_derivative_skips_correction(caplog):
    # At the pole cos(lat) vanishes, so the Newton slope is ~1e-14
    pole = GeoCoordinate(lat=90.0, lng=0.0)
    sun = SolarPosition(10.0, 100.0, 50.0)
    window = SolarWindow(previous=sun, current=sun, following=sun)
    m0 = approximate_transit(pole.lng, sun.apparent_sidereal_time, sun.right_ascension)

    with caplog.at_level(logging.WARNING, logger="salahtime.transit"):
        hours = corrected_hour_angle(m0, 10.0, pole, True, window)

    assert hours == pytest.approx((m0 + 0.25) * 24)
    assert "degenerate derivative" in caplog.text
