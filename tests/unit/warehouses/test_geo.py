import math

import pytest

from modules.warehouses.geo import EARTH_RADIUS_KM, haversine_km

pytestmark = pytest.mark.unit

ONE_DEGREE_KM = EARTH_RADIUS_KM * math.pi / 180


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(49.009722, 2.547778, 49.009722, 2.547778) == 0.0

    def test_one_degree_along_equator(self):
        assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(ONE_DEGREE_KM)

    def test_one_degree_along_meridian(self):
        assert haversine_km(10.0, 5.0, 11.0, 5.0) == pytest.approx(ONE_DEGREE_KM)

    def test_symmetric(self):
        a = haversine_km(33.9425, -118.408056, 22.308889, 113.914444)
        b = haversine_km(22.308889, 113.914444, 33.9425, -118.408056)
        assert a == pytest.approx(b)

    def test_antipodal_points_are_half_the_circumference(self):
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(
            math.pi * EARTH_RADIUS_KM
        )

    def test_pole_to_pole(self):
        assert haversine_km(90.0, 0.0, -90.0, 0.0) == pytest.approx(
            math.pi * EARTH_RADIUS_KM
        )

    def test_crosses_antimeridian_the_short_way(self):
        assert haversine_km(0.0, 179.5, 0.0, -179.5) == pytest.approx(ONE_DEGREE_KM)

    def test_paris_to_new_york(self):
        km = haversine_km(49.009722, 2.547778, 40.639722, -73.778889)
        assert 5800 < km < 5900
