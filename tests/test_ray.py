"""Tests for Ray class."""

import pytest
from pathforge.vec3 import Vec3, Point3
from pathforge.ray import Ray


class TestRayCreation:
    """Test Ray construction."""

    def test_stores_origin(self):
        origin = Point3(1, 2, 3)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.origin == origin

    def test_stores_direction(self):
        direction = Vec3(1, 2, 3)
        ray = Ray(Point3(0, 0, 0), direction)
        assert ray.direction == direction

    def test_direction_not_normalized(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -4))
        assert ray.direction.length() == 4.0

    def test_is_read_only(self):
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        with pytest.raises(AttributeError):
            ray.origin = Point3(1, 1, 1)


class TestRayAt:
    """Test Ray.at() method."""

    def test_at_zero(self):
        origin = Point3(1, 2, 3)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.at(0) == origin

    def test_at_positive(self):
        point = Ray(Point3(0, 0, 0), Vec3(1, 0, 0)).at(5)
        assert (point.x, point.y, point.z) == (5, 0, 0)

    def test_at_negative(self):
        point = Ray(Point3(0, 0, 0), Vec3(1, 0, 0)).at(-5)
        assert point.x == -5

    def test_at_scales_with_direction_length(self):
        point = Ray(Point3(1, 1, 1), Vec3(0, 2, 0)).at(1.5)
        assert point == Point3(1, 4, 1)


class TestRayRepr:
    """Test Ray string representation."""

    def test_repr(self):
        s = repr(Ray(Point3(1, 2, 3), Vec3(0, 1, 0)))
        assert "Ray" in s
        assert "origin" in s
        assert "direction" in s
