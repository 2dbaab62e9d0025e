"""Tests for geometric shapes."""

import pytest
from pathforge.vec3 import Vec3, Point3, Colour
from pathforge.ray import Ray
from pathforge.shapes import HitRecord, Sphere, HittableList
from pathforge.materials import Lambertian, Metal


INF = float('inf')


class TestHitRecord:
    """Test face normal orientation."""

    def test_front_face(self):
        record = HitRecord(point=Point3(0, 0, -1), normal=Vec3(0, 0, 1), t=1.0)
        record.set_face_normal(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), Vec3(0, 0, 1))
        assert record.front_face is True
        assert record.normal == Vec3(0, 0, 1)

    def test_back_face_flips_normal(self):
        record = HitRecord(point=Point3(0, 0, -1), normal=Vec3(0, 0, 1), t=1.0)
        record.set_face_normal(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), Vec3(0, 0, 1))
        assert record.front_face is False
        assert record.normal == Vec3(0, 0, -1)


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0
        assert sphere.material is None

    def test_hit_distance_is_d_minus_r(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)

        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        assert hit.point == Point3(0, 0, -4)

    def test_t_measured_in_direction_units(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -2)), 0.001, INF)
        assert hit.t == pytest.approx(2.0)

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, INF)

        assert hit.front_face is True
        assert hit.normal == Vec3(0, 0, -1)

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0.001, INF)

        assert hit is not None
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_negative_radius_inverts_outward_normal(self):
        sphere = Sphere(Point3(0, 0, 0), -1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, INF)

        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        assert hit.front_face is False
        # Still faces the incoming ray
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 5, -5), Vec3(0, 0, 1)), 0.001, INF)
        assert hit is None

    def test_pointing_away(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0.001, INF)
        assert hit is None

    def test_t_min_is_exclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        # Near root is at exactly t=4, far root at t=6
        hit = sphere.hit(ray, 4.0, INF)
        assert hit is not None
        assert hit.t == pytest.approx(6.0)

    def test_t_max_is_inclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hit = sphere.hit(ray, 0.001, 4.0)
        assert hit is not None
        assert hit.t == pytest.approx(4.0)

    def test_both_roots_out_of_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, 3.0) is None
        assert sphere.hit(ray, 6.5, INF) is None

    def test_normal_is_unit_and_faces_ray(self, rng):
        sphere = Sphere(Point3(0, 0, 0), 1.5)
        hits = 0
        for _ in range(200):
            origin = Vec3.random_from_range(rng, -3, 3)
            direction = Vec3.random_unit_vector(rng)
            hit = sphere.hit(Ray(origin, direction), 0.001, INF)
            if hit is None:
                continue
            hits += 1
            assert abs(hit.normal.length() - 1.0) < 1e-9
            assert direction.dot(hit.normal) <= 0
        assert hits > 0

    def test_zero_radius_rejected(self):
        with pytest.raises(ValueError):
            Sphere(Point3(0, 0, 0), 0.0)

    def test_with_material(self):
        material = Lambertian(Colour(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, INF)
        assert hit.material is material


class TestHittableList:
    """Test HittableList aggregate."""

    def test_empty_list(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF) is None

    def test_add_and_clear(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -1), 0.5))
        world.add(Sphere(Point3(0, 0, -3), 0.5))
        assert len(world) == 2

        world.clear()
        assert len(world) == 0

    def test_iteration_preserves_order(self):
        a = Sphere(Point3(0, 0, -1), 0.5)
        b = Sphere(Point3(0, 0, -3), 0.5)
        world = HittableList([a, b])
        assert list(world) == [a, b]

    def test_closest_hit_wins_regardless_of_order(self):
        near = Sphere(Point3(0, 0, -2), 0.5, Lambertian(Colour(1, 0, 0)))
        far = Sphere(Point3(0, 0, -6), 0.5, Lambertian(Colour(0, 1, 0)))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for world in (HittableList([near, far]), HittableList([far, near])):
            hit = world.hit(ray, 0.001, INF)
            assert hit.t == pytest.approx(1.5)
            assert hit.material is near.material

    def test_equal_t_keeps_first_object(self):
        first = Lambertian(Colour(1, 0, 0))
        second = Metal(Colour(0, 1, 0))
        world = HittableList([
            Sphere(Point3(0, 0, -2), 0.5, first),
            Sphere(Point3(0, 0, -2), 0.5, second),
        ])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit.material is first

    def test_respects_t_max(self):
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0)])
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, 5.0) is None

    def test_nested_lists(self):
        inner = HittableList([Sphere(Point3(0, 0, -2), 0.5)])
        outer = HittableList([Sphere(Point3(0, 0, -10), 0.5), inner])

        hit = outer.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(1.5)

    def test_miss_everything(self):
        world = HittableList([Sphere(Point3(0, 0, -2), 0.5), Sphere(Point3(3, 0, -2), 0.5)])
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), 0.001, INF) is None
