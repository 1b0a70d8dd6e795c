"""Tests for geometric shapes."""

import pytest
from raycore.vec3 import Vec3, Point3, Color
from raycore.ray import Ray
from raycore.shapes import HitRecord, Sphere, HittableList
from raycore.materials import Lambertian


class TestHitRecord:
    """Test HitRecord face orientation."""

    def test_front_face(self):
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        rec = HitRecord(point=Point3(0, 0, 1), normal=Vec3(0, 0, 1), t=4.0)
        rec.set_face_normal(ray, Vec3(0, 0, 1))
        assert rec.front_face is True
        assert rec.normal == Vec3(0, 0, 1)

    def test_back_face_flips_normal(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        rec = HitRecord(point=Point3(0, 0, 1), normal=Vec3(0, 0, 1), t=1.0)
        rec.set_face_normal(ray, Vec3(0, 0, 1))
        assert rec.front_face is False
        assert rec.normal == Vec3(0, 0, -1)

    def test_normal_opposes_ray(self):
        for direction in (Vec3(0, 0, 1), Vec3(0, 0, -1), Vec3(1, 0.2, 0.3)):
            ray = Ray(Point3(0, 0, 0), direction)
            rec = HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 0, 1), t=1.0)
            rec.set_face_normal(ray, Vec3(0, 0, 1))
            assert ray.direction.dot(rec.normal) <= 0


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-6
        assert abs(hit.point.z - (-1.0)) < 1e-6

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

        assert hit.front_face is True
        assert hit.normal.z < 0

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_negative_radius_flips_orientation(self):
        sphere = Sphere(Point3(0, 0, 0), -1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        assert sphere.hit(Ray(Point3(0, 5, -5), Vec3(0, 0, 1)), 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0.001, float('inf')) is None

    def test_t_max_limits_hit(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        assert sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, 3.0) is None

    def test_t_min_skips_near_crossing(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 4.5, float('inf'))

        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-6
        assert hit.front_face is False

    def test_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 2)), 0.001, float('inf'))

        assert abs(hit.t - 2.0) < 1e-6
        assert hit.point == Point3(0, 0, -1)

    def test_hit_carries_material(self):
        material = Lambertian(Color(0.5, 0.5, 0.5))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert hit.material is material


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list_misses(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf')) is None

    def test_closest_hit_wins(self):
        far_mat = Lambertian(Color(1, 0, 0))
        near_mat = Lambertian(Color(0, 1, 0))
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -10), 1.0, far_mat))
        world.add(Sphere(Point3(0, 0, -4), 1.0, near_mat))

        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert hit.material is near_mat
        assert abs(hit.t - 3.0) < 1e-6

    def test_clear(self):
        world = HittableList([Sphere(Point3(0, 0, -4), 1.0)])
        world.clear()
        assert len(world) == 0

    def test_iteration(self):
        spheres = [Sphere(Point3(0, 0, -4), 1.0), Sphere(Point3(0, 0, -8), 1.0)]
        assert list(HittableList(spheres)) == spheres
