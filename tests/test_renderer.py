"""Tests for Renderer class."""

import pytest
import numpy as np
from PIL import Image

from raycore.vec3 import Vec3, Point3, Color
from raycore.ray import Ray
from raycore.camera import Camera
from raycore.shapes import Sphere, HittableList
from raycore.materials import Material, Lambertian, Metal, ScatterResult
from raycore.renderer import Renderer, RenderSettings


class Absorber(Material):
    """Material that absorbs every ray."""

    def scatter(self, ray_in, rec, rng):
        return None


class PassThrough(Material):
    """Material that continues the ray unchanged with a fixed tint."""

    def __init__(self, tint):
        self.tint = tint

    def scatter(self, ray_in, rec, rng):
        return ScatterResult(Ray(rec.point, ray_in.direction), self.tint)


def front_camera():
    return Camera(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=1.0
    )


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.width == 400
        assert settings.height == 225
        assert settings.samples_per_pixel == 100
        assert settings.max_depth == 50
        assert settings.gamma == 2.0
        assert settings.seed is None
        assert settings.background_color == Color(0, 0, 0)

    def test_custom_values(self):
        settings = RenderSettings(width=1920, height=1080, samples_per_pixel=500, max_depth=100)
        assert settings.width == 1920
        assert settings.height == 1080

    def test_aspect_ratio(self):
        assert RenderSettings(width=300, height=200).aspect_ratio == 1.5


class TestRendererBasic:
    """Test basic renderer functionality."""

    def test_render_produces_image(self):
        settings = RenderSettings(width=10, height=10, samples_per_pixel=1, max_depth=2, seed=0)
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -5), 1.0, Lambertian(Color(1, 0, 0))))

        image = Renderer(settings).render(world, front_camera())

        assert image.shape == (10, 10, 3)
        assert image.dtype == np.float64

    def test_non_square_image(self):
        settings = RenderSettings(width=6, height=4, samples_per_pixel=1, max_depth=1, seed=0)
        image = Renderer(settings).render(HittableList(), front_camera())
        assert image.shape == (4, 6, 3)

    def test_sky_gradient(self):
        settings = RenderSettings(width=10, height=10, samples_per_pixel=1, max_depth=1, seed=0)
        image = Renderer(settings).render(HittableList(), front_camera())

        # Row 0 is the top of the image, which looks further up the sky
        assert image[0, 5, 0] < image[9, 5, 0]
        assert image[0, 5, 2] == pytest.approx(1.0, abs=1e-12)

    def test_solid_background(self):
        settings = RenderSettings(
            width=10, height=10, samples_per_pixel=1, max_depth=1,
            use_sky_gradient=False, background_color=Color(0.1, 0.2, 0.3), seed=0
        )
        image = Renderer(settings).render(HittableList(), front_camera())

        assert np.allclose(image, [0.1, 0.2, 0.3])

    def test_same_seed_same_image(self):
        settings = RenderSettings(width=8, height=8, samples_per_pixel=2, max_depth=5, seed=123)
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -2), 1.0, Lambertian(Color(0.5, 0.5, 0.5))))
        world.add(Sphere(Point3(0, -101, -2), 100.0, Metal(Color(0.8, 0.8, 0.8), 0.3)))

        a = Renderer(settings).render(world, front_camera())
        b = Renderer(settings).render(world, front_camera())
        assert np.array_equal(a, b)


class TestRayColor:
    """Test Renderer.ray_color()."""

    def test_depth_exhausted_is_black(self):
        renderer = Renderer(RenderSettings())
        ray = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        color = renderer.ray_color(ray, HittableList(), 0, np.random.default_rng(0))
        assert color == Color(0, 0, 0)

    def test_miss_returns_sky(self):
        renderer = Renderer(RenderSettings())
        ray = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        color = renderer.ray_color(ray, HittableList(), 5, np.random.default_rng(0))
        assert color == Color(0.5, 0.7, 1.0)

    def test_absorbed_ray_is_black(self):
        renderer = Renderer(RenderSettings())
        world = HittableList([Sphere(Point3(0, 0, -3), 1.0, Absorber())])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        color = renderer.ray_color(ray, world, 5, np.random.default_rng(0))
        assert color == Color(0, 0, 0)

    def test_attenuation_multiplies_background(self):
        settings = RenderSettings(use_sky_gradient=False, background_color=Color(1, 1, 1))
        renderer = Renderer(settings)
        world = HittableList([Sphere(Point3(0, 0, -3), 1.0, PassThrough(Color(0.5, 0.25, 1.0)))])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        # Entering and leaving the sphere applies the tint twice
        color = renderer.ray_color(ray, world, 10, np.random.default_rng(0))
        assert color == Color(0.25, 0.0625, 1.0)

    def test_depth_bound_stops_bounces(self):
        settings = RenderSettings(use_sky_gradient=False, background_color=Color(1, 1, 1))
        renderer = Renderer(settings)
        world = HittableList([Sphere(Point3(0, 0, -3), 1.0, PassThrough(Color(0.5, 0.5, 0.5)))])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        # Two hits need three levels of depth to reach the background
        color = renderer.ray_color(ray, world, 2, np.random.default_rng(0))
        assert color == Color(0, 0, 0)

    def test_missing_material_shows_normal(self):
        renderer = Renderer(RenderSettings())
        world = HittableList([Sphere(Point3(0, 0, -3), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        color = renderer.ray_color(ray, world, 5, np.random.default_rng(0))
        assert color == Color(0.5, 0.5, 1.0)


class TestRendererProgress:
    """Test renderer progress reporting."""

    def test_progress_callback(self):
        settings = RenderSettings(width=10, height=10, samples_per_pixel=1, max_depth=1, seed=0)
        renderer = Renderer(settings)

        progress_values = []
        renderer.set_progress_callback(progress_values.append)
        renderer.render(HittableList(), front_camera())

        assert len(progress_values) == 10
        assert progress_values == sorted(progress_values)
        assert progress_values[-1] == 1.0


class TestImageOutput:
    """Test LDR conversion and saving."""

    def test_to_ldr_gamma(self):
        renderer = Renderer(RenderSettings(gamma=2.0))
        hdr = np.array([[[0.25, 1.0, 0.0]]])
        ldr = renderer.to_ldr(hdr)

        assert ldr.dtype == np.uint8
        assert ldr[0, 0].tolist() == [128, 255, 0]

    def test_to_ldr_clamps(self):
        renderer = Renderer(RenderSettings())
        ldr = renderer.to_ldr(np.array([[[-1.0, 5.0, 0.5]]]))
        assert ldr[0, 0, 0] == 0
        assert ldr[0, 0, 1] == 255

    @pytest.mark.parametrize("suffix", [".png", ".ppm"])
    def test_save_image(self, tmp_path, suffix):
        renderer = Renderer(RenderSettings())
        hdr = np.full((4, 6, 3), 0.25)
        path = tmp_path / f"out{suffix}"

        renderer.save_image(hdr, str(path))

        with Image.open(path) as img:
            assert img.size == (6, 4)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (128, 128, 128)
