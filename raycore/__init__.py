"""
raycore - The light-transport core of a Python ray tracer

Provides:
- A thin-lens camera with depth of field
- Lambertian, metal and dielectric materials
- A minimal sphere scene and a single-threaded path tracing driver
- JSON/YAML scene files
"""

__version__ = "0.1.0"
__author__ = "raycore Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .sampling import make_rng, spawn_rngs
from .shapes import HitRecord, Hittable, Sphere, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflectance
from .camera import Camera
from .renderer import Renderer, RenderSettings
from .scenes import random_scene, three_spheres
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
