"""Configuration for the ray tracer, read from environment variables."""

import math
import os
from pathlib import Path

# Tolerance for approximate comparisons and surface offsets
EPSILON = 1e-6

# Shading
MAX_DEPTH = int(os.getenv("RAYTRACER_MAX_DEPTH", "5"))

# Rendering defaults
RENDER_WIDTH, RENDER_HEIGHT = tuple(
    map(int, os.getenv("RAYTRACER_RESOLUTION", "400,200").split(","))
)
FIELD_OF_VIEW = float(os.getenv("RAYTRACER_FOV", str(math.pi / 3.0)))

# Paths (created lazily when an image is written)
OUTPUT_DIR = Path(os.getenv("RAYTRACER_OUTPUT_DIR", "images"))

# Logging settings
LOG_LEVEL = os.getenv("RAYTRACER_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv(
    "RAYTRACER_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

__all__ = [
    "EPSILON",
    "MAX_DEPTH",
    "RENDER_WIDTH",
    "RENDER_HEIGHT",
    "FIELD_OF_VIEW",
    "OUTPUT_DIR",
    "LOG_LEVEL",
    "LOG_FORMAT",
]
