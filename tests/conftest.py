"""Pytest configuration and shared fixtures."""

import math
import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from raytracer.materials import Material  # noqa: E402
from raytracer.world import default_world as build_default_world  # noqa: E402


@pytest.fixture
def default_world():
    """Two concentric spheres lit by a white point light at (-10, 10, -10)."""
    return build_default_world()


@pytest.fixture(scope="session")
def sqrt2_2():
    """sqrt(2) / 2, the recurring 45-degree component."""
    return math.sqrt(2.0) / 2.0


@pytest.fixture
def glass():
    """Fully transparent material with the refractive index of glass."""
    return Material(transparency=1.0, refractive_index=1.5)


@pytest.fixture
def temp_output_dir(tmp_path):
    """Provide a temporary directory for test outputs."""
    return tmp_path / "outputs"
