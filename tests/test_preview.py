"""Tests for the pygame preview window, run against SDL's dummy video driver."""

import pytest

pygame = pytest.importorskip("pygame")

from raytracer.canvas import Canvas  # noqa: E402
from raytracer.preview import canvas_to_surface, show  # noqa: E402
from raytracer.tuples import Color  # noqa: E402


@pytest.fixture(autouse=True)
def headless(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def canvas():
    c = Canvas(6, 4)
    c.write_pixel(5, 0, Color(1, 0, 0))
    c.write_pixel(0, 3, Color(0, 0, 1))
    return c


class TestPreview:

    def test_surface_matches_canvas(self, canvas):
        surface = canvas_to_surface(canvas)
        assert surface.get_size() == (6, 4)
        assert tuple(surface.get_at((5, 0)))[:3] == (255, 0, 0)
        assert tuple(surface.get_at((0, 3)))[:3] == (0, 0, 255)

    def test_show_runs_bounded_loop(self, canvas):
        show(canvas, title="test", max_frames=1)
        assert not pygame.get_init()
