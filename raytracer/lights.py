from typing import TYPE_CHECKING, Callable, Iterator, Optional, Union

from raytracer.tuples import Color, Vec4, point

if TYPE_CHECKING:
    from raytracer.world import World


class PointLight:
    """Light from a single point: a point is either fully lit or in shadow."""

    def __init__(self, position: Vec4, intensity: Color):
        self.position = position
        self.intensity = intensity

    def samples(self) -> Iterator[Vec4]:
        yield self.position

    def intensity_at(self, p: Vec4, world: "World") -> float:
        """1.0 if p sees the light, 0.0 if it is shadowed."""
        return 0.0 if world.is_shadowed(p, self.position) else 1.0

    def __eq__(self, o) -> bool:
        if not isinstance(o, PointLight):
            return NotImplemented
        return self.position == o.position and self.intensity == o.intensity

    __hash__ = None

    def __repr__(self) -> str:
        return f"PointLight({self.position!r}, {self.intensity!r})"


class AreaLight:
    """
    Rectangular light made of usteps x vsteps cells, for soft shadows.

    Each cell contributes one sample point. Without a jitter source the
    sample is the cell centre; pass `jitter` (a zero-argument callable
    returning floats in [0, 1), e.g. random.random) to sample randomly
    inside each cell instead.

    Notes:
      - A jitter source makes renders non-deterministic unless it is seeded.
      - `position` is the centre of the rectangle (used where one point has
        to stand for the whole light).
    """

    def __init__(self, corner: Vec4, full_uvec: Vec4, usteps: int,
                 full_vvec: Vec4, vsteps: int, intensity: Color,
                 jitter: Optional[Callable[[], float]] = None):
        if usteps < 1 or vsteps < 1:
            raise ValueError("area light needs at least one step in each direction")
        self.corner = corner
        self.uvec = full_uvec / usteps
        self.usteps = usteps
        self.vvec = full_vvec / vsteps
        self.vsteps = vsteps
        self.samples_count = usteps * vsteps
        self.intensity = intensity
        self.jitter = jitter
        centre = corner + full_uvec / 2.0 + full_vvec / 2.0
        self.position = point(centre.x, centre.y, centre.z)

    def _offset(self) -> float:
        return 0.5 if self.jitter is None else self.jitter()

    def point_on_light(self, u: int, v: int) -> Vec4:
        return (self.corner
                + self.uvec * (u + self._offset())
                + self.vvec * (v + self._offset()))

    def samples(self) -> Iterator[Vec4]:
        for v in range(self.vsteps):
            for u in range(self.usteps):
                yield self.point_on_light(u, v)

    def intensity_at(self, p: Vec4, world: "World") -> float:
        """Fraction of the cell samples that p can see."""
        lit = 0
        for sample in self.samples():
            if not world.is_shadowed(p, sample):
                lit += 1
        return lit / self.samples_count

    def __repr__(self) -> str:
        return (f"AreaLight(corner={self.corner!r}, usteps={self.usteps}, "
                f"vsteps={self.vsteps}, intensity={self.intensity!r})")


Light = Union[PointLight, AreaLight]
