import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from raytracer.shapes import Group, SmoothTriangle, Triangle
from raytracer.tuples import Vec4, point, vector

logger = logging.getLogger(__name__)


# ============================================================
#  OBJ parser
# ============================================================

class ObjParser:
    """
    Wavefront OBJ reader producing triangles inside groups.

    Supported:
      v  x y z
      vn x y z
      f  v v v ...                 (any index syntax: v, v/vt, v//vn, v/vt/vn)
      g  name

    Notes:
      - Indices in the file are 1-based (negative = relative to the end);
        vertices / normals are stored 0-based.
      - Polygons with more than 3 vertices are fan-triangulated:
          (0,1,2), (0,2,3), ..., (0,N-2,N-1)
      - A face whose every vertex carries a normal becomes a SmoothTriangle.
      - Faces before the first `g` go to default_group.
      - Anything else (vt, o, s, usemtl, malformed lines, degenerate faces)
        is skipped and counted in `ignored`.
    """

    def __init__(self):
        self.vertices: List[Vec4] = []
        self.normals: List[Vec4] = []
        self.default_group = Group()
        self.groups: Dict[str, Group] = {}
        self.ignored = 0
        self._current = self.default_group
        self._root: Optional[Group] = None

    def parse(self, lines: Iterable[str]) -> "ObjParser":
        for lineno, line in enumerate(lines, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                handled = self._parse_statement(line.split())
            except (ValueError, IndexError) as exc:
                logger.debug("OBJ line %d skipped (%s): %r", lineno, exc, line)
                handled = True
                self.ignored += 1
            if not handled:
                self.ignored += 1
        logger.info("Parsed OBJ: %d vertices, %d normals, %d named groups, %d lines ignored",
                    len(self.vertices), len(self.normals), len(self.groups), self.ignored)
        return self

    def _parse_statement(self, parts: List[str]) -> bool:
        """Apply one statement. False means the keyword is not supported."""
        keyword, args = parts[0], parts[1:]
        if keyword == "v":
            self.vertices.append(point(*self._floats(args)))
        elif keyword == "vn":
            self.normals.append(vector(*self._floats(args)))
        elif keyword == "f":
            for triangle in self._fan_triangulation(args):
                self._current.add_child(triangle)
        elif keyword == "g":
            if not args:
                raise ValueError("group without a name")
            name = " ".join(args)
            if name not in self.groups:
                self.groups[name] = Group()
            self._current = self.groups[name]
        else:
            return False
        return True

    @staticmethod
    def _floats(args: List[str]) -> Tuple[float, float, float]:
        if len(args) < 3:
            raise ValueError("expected 3 coordinates")
        return float(args[0]), float(args[1]), float(args[2])

    @staticmethod
    def _index(token: str, count: int) -> int:
        i = int(token)
        if i < 0:
            i = count + i + 1
        if i < 1 or i > count:
            raise IndexError(f"index {token} out of range 1..{count}")
        return i - 1

    def _fan_triangulation(self, args: List[str]) -> List[Triangle]:
        if len(args) < 3:
            raise ValueError("face needs at least 3 vertices")

        verts: List[Vec4] = []
        norms: List[Optional[Vec4]] = []
        for token in args:
            comps = token.split("/")
            verts.append(self.vertices[self._index(comps[0], len(self.vertices))])
            if len(comps) > 2 and comps[2]:
                norms.append(self.normals[self._index(comps[2], len(self.normals))])
            else:
                norms.append(None)
        smooth = all(n is not None for n in norms)

        triangles: List[Triangle] = []
        for i in range(1, len(verts) - 1):
            if smooth:
                triangles.append(SmoothTriangle(verts[0], verts[i], verts[i + 1],
                                                norms[0], norms[i], norms[i + 1]))
            else:
                triangles.append(Triangle(verts[0], verts[i], verts[i + 1]))
        return triangles

    def to_group(self) -> Group:
        """
        One group holding everything parsed: the default group and every
        named group, leaving out those without faces. Built once; later
        calls return the same group.
        """
        if self._root is None:
            root = Group()
            if len(self.default_group):
                root.add_child(self.default_group)
            for group in self.groups.values():
                if len(group):
                    root.add_child(group)
            self._root = root
        return self._root


def parse_obj(lines: Iterable[str]) -> ObjParser:
    """Parse OBJ statements from any iterable of lines (file object, list, ...)."""
    return ObjParser().parse(lines)


def load_obj(path: Union[str, Path]) -> ObjParser:
    """Read and parse an OBJ file."""
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return parse_obj(f)
