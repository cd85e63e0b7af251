import logging
import math
from typing import Optional, Sequence

from raytracer.tuples import Vec4, approx_equal

logger = logging.getLogger(__name__)


# ============================================================
#  Matrix
# ============================================================

class Matrix:
    """
    Square matrix (row-major), immutable.

    We use 4x4 matrices for every transform in the scene:
      - shape transforms (object space -> parent space)
      - pattern transforms (pattern space -> object space)
      - the camera view transform

    2x2 and 3x3 matrices only appear as submatrices during cofactor
    expansion.

    Multiplication:
      - Matrix @ Matrix => Matrix
      - Matrix @ Vec4   => Vec4
    """
    __slots__ = ("m", "size")

    def __init__(self, rows: Sequence[Sequence[float]]):
        self.m = tuple(tuple(float(v) for v in row) for row in rows)
        self.size = len(self.m)
        if any(len(row) != self.size for row in self.m):
            raise ValueError("matrix must be square")

    @staticmethod
    def identity(size: int = 4) -> "Matrix":
        """Create identity matrix."""
        return Matrix([[1.0 if i == j else 0.0 for j in range(size)] for i in range(size)])

    def __getitem__(self, index):
        row, col = index
        return self.m[row][col]

    def __eq__(self, o) -> bool:
        if not isinstance(o, Matrix):
            return NotImplemented
        if self.size != o.size:
            return False
        return all(approx_equal(a, b)
                   for row_a, row_b in zip(self.m, o.m)
                   for a, b in zip(row_a, row_b))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix({[list(row) for row in self.m]})"

    def __matmul__(self, o):
        if isinstance(o, Vec4):
            return self.mul_vec4(o)
        if not isinstance(o, Matrix):
            return NotImplemented
        if o.size != self.size:
            raise ValueError("cannot multiply matrices of different sizes")
        n = self.size
        a, b = self.m, o.m
        return Matrix([[sum(a[i][k] * b[k][j] for k in range(n)) for j in range(n)]
                       for i in range(n)])

    def mul_vec4(self, v: Vec4) -> Vec4:
        """Multiply a 4x4 matrix by a Vec4 (Mat4 * Vec4)."""
        m = self.m
        x = m[0][0]*v.x + m[0][1]*v.y + m[0][2]*v.z + m[0][3]*v.w
        y = m[1][0]*v.x + m[1][1]*v.y + m[1][2]*v.z + m[1][3]*v.w
        z = m[2][0]*v.x + m[2][1]*v.y + m[2][2]*v.z + m[2][3]*v.w
        w = m[3][0]*v.x + m[3][1]*v.y + m[3][2]*v.z + m[3][3]*v.w
        return Vec4(x, y, z, w)

    def transpose(self) -> "Matrix":
        return Matrix(list(zip(*self.m)))

    # ---------------- Cofactor expansion ----------------

    def determinant(self) -> float:
        """Direct formula for 2x2, cofactor expansion along row 0 otherwise."""
        if self.size == 2:
            (a, b), (c, d) = self.m
            return a * d - b * c
        return sum(self.m[0][col] * self.cofactor(0, col) for col in range(self.size))

    def submatrix(self, row: int, col: int) -> "Matrix":
        """Copy of the matrix with one row and one column removed."""
        return Matrix([[v for j, v in enumerate(r) if j != col]
                       for i, r in enumerate(self.m) if i != row])

    def minor(self, row: int, col: int) -> float:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        minor = self.minor(row, col)
        return -minor if (row + col) % 2 else minor

    def is_invertible(self) -> bool:
        return self.determinant() != 0.0

    def inverse(self) -> Optional["Matrix"]:
        """
        Inverse by the adjugate: inverse[c][r] = cofactor(r, c) / det.

        The swapped indices do the transpose of the cofactor matrix in the
        same pass. Returns None for a singular matrix.
        """
        det = self.determinant()
        if det == 0.0:
            return None
        n = self.size
        inv = [[0.0] * n for _ in range(n)]
        for row in range(n):
            for col in range(n):
                inv[col][row] = self.cofactor(row, col) / det
        return Matrix(inv)

    def inverse_or_identity(self) -> "Matrix":
        """
        Inverse, or identity when the matrix is singular.

        Degenerate transforms (e.g. a zero scale) still need *some* inverse
        to map rays into object space; identity is the documented fallback.
        """
        inv = self.inverse()
        if inv is None:
            logger.debug("singular transform %r, using identity", self)
            return Matrix.identity(self.size)
        return inv


IDENTITY = Matrix.identity()


# ============================================================
#  3D transforms
# ============================================================

def translate(tx, ty, tz) -> Matrix:
    """
    Move points by (tx, ty, tz).

    The offset sits in the w column, so vectors (w = 0) pass through
    unchanged and only points (w = 1) are moved.
    """
    return Matrix([
        [1.0, 0.0, 0.0, tx],
        [0.0, 1.0, 0.0, ty],
        [0.0, 0.0, 1.0, tz],
        [0.0, 0.0, 0.0, 1.0],
    ])

def scale(sx, sy, sz) -> Matrix:
    """
    Stretch points and vectors along each axis.

    A negative factor mirrors across that axis (scale(-1, 1, 1) reflects in x).
    """
    return Matrix([
        [sx, 0.0, 0.0, 0.0],
        [0.0, sy, 0.0, 0.0],
        [0.0, 0.0, sz, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])

def rotate_x(a) -> Matrix:
    """Left-handed turn of `a` radians about x: y rolls toward z."""
    c, s = math.cos(a), math.sin(a)
    return Matrix([
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c, -s, 0.0],
        [0.0, s, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])

def rotate_y(a) -> Matrix:
    """Turn about y by `a` radians; z swings toward x."""
    c, s = math.cos(a), math.sin(a)
    return Matrix([
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])

def rotate_z(a) -> Matrix:
    """Turn about z by `a` radians; x swings toward y."""
    c, s = math.cos(a), math.sin(a)
    return Matrix([
        [c, -s, 0.0, 0.0],
        [s, c, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])

def shear(xy, xz, yx, yz, zx, zy) -> Matrix:
    """
    Shearing matrix: each component moves in proportion to the other two.

    Applies: x -> x + xy*y + xz*z, y -> y + yx*x + yz*z, z -> z + zx*x + zy*y
    """
    return Matrix([
        [1.0, xy, xz, 0.0],
        [yx, 1.0, yz, 0.0],
        [zx, zy, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


# ============================================================
#  Camera orientation
# ============================================================

def view_transform(frm: Vec4, to: Vec4, up: Vec4) -> Matrix:
    """
    World -> camera transform for an eye at `frm` looking at `to`.

    Notes:
      - `up` only needs to be roughly up; it is re-orthogonalised.
      - The camera looks towards -Z in its own space.
    """
    forward = (to - frm).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = Matrix([
        [left.x, left.y, left.z, 0.0],
        [true_up.x, true_up.y, true_up.z, 0.0],
        [-forward.x, -forward.y, -forward.z, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])
    return orientation @ translate(-frm.x, -frm.y, -frm.z)
