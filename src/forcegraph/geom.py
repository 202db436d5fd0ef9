"""
Geometric primitives for graph layout.

This module provides 2D point arithmetic, axis-aligned rectangles for
hit-testing, and affine transforms between model and view space.
"""

from __future__ import annotations

from typing import Optional
import math
import numpy as np


class Point:
    """2D point, also used as a 2D vector."""

    __slots__ = ('x', 'y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = x
        self.y = y

    @staticmethod
    def zero() -> Point:
        """Create a point at the origin."""
        return Point(0.0, 0.0)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __repr__(self) -> str:
        return f"Point({self.x!r}, {self.y!r})"

    def length_squared(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.length_squared())

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return (self - other).length()


class Rectangle:
    """Axis-aligned rectangle."""

    def __init__(self, x: float, X: float, y: float, Y: float):
        """
        Initialize rectangle.

        Args:
            x: Left edge
            X: Right edge
            y: Bottom edge
            Y: Top edge
        """
        self.x = x
        self.X = X
        self.y = y
        self.Y = Y

    @staticmethod
    def around(center: Point, half_width: float) -> Rectangle:
        """Create a square centred on a point."""
        return Rectangle(
            center.x - half_width,
            center.x + half_width,
            center.y - half_width,
            center.y + half_width
        )

    def contains(self, p: Point) -> bool:
        """
        Test whether a point lies inside the rectangle.

        The min edges are inclusive and the max edges exclusive, so
        adjacent rectangles never both claim a point on a shared side.
        An empty rectangle contains nothing.
        """
        return self.x <= p.x < self.X and self.y <= p.y < self.Y

    def __repr__(self) -> str:
        return f"Rectangle({self.x!r}, {self.X!r}, {self.y!r}, {self.Y!r})"


class AffineTransform:
    """
    2D affine transform stored as a 3x3 homogeneous matrix.

    Points are treated as column vectors, so ``m @ [x, y, 1]`` maps a point.
    Composition helpers follow the CoreGraphics convention: ``translated_by``
    and ``scaled_by`` prepend the new operation, which is therefore applied
    to points before the existing transform.
    """

    def __init__(self, matrix: Optional[np.ndarray] = None):
        if matrix is None:
            matrix = np.eye(3)
        self.matrix = np.asarray(matrix, dtype=float)

    @staticmethod
    def identity() -> AffineTransform:
        return AffineTransform()

    @staticmethod
    def translation(tx: float, ty: float) -> AffineTransform:
        m = np.eye(3)
        m[0, 2] = tx
        m[1, 2] = ty
        return AffineTransform(m)

    @staticmethod
    def scaling(sx: float, sy: float) -> AffineTransform:
        m = np.eye(3)
        m[0, 0] = sx
        m[1, 1] = sy
        return AffineTransform(m)

    @property
    def a(self) -> float:
        """Horizontal scale component."""
        return float(self.matrix[0, 0])

    @property
    def tx(self) -> float:
        return float(self.matrix[0, 2])

    @property
    def ty(self) -> float:
        return float(self.matrix[1, 2])

    def then(self, other: AffineTransform) -> AffineTransform:
        """Transform that applies self first, then other."""
        return AffineTransform(other.matrix @ self.matrix)

    def translated_by(self, tx: float, ty: float) -> AffineTransform:
        return AffineTransform.translation(tx, ty).then(self)

    def scaled_by(self, sx: float, sy: float) -> AffineTransform:
        return AffineTransform.scaling(sx, sy).then(self)

    def inverted(self) -> AffineTransform:
        """
        Get the inverse transform.

        A singular transform (e.g. zero scale) has no inverse; identity is
        returned instead so that callers never have to handle an error.
        """
        try:
            inv = np.linalg.inv(self.matrix)
        except np.linalg.LinAlgError:
            return AffineTransform.identity()
        if not np.all(np.isfinite(inv)):
            return AffineTransform.identity()
        return AffineTransform(inv)

    def apply(self, p: Point) -> Point:
        """Map a point through the transform."""
        m = self.matrix
        return Point(
            float(m[0, 0] * p.x + m[0, 1] * p.y + m[0, 2]),
            float(m[1, 0] * p.x + m[1, 1] * p.y + m[1, 2])
        )

    def __repr__(self) -> str:
        m = self.matrix
        return (
            f"AffineTransform(a={m[0, 0]!r}, b={m[1, 0]!r}, c={m[0, 1]!r}, "
            f"d={m[1, 1]!r}, tx={m[0, 2]!r}, ty={m[1, 2]!r})"
        )
