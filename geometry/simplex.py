"""Barycentric projection between strategy compositions and plot coordinates."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

import numpy as np


class DegenerateGeometryError(ValueError):
    """Raised when triangle vertices are collinear."""


class Point2D(NamedTuple):
    """Immutable 2D point in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Triangle:
    """Simplex triangle with vertices bound to the top, left and right strategies."""

    top: Point2D
    left: Point2D
    right: Point2D

    def __post_init__(self) -> None:
        doubled_area = (self.left.x - self.top.x) * (self.right.y - self.top.y) - (
            self.right.x - self.top.x
        ) * (self.left.y - self.top.y)
        if doubled_area == 0.0:
            raise DegenerateGeometryError("Triangle vertices must not be collinear.")

    @classmethod
    def equilateral(cls, center_x: float, center_y: float, side_length: float) -> "Triangle":
        """Build an apex-up equilateral triangle centred on ``(center_x, center_y)``.

        Screen coordinates are assumed, so ``y`` grows downward and the top
        vertex has the smallest ``y``.
        """
        if side_length <= 0:
            raise ValueError("side_length must be > 0")
        height = side_length * math.sqrt(3) / 2.0
        return cls(
            top=Point2D(center_x, center_y - height / 2.0),
            left=Point2D(center_x - side_length / 2.0, center_y + height / 2.0),
            right=Point2D(center_x + side_length / 2.0, center_y + height / 2.0),
        )

    def corners(self) -> np.ndarray:
        """Return vertices as a ``(3, 2)`` array ordered top, left, right."""
        return np.array([self.top, self.left, self.right], dtype=float)

    def vertex(self, vertex: "Vertex") -> Point2D:
        return (self.left, self.top, self.right)[int(vertex)]

    def weights_at(self, x: float, y: float) -> tuple[float, float, float]:
        """Return barycentric weights of ``(x, y)`` in vertex order (left, top, right)."""
        return inverse((x, y), self.left, self.top, self.right)

    def point_for(self, left: float, top: float, right: float) -> Point2D:
        """Project weights given in vertex order (left, top, right)."""
        return forward(top, left, right, self.top, self.left, self.right)


class Vertex(enum.IntEnum):
    """Triangle corners in the order strategies, ratios and counts use."""

    LEFT = 0
    TOP = 1
    RIGHT = 2


def forward(
    a: float,
    b: float,
    c: float,
    top: Sequence[float],
    left: Sequence[float],
    right: Sequence[float],
) -> Point2D:
    """Map barycentric weights of (top, left, right) to a canvas point.

    Weights are used as given; a triple that does not sum to one lands
    outside the triangle.
    """
    x = a * top[0] + b * left[0] + c * right[0]
    y = a * top[1] + b * left[1] + c * right[1]
    return Point2D(float(x), float(y))


def scaled_implicit(
    point: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Sequence[float],
) -> float:
    """Evaluate the line through ``p1`` and ``p2`` at ``point``, scaled to 1 at ``p3``."""
    a12 = p2[1] - p1[1]
    b12 = -(p2[0] - p1[0])
    c12 = p1[1] * p2[0] - p1[0] * p2[1]
    k = a12 * p3[0] + b12 * p3[1] + c12
    if k == 0:
        raise DegenerateGeometryError("Cannot scale implicit line: vertices are collinear.")
    return float((a12 * point[0] + b12 * point[1] + c12) / k)


def inverse(
    point: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Sequence[float],
) -> tuple[float, float, float]:
    """Return barycentric weights of ``p1``, ``p2`` and ``p3`` for ``point``.

    Points outside the triangle produce negative weights; they are returned
    unchanged.
    """
    w1 = scaled_implicit(point, p2, p3, p1)
    w2 = scaled_implicit(point, p3, p1, p2)
    w3 = scaled_implicit(point, p1, p2, p3)
    return (w1, w2, w3)


def forward_many(weights: Sequence[Sequence[float]] | np.ndarray, triangle: Triangle) -> np.ndarray:
    """Project an ``(N, 3)`` array of (top, left, right) weights to ``(N, 2)`` points."""
    matrix = np.asarray(weights, dtype=float)
    if matrix.size == 0:
        return np.empty((0, 2), dtype=float)
    if matrix.ndim != 2 or matrix.shape[1] != 3:
        raise ValueError(f"weights must have shape (N, 3), got {matrix.shape}")
    return matrix @ triangle.corners()
