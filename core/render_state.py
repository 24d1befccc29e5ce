"""Immutable render-state contracts for rendering collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field

from geometry.simplex import Point2D


@dataclass(frozen=True)
class VertexLabel:
    """Strategy label drawn next to one triangle corner."""

    vertex: int
    name: str
    color: str
    anchor: Point2D


@dataclass(frozen=True)
class RenderFrame:
    """One plotted composition point plus the path segment leading to it."""

    generation_index: int
    point: Point2D
    previous_point: Point2D | None
    counts: tuple[int, int, int]
    fractions: tuple[float, float, float]
    metrics: dict[str, float] = field(default_factory=dict)

    @property
    def segment(self) -> tuple[Point2D, Point2D] | None:
        if self.previous_point is None:
            return None
        return (self.previous_point, self.point)


@dataclass(frozen=True)
class BoardState:
    """Snapshot of the triangle and its labels after a reset or rotation."""

    top: Point2D
    left: Point2D
    right: Point2D
    labels: tuple[VertexLabel, ...]
