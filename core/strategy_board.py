"""Active strategy triple, rotation queue and vertex label hit regions."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable

from agents.strategy import Strategy
from core.render_state import BoardState, VertexLabel
from geometry.simplex import Point2D, Triangle, Vertex


LABEL_WIDTH = 80.0
LABEL_HEIGHT = 40.0


@dataclass(frozen=True)
class LabelRegion:
    """Open rectangle ``left < x < right`` and ``top < y < bottom``."""

    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left < x < self.right and self.top < y < self.bottom


def label_region(triangle: Triangle, vertex: Vertex) -> LabelRegion:
    """Return the clickable label area for ``vertex``.

    Left and right labels sit outside their corners; the top label is centred
    on the apex. All three lie just above their vertex.
    """
    corner = triangle.vertex(vertex)
    if vertex == Vertex.LEFT:
        x_min, x_max = corner.x - LABEL_WIDTH, corner.x
    elif vertex == Vertex.TOP:
        x_min, x_max = corner.x - LABEL_WIDTH / 2.0, corner.x + LABEL_WIDTH / 2.0
    else:
        x_min, x_max = corner.x, corner.x + LABEL_WIDTH
    return LabelRegion(left=x_min, top=corner.y - LABEL_HEIGHT, right=x_max, bottom=corner.y)


def label_at(x: float, y: float, triangle: Triangle) -> Vertex | None:
    """Return the vertex whose label contains ``(x, y)``, checking left, top, right."""
    for vertex in Vertex:
        if label_region(triangle, vertex).contains(x, y):
            return vertex
    return None


def label_anchor(triangle: Triangle, vertex: Vertex) -> Point2D:
    """Centre point for drawing a vertex label."""
    corner = triangle.vertex(vertex)
    if vertex == Vertex.LEFT:
        return Point2D(corner.x - LABEL_WIDTH / 2.0, corner.y - LABEL_HEIGHT / 2.0)
    if vertex == Vertex.TOP:
        return Point2D(corner.x, corner.y - LABEL_HEIGHT / 2.0)
    return Point2D(corner.x + LABEL_WIDTH / 2.0, corner.y - LABEL_HEIGHT / 2.0)


class StrategyBoard:
    """Strategies bound to the triangle corners plus the ones waiting in line."""

    def __init__(self, active: Iterable[Strategy], queue: Iterable[Strategy] = ()) -> None:
        self._active = list(active)
        if len(self._active) != 3:
            raise ValueError("StrategyBoard requires exactly three active strategies.")
        self._queue: deque[Strategy] = deque(queue)

    @property
    def active(self) -> tuple[Strategy, ...]:
        return tuple(self._active)

    @property
    def queue(self) -> tuple[Strategy, ...]:
        return tuple(self._queue)

    def strategy_at(self, vertex: Vertex) -> Strategy:
        return self._active[int(vertex)]

    def rotate(self, vertex: Vertex) -> Strategy:
        """Send the vertex's strategy to the back of the queue and bind the front one.

        With an empty queue the same strategy comes straight back.
        """
        index = int(vertex)
        self._queue.append(self._active[index])
        self._active[index] = self._queue.popleft()
        return self._active[index]

    def snapshot(self, triangle: Triangle) -> BoardState:
        labels = tuple(
            VertexLabel(
                vertex=int(vertex),
                name=self._active[int(vertex)].name,
                color=self._active[int(vertex)].color,
                anchor=label_anchor(triangle, vertex),
            )
            for vertex in Vertex
        )
        return BoardState(top=triangle.top, left=triangle.left, right=triangle.right, labels=labels)
