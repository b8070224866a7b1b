"""Bounding-box geometry helpers for detected text.

All measurements are approximations on the four-vertex polygons returned by
the vision service (clockwise from top-left). Rotated text is measured as if
it were axis-aligned, and image height is estimated from the box itself
because the real image dimensions are not available here.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, List, Sequence


@dataclass(frozen=True)
class Vertex:
    """A polygon vertex in pixel space. Missing coordinates read as 0."""
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class BoundingPoly:
    """Ordered polygon vertices, clockwise from top-left."""
    vertices: List[Vertex] = field(default_factory=list)

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "BoundingPoly":
        """Build from [[x, y], ...] point lists (EasyOCR / test fixtures)."""
        return cls(vertices=[Vertex(x=int(p[0]), y=int(p[1])) for p in points])

    @classmethod
    def from_extent(cls, min_x: int, min_y: int, max_x: int, max_y: int) -> "BoundingPoly":
        """Axis-aligned rectangle spanning the given extent."""
        return cls(vertices=[
            Vertex(x=min_x, y=min_y),
            Vertex(x=max_x, y=min_y),
            Vertex(x=max_x, y=max_y),
            Vertex(x=min_x, y=max_y),
        ])

    @property
    def top_left(self) -> Optional[Vertex]:
        """First vertex, or None when the polygon is empty."""
        return self.vertices[0] if self.vertices else None


# Fallback values when geometry is missing
DEFAULT_RELATIVE_Y = 0.5
DEFAULT_IMAGE_HEIGHT = 1000
IMAGE_HEIGHT_FACTOR = 1.2


def area(box: Optional[BoundingPoly]) -> int:
    """
    Approximate area of a text box in square pixels.

    Uses |x1 - x0| * |y2 - y1| on the first three vertices, which is exact
    for axis-aligned rectangles only. Returns 0 without 4 vertices.
    """
    if box is None or len(box.vertices) < 4:
        return 0
    v = box.vertices
    width = abs(v[1].x - v[0].x)
    height = abs(v[2].y - v[1].y)
    return width * height


def relative_y(box: Optional[BoundingPoly]) -> float:
    """
    Approximate vertical position of a box (0 = top, 1 = bottom).

    The image height is estimated as 1.2x the lowest vertex of the box, so
    this is a rough prominence signal rather than a true page position.
    For an upright rectangle with non-negative coordinates the result is
    never below 5/12 (about 0.4167), even for text at the very top, so only
    skewed polygons can fall under 0.4.
    """
    if box is None or not box.vertices:
        return DEFAULT_RELATIVE_Y

    ys = [v.y for v in box.vertices]
    avg_y = sum(ys) / len(ys)
    max_y = max(ys)
    estimated_height = max_y * IMAGE_HEIGHT_FACTOR if max_y > 0 else DEFAULT_IMAGE_HEIGHT

    return max(0.0, min(1.0, avg_y / estimated_height))


def distance(a: Optional[Vertex], b: Optional[Vertex]) -> float:
    """Euclidean distance between two vertices (missing vertex = origin)."""
    a = a or Vertex()
    b = b or Vertex()
    return math.hypot(a.x - b.x, a.y - b.y)


def enclosing_box(boxes: Sequence[Optional[BoundingPoly]]) -> Optional[BoundingPoly]:
    """Axis-aligned rectangle covering every vertex of the given boxes."""
    vertices = [v for box in boxes if box is not None for v in box.vertices]
    if not vertices:
        return None
    return BoundingPoly.from_extent(
        min(v.x for v in vertices),
        min(v.y for v in vertices),
        max(v.x for v in vertices),
        max(v.y for v in vertices),
    )
