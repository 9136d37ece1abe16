# geometry.py
"""
Directed segments and regular polygons.

A Poly is the shape of a single particle. Collision detection decomposes
each Poly into its edges (Vector instances) and intersects them pairwise.
"""
import math
import operator
from dataclasses import dataclass
from typing import List, Optional, Tuple

from algebra import LinearEq, Point

# --- Data Contracts ---
#
# class Vector:
#   - a, b: Point endpoints of a directed segment.
#   - pt_of_intersection(other, bounded=True) -> Optional[Point]
#     - Outputs: the shared endpoint if the segments touch, else the crossing
#       point of their lines. With bounded=True the crossing point must lie on
#       both segments (checked on the parametric form, so near-vertical edges
#       are handled like any other); with bounded=False any non-parallel pair
#       yields a point.
#
# class Poly:
#   - __init__(x, y, size, color_position, color_strength, sides)
#     - Invariants: sides is an integer (Python or numpy) with
#       3 <= sides <= 255, otherwise ValueError.
#   - to_vecs() -> List[Vector]
#     - Outputs: `sides` world-space edges; edge i's b is edge i+1's a.

MIN_SIDES = 3
MAX_SIDES = 255
# Slack on the segment parameters so crossings at a shared vertex survive rounding.
PARAM_EPSILON = 1e-9


@dataclass(frozen=True)
class Vector:
    a: Point
    b: Point

    def angle(self) -> float:
        return (self.b - self.a).angle()

    def slope(self) -> Optional[float]:
        if self.b.x == self.a.x:
            return None
        d = self.b - self.a
        return d.y / d.x

    def intercept(self) -> Optional[float]:
        slope = self.slope()
        if slope is None:
            return None
        return self.a.y - slope * self.a.x

    def to_lin_eq(self) -> Optional[LinearEq]:
        slope = self.slope()
        if slope is None:
            return None
        return LinearEq(
            m=slope,
            b=self.intercept(),
            x_lower=self.a.smaller_x(self.b),
            x_upper=self.a.greater_x(self.b),
        )

    def pt_touching(self, other: "Vector") -> Optional[Point]:
        if self.a == other.a or self.a == other.b:
            return self.a
        if self.b == other.a or self.b == other.b:
            return self.b
        return None

    def is_parallel(self, other: "Vector") -> bool:
        return self.angle() == other.angle()

    def line_params(self, other: "Vector") -> Optional[Tuple[float, float]]:
        """
        Solves self.a + t*(self.b - self.a) == other.a + u*(other.b - other.a).

        Returns (t, u), or None when the lines never meet. The segments
        themselves cross when both values are within [0, 1].
        """
        d_self = self.b - self.a
        d_other = other.b - other.a
        denom = d_self.cross(d_other)
        if denom == 0.0:
            return None
        offset = other.a - self.a
        return offset.cross(d_other) / denom, offset.cross(d_self) / denom

    def pt_of_intersection(self, other: "Vector", bounded: bool = True) -> Optional[Point]:
        touching = self.pt_touching(other)
        if touching is not None:
            return touching
        if self.is_parallel(other):
            return None

        # Parametric form, so steep edges that are vertical up to rounding
        # need no slope.
        params = self.line_params(other)
        if params is None:
            return None
        t, u = params
        if bounded and not (-PARAM_EPSILON <= t <= 1.0 + PARAM_EPSILON
                            and -PARAM_EPSILON <= u <= 1.0 + PARAM_EPSILON):
            return None
        return self.a + (self.b - self.a).scale(t)


class Poly:
    """
    A regular polygon with `sides` vertices on a circle of radius `size`
    around `center`. The first vertex sits at angle 0 (no rotation).
    """
    def __init__(self, x: float, y: float, size: float, color_position: float,
                 color_strength: float, sides: int):
        try:
            sides = operator.index(sides)
        except TypeError:
            sides_ok = False
        else:
            sides_ok = MIN_SIDES <= sides <= MAX_SIDES
        if not sides_ok:
            raise ValueError(
                f"A polygon needs between {MIN_SIDES} and {MAX_SIDES} sides, got {sides!r}."
            )
        self.center = Point(x, y)
        self.size = size
        self.color_position = color_position
        self.color_strength = color_strength
        self.sides = sides

    def __repr__(self) -> str:
        return f"Poly(center={self.center}, size={self.size}, sides={self.sides})"

    @staticmethod
    def sine_map(num: float) -> float:
        return math.sin(num) / 2.0 + 0.5

    def d_theta(self) -> float:
        return 2.0 * math.pi / self.sides

    def ang_at_pos(self, pos: int) -> float:
        return pos * self.d_theta() % (2.0 * math.pi)

    def unit_circle(self) -> List[Point]:
        return [Point.from_polar(1.0, self.ang_at_pos(k)) for k in range(self.sides)]

    def vertices(self) -> List[Point]:
        return [self.center + p.scale(self.size) for p in self.unit_circle()]

    def local_vecs(self) -> List[Vector]:
        """Edges in the frame centred on the origin rather than on `center`."""
        return self._edges([p.scale(self.size) for p in self.unit_circle()])

    def to_vecs(self) -> List[Vector]:
        return self._edges(self.vertices())

    @staticmethod
    def _edges(points: List[Point]) -> List[Vector]:
        n = len(points)
        return [Vector(points[i], points[(i + 1) % n]) for i in range(n)]

    def color(self) -> Tuple[float, float, float, float]:
        """RGBA in [0, 1], cycling through the hue wheel with color_position."""
        third = 2.0 / 3.0 * math.pi
        return (
            self.color_strength * Poly.sine_map(self.color_position),
            self.color_strength * Poly.sine_map(self.color_position + third),
            self.color_strength * Poly.sine_map(self.color_position + 2.0 * third),
            1.0,
        )
