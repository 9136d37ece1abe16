# algebra.py
"""
First-order 2-D algebra for the particle geometry.

Point doubles as a 2-D vector (positions, velocities, offsets). LinearEq is
a line in slope-intercept form restricted to an x-domain, which is how the
geometry module approximates a finite segment.
"""
import math
from dataclasses import dataclass
from typing import Optional

# --- Data Contracts ---
#
# class Point:
#   - Immutable value type. Equality is exact float equality on (x, y);
#     no tolerance is applied, so values produced by rotate/from_polar
#     round-trips should be compared approximately.
#
# class LinearEq:
#   - m: slope, b: intercept, x_lower/x_upper: the domain of the segment.
#   - pt_of_line_intersection(other) -> Optional[Point]
#     - Outputs: None when both lines have the same slope.


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return f"(x={self.x}, y={self.y})"

    def smaller_x(self, other: "Point") -> float:
        return self.x if self.x < other.x else other.x

    def greater_x(self, other: "Point") -> float:
        return self.x if self.x > other.x else other.x

    @staticmethod
    def from_polar(r: float, theta: float) -> "Point":
        return Point(r * math.cos(theta), r * math.sin(theta))

    def scale(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    def radius(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def distance_to(self, other: "Point") -> float:
        return (self - other).radius()

    def cross(self, other: "Point") -> float:
        """z component of the 3-D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    def rotate(self, ang: float) -> "Point":
        return Point.from_polar(self.radius(), self.angle() + ang)

    def reflect_across(self, other: "Point") -> "Point":
        """
        Mirrors this vector about the line through the origin pointing
        along `other`. Only the direction of `other` matters.
        """
        return Point.from_polar(self.radius(), 2.0 * other.angle() - self.angle())


@dataclass(frozen=True)
class LinearEq:
    m: float
    b: float
    x_lower: float
    x_upper: float

    def f(self, x: float) -> float:
        return self.m * x + self.b

    def pt_of_line_intersection(self, other: "LinearEq") -> Optional[Point]:
        # m1*x + b1 = m2*x + b2  =>  x = (b2 - b1) / (m1 - m2)
        if self.m == other.m:
            return None
        x = (other.b - self.b) / (self.m - other.m)
        return Point(x, self.f(x))

    def intersects(self, other: "LinearEq") -> bool:
        pt = self.pt_of_line_intersection(other)
        if pt is None:
            return False
        return self.in_range(pt.x) and other.in_range(pt.x)

    def in_range(self, x: float) -> bool:
        return self.x_lower < x < self.x_upper
