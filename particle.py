# particle.py
"""
A single polygon particle and its per-frame physics.

This module defines the Particle class, which moves a Poly under a random
walk on its velocity, resolves edge overlaps against the rest of the
population, and bounces off the screen bounds.
"""
import logging
import math
from typing import Callable, List, Optional, Tuple

import numpy as np
from numba import jit

from algebra import Point
from constants import COLOR_DRIFT, JITTER_SPAN, MAX_SEPARATION_STEPS
from geometry import Poly

# --- Data Contracts ---
#
# class Particle:
#   - __init__(self, x, y, size, color_position, color_strength, sides, speed,
#              rng=None, max_separation_steps=MAX_SEPARATION_STEPS):
#     - Inputs:
#       - rng: numpy Generator supplying uniform floats in [0, 1).
#     - Invariants: velocity starts at (0, 0) and life at 0.
#
#   - tick(self, others: List[Particle], screen_size) -> int:
#     - Inputs:
#       - others: the live population. Particles are mutated in place, so a
#         collision changes both sides of the pair.
#       - screen_size: callable returning (width, height), queried once.
#     - Outputs: number of pairs that could not be separated this tick.
#     - Side Effects: color, velocity, position and life are updated in the
#       order color -> velocity -> position -> collisions -> bounds -> life.
#       Collision partners moved during this tick are clamped to the same
#       bounds, so every particle ends the frame inside the box.
#
#   - uncollide(self, other) -> bool:
#     - Outputs: True if the pair overlapped and was separated.
#     - Side Effects: both velocities are mirrored with reflect_across about
#       the contact tangent, i.e. the summed contact offset rotated by pi/2,
#       rather than about the summed contact itself. This flips the normal
#       component so an approaching pair moves apart. Both particles then
#       step along their velocities until no edges cross.
#     - Raises: UnresolvableCollisionError when the pair is still overlapping
#       after max_separation_steps position steps.


class UnresolvableCollisionError(RuntimeError):
    """Two particles still overlap after the separation step budget ran out."""


@jit(nopython=True)
def _in_range_mask_numba(centers, sizes, x, y, size):
    """
    Numba-jitted circle test of one particle against a whole population.

    Entry i is True when the distance between (x, y) and centers[i] is
    strictly less than size + sizes[i].
    """
    count = centers.shape[0]
    mask = np.zeros(count, dtype=np.bool_)
    for i in range(count):
        dx = centers[i, 0] - x
        dy = centers[i, 1] - y
        mask[i] = np.sqrt(dx * dx + dy * dy) < size + sizes[i]
    return mask


class BoundingBox:
    """
    Axis-aligned box that reflects particles which leave it.
    """
    def __init__(self, x_lower: float, x_upper: float, y_lower: float, y_upper: float):
        self.x_lower = x_lower
        self.x_upper = x_upper
        self.y_lower = y_lower
        self.y_upper = y_upper

    def check(self, particle: "Particle") -> None:
        x, y = particle.poly.center.x, particle.poly.center.y
        vx, vy = particle.velocity.x, particle.velocity.y

        # Each axis is handled on its own so a corner flips both components.
        if x < self.x_lower:
            x, vx = self.x_lower, -vx
        elif x > self.x_upper:
            x, vx = self.x_upper, -vx
        if y < self.y_lower:
            y, vy = self.y_lower, -vy
        elif y > self.y_upper:
            y, vy = self.y_upper, -vy

        particle.poly.center = Point(x, y)
        particle.velocity = Point(vx, vy)


class Particle:
    """
    A moving regular polygon with a velocity and an age in ticks.
    """
    def __init__(self, x: float, y: float, size: float, color_position: float,
                 color_strength: float, sides: int, speed: float,
                 rng: Optional[np.random.Generator] = None,
                 max_separation_steps: int = MAX_SEPARATION_STEPS):
        self.poly = Poly(x, y, size, color_position, color_strength, sides)
        self.velocity = Point(0.0, 0.0)
        self.life = 0
        self.speed = speed
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_separation_steps = max_separation_steps

    def __repr__(self) -> str:
        return f"Particle(poly={self.poly!r}, velocity={self.velocity}, life={self.life})"

    def is_alive(self, lifetime: int) -> bool:
        # A negative lifetime makes the particle immortal.
        return lifetime < 0 or self.life < lifetime

    def color_tick(self) -> None:
        self.poly.color_position += COLOR_DRIFT

    def velo_tick(self) -> None:
        half = JITTER_SPAN / 2.0
        self.velocity = self.velocity + Point(
            self.speed * (JITTER_SPAN * self.rng.random() - half),
            self.speed * (JITTER_SPAN * self.rng.random() - half),
        )

    def pos_tick(self) -> None:
        self.poly.center = self.poly.center + self.velocity

    def is_in_range(self, other: "Particle") -> bool:
        return self.poly.center.distance_to(other.poly.center) < self.poly.size + other.poly.size

    def get_intersections(self, other: "Particle") -> List[Point]:
        points = []
        other_vecs = other.poly.to_vecs()
        for vec in self.poly.to_vecs():
            for other_vec in other_vecs:
                pt = vec.pt_of_intersection(other_vec)
                if pt is not None:
                    points.append(pt)
        return points

    def uncollide(self, other: "Particle") -> bool:
        points = self.get_intersections(other)
        if not points:
            return False

        # Summed, not averaged: only the direction is used below.
        contact = sum((pt - self.poly.center for pt in points), Point(0.0, 0.0))
        tangent = contact.rotate(math.pi / 2.0)
        self.velocity = self.velocity.reflect_across(tangent)
        other.velocity = other.velocity.reflect_across(tangent)

        for step in range(1, self.max_separation_steps + 1):
            self.pos_tick()
            other.pos_tick()
            if not self.get_intersections(other):
                logging.debug(
                    f"Separated particles at {self.poly.center} and "
                    f"{other.poly.center} after {step} step(s)."
                )
                return True

        raise UnresolvableCollisionError(
            f"Particles at {self.poly.center} and {other.poly.center} still overlap "
            f"after {self.max_separation_steps} separation steps."
        )

    def _range_mask(self, others: List["Particle"]) -> np.ndarray:
        centers = np.array(
            [(p.poly.center.x, p.poly.center.y) for p in others], dtype=np.float64
        ).reshape(-1, 2)
        sizes = np.array([p.poly.size for p in others], dtype=np.float64)
        return _in_range_mask_numba(
            centers, sizes, self.poly.center.x, self.poly.center.y, self.poly.size
        )

    def collision_tick(self, others: List["Particle"], bounds: Optional[BoundingBox] = None) -> int:
        """
        Resolves overlaps with every other particle in range.

        A partner moved by the separation is put back inside `bounds`, since
        it may already have had its own boundary check this frame.

        Returns the number of pairs that could not be separated.
        """
        unresolved = 0
        mask = None
        for j, other in enumerate(others):
            if other is self:
                continue
            if mask is None:
                mask = self._range_mask(others)
            if not mask[j]:
                continue
            try:
                moved = self.uncollide(other)
            except UnresolvableCollisionError as e:
                logging.debug(f"Unresolved collision: {e}")
                unresolved += 1
                moved = True
            if moved:
                # Positions changed, so the remaining range tests are stale.
                mask = None
                if bounds is not None:
                    bounds.check(other)
        return unresolved

    def tick(self, others: List["Particle"], screen_size: Callable[[], Tuple[float, float]]) -> int:
        self.color_tick()
        self.velo_tick()
        self.pos_tick()
        width, height = screen_size()
        bounds = BoundingBox(0.0, width, 0.0, height)
        unresolved = self.collision_tick(others, bounds)
        bounds.check(self)
        self.life += 1
        return unresolved
