# simulation.py
"""
Handles the particle population and the per-frame update.

This module defines the Emitter class, which owns a fixed-size population
of particles, advances every particle by one tick, evicts the expired ones
and refills the population back to its target count.
"""
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from algebra import Point
from constants import MAX_SEPARATION_STEPS
from geometry import MAX_SIDES, MIN_SIDES
from particle import Particle

# --- Data Contracts ---
#
# class Emitter:
#   - __init__(self, count, lifetime, center, size, radius, sides, speed,
#              rng=None, max_separation_steps=MAX_SEPARATION_STEPS):
#     - Inputs:
#       - count: int, target population size.
#       - lifetime: int, ticks a particle lives for; negative means forever.
#       - center: Point, the spawn centre.
#       - radius: float, spawn positions are within this distance of center.
#     - Side Effects: None until fill() is called.
#
#   - from_params(params: Dict[str, Any]) -> Emitter:
#     - Inputs: the "simulation_parameters" section of config.json.
#     - Raises: ValueError on invalid parameters.
#
#   - tick(self, screen_size) -> None:
#     - Inputs: screen_size, a callable returning (width, height).
#     - Invariants: after the call len(self.particles) == self.count and every
#       particle satisfies is_alive(self.lifetime).


class Emitter:
    """
    Spawns and maintains a fixed-size population of polygon particles.
    """
    def __init__(self, count: int, lifetime: int, center: Point, size: float,
                 radius: float, sides: int, speed: float,
                 rng: Optional[np.random.Generator] = None,
                 max_separation_steps: int = MAX_SEPARATION_STEPS):
        self.count = count
        self.lifetime = lifetime
        self.center = center
        self.size = size
        self.radius = radius
        self.sides = sides
        self.speed = speed
        self.max_separation_steps = max_separation_steps
        self.particles: List[Particle] = []

        # All randomness in the simulation flows through this one generator.
        self.rng = rng if rng is not None else np.random.default_rng()

        self.unresolved_collisions = 0

        logging.info(
            f"Emitter initialized: {self.count} particles of {self.sides} sides, "
            f"lifetime {self.lifetime}, spawning within {self.radius} of {self.center}."
        )

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "Emitter":
        """
        Builds an emitter from the simulation parameters section of the config.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.

        Raises:
            ValueError: If a parameter is out of range.
        """
        count = int(params['count'])
        size = float(params['size'])
        radius = float(params['radius'])
        sides = int(params['sides'])
        max_separation_steps = int(params.get('max_separation_steps', MAX_SEPARATION_STEPS))

        problems = []
        if count < 0:
            problems.append(f"count must be non-negative, got {count}")
        if size <= 0:
            problems.append(f"size must be positive, got {size}")
        if radius < 0:
            problems.append(f"radius must be non-negative, got {radius}")
        if not MIN_SIDES <= sides <= MAX_SIDES:
            problems.append(f"sides must be between {MIN_SIDES} and {MAX_SIDES}, got {sides}")
        if max_separation_steps < 1:
            problems.append(f"max_separation_steps must be at least 1, got {max_separation_steps}")
        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

        center_x, center_y = params['center']
        return cls(
            count=count,
            lifetime=int(params['lifetime']),
            center=Point(float(center_x), float(center_y)),
            size=size,
            radius=radius,
            sides=sides,
            speed=float(params['speed']),
            rng=np.random.default_rng(params.get('seed')),
            max_separation_steps=max_separation_steps,
        )

    def fill(self) -> None:
        spawned = 0
        while len(self.particles) < self.count:
            ang = 2.0 * math.pi * self.rng.random()
            r = self.radius * self.rng.random()
            self.particles.append(Particle(
                self.center.x + math.cos(ang) * r,
                self.center.y + math.sin(ang) * r,
                self.size,
                2.0 * math.pi * self.rng.random(),
                self.rng.random(),
                self.sides,
                self.speed,
                rng=self.rng,
                max_separation_steps=self.max_separation_steps,
            ))
            spawned += 1
        if spawned:
            logging.debug(f"Spawned {spawned} particle(s).")

    def tick(self, screen_size: Callable[[], Tuple[float, float]]) -> None:
        """
        Executes one time step for the whole population.
        """
        for p in self.particles:
            self.unresolved_collisions += p.tick(self.particles, screen_size)

        before = len(self.particles)
        self.particles = [p for p in self.particles if p.is_alive(self.lifetime)]
        expired = before - len(self.particles)
        if expired:
            logging.debug(f"Evicted {expired} expired particle(s).")

        if len(self.particles) < self.count:
            self.fill()

    def average_speed(self) -> float:
        if not self.particles:
            return 0.0
        velocities = np.array([(p.velocity.x, p.velocity.y) for p in self.particles])
        return float(np.mean(np.linalg.norm(velocities, axis=1)))
