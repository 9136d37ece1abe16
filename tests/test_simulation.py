"""Unit tests for the emitter lifecycle."""

import unittest

import numpy as np

from algebra import Point
from simulation import Emitter


def screen_1000():
    return (1000.0, 1000.0)


def sparse_emitter(lifetime, count=8, seed=3):
    # Small particles spread over a large area, so collisions stay rare.
    return Emitter(
        count=count, lifetime=lifetime, center=Point(500.0, 500.0), size=2.0,
        radius=400.0, sides=3, speed=1.0, rng=np.random.default_rng(seed),
    )


class TestEmitterFill(unittest.TestCase):
    def test_fill_spawns_at_rest_within_radius(self):
        emitter = Emitter(
            count=8, lifetime=-1, center=Point(0.0, 0.0), size=10.0, radius=50.0,
            sides=3, speed=1.0, rng=np.random.default_rng(0),
        )
        emitter.fill()
        self.assertEqual(len(emitter.particles), 8)
        for p in emitter.particles:
            self.assertEqual(p.life, 0)
            self.assertEqual(p.velocity, Point(0.0, 0.0))
            self.assertLess(p.poly.center.distance_to(Point(0.0, 0.0)), 50.0 + 1e-9)
            self.assertEqual(p.poly.size, 10.0)
            self.assertEqual(p.poly.sides, 3)
            self.assertEqual(p.speed, 1.0)

    def test_fill_is_idempotent_when_full(self):
        emitter = sparse_emitter(lifetime=-1)
        emitter.fill()
        before = list(emitter.particles)
        emitter.fill()
        self.assertEqual(emitter.particles, before)

    def test_same_seed_same_population(self):
        first, second = sparse_emitter(-1, seed=11), sparse_emitter(-1, seed=11)
        first.fill()
        second.fill()
        self.assertEqual(
            [p.poly.center for p in first.particles],
            [p.poly.center for p in second.particles],
        )


class TestEmitterTick(unittest.TestCase):
    def test_expired_particles_are_evicted(self):
        emitter = sparse_emitter(lifetime=5)
        emitter.fill()
        for _ in range(12):
            emitter.tick(screen_1000)
            self.assertEqual(len(emitter.particles), 8)
            for p in emitter.particles:
                self.assertLess(p.life, 5)

    def test_lifetime_one_replaces_everything(self):
        emitter = sparse_emitter(lifetime=1)
        emitter.fill()
        before = list(emitter.particles)
        emitter.tick(screen_1000)
        self.assertEqual(len(emitter.particles), 8)
        for p in emitter.particles:
            self.assertEqual(p.life, 0)
            self.assertNotIn(p, before)

    def test_immortal_particles_keep_aging(self):
        emitter = sparse_emitter(lifetime=-1)
        emitter.fill()
        for _ in range(4):
            emitter.tick(screen_1000)
        self.assertEqual([p.life for p in emitter.particles], [4] * 8)

    def test_screen_size_queried_once_per_particle(self):
        calls = []

        def screen_size():
            calls.append(1)
            return screen_1000()

        emitter = sparse_emitter(lifetime=-1)
        emitter.fill()
        emitter.tick(screen_size)
        self.assertEqual(len(calls), 8)

    def test_particles_stay_in_bounds(self):
        emitter = sparse_emitter(lifetime=-1)
        emitter.fill()
        for _ in range(20):
            emitter.tick(screen_1000)
        for p in emitter.particles:
            self.assertTrue(0.0 <= p.poly.center.x <= 1000.0)
            self.assertTrue(0.0 <= p.poly.center.y <= 1000.0)

    def test_empty_emitter(self):
        emitter = sparse_emitter(lifetime=-1, count=0)
        emitter.fill()
        emitter.tick(screen_1000)
        self.assertEqual(emitter.particles, [])
        self.assertEqual(emitter.average_speed(), 0.0)

    def test_average_speed(self):
        emitter = sparse_emitter(lifetime=-1, count=2)
        emitter.fill()
        emitter.particles[0].velocity = Point(3.0, 4.0)
        emitter.particles[1].velocity = Point(0.0, 1.0)
        self.assertAlmostEqual(emitter.average_speed(), 3.0)

    def test_collisions_do_not_stop_the_tick(self):
        # A crowded emitter overlaps from the first frame.
        emitter = Emitter(
            count=6, lifetime=-1, center=Point(200.0, 200.0), size=30.0, radius=20.0,
            sides=3, speed=4.0, rng=np.random.default_rng(5), max_separation_steps=10,
        )
        emitter.fill()
        for _ in range(3):
            emitter.tick(lambda: (400.0, 400.0))
        self.assertEqual(len(emitter.particles), 6)
        # Particles at rest cannot step apart within ten separation steps.
        self.assertGreater(emitter.unresolved_collisions, 0)

    def test_crowded_particles_stay_in_bounds(self):
        # Collision partners moved after their own tick must still be clamped.
        for seed in (0, 1, 2):
            emitter = Emitter(
                count=16, lifetime=-1, center=Point(200.0, 200.0), size=32.0,
                radius=100.0, sides=3, speed=4.0, rng=np.random.default_rng(seed),
                max_separation_steps=30,
            )
            emitter.fill()
            for _ in range(8):
                emitter.tick(lambda: (400.0, 400.0))
                for p in emitter.particles:
                    with self.subTest(seed=seed, center=str(p.poly.center)):
                        self.assertTrue(0.0 <= p.poly.center.x <= 400.0)
                        self.assertTrue(0.0 <= p.poly.center.y <= 400.0)


class TestEmitterFromParams(unittest.TestCase):
    def params(self, **overrides):
        params = {
            "seed": 1, "count": 4, "lifetime": 10, "center": [10, 20],
            "size": 5, "radius": 15, "sides": 5, "speed": 2.0,
            "max_separation_steps": 7,
        }
        params.update(overrides)
        return params

    def test_valid_params(self):
        emitter = Emitter.from_params(self.params())
        self.assertEqual(emitter.count, 4)
        self.assertEqual(emitter.lifetime, 10)
        self.assertEqual(emitter.center, Point(10.0, 20.0))
        self.assertEqual(emitter.sides, 5)
        self.assertEqual(emitter.max_separation_steps, 7)
        emitter.fill()
        self.assertEqual(emitter.particles[0].max_separation_steps, 7)

    def test_invalid_params(self):
        for bad in ({"sides": 2}, {"sides": 300}, {"count": -1}, {"size": 0},
                    {"radius": -1}, {"max_separation_steps": 0}):
            with self.subTest(bad=bad):
                with self.assertLogs(level='CRITICAL'):
                    with self.assertRaises(ValueError):
                        Emitter.from_params(self.params(**bad))


if __name__ == '__main__':
    unittest.main()
