import math
import unittest

import numpy as np

from pendulum_music.arm import Arm, TRAIL_CAPACITY


def make_arm(**overrides):
    kwargs = dict(x=400.0, y=300.0, length=100.0, mass=15.0, angle=np.pi / 4,
                  color=(127, 0, 127), gravity=1.0)
    kwargs.update(overrides)
    return Arm(**kwargs)


class TestArmIntegration(unittest.TestCase):
    def test_initial_state(self):
        arm = make_arm()
        self.assertEqual(arm.angular_velocity, 0.0)
        self.assertAlmostEqual(arm.position[0], 400.0 + 100.0 * math.sin(np.pi / 4))
        self.assertAlmostEqual(arm.position[1], 300.0 + 100.0 * math.cos(np.pi / 4))
        self.assertEqual(arm.trail, [])

    def test_single_step_matches_update_rule(self):
        arm = make_arm()
        theta = np.pi / 4
        alpha = -(1.0 / 100.0) * math.sin(theta)
        omega = alpha * 0.99
        arm.advance()
        self.assertAlmostEqual(arm.angular_acceleration, alpha)
        self.assertAlmostEqual(arm.angular_velocity, omega)
        self.assertAlmostEqual(arm.angle, theta + omega)

    def test_finite_over_long_runs(self):
        cases = [
            dict(gravity=1.0, length=100.0, angle=np.pi / 4),
            dict(gravity=-10.0, length=30.0, angle=3.0),
            dict(gravity=10.0, length=0.5, angle=-2.0),
            dict(gravity=0.0, length=250.0, angle=6.0),
            dict(gravity=10.0, length=100.0, angle=0.1, mass=0.0),
            dict(gravity=10.0, length=100.0, angle=0.1, mass=1e9),
            dict(gravity=1.0, length=-100.0, angle=np.pi / 4),
            dict(gravity=1.0, length=100.0, angle=np.pi / 4, mass=-5.0),
            dict(gravity=1.0, length=-100.0, angle=np.pi / 4, mass=-5.0),
            dict(gravity=10.0, length=1e-8, angle=np.pi / 4),
        ]
        for case in cases:
            with self.subTest(**case):
                arm = make_arm(**case)
                for _ in range(10000):
                    arm.advance()
                self.assertTrue(math.isfinite(arm.angle))
                self.assertTrue(math.isfinite(arm.angular_velocity))
                self.assertTrue(np.all(np.isfinite(arm.position)))
                self.assertTrue(math.isfinite(arm.energy()))

    def test_zero_length_has_no_torque(self):
        arm = make_arm(length=0.0, angle=1.0)
        for _ in range(100):
            arm.advance()
        self.assertEqual(arm.angular_velocity, 0.0)
        self.assertEqual(arm.angle, 1.0)
        np.testing.assert_allclose(arm.position, arm.origin)

    def test_zero_gravity_keeps_rest_state(self):
        arm = make_arm(gravity=0.0, angle=1.2)
        for _ in range(1000):
            arm.advance()
        self.assertEqual(arm.angle, 1.2)
        self.assertEqual(arm.angular_velocity, 0.0)

    def test_mass_does_not_affect_motion(self):
        light = make_arm(mass=5.0)
        heavy = make_arm(mass=50.0)
        for _ in range(500):
            light.advance()
            heavy.advance()
        self.assertEqual(light.angle, heavy.angle)
        self.assertEqual(light.angular_velocity, heavy.angular_velocity)

    def test_position_follows_defining_formula(self):
        arm = make_arm(angle=2.0, gravity=3.0)
        for _ in range(300):
            arm.advance()
            expected = arm.origin + arm.length * np.array([math.sin(arm.angle), math.cos(arm.angle)])
            np.testing.assert_allclose(arm.position, expected)
            np.testing.assert_allclose(arm.trail[-1], arm.position)

    def test_set_origin_moves_position(self):
        arm = make_arm()
        arm.set_origin((10.0, 20.0))
        np.testing.assert_allclose(arm.position, arm.compute_position())
        self.assertAlmostEqual(arm.position[0], 10.0 + 100.0 * math.sin(np.pi / 4))


class TestArmDamping(unittest.TestCase):
    def test_velocity_envelope_decays(self):
        arm = make_arm(angle=np.pi / 3)
        # small-angle period is 2*pi*sqrt(L/g) ~ 63 ticks; use two-period windows
        window = 126
        peaks = []
        for _ in range(6):
            speeds = []
            for _ in range(window):
                arm.advance()
                speeds.append(abs(arm.angular_velocity))
            peaks.append(max(speeds))
        for earlier, later in zip(peaks, peaks[1:]):
            self.assertLess(later, earlier)

    def test_energy_non_increasing_across_periods(self):
        arm = make_arm(angle=np.pi / 3)
        window = 126
        peaks = []
        for _ in range(6):
            energies = []
            for _ in range(window):
                arm.advance()
                energies.append(arm.energy())
            peaks.append(max(energies))
        for earlier, later in zip(peaks, peaks[1:]):
            self.assertLessEqual(later, earlier + 1e-9)

    def test_undamped_arm_keeps_swinging(self):
        arm = make_arm(damping=1.0)
        for _ in range(1000):
            arm.advance()
        speeds = []
        for _ in range(126):
            arm.advance()
            speeds.append(abs(arm.angular_velocity))
        self.assertGreater(max(speeds), 0.01)


class TestArmTrail(unittest.TestCase):
    def test_trail_is_bounded_fifo(self):
        arm = make_arm()
        positions = []
        for _ in range(TRAIL_CAPACITY + 50):
            arm.advance()
            positions.append(arm.position.copy())
        self.assertEqual(len(arm.trail), TRAIL_CAPACITY)
        np.testing.assert_allclose(arm.trail[0], positions[50])
        np.testing.assert_allclose(arm.trail[-1], positions[-1])

    def test_custom_capacity(self):
        arm = make_arm(trail_capacity=3)
        for _ in range(10):
            arm.advance()
        self.assertEqual(len(arm.trail), 3)

    def test_snapshot_is_a_copy(self):
        arm = make_arm()
        arm.advance()
        snap = arm.snapshot()
        arm.advance()
        self.assertEqual(len(snap.trail), 1)
        self.assertFalse(np.allclose(snap.position, arm.position))
        self.assertEqual(snap.color, (127, 0, 127))
        self.assertEqual(snap.mass, 15.0)


if __name__ == "__main__":
    unittest.main()
