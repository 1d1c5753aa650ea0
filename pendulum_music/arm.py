"""
Arm - a single damped pendulum segment.

Simple-pendulum torque model, integrated once per frame:

    alpha = -(g / L) * sin(theta)
    omega = (omega + alpha * dt) * damping ** dt
    theta = theta + omega * dt

Mass is carried for sound mapping and bob size only; it never enters the
integration. Two Arms chained by origin make a Pendulum.
"""

import numpy as np


DAMPING = 0.99
TRAIL_CAPACITY = 200
LENGTH_EPSILON = 1e-9


class ArmSnapshot:
    """Read-only view of an arm for renderers."""

    __slots__ = ("origin", "position", "trail", "color", "mass")

    def __init__(self, origin, position, trail, color, mass):
        self.origin = origin
        self.position = position
        self.trail = trail
        self.color = color
        self.mass = mass


class Arm:
    """
    One damped rotational segment.

    `position` is always origin + length * (sin(angle), cos(angle)); it is
    never assigned independently. Screen coordinates: +y points down, so an
    angle of 0 hangs straight below the origin.
    """

    def __init__(self, x, y, length, mass, angle, color, gravity,
                 damping=DAMPING, trail_capacity=TRAIL_CAPACITY):
        self.origin = np.array([x, y], dtype=float)
        self.length = float(length)
        self.mass = float(mass)
        self.angle = float(angle)
        self.angular_velocity = 0.0
        self.angular_acceleration = 0.0
        self.gravity = float(gravity)
        self.damping = float(damping)
        self.trail_capacity = int(trail_capacity)
        self.color = tuple(color)

        self.position = self.compute_position()
        self.trail = []

    def compute_position(self):
        """Bob position from (origin, length, angle)."""
        return self.origin + self.length * np.array(
            [np.sin(self.angle), np.cos(self.angle)]
        )

    def set_origin(self, point):
        """Move the pivot; position follows immediately."""
        self.origin = np.array(point, dtype=float)
        self.position = self.compute_position()

    def torque(self):
        if abs(self.length) <= LENGTH_EPSILON:
            return 0.0
        return (self.gravity / self.length) * np.sin(self.angle)

    def advance(self, dt=1.0):
        """Integrate one step and record the new bob position in the trail."""
        self.angular_acceleration = -self.torque()
        self.angular_velocity += self.angular_acceleration * dt
        self.angular_velocity *= self.damping ** dt
        self.angle += self.angular_velocity * dt

        self.position = self.compute_position()

        self.trail.append(self.position.copy())
        if len(self.trail) > self.trail_capacity:
            self.trail.pop(0)

    # ---- Energy ----

    def kinetic_energy(self):
        return 0.5 * self.mass * self.angular_velocity ** 2

    def potential_energy(self):
        return self.mass * self.gravity * self.length * (1.0 - np.cos(self.angle))

    def energy(self):
        return self.kinetic_energy() + self.potential_energy()

    def snapshot(self):
        return ArmSnapshot(
            origin=self.origin.copy(),
            position=self.position.copy(),
            trail=[p.copy() for p in self.trail],
            color=self.color,
            mass=self.mass,
        )
