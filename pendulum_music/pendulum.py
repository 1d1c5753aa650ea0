"""
Pendulum - two Arms chained by origin, plus its two synth voices.

arm2's pivot is overwritten with arm1's bob every tick; that is the only
coupling between the segments (no shared angular-momentum terms). After the
arms move, the mapped channel parameters are pushed to the voices and the
removal policy is checked.
"""

import numpy as np

from pendulum_music.arm import Arm, DAMPING, TRAIL_CAPACITY
from pendulum_music.mapping import MappingConfig, envelope_for_energy, map_channel
from pendulum_music.voice import Voice


LIFETIME = 10000.0
STILLNESS_THRESHOLD = 0.01
STILLNESS_WINDOW = 30     # consecutive still ticks before removal
STILLNESS_TESTS = ("position", "velocity")
DEFAULT_AMPLITUDE = 0.5


class PendulumSnapshot:
    """Per-tick state handed to render / audio collaborators."""

    __slots__ = ("pendulum_id", "arm1", "arm2", "channels", "energy",
                 "complexity", "age", "is_active")

    def __init__(self, pendulum_id, arm1, arm2, channels, energy,
                 complexity, age, is_active):
        self.pendulum_id = pendulum_id
        self.arm1 = arm1
        self.arm2 = arm2
        self.channels = channels
        self.energy = energy
        self.complexity = complexity
        self.age = age
        self.is_active = is_active


class Pendulum:
    """
    A dual-arm unit.

    Removal happens when the stillness test stays below `stillness_threshold`
    for `stillness_window` consecutive ticks, or when `age` exceeds
    `lifetime`. The "position" test (default) measures
    |arm1.position + arm2.position|; "velocity" measures |omega1| + |omega2|
    and only counts once the pendulum has exceeded the threshold at least
    once, so a pendulum released from rest is not retired before it swings.

    `age` is measured from `created_at` on the owner's clock when `advance`
    is given `now`, otherwise it accumulates `dt`.
    """

    def __init__(self, x, y, length1, length2, mass1, mass2, angle1, angle2,
                 color1, color2, gravity, *,
                 damping=DAMPING, trail_capacity=TRAIL_CAPACITY,
                 lifetime=LIFETIME, stillness_threshold=STILLNESS_THRESHOLD,
                 stillness_test="position", stillness_window=STILLNESS_WINDOW,
                 mapping=None, voices=None,
                 on_remove=None, created_at=0.0, pendulum_id=0):
        if stillness_test not in STILLNESS_TESTS:
            raise ValueError(f"Unknown stillness_test: {stillness_test!r}")

        self.arm1 = Arm(x, y, length1, mass1, angle1, color1, gravity,
                        damping=damping, trail_capacity=trail_capacity)
        self.arm2 = Arm(self.arm1.position[0], self.arm1.position[1],
                        length2, mass2, angle2, color2, gravity,
                        damping=damping, trail_capacity=trail_capacity)

        self.lifetime = lifetime
        self.stillness_threshold = stillness_threshold
        self.stillness_test = stillness_test
        self.stillness_window = max(1, int(stillness_window))
        self.has_moved = False
        self.still_ticks = 0
        self.mapping = mapping if mapping is not None else MappingConfig()
        self.on_remove = on_remove
        self.pendulum_id = pendulum_id

        self.voices = voices if voices is not None else (Voice(name="arm1"), Voice(name="arm2"))
        for voice in self.voices:
            voice.trigger_attack()

        self.channels = None
        self.is_active = True
        self.created_at = created_at
        self.age = 0.0

    # ---- Simulation ----

    def advance(self, dt=1.0, amplitude=None, now=None):
        """One tick: arm1, re-pivot arm2, arm2, sound, removal check."""
        if not self.is_active:
            return

        self.arm1.advance(dt)
        self.arm2.set_origin(self.arm1.position.copy())
        self.arm2.advance(dt)
        if now is None:
            self.age += dt
        else:
            self.age = now - self.created_at

        self.update_sound(DEFAULT_AMPLITUDE if amplitude is None else amplitude)

        if self.should_remove():
            self.remove()

    def map_channels(self, amplitude):
        envelope = envelope_for_energy(self.total_energy(), self.mapping)
        return tuple(
            map_channel(arm.mass, arm.angular_velocity, arm.position[0],
                        arm.color, amplitude, envelope, self.mapping)
            for arm in (self.arm1, self.arm2)
        )

    def update_sound(self, amplitude):
        self.channels = self.map_channels(amplitude)
        for voice, params in zip(self.voices, self.channels):
            voice.set_params(params)

    def stillness(self):
        if self.stillness_test == "velocity":
            return abs(self.arm1.angular_velocity) + abs(self.arm2.angular_velocity)
        return float(np.linalg.norm(self.arm1.position + self.arm2.position))

    def is_still(self):
        below = self.stillness() < self.stillness_threshold
        if self.stillness_test == "velocity" and not self.has_moved:
            self.has_moved = not below
            return False
        return below

    def should_remove(self):
        if self.is_still():
            self.still_ticks += 1
        else:
            self.still_ticks = 0
        return (self.still_ticks >= self.stillness_window
                or self.age > self.lifetime)

    def remove(self):
        """Deactivate, release both voices and notify the owner, once."""
        if not self.is_active:
            return
        self.is_active = False
        for voice in self.voices:
            voice.release()
        if self.on_remove is not None:
            self.on_remove(self)

    # ---- Derived metrics ----

    def total_energy(self):
        return self.arm1.energy() + self.arm2.energy()

    def motion_complexity(self):
        return abs(self.arm1.angular_velocity) + abs(self.arm2.angular_velocity)

    def snapshot(self):
        return PendulumSnapshot(
            pendulum_id=self.pendulum_id,
            arm1=self.arm1.snapshot(),
            arm2=self.arm2.snapshot(),
            channels=self.channels,
            energy=self.total_energy(),
            complexity=self.motion_complexity(),
            age=self.age,
            is_active=self.is_active,
        )

    def display(self):
        """Rendering belongs to the visualizer; hand it the current state."""
        return self.snapshot()
