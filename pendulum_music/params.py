"""
Construction parameters for a Pendulum and the two ways to obtain them:
explicit values (the control panel) or independent random draws.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class PendulumParams:
    """The ten per-pendulum values plus gravity. Defaults match the sliders."""
    angle1: float = np.pi / 4
    angle2: float = np.pi / 4
    length1: float = 100.0
    length2: float = 100.0
    mass1: float = 15.0
    mass2: float = 15.0
    r1: float = 127.0
    b1: float = 127.0
    r2: float = 127.0
    b2: float = 127.0
    gravity: float = 1.0

    def colors(self):
        """Bob colors as (r, g, b); green is always 0."""
        return (self.r1, 0.0, self.b1), (self.r2, 0.0, self.b2)


@dataclass
class RandomRanges:
    """
    Ranges for randomized pendulums. Lengths are fractions of the canvas.

    The angle range is stored as given; sampling always uses the smaller
    bound as the minimum, so (4pi/3, 2pi/3) draws from [2pi/3, 4pi/3].
    """
    angle: tuple = (4 * np.pi / 3, 2 * np.pi / 3)
    length_min_height_frac: float = 0.15
    length_max_min_dim_frac: float = 0.5
    mass: tuple = (5.0, 50.0)
    channel: tuple = (1.0, 255.0)

    @staticmethod
    def _uniform(rng, bounds):
        lo, hi = sorted(bounds)
        return float(rng.uniform(lo, hi))

    def sample(self, rng, width, height, gravity=1.0):
        length_bounds = (self.length_min_height_frac * height,
                         self.length_max_min_dim_frac * min(width, height))
        return PendulumParams(
            angle1=self._uniform(rng, self.angle),
            angle2=self._uniform(rng, self.angle),
            length1=self._uniform(rng, length_bounds),
            length2=self._uniform(rng, length_bounds),
            mass1=self._uniform(rng, self.mass),
            mass2=self._uniform(rng, self.mass),
            r1=self._uniform(rng, self.channel),
            b1=self._uniform(rng, self.channel),
            r2=self._uniform(rng, self.channel),
            b2=self._uniform(rng, self.channel),
            gravity=gravity,
        )


@dataclass
class Explicit:
    """Add a pendulum with exactly these parameters."""
    params: PendulumParams = field(default_factory=PendulumParams)


@dataclass
class Randomized:
    """Add a pendulum with every parameter drawn independently."""
    ranges: RandomRanges = field(default_factory=RandomRanges)
    gravity: float = None    # None: use the ensemble's current gravity


AddRequest = (Explicit, Randomized)
