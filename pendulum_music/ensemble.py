"""
Ensemble - the bounded, ordered collection of live pendulums.

Driven once per frame by the host loop:
  shared inputs snapshot -> advance each pendulum -> drop removed ones -> metrics

Insertion order is eviction order: when the ensemble is full, the oldest
member (index 0) is removed before the new one is appended.
"""

import numpy as np

from pendulum_music.arm import DAMPING, TRAIL_CAPACITY
from pendulum_music.mapping import MappingConfig
from pendulum_music.params import AddRequest, Explicit, PendulumParams, Randomized, RandomRanges
from pendulum_music.pendulum import (
    Pendulum, LIFETIME, STILLNESS_THRESHOLD, STILLNESS_WINDOW, DEFAULT_AMPLITUDE,
)
from pendulum_music.session_log import LogRecord, SessionLog
from pendulum_music.voice import Voice, RAMP_TIME, FRAME_RATE


MAX_PENDULUMS = 5
HISTORY_LENGTH = 1000


class Ensemble:
    """Owns every active Pendulum and advances them once per tick."""

    def __init__(self, cfg=None, rng=None, voice_factory=Voice):
        cfg = cfg or {}
        self.cfg = cfg
        self.rng = rng if rng is not None else np.random.default_rng()
        self.voice_factory = voice_factory

        canvas = cfg.get("canvas", {})
        self.width = float(canvas.get("width", 800))
        self.height = float(canvas.get("height", 600))

        physics = cfg.get("physics", {})
        self.damping = physics.get("damping", DAMPING)
        self.trail_capacity = physics.get("trail_capacity", TRAIL_CAPACITY)
        self.dt = physics.get("dt", 1.0)

        lifecycle = cfg.get("lifecycle", {})
        self.max_pendulums = lifecycle.get("max_pendulums", MAX_PENDULUMS)
        if self.max_pendulums < 1:
            raise ValueError(f"max_pendulums must be at least 1, got {self.max_pendulums}")
        self.lifetime = lifecycle.get("lifetime", LIFETIME)
        self.stillness_threshold = lifecycle.get("stillness_threshold", STILLNESS_THRESHOLD)
        self.stillness_test = lifecycle.get("stillness_test", "position")
        self.stillness_window = lifecycle.get("stillness_window", STILLNESS_WINDOW)

        self.mapping = MappingConfig.from_cfg(cfg.get("mapping"), canvas_width=self.width)

        audio = cfg.get("audio", {})
        self.ramp_time = audio.get("ramp_time", RAMP_TIME)
        self.frame_rate = audio.get("frame_rate", FRAME_RATE)

        random_cfg = cfg.get("random", {})
        self.random_ranges = RandomRanges(**{
            k: tuple(v) if isinstance(v, list) else v
            for k, v in random_cfg.items()
        })

        # Shared control inputs, written by the UI, read once per tick
        self.amplitude = audio.get("amplitude", DEFAULT_AMPLITUDE)
        self.gravity = physics.get("gravity", 1.0)

        self.pendulums = []
        self.log = SessionLog()
        self.time = 0.0
        self.tick = 0
        self._next_id = 0

        # Metrics history
        self.energy_history = []
        self.count_history = []

    def __len__(self):
        return len(self.pendulums)

    # ---- Membership ----

    def add_pendulum(self, request=None):
        """Append a pendulum built from an Explicit or Randomized request."""
        if request is None:
            request = Explicit(PendulumParams(gravity=self.gravity))
        if not isinstance(request, AddRequest):
            raise TypeError(f"Expected Explicit or Randomized, got {type(request).__name__}")

        if isinstance(request, Randomized):
            gravity = self.gravity if request.gravity is None else request.gravity
            params = request.ranges.sample(self.rng, self.width, self.height, gravity)
            controls_shown = False
        else:
            params = request.params
            controls_shown = True

        while len(self.pendulums) >= self.max_pendulums:
            self.remove_oldest()

        pendulum = self._build(params)
        self.pendulums.append(pendulum)
        self.log.append(LogRecord.from_params(params, controls_shown))
        return pendulum

    def add_random(self):
        return self.add_pendulum(Randomized(self.random_ranges))

    def _build(self, params):
        color1, color2 = params.colors()
        pendulum_id = self._next_id
        self._next_id += 1
        voices = tuple(
            self.voice_factory(ramp_time=self.ramp_time, frame_rate=self.frame_rate,
                               name=f"pendulum{pendulum_id}/arm{i}")
            for i in (1, 2)
        )
        return Pendulum(
            self.width / 2, self.height / 2,
            params.length1, params.length2,
            params.mass1, params.mass2,
            params.angle1, params.angle2,
            color1, color2, params.gravity,
            damping=self.damping,
            trail_capacity=self.trail_capacity,
            lifetime=self.lifetime,
            stillness_threshold=self.stillness_threshold,
            stillness_test=self.stillness_test,
            stillness_window=self.stillness_window,
            mapping=self.mapping,
            voices=voices,
            on_remove=self._drop,
            created_at=self.time,
            pendulum_id=pendulum_id,
        )

    def _drop(self, pendulum):
        if pendulum in self.pendulums:
            self.pendulums.remove(pendulum)

    def remove_oldest(self):
        """Remove index 0; no-op on an empty ensemble."""
        if not self.pendulums:
            return None
        oldest = self.pendulums[0]
        oldest.remove()
        # remove() already dropped it via the callback; guard foreign pendulums
        self._drop(oldest)
        return oldest

    def clear(self):
        while self.pendulums:
            self.remove_oldest()

    # ---- Simulation ----

    def advance_all(self):
        """Advance every active member once, in insertion order."""
        amplitude = self.amplitude
        now = self.time + self.dt
        for pendulum in list(self.pendulums):
            if pendulum.is_active:
                pendulum.advance(self.dt, amplitude=amplitude, now=now)
        self.time += self.dt
        self.tick += 1
        self._record_metrics()

    def _record_metrics(self):
        self.energy_history.append(sum(p.total_energy() for p in self.pendulums))
        if len(self.energy_history) > HISTORY_LENGTH:
            self.energy_history.pop(0)

        self.count_history.append(len(self.pendulums))
        if len(self.count_history) > HISTORY_LENGTH:
            self.count_history.pop(0)

    def snapshot(self):
        return [p.snapshot() for p in self.pendulums]

    def get_metrics(self):
        """Return current metrics dict."""
        return {
            "tick": self.tick,
            "time": self.time,
            "count": len(self.pendulums),
            "amplitude": self.amplitude,
            "total_energy": self.energy_history[-1] if self.energy_history else 0.0,
            "pend_ids": [p.pendulum_id for p in self.pendulums],
            "pend_energies": [p.total_energy() for p in self.pendulums],
            "pend_complexities": [p.motion_complexity() for p in self.pendulums],
        }
