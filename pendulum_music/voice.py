"""
Voice - in-memory stand-in for one synth channel.

A real audio backend would subclass this and forward the smoothed values to
its oscillators. The base class only ramps toward the mapped targets and
tracks its lifecycle, which is all the simulation core needs.
"""

from pendulum_music.mapping import ParameterSmoother, gain_to_db


RAMP_TIME = 0.1      # seconds, as the synth's rampTo
FRAME_RATE = 60.0


class Voice:
    """One FM-synth channel: frequency, gain, pan, harmonicity, mod index."""

    RAMPED = ("frequency", "amplitude", "pan", "harmonicity", "modulation_index")

    def __init__(self, ramp_time=RAMP_TIME, frame_rate=FRAME_RATE, name=""):
        self.name = name
        self.ramp_ticks = ramp_time * frame_rate
        self.smoothers = {k: ParameterSmoother(self.ramp_ticks) for k in self.RAMPED}
        self.target = None
        self.playing = False
        self.release_count = 0
        self.updates = 0

    def trigger_attack(self):
        if self.release_count == 0:
            self.playing = True

    def set_params(self, params):
        """Record the new targets and step every ramp once."""
        if self.release_count:
            return
        self.target = params
        self.updates += 1
        values = params.as_dict()
        for key, smoother in self.smoothers.items():
            smoother.update(values[key])

    def current(self, key):
        return self.smoothers[key].value

    @property
    def volume_db(self):
        gain = self.current("amplitude")
        return gain_to_db(0.0 if gain is None else gain)

    def release(self):
        """Stop the voice. Safe to call more than once."""
        if self.release_count:
            return
        self.release_count = 1
        self.playing = False
