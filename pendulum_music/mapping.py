"""
Parameter Mapper - pendulum state to synth / render control values.

Every mapping here is a pure function: same inputs, same output, no hidden
state. Outputs are clamped into their documented interval unless noted.
The only stateful piece is ParameterSmoother, a thin exponential ramp that
sits *around* the mapped targets (the synth's rampTo).
"""

import math
from dataclasses import dataclass

import numpy as np


CHANNEL_MIN = 1.0
CHANNEL_MAX = 255.0
GAIN_FLOOR_DB = -100.0

A4_FREQ = 440.0
SCALES = {
    "chromatic": (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11),
    "pentatonic": (0, 2, 4, 7, 9),
}
MODULATION_SOURCES = ("color", "velocity")


def linear_map(value, in_min, in_max, out_min, out_max):
    """Linear rescale of value from [in_min, in_max] onto [out_min, out_max]."""
    span = in_max - in_min
    if span == 0:
        return float(out_min)
    return out_min + (out_max - out_min) * (value - in_min) / span


def constrain(value, lo, hi):
    if lo > hi:
        lo, hi = hi, lo
    return float(min(max(value, lo), hi))


def mass_to_frequency(mass, min_mass=5.0, max_mass=50.0,
                      min_freq=200.0, max_freq=1000.0):
    """
    Lighter bob -> higher pitch. Not clamped: masses outside
    [min_mass, max_mass] extrapolate along the same line.
    """
    span = max_mass - min_mass
    if span == 0:
        return float(max_freq)
    return min_freq + (max_freq - min_freq) * (max_mass - mass) / span


def velocity_to_modulation_index(angular_velocity, out_min=0.0, out_max=20.0):
    """|omega| over the domain [0, 1], clamped to [out_min, out_max]."""
    mapped = linear_map(abs(angular_velocity), 0.0, 1.0, out_min, out_max)
    return constrain(mapped, out_min, out_max)


def color_channel_to_harmonicity(channel, out_min=1.0, out_max=1000.0):
    mapped = linear_map(channel, CHANNEL_MIN, CHANNEL_MAX, out_min, out_max)
    return constrain(mapped, out_min, out_max)


def color_channel_to_modulation_index(channel, out_min=1.0, out_max=10.0):
    mapped = linear_map(channel, CHANNEL_MIN, CHANNEL_MAX, out_min, out_max)
    return constrain(mapped, out_min, out_max)


def position_to_pan(x, canvas_width, out_min=-1.0, out_max=1.0):
    """Horizontal bob position -> stereo pan, clamped to [-1, 1]."""
    mapped = linear_map(x, 0.0, canvas_width, out_min, out_max)
    return constrain(mapped, max(out_min, -1.0), min(out_max, 1.0))


def energy_to_envelope_parameter(energy, domain, range):
    """
    Generic clamped linear map for envelope-style values.

    `range` may be descending (e.g. more energy -> shorter attack).
    """
    in_min, in_max = domain
    out_min, out_max = range
    mapped = linear_map(energy, in_min, in_max, out_min, out_max)
    return constrain(mapped, out_min, out_max)


def gain_to_db(gain):
    """Linear gain -> decibels, floored for silent or negative gains."""
    if gain <= 0:
        return GAIN_FLOOR_DB
    return max(20.0 * math.log10(gain), GAIN_FLOOR_DB)


def quantize_frequency(freq, scale="pentatonic"):
    """Snap a frequency to the nearest pitch of `scale`, rooted on A."""
    if scale not in SCALES:
        raise ValueError(f"Unknown scale: {scale!r}")
    if freq <= 0 or not math.isfinite(freq):
        return float(freq)
    semis = 12.0 * math.log2(freq / A4_FREQ)
    octave = math.floor(semis / 12.0)
    best = None
    # Check neighbouring octaves so degrees near the octave edge snap correctly
    for o in (octave - 1, octave, octave + 1):
        for degree in SCALES[scale]:
            candidate = 12 * o + degree
            if best is None or abs(candidate - semis) < abs(best - semis):
                best = candidate
    return A4_FREQ * 2.0 ** (best / 12.0)


@dataclass
class MappingConfig:
    """Domains and ranges for every per-tick mapping."""
    min_mass: float = 5.0
    max_mass: float = 50.0
    min_freq: float = 200.0
    max_freq: float = 1000.0
    harmonicity_range: tuple = (1.0, 1000.0)
    modulation_range: tuple = (1.0, 10.0)
    velocity_modulation_range: tuple = (0.0, 20.0)
    modulation_source: str = "color"      # "color" (blue channel) or "velocity"
    quantize: str = None                  # None, "chromatic" or "pentatonic"
    canvas_width: float = 800.0
    # Envelope use sites: total pendulum energy drives attack/release/delay
    energy_domain: tuple = (0.0, 5000.0)
    attack_range: tuple = (0.5, 0.01)
    release_range: tuple = (1.0, 0.2)
    delay_time_range: tuple = (0.15, 0.05)

    def __post_init__(self):
        if self.modulation_source not in MODULATION_SOURCES:
            raise ValueError(f"Unknown modulation_source: {self.modulation_source!r}")
        if self.quantize is not None and self.quantize not in SCALES:
            raise ValueError(f"Unknown scale: {self.quantize!r}")

    @classmethod
    def from_cfg(cls, cfg, canvas_width=None):
        """Build from the `mapping` section of a config dict."""
        cfg = dict(cfg or {})
        for key in ("harmonicity_range", "modulation_range",
                    "velocity_modulation_range", "energy_domain",
                    "attack_range", "release_range", "delay_time_range"):
            if key in cfg:
                cfg[key] = tuple(cfg[key])
        if canvas_width is not None:
            cfg.setdefault("canvas_width", canvas_width)
        return cls(**cfg)


@dataclass
class Envelope:
    attack: float
    release: float
    delay_time: float


@dataclass
class ChannelParams:
    """Targets for one synth channel (one arm)."""
    frequency: float
    amplitude: float
    pan: float
    harmonicity: float
    modulation_index: float
    attack: float = 0.5
    release: float = 0.5
    delay_time: float = 0.15

    def as_dict(self):
        return {
            "frequency": self.frequency,
            "amplitude": self.amplitude,
            "pan": self.pan,
            "harmonicity": self.harmonicity,
            "modulation_index": self.modulation_index,
            "attack": self.attack,
            "release": self.release,
            "delay_time": self.delay_time,
        }


def envelope_for_energy(energy, mcfg):
    """Attack, release and delay time for a pendulum's total energy."""
    return Envelope(
        attack=energy_to_envelope_parameter(energy, mcfg.energy_domain, mcfg.attack_range),
        release=energy_to_envelope_parameter(energy, mcfg.energy_domain, mcfg.release_range),
        delay_time=energy_to_envelope_parameter(energy, mcfg.energy_domain, mcfg.delay_time_range),
    )


def map_channel(mass, angular_velocity, x, color, amplitude, envelope, mcfg):
    """
    Map one arm's state onto its synth channel.

    Harmonicity and (by default) modulation depth come from the bob color,
    not from the physics: red -> harmonicity, blue -> modulation index.
    """
    r, _, b = color
    freq = mass_to_frequency(mass, mcfg.min_mass, mcfg.max_mass,
                             mcfg.min_freq, mcfg.max_freq)
    if mcfg.quantize is not None:
        freq = quantize_frequency(freq, mcfg.quantize)

    if mcfg.modulation_source == "velocity":
        mod_index = velocity_to_modulation_index(angular_velocity, *mcfg.velocity_modulation_range)
    else:
        mod_index = color_channel_to_modulation_index(b, *mcfg.modulation_range)

    return ChannelParams(
        frequency=freq,
        amplitude=constrain(amplitude, 0.0, 1.0),
        pan=position_to_pan(x, mcfg.canvas_width),
        harmonicity=color_channel_to_harmonicity(r, *mcfg.harmonicity_range),
        modulation_index=mod_index,
        attack=envelope.attack,
        release=envelope.release,
        delay_time=envelope.delay_time,
    )


@dataclass
class ParameterSmoother:
    """
    Exponential approach toward the latest target.

    `ramp_ticks` is the number of ticks to cover ~63% of a step; 0 jumps
    straight to the target.
    """
    ramp_ticks: float = 6.0
    value: float = None

    @property
    def alpha(self):
        if self.ramp_ticks <= 0:
            return 1.0
        return 1.0 - float(np.exp(-1.0 / self.ramp_ticks))

    def update(self, target):
        if self.value is None:
            self.value = float(target)
        else:
            self.value += self.alpha * (target - self.value)
        return self.value

    def reset(self, value=None):
        self.value = value
