"""
Real-Time Visualizer - matplotlib FuncAnimation with sliders.

Panels:
  1. Pendulums with fading trails (canvas coordinates, +y down)
  2. Ensemble energy
  3. Mapped frequencies per arm

Controls:
  - Amplitude and gravity sliders (shared inputs read by the ensemble)
  - Add / Add random / Remove oldest buttons

Only snapshots are read here; all physics lives in the ensemble.
"""

import numpy as np
import matplotlib

# Pick the best available interactive backend
for _be in ("TkAgg", "Qt5Agg", "GTK3Agg", "Agg"):
    try:
        matplotlib.use(_be)
        break
    except Exception:
        continue

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Button, Slider

from pendulum_music.params import Explicit, PendulumParams


def to_rgb(color):
    """(r, g, b) in 0..255 -> matplotlib rgb tuple."""
    return tuple(float(np.clip(c, 0, 255)) / 255.0 for c in color)


class RealTimeVisualizer:
    """Real-time matplotlib dashboard for the pendulum ensemble."""

    def __init__(self, ensemble, cfg):
        self.ens = ensemble
        self.cfg = cfg

        plt.style.use("dark_background")
        self.fig = plt.figure(figsize=(14, 9), facecolor="#0a0a0a")
        self.fig.canvas.manager.set_window_title("Pendulum Music")

        gs = self.fig.add_gridspec(
            3, 3, hspace=0.4, wspace=0.3,
            left=0.05, right=0.95, top=0.93, bottom=0.2
        )

        # Panel 1: pendulums
        self.ax_pend = self.fig.add_subplot(gs[0:3, 0:2])

        # Panel 2: energy
        self.ax_energy = self.fig.add_subplot(gs[0, 2])
        self.ax_energy.set_title("Ensemble Energy", fontsize=9, color="#ff922b")

        # Panel 3: frequencies
        self.ax_freq = self.fig.add_subplot(gs[1:3, 2])
        self.ax_freq.set_title("Arm Frequencies (Hz)", fontsize=9, color="#74c0fc")

        # Sliders
        slider_color = "#2a2a3a"
        ax_amp = self.fig.add_axes([0.08, 0.1, 0.25, 0.02], facecolor=slider_color)
        ax_grav = self.fig.add_axes([0.08, 0.06, 0.25, 0.02], facecolor=slider_color)
        self.s_amplitude = Slider(ax_amp, "Amplitude", 0.01, 1.0,
                                  valinit=self.ens.amplitude, color="#51cf66")
        self.s_gravity = Slider(ax_grav, "Gravity", -10.0, 10.0,
                                valinit=self.ens.gravity, valstep=0.1, color="#ff6b6b")
        self.s_amplitude.on_changed(self._on_amplitude)
        self.s_gravity.on_changed(self._on_gravity)

        # Buttons
        self.b_add = Button(self.fig.add_axes([0.45, 0.06, 0.1, 0.05]), "Add")
        self.b_random = Button(self.fig.add_axes([0.57, 0.06, 0.1, 0.05]), "Add random")
        self.b_remove = Button(self.fig.add_axes([0.69, 0.06, 0.12, 0.05]), "Remove oldest")
        self.b_add.on_clicked(self._on_add)
        self.b_random.on_clicked(self._on_random)
        self.b_remove.on_clicked(self._on_remove)

    def _on_amplitude(self, val):
        self.ens.amplitude = val

    def _on_gravity(self, val):
        self.ens.gravity = val

    def _on_add(self, _event):
        self.ens.add_pendulum(Explicit(PendulumParams(gravity=self.ens.gravity)))

    def _on_random(self, _event):
        self.ens.add_random()

    def _on_remove(self, _event):
        self.ens.remove_oldest()

    def _draw_arm(self, arm, linewidth):
        rgb = to_rgb(arm.color)
        if len(arm.trail) > 2:
            trail = np.array(arm.trail)
            n_trail = len(trail)
            alphas = np.linspace(0.05, 0.8, n_trail)
            for i in range(n_trail - 1):
                self.ax_pend.plot(
                    trail[i:i + 2, 0], trail[i:i + 2, 1],
                    color=rgb, alpha=alphas[i], linewidth=1.0
                )
        self.ax_pend.plot([arm.origin[0], arm.position[0]],
                          [arm.origin[1], arm.position[1]],
                          color="#dddddd", linewidth=linewidth, zorder=5)
        self.ax_pend.scatter([arm.position[0]], [arm.position[1]], color=[rgb],
                             s=4 * arm.mass, zorder=6, edgecolors="white", linewidths=0.5)

    def _update(self, frame):
        """Animation update called each frame."""
        self.ens.advance_all()
        snaps = self.ens.snapshot()

        # ---- Pendulums ----
        self.ax_pend.clear()
        self.ax_pend.set_facecolor("#5c5c5c")
        self.ax_pend.set_xlim(0, self.ens.width)
        self.ax_pend.set_ylim(self.ens.height, 0)
        self.ax_pend.set_aspect("equal")
        self.ax_pend.set_title("Pendulums", fontsize=11, color="#ff6b6b")
        for snap in snaps:
            self._draw_arm(snap.arm1, 2.0)
            self._draw_arm(snap.arm2, 1.5)
            self.ax_pend.scatter([snap.arm1.origin[0]], [snap.arm1.origin[1]],
                                 color="white", s=20, zorder=7)

        # ---- Energy ----
        self.ax_energy.clear()
        self.ax_energy.set_facecolor("#0a0a0a")
        self.ax_energy.set_title("Ensemble Energy", fontsize=9, color="#ff922b")
        if len(self.ens.energy_history) > 1:
            self.ax_energy.plot(self.ens.energy_history[-300:],
                                color="#ff922b", alpha=0.8, linewidth=0.8)
        self.ax_energy.tick_params(labelsize=6, colors="#444")

        # ---- Frequencies ----
        self.ax_freq.clear()
        self.ax_freq.set_facecolor("#0a0a0a")
        self.ax_freq.set_title("Arm Frequencies (Hz)", fontsize=9, color="#74c0fc")
        labels, freqs, colors = [], [], []
        for snap in snaps:
            if snap.channels is None:
                continue
            for i, (ch, arm) in enumerate(zip(snap.channels, (snap.arm1, snap.arm2)), start=1):
                labels.append(f"{snap.pendulum_id}.{i}")
                freqs.append(ch.frequency)
                colors.append(to_rgb(arm.color))
        if freqs:
            self.ax_freq.barh(labels, freqs, color=colors, alpha=0.85)
        self.ax_freq.set_xlim(0, self.ens.mapping.max_freq * 1.1)
        self.ax_freq.tick_params(labelsize=6, colors="#888")

        self.fig.suptitle(
            f"Pendulum Music  |  tick={self.ens.tick}  |  "
            f"pendulums={len(self.ens)}/{self.ens.max_pendulums}  |  "
            f"amplitude={self.ens.amplitude:.2f}  gravity={self.ens.gravity:.1f}",
            fontsize=12, color="#aaa", y=0.97
        )

        return []

    def run(self, tb_logger=None):
        """Start the real-time animation."""
        def update_with_logging(frame):
            result = self._update(frame)
            if tb_logger is not None:
                tb_logger.log(self.ens)
            return result

        interval = self.cfg.get("visualization", {}).get("update_interval_ms", 16)
        self.anim = FuncAnimation(
            self.fig, update_with_logging,
            interval=interval, blit=False, cache_frame_data=False
        )
        plt.show()
