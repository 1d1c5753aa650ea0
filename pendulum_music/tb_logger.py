"""
TensorBoard Logger - logs ensemble metrics to TensorBoard.
"""

import numpy as np
from torch.utils.tensorboard import SummaryWriter


class TBLogger:
    """Wraps TensorBoard SummaryWriter for ensemble metrics."""

    def __init__(self, log_dir="runs", log_interval=10):
        self.writer = SummaryWriter(log_dir=log_dir)
        self.log_interval = log_interval
        self.step_count = 0

    def log(self, ensemble):
        """Log metrics from the ensemble to TensorBoard."""
        self.step_count += 1
        if self.step_count % self.log_interval != 0:
            return

        t = ensemble.tick
        metrics = ensemble.get_metrics()

        # Scalar metrics
        self.writer.add_scalar("ensemble/count", metrics["count"], t)
        self.writer.add_scalar("ensemble/amplitude", metrics["amplitude"], t)
        self.writer.add_scalar("energy/total", metrics["total_energy"], t)

        for pid, e, c in zip(metrics["pend_ids"], metrics["pend_energies"],
                             metrics["pend_complexities"]):
            self.writer.add_scalar(f"energy/pendulum_{pid}", e, t)
            self.writer.add_scalar(f"complexity/pendulum_{pid}", c, t)

        if metrics["pend_energies"]:
            self.writer.add_histogram("pendulum_energies",
                                      np.asarray(metrics["pend_energies"]), t)

        # Arm states and mapped frequencies
        for pend in ensemble.pendulums:
            for i, arm in enumerate((pend.arm1, pend.arm2), start=1):
                tag = f"pendulum_{pend.pendulum_id}/arm{i}"
                self.writer.add_scalar(f"{tag}/theta", arm.angle, t)
                self.writer.add_scalar(f"{tag}/omega", arm.angular_velocity, t)
            if pend.channels is not None:
                for i, ch in enumerate(pend.channels, start=1):
                    self.writer.add_scalar(
                        f"pendulum_{pend.pendulum_id}/arm{i}/frequency", ch.frequency, t
                    )
                    self.writer.add_scalar(
                        f"pendulum_{pend.pendulum_id}/arm{i}/pan", ch.pan, t
                    )

    def close(self):
        self.writer.close()
