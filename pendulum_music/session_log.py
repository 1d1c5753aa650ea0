"""
Session log - one flat record per added pendulum, exportable as CSV.
"""

import csv
import io
from dataclasses import dataclass, astuple
from pathlib import Path


CSV_HEADER = ("angle1", "angle2", "length1", "length2", "mass1", "mass2",
              "r1", "b1", "r2", "b2", "gravity", "areControlsShown")


@dataclass
class LogRecord:
    angle1: float
    angle2: float
    length1: float
    length2: float
    mass1: float
    mass2: float
    r1: float
    b1: float
    r2: float
    b2: float
    gravity: float
    are_controls_shown: bool

    @classmethod
    def from_params(cls, params, controls_shown):
        return cls(
            params.angle1, params.angle2, params.length1, params.length2,
            params.mass1, params.mass2, params.r1, params.b1,
            params.r2, params.b2, params.gravity, bool(controls_shown),
        )

    def row(self):
        values = list(astuple(self))
        values[-1] = "true" if self.are_controls_shown else "false"
        return values


class SessionLog:
    """Append-only, ordered by addition time."""

    def __init__(self):
        self.records = []

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def append(self, record):
        self.records.append(record)

    def write(self, f):
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for record in self.records:
            writer.writerow(record.row())

    def to_csv(self):
        buf = io.StringIO()
        self.write(buf)
        return buf.getvalue()

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            self.write(f)
        return path
