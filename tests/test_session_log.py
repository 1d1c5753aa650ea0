import csv
import tempfile
import unittest
from pathlib import Path

import numpy as np

from pendulum_music.params import PendulumParams, RandomRanges
from pendulum_music.session_log import CSV_HEADER, LogRecord, SessionLog


class TestSessionLog(unittest.TestCase):
    def test_header_row(self):
        text = SessionLog().to_csv()
        self.assertEqual(
            text,
            "angle1,angle2,length1,length2,mass1,mass2,r1,b1,r2,b2,gravity,areControlsShown\n",
        )

    def test_rows_in_addition_order(self):
        log = SessionLog()
        log.append(LogRecord.from_params(PendulumParams(mass1=10.0), controls_shown=True))
        log.append(LogRecord.from_params(PendulumParams(mass1=20.0), controls_shown=False))
        rows = list(csv.reader(log.to_csv().splitlines()))
        self.assertEqual(tuple(rows[0]), CSV_HEADER)
        self.assertEqual(len(rows), 3)
        self.assertEqual(float(rows[1][4]), 10.0)
        self.assertEqual(rows[1][-1], "true")
        self.assertEqual(float(rows[2][4]), 20.0)
        self.assertEqual(rows[2][-1], "false")

    def test_save_writes_file(self):
        log = SessionLog()
        log.append(LogRecord.from_params(PendulumParams(), controls_shown=True))
        with tempfile.TemporaryDirectory() as tmpdir:
            path = log.save(Path(tmpdir) / "nested" / "pendulum_log.csv")
            self.assertTrue(path.exists())
            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(len(lines[1].split(",")), len(CSV_HEADER))


class TestRandomRanges(unittest.TestCase):
    def test_inverted_angle_bounds_are_sorted(self):
        rng = np.random.default_rng(7)
        ranges = RandomRanges()
        self.assertGreater(ranges.angle[0], ranges.angle[1])
        for _ in range(100):
            params = ranges.sample(rng, width=1000, height=500)
            self.assertTrue(2 * np.pi / 3 <= params.angle1 <= 4 * np.pi / 3)
            self.assertTrue(75.0 <= params.length1 <= 250.0)
            self.assertTrue(1.0 <= params.r2 <= 255.0)

    def test_colors_have_no_green(self):
        c1, c2 = PendulumParams(r1=10, b1=20, r2=30, b2=40).colors()
        self.assertEqual(c1, (10, 0.0, 20))
        self.assertEqual(c2, (30, 0.0, 40))


if __name__ == "__main__":
    unittest.main()
