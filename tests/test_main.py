import contextlib
import io
import tempfile
import unittest
from pathlib import Path

import numpy as np

import main
from pendulum_music.ensemble import Ensemble


class TestHeadlessRun(unittest.TestCase):
    def test_run_headless_spawns_and_advances(self):
        ens = Ensemble({"lifecycle": {"max_pendulums": 3}}, rng=np.random.default_rng(3))
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            main.run_headless(ens, ticks=50, spawn_every=10)
        self.assertEqual(ens.tick, 50)
        self.assertEqual(len(ens.log), 5)
        self.assertEqual(len(ens), 3)
        self.assertIn("[pendulum-music]", out.getvalue())

    def test_load_config_reads_shipped_yaml(self):
        path = Path(__file__).resolve().parent.parent / "configs" / "pendulum_music.yaml"
        cfg = main.load_config(path)
        self.assertEqual(cfg["lifecycle"]["max_pendulums"], 5)
        ens = Ensemble(cfg, rng=np.random.default_rng(0))
        self.assertEqual(ens.damping, 0.99)
        self.assertEqual(ens.stillness_test, "position")
        ens.add_random()
        ens.advance_all()
        self.assertEqual(len(ens), 1)


class TestTBLogger(unittest.TestCase):
    def test_logs_at_interval(self):
        from pendulum_music.tb_logger import TBLogger

        with tempfile.TemporaryDirectory() as tmpdir:
            logger = TBLogger(log_dir=tmpdir, log_interval=2)
            ens = Ensemble(rng=np.random.default_rng(0))
            ens.add_pendulum()
            for _ in range(4):
                ens.advance_all()
                logger.log(ens)
            logger.close()
            self.assertEqual(logger.step_count, 4)
            self.assertTrue(any(Path(tmpdir).iterdir()))


if __name__ == "__main__":
    unittest.main()
