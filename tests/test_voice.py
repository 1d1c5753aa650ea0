import unittest

from pendulum_music.mapping import ChannelParams
from pendulum_music.voice import Voice


def params(freq, amp=0.5):
    return ChannelParams(frequency=freq, amplitude=amp, pan=0.0,
                         harmonicity=1.0, modulation_index=1.0)


class TestVoice(unittest.TestCase):
    def test_ramps_toward_target(self):
        v = Voice(ramp_time=0.1, frame_rate=60)
        v.trigger_attack()
        v.set_params(params(200.0))
        self.assertEqual(v.current("frequency"), 200.0)
        for _ in range(3):
            v.set_params(params(1000.0))
        self.assertGreater(v.current("frequency"), 200.0)
        self.assertLess(v.current("frequency"), 1000.0)
        for _ in range(200):
            v.set_params(params(1000.0))
        self.assertAlmostEqual(v.current("frequency"), 1000.0, places=3)

    def test_volume_in_db(self):
        v = Voice()
        v.set_params(params(440.0, amp=1.0))
        self.assertAlmostEqual(v.volume_db, 0.0)

    def test_release_is_idempotent_and_final(self):
        v = Voice()
        v.trigger_attack()
        v.release()
        v.release()
        self.assertEqual(v.release_count, 1)
        self.assertFalse(v.playing)
        v.set_params(params(300.0))
        self.assertEqual(v.updates, 0)
        v.trigger_attack()
        self.assertFalse(v.playing)


if __name__ == "__main__":
    unittest.main()
