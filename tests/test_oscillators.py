import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import unittest
import torch
from robospeak.dsp.oscillators import Oscillator
from robospeak.dsp.filters import Effects, Filter

class TestOscillators(unittest.TestCase):
    def setUp(self):
        self.sr = 44100
        self.n = 4410 # 100ms
        self.freq = torch.full((self.n,), 441.0)
        self.cycles = Oscillator.cycles(self.freq, self.sr)

    def test_cycles_start_at_zero(self):
        self.assertEqual(self.cycles[0].item(), 0.0)
        # 441 Hz for 100 ms is 44.1 cycles, minus the first step
        self.assertAlmostEqual(self.cycles[-1].item(), 44.1 - 0.01, places=6)

    def test_sine_shape_and_range(self):
        wave = Oscillator.sine(self.cycles)
        self.assertEqual(len(wave), self.n)
        self.assertTrue(torch.max(wave) <= 1.0001)
        self.assertTrue(torch.min(wave) >= -1.0001)

    def test_square_levels_and_duty(self):
        wave = Oscillator.square(self.cycles, 0.25)
        self.assertEqual(set(wave.unique().tolist()), {-0.5, 0.5})
        high = float((wave > 0).float().mean())
        self.assertAlmostEqual(high, 0.25, delta=0.02)

    def test_saw_range(self):
        wave = Oscillator.saw(self.cycles)
        self.assertTrue(torch.max(wave) <= 1.0)
        self.assertTrue(torch.min(wave) > -1.0)

    def test_noise_seeded(self):
        a = Oscillator.noise(self.cycles, torch.Generator().manual_seed(5))
        b = Oscillator.noise(self.cycles, torch.Generator().manual_seed(5))
        self.assertTrue(torch.equal(a, b))
        self.assertTrue(torch.max(torch.abs(a)) <= 1.0)

    def test_determinism(self):
        # Oscillators are stateless math functions, but good to verify
        wave1 = Oscillator.sine(Oscillator.cycles(self.freq, self.sr))
        wave2 = Oscillator.sine(Oscillator.cycles(self.freq, self.sr))
        self.assertTrue(torch.allclose(wave1, wave2))

class TestFilters(unittest.TestCase):
    def test_lowpass_attenuates_high_tone(self):
        sr = 44100
        cycles = Oscillator.cycles(torch.full((sr // 10,), 10000.0), sr)
        tone = Oscillator.sine(cycles)
        out = Filter.lowpass(tone, sr, 500.0)
        self.assertLess(float(out[-1000:].abs().max()), 0.1)

    def test_swept_keeps_length(self):
        x = torch.randn(1000, generator=torch.Generator().manual_seed(1)) * 0.1
        out = Filter.swept(x, 44100, "highpass", 100.0, 2000.0)
        self.assertEqual(out.shape, x.shape)

    def test_phaser_zero_delay_is_identity(self):
        x = torch.linspace(-1.0, 1.0, 64)
        out = Effects.phaser(x, torch.zeros(64))
        self.assertTrue(torch.allclose(out, x))

    def test_phaser_delay(self):
        x = torch.zeros(8)
        x[0] = 1.0
        out = Effects.phaser(x, torch.full((8,), 3.0))
        self.assertEqual(out[0].item(), 0.5)
        self.assertEqual(out[3].item(), 0.5)

if __name__ == '__main__':
    unittest.main()
