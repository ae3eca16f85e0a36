"""Achievement tones played alongside XP popups

Two short sine chirps: a minor one for everyday awards and a longer, higher
"major" one for big awards. Playback is best-effort; any failure is dropped.

No audio backend ships with the package: the host UI passes its own output
callable to TonePlayer. Without one (the CLI, headless use) tones are
skipped and SOUND_ENABLED only gates hosts that do pass an output.
"""
import logging
from typing import Callable, Optional

import numpy as np

from src.config import SOUND_ENABLED

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

MINOR_FREQUENCY = 523.25  # C5
MAJOR_FREQUENCY = 659.25  # E5
FREQUENCY_RAMP = 1.5      # pitch rises to 1.5x...
RAMP_SECONDS = 0.1        # ...over the first 100 ms
START_GAIN = 0.05
END_GAIN = 0.001
MINOR_SECONDS = 0.4
MAJOR_SECONDS = 0.8

ToneOutput = Callable[[np.ndarray, int], None]


def synthesize_tone(major: bool = False, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """
    Render an achievement chirp as mono float32 samples

    Frequency and gain both move exponentially, matching a Web Audio
    oscillator driven by exponentialRampToValueAtTime.
    """
    base = MAJOR_FREQUENCY if major else MINOR_FREQUENCY
    duration = MAJOR_SECONDS if major else MINOR_SECONDS

    t = np.arange(int(sample_rate * duration)) / sample_rate

    ramp = np.clip(t / RAMP_SECONDS, 0.0, 1.0)
    frequency = base * FREQUENCY_RAMP ** ramp
    # Integrate frequency to get phase so the sweep stays continuous
    phase = 2 * np.pi * np.cumsum(frequency) / sample_rate

    gain = START_GAIN * (END_GAIN / START_GAIN) ** (t / duration)

    return (np.sin(phase) * gain).astype(np.float32)


class TonePlayer:
    """
    Plays achievement tones through an injected output

    Args:
        output: Callable taking (samples, sample_rate). With no output the
            player is silent, which is the normal state on headless hosts.
        enabled: Master switch (SOUND_ENABLED)
    """

    def __init__(self, output: Optional[ToneOutput] = None, enabled: bool = SOUND_ENABLED):
        self.output = output
        self.enabled = enabled

    def play(self, major: bool = False) -> bool:
        """Play a tone; returns whether anything was handed to the output"""
        if not self.enabled or self.output is None:
            return False
        try:
            samples = synthesize_tone(major)
            self.output(samples, SAMPLE_RATE)
            return True
        except Exception as e:
            # Sound is cosmetic; never let it interrupt an award
            logger.debug(f"[FEEDBACK] Tone playback unavailable: {type(e).__name__}: {e}")
            return False
