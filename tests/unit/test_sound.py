"""Unit tests for achievement tones (src/gamification/sound.py)"""
from unittest.mock import Mock

import numpy as np

from src.gamification.sound import SAMPLE_RATE, TonePlayer, synthesize_tone


def test_minor_tone_shape():
    samples = synthesize_tone(major=False)

    assert samples.dtype == np.float32
    assert len(samples) == int(SAMPLE_RATE * 0.4)


def test_major_tone_is_longer():
    assert len(synthesize_tone(major=True)) == int(SAMPLE_RATE * 0.8)


def test_tone_gain_decays():
    samples = synthesize_tone()

    assert np.max(np.abs(samples)) <= 0.05 + 1e-6
    head = np.max(np.abs(samples[:1000]))
    tail = np.max(np.abs(samples[-1000:]))
    assert tail < head


def test_player_without_output_is_silent():
    assert TonePlayer().play() is False


def test_player_disabled():
    output = Mock()
    assert TonePlayer(output=output, enabled=False).play(major=True) is False
    output.assert_not_called()


def test_player_hands_samples_to_output():
    output = Mock()

    assert TonePlayer(output=output, enabled=True).play(major=True) is True
    samples, rate = output.call_args.args
    assert rate == SAMPLE_RATE
    assert len(samples) == int(SAMPLE_RATE * 0.8)


def test_player_swallows_output_errors():
    output = Mock(side_effect=OSError("device busy"))
    assert TonePlayer(output=output).play() is False


def test_default_emitter_is_headless():
    from src.gamification.feedback import FeedbackEmitter, ManualScheduler

    emitter = FeedbackEmitter(scheduler=ManualScheduler())

    assert emitter.tone_player.output is None
    assert emitter.emit(200) is not None
    assert emitter.tone_player.play(major=True) is False
