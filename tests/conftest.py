"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

# Default sample rate for test audio
TEST_SR = 22050


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so sampled shapes are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def pure_sine(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a pure 440Hz sine wave (A4 note).

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 2.0  # 2 seconds
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    frequency = 440.0  # A4
    y = 0.5 * np.sin(2 * np.pi * frequency * t)
    return y.astype(np.float32), sample_rate


@pytest.fixture
def sine_audio_file(tmp_path, pure_sine):
    """Write the 440Hz sine to a temporary wav file."""
    import soundfile as sf

    y, sr = pure_sine
    audio_path = tmp_path / "sine_440.wav"
    sf.write(audio_path, y, sr)
    return audio_path


@pytest.fixture
def hand_landmarks() -> np.ndarray:
    """
    21 normalized hand landmarks for an upright, open right hand.

    Wrist left of center; pinch of 0.1; fingers straight up; palm flat.
    """
    pts = np.full((21, 3), 0.5)
    pts[:, 2] = 0.0
    pts[0] = (0.25, 0.5, 0.0)   # wrist
    pts[4] = (0.5, 0.5, 0.0)    # thumb tip
    pts[8] = (0.6, 0.5, 0.0)    # index tip
    pts[5] = (0.4, 0.4, 0.0)    # index MCP
    pts[9] = (0.25, 0.3, 0.0)   # middle MCP
    pts[17] = (0.6, 0.4, 0.0)   # pinky MCP
    return pts
