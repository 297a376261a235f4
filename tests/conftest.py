"""
Pytest configuration and fixtures for podmix tests.
"""
import pytest
import numpy as np

from podmix.core.buffer import SampleBuffer
from podmix.core.config import EngineConfig
from podmix.core.mixer import MixSettings
from podmix.core.timeline import Timeline
from podmix.core.undo_manager import UndoManager

SAMPLERATE = 48000


def sine(freq: float, seconds: float, amplitude: float = 0.5, sr: int = SAMPLERATE) -> np.ndarray:
    t = np.arange(int(round(seconds * sr))) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


@pytest.fixture
def make_sine():
    """Factory for float32 sine arrays at the test sample rate."""
    return sine


@pytest.fixture
def sample_mono_buffer() -> SampleBuffer:
    """1 second of mono 440 Hz sine at half scale."""
    return SampleBuffer(sine(440, 1.0), SAMPLERATE)


@pytest.fixture
def sample_stereo_buffer() -> SampleBuffer:
    """1 second of stereo sine, 440 Hz left and 880 Hz right."""
    return SampleBuffer.from_channels([sine(440, 1.0), sine(880, 1.0, amplitude=0.25)], SAMPLERATE)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(max_tracks=4)


@pytest.fixture
def no_fades() -> MixSettings:
    return MixSettings(fade_in=0.0, fade_out=0.0)


@pytest.fixture
def empty_timeline(config) -> Timeline:
    return Timeline(config)


@pytest.fixture
def scenario_sources() -> dict:
    """Two 5 second stereo sources, quiet enough that their sum stays below headroom."""
    rng = np.random.default_rng(7)
    return {
        "a": SampleBuffer(rng.uniform(-0.3, 0.3, (5 * SAMPLERATE, 2)).astype(np.float32), SAMPLERATE),
        "b": SampleBuffer(rng.uniform(-0.3, 0.3, (5 * SAMPLERATE, 2)).astype(np.float32), SAMPLERATE),
    }


@pytest.fixture
def scenario_timeline(config) -> Timeline:
    """A on track 0 over [0, 5), B on track 1 over [3, 8) at half gain."""
    timeline = Timeline(config)
    timeline.add_clip("a", 5.0, name="A", start_time=0.0)
    timeline.add_clip("b", 5.0, name="B", start_time=3.0, gain=0.5)
    return timeline


@pytest.fixture
def undo_manager() -> UndoManager:
    """Create an undo manager."""
    return UndoManager(max_depth=10)
