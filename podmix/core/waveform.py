"""
Waveform overview and level measurement.
Read-only summaries of a buffer for display and metering.
"""
from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from .buffer import SampleBuffer
from .config import WAVEFORM_CONFIG


@dataclass(frozen=True, slots=True)
class LevelStats:
    peak: float
    rms: float
    peak_db: float
    rms_db: float


def reduce_peaks(buffer: SampleBuffer, width: int = WAVEFORM_CONFIG.default_width) -> NDArray[np.float32]:
    """
    Peak magnitude of channel 0 over `width` equal windows.

    Windows are num_samples // width long; samples past width * window are
    dropped. When the buffer is shorter than width every window is empty
    and the result is all zeros.

    Args:
        buffer: Audio to summarize
        width: Number of output values (e.g. pixels)

    Returns:
        Float32 array of length width
    """
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")

    window = buffer.num_samples // width
    if window == 0:
        return np.zeros(width, dtype=np.float32)

    mono = np.abs(buffer.channel(0)[:width * window])
    return mono.reshape(width, window).max(axis=1).astype(np.float32)


def linear_to_db(value: float, floor: float = WAVEFORM_CONFIG.db_floor_linear) -> float:
    return 20.0 * float(np.log10(max(value, floor)))


def db_to_linear(db: float) -> float:
    return float(10.0 ** (db / 20.0))


def analyze_levels(buffer: SampleBuffer) -> LevelStats:
    """Peak and RMS over every sample of every channel, linear and dBFS."""
    if buffer.data.size == 0:
        peak = rms = 0.0
    else:
        data = buffer.data.astype(np.float64)
        peak = float(np.max(np.abs(data)))
        rms = float(np.sqrt(np.mean(data ** 2)))
    return LevelStats(peak=peak, rms=rms, peak_db=linear_to_db(peak), rms_db=linear_to_db(rms))
