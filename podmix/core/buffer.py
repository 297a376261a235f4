"""
Immutable sample container shared by every engine component.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

from .types import AudioArray, MonoArray


@dataclass(frozen=True, slots=True, eq=False)
class SampleBuffer:
    """
    Fixed-length, fixed-channel float32 audio at a fixed sample rate.

    Data is stored as (samples, channels). The array is copied on
    construction and marked read-only, so a buffer never changes after it
    is created and never aliases the caller's array. Transforms return a
    new buffer.
    """
    data: AudioArray
    samplerate: int

    def __post_init__(self) -> None:
        data = np.array(self.data, dtype=np.float32, copy=True)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        if data.ndim != 2 or data.shape[1] < 1:
            raise ValueError(f"Expected (samples, channels) data, got shape {data.shape}")
        if int(self.samplerate) != self.samplerate or self.samplerate <= 0:
            raise ValueError(f"Invalid samplerate: {self.samplerate}")
        data.flags.writeable = False
        object.__setattr__(self, 'data', data)
        object.__setattr__(self, 'samplerate', int(self.samplerate))

    @classmethod
    def silence(cls, num_samples: int, channels: int, samplerate: int) -> SampleBuffer:
        """Zero-filled buffer."""
        return cls(np.zeros((num_samples, channels), dtype=np.float32), samplerate)

    @classmethod
    def from_channels(cls, channels: Sequence[MonoArray], samplerate: int) -> SampleBuffer:
        """Build a buffer from equal-length per-channel arrays."""
        return cls(np.column_stack([np.asarray(c, dtype=np.float32) for c in channels]), samplerate)

    @property
    def num_samples(self) -> int:
        return self.data.shape[0]

    @property
    def channels(self) -> int:
        return self.data.shape[1]

    @property
    def is_mono(self) -> bool:
        return self.channels == 1

    @property
    def duration_seconds(self) -> float:
        return self.num_samples / self.samplerate

    def __len__(self) -> int:
        return self.num_samples

    def channel(self, index: int) -> MonoArray:
        """Read-only view of one channel."""
        return self.data[:, index]

    def to_stereo(self) -> SampleBuffer:
        """
        Two-channel version of this buffer.
        Mono is duplicated to both sides; channels beyond the second are dropped.
        """
        if self.channels == 2:
            return self
        if self.is_mono:
            return SampleBuffer(np.repeat(self.data, 2, axis=1), self.samplerate)
        return SampleBuffer(self.data[:, :2], self.samplerate)

    def scaled(self, factor: float) -> SampleBuffer:
        return SampleBuffer(self.data * np.float32(factor), self.samplerate)

    def peak(self) -> float:
        """Maximum absolute sample value across all channels."""
        if self.data.size == 0:
            return 0.0
        return float(np.max(np.abs(self.data)))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.data)))

    def __repr__(self) -> str:
        return (f"SampleBuffer(channels={self.channels}, samplerate={self.samplerate}, "
                f"duration={self.duration_seconds:.2f}s)")
