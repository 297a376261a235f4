from __future__ import annotations
from dataclasses import dataclass, replace

from .effects import Effect


@dataclass(frozen=True, slots=True)
class Clip:
    """
    A placed instance of a decoded asset on the timeline.

    The placement window [start_time, end_time) need not match the
    intrinsic duration of the source; mixing reads at most the shorter of
    the two, starting at source_offset seconds into the source.
    """
    id: int
    asset_id: str
    track_index: int
    start_time: float  # Seconds on the timeline
    end_time: float
    duration: float  # Intrinsic source duration, seconds
    name: str = ""
    gain: float = 1.0
    source_offset: float = 0.0
    effects: tuple[Effect, ...] = ()

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError(f"Clip {self.id}: end_time {self.end_time} < start_time {self.start_time}")

    @property
    def window_length(self) -> float:
        return self.end_time - self.start_time

    @property
    def midpoint(self) -> float:
        return self.start_time + self.window_length / 2

    def contains(self, time: float) -> bool:
        return self.start_time <= time < self.end_time

    def overlaps(self, other: Clip) -> bool:
        """True when both windows share a stretch of time (touching ends don't count)."""
        return self.start_time < other.end_time and other.start_time < self.end_time

    def shifted(self, delta: float) -> Clip:
        """Copy moved by delta seconds, window length preserved."""
        return replace(self, start_time=self.start_time + delta, end_time=self.end_time + delta)

    def copy(self, **changes) -> Clip:
        return replace(self, **changes)
