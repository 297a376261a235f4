"""
Track lane allocation for new clips.
"""
from __future__ import annotations
from typing import Iterable

from .clip import Clip
from .config import ENGINE_CONFIG
from .errors import TrackCapacityError
from podmix.utils.logger import logger

FALLBACK_TRACK = 0


class TrackAllocator:
    """
    Hands out the lowest free lane in [0, max_tracks).

    Occupancy is always recomputed from the clips passed in; the allocator
    keeps no state of its own. When every lane is taken, compatibility mode
    returns lane 0 (the clip then shares that lane) and strict mode raises
    TrackCapacityError.
    """
    __slots__ = ('max_tracks', 'strict')

    def __init__(self, max_tracks: int = ENGINE_CONFIG.max_tracks, strict: bool = False) -> None:
        if max_tracks < 1:
            raise ValueError(f"max_tracks must be at least 1, got {max_tracks}")
        self.max_tracks = max_tracks
        self.strict = strict

    @staticmethod
    def occupied(clips: Iterable[Clip]) -> frozenset[int]:
        """Set of lane indices holding at least one clip."""
        return frozenset(clip.track_index for clip in clips)

    def is_occupied(self, clips: Iterable[Clip], index: int) -> bool:
        return index in self.occupied(clips)

    def free_lanes(self, clips: Iterable[Clip]) -> list[int]:
        used = self.occupied(clips)
        return [i for i in range(self.max_tracks) if i not in used]

    def allocate(self, clips: Iterable[Clip]) -> int:
        """Lowest unused lane index, never >= max_tracks."""
        free = self.free_lanes(clips)
        if free:
            logger.debug(f"Allocated track {free[0]}")
            return free[0]

        if self.strict:
            raise TrackCapacityError(self.max_tracks)
        logger.warning(
            f"All {self.max_tracks} tracks occupied; placing clip on track {FALLBACK_TRACK}"
        )
        return FALLBACK_TRACK
