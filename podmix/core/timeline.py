"""
Timeline model for podmix.
Holds the clips placed on track lanes and derives durations and occupancy.
"""
from __future__ import annotations
import itertools
from typing import TYPE_CHECKING, Iterator, Optional, Sequence

from .allocator import TrackAllocator
from .clip import Clip
from .config import ENGINE_CONFIG, UNDO_CONFIG, EngineConfig
from .effects import Effect
from .errors import ClipNotFound, InvalidPlacement
from .undo_manager import UndoManager
from podmix.utils.logger import logger

if TYPE_CHECKING:
    from .buffer import SampleBuffer


class Timeline:
    """
    The set of clips on a shared time axis.

    Clips are immutable; every operation swaps in a new id -> Clip mapping
    in a single assignment, so readers never see a half-applied edit. Lane
    occupancy is derived from the clips on demand. Edits are recorded on
    the undo stack.
    """

    def __init__(self, config: EngineConfig = ENGINE_CONFIG, undo_depth: int = UNDO_CONFIG.max_depth) -> None:
        self.config = config
        self.allocator = TrackAllocator(config.max_tracks, strict=config.strict_track_allocation)
        self.undo_manager = UndoManager(max_depth=undo_depth)
        self._clips: dict[int, Clip] = {}
        self._ids = itertools.count(1)

    # --- Queries ---

    @property
    def clips(self) -> list[Clip]:
        """Clips ordered by id."""
        return [self._clips[k] for k in sorted(self._clips)]

    def __iter__(self) -> Iterator[Clip]:
        return iter(self.clips)

    def __len__(self) -> int:
        return len(self._clips)

    def __contains__(self, clip_id: object) -> bool:
        return clip_id in self._clips

    def get_clip(self, clip_id: int) -> Clip:
        try:
            return self._clips[clip_id]
        except KeyError:
            raise ClipNotFound(clip_id) from None

    def content_duration(self) -> float:
        """End of the last clip, 0.0 when empty."""
        return max((c.end_time for c in self._clips.values()), default=0.0)

    def duration(self) -> float:
        """Timeline length in seconds, never below the configured floor."""
        return max(self.config.timeline_floor_seconds, self.content_duration())

    def view_duration(self) -> float:
        """Length shown in the view: content plus trailing padding, floored."""
        if not self._clips:
            return self.config.timeline_floor_seconds
        return max(self.config.timeline_floor_seconds,
                   self.content_duration() + self.config.timeline_padding_seconds)

    def occupied_tracks(self) -> frozenset[int]:
        return self.allocator.occupied(self._clips.values())

    def is_track_occupied(self, index: int) -> bool:
        return self.allocator.is_occupied(self._clips.values(), index)

    def clips_on_track(self, index: int) -> list[Clip]:
        return sorted((c for c in self._clips.values() if c.track_index == index),
                      key=lambda c: (c.start_time, c.id))

    def clip_at(self, time: float, track_index: int) -> Optional[Clip]:
        """First clip (by id) on the lane whose window contains time."""
        for clip in self.clips:
            if clip.track_index == track_index and clip.contains(time):
                return clip
        return None

    def overlapping_pairs(self) -> list[tuple[Clip, Clip]]:
        """
        Pairs of clips sharing a lane and a stretch of time.
        Overlap is allowed; this only reports it.
        """
        pairs = []
        for index in sorted(self.occupied_tracks()):
            lane = self.clips_on_track(index)
            for a, b in itertools.combinations(lane, 2):
                if a.overlaps(b):
                    pairs.append((a, b))
        return pairs

    # --- Editing ---

    def add_clip(
        self,
        asset_id: str,
        duration: float,
        name: str = "",
        start_time: float = 0.0,
        end_time: Optional[float] = None,
        track_index: Optional[int] = None,
        gain: Optional[float] = None,
        effects: Sequence[Effect] = (),
    ) -> Clip:
        """
        Place a decoded asset on the timeline.

        Args:
            asset_id: Identifier of the decoded source
            duration: Intrinsic source duration in seconds
            start_time: Placement start (seconds, >= 0)
            end_time: Placement end; defaults to start_time + duration
            track_index: Lane to use; allocated when None
            gain: Linear gain; defaults to the configured default gain

        Returns:
            The new clip
        """
        if start_time < 0:
            raise InvalidPlacement(f"start_time must be >= 0, got {start_time}")
        if duration < 0:
            raise InvalidPlacement(f"duration must be >= 0, got {duration}")
        if end_time is None:
            end_time = start_time + duration
        if end_time < start_time:
            raise InvalidPlacement(f"end_time {end_time} is before start_time {start_time}")
        if track_index is None:
            track_index = self.allocator.allocate(self._clips.values())
        else:
            self._check_track(track_index)

        clip = Clip(
            id=next(self._ids),
            asset_id=asset_id,
            track_index=track_index,
            start_time=float(start_time),
            end_time=float(end_time),
            duration=float(duration),
            name=name or asset_id,
            gain=self._clamp_gain(self.config.default_gain if gain is None else gain),
            effects=tuple(effects),
        )
        self._commit(f"Add clip {clip.name}", {**self._clips, clip.id: clip})
        logger.info(f"Added clip {clip.id} ({clip.name}, {clip.duration:.2f}s) on track {track_index}")
        return clip

    def add_buffer(self, asset_id: str, buffer: "SampleBuffer", name: str = "", **kwargs) -> Clip:
        """Place a decoded buffer, using its length as the intrinsic duration."""
        return self.add_clip(asset_id, buffer.duration_seconds, name=name, **kwargs)

    def move_clip(self, clip_id: int, delta: float) -> Clip:
        """Shift a clip by delta seconds; start is clamped at 0, window length kept."""
        clip = self.get_clip(clip_id)
        new_start = max(0.0, clip.start_time + delta)
        moved = clip.shifted(new_start - clip.start_time)
        if moved == clip:
            return clip
        self._commit(f"Move clip {clip.name}", {**self._clips, clip_id: moved})
        return moved

    def delete_clip(self, clip_id: int) -> Clip:
        clip = self.get_clip(clip_id)
        remaining = {k: v for k, v in self._clips.items() if k != clip_id}
        self._commit(f"Delete clip {clip.name}", remaining)
        logger.info(f"Deleted clip {clip_id}")
        return clip

    def duplicate_clip(self, clip_id: int) -> Clip:
        """Copy with a new id on a newly allocated lane; window, gain and effects kept."""
        clip = self.get_clip(clip_id)
        copy = clip.copy(
            id=next(self._ids),
            name=f"{clip.name} (Copy)",
            track_index=self.allocator.allocate(self._clips.values()),
        )
        self._commit(f"Duplicate clip {clip.name}", {**self._clips, copy.id: copy})
        return copy

    def split_clip(self, clip_id: int) -> tuple[Clip, Clip]:
        """
        Split a clip at the midpoint of its window.

        The first half keeps the id and lane. The second half gets a new id,
        a newly allocated lane and a source offset advanced past the first
        half, so the two halves together play exactly what the original did.
        """
        clip = self.get_clip(clip_id)
        split_at = clip.midpoint
        first = clip.copy(end_time=split_at)
        second = clip.copy(
            id=next(self._ids),
            start_time=split_at,
            track_index=self.allocator.allocate(self._clips.values()),
            source_offset=clip.source_offset + (split_at - clip.start_time),
        )
        self._commit(f"Split clip {clip.name}", {**self._clips, first.id: first, second.id: second})
        logger.info(f"Split clip {clip_id} at {split_at:.3f}s into {first.id} and {second.id}")
        return first, second

    def set_gain(self, clip_id: int, gain: float) -> Clip:
        clip = self.get_clip(clip_id)
        updated = clip.copy(gain=self._clamp_gain(gain))
        self._commit(f"Set gain of {clip.name}", {**self._clips, clip_id: updated})
        return updated

    def set_track(self, clip_id: int, track_index: int) -> Clip:
        clip = self.get_clip(clip_id)
        self._check_track(track_index)
        updated = clip.copy(track_index=track_index)
        self._commit(f"Move {clip.name} to track {track_index}", {**self._clips, clip_id: updated})
        return updated

    def set_effects(self, clip_id: int, effects: Sequence[Effect]) -> Clip:
        clip = self.get_clip(clip_id)
        updated = clip.copy(effects=tuple(effects))
        self._commit(f"Set effects of {clip.name}", {**self._clips, clip_id: updated})
        return updated

    def clear(self) -> None:
        """Remove every clip and forget edit history."""
        self._clips = {}
        self.undo_manager.clear()
        logger.info("Timeline cleared")

    # --- Undo ---

    @property
    def can_undo(self) -> bool:
        return self.undo_manager.can_undo

    @property
    def can_redo(self) -> bool:
        return self.undo_manager.can_redo

    def undo(self) -> bool:
        return self.undo_manager.undo()

    def redo(self) -> bool:
        return self.undo_manager.redo()

    # --- Internals ---

    def _commit(self, description: str, clips: dict[int, Clip]) -> None:
        before, after = self._clips, clips

        def undo():
            self._clips = before

        def redo():
            self._clips = after

        self._clips = after
        self.undo_manager.push_action(description, undo, redo)

    def _check_track(self, index: int) -> None:
        if not 0 <= index < self.config.max_tracks:
            raise InvalidPlacement(
                f"Track index {index} outside [0, {self.config.max_tracks})"
            )

    def _clamp_gain(self, gain: float) -> float:
        return min(max(0.0, float(gain)), self.config.max_gain)
