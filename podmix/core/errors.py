"""
Exceptions raised by the podmix engine.
"""
from typing import Optional


class PodmixError(Exception):
    """Base class for all engine errors."""


class EmptyTimeline(PodmixError):
    """Raised when a mix is requested for a timeline without clips."""


class AllSourcesFailed(EmptyTimeline):
    """Raised when every clip's source failed to resolve."""

    def __init__(self, skipped: tuple[int, ...] = ()):
        self.skipped = skipped
        super().__init__(f"All {len(skipped)} clip sources failed to decode")


class SourceDecodeFailure(PodmixError):
    """A single asset could not be decoded into a usable buffer."""

    def __init__(self, asset_id: str, reason: str = "", cause: Optional[BaseException] = None):
        self.asset_id = asset_id
        self.reason = reason
        self.cause = cause
        message = f"Cannot decode source '{asset_id}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TrackCapacityError(PodmixError):
    """Raised in strict allocation mode when every track lane is occupied."""

    def __init__(self, max_tracks: int):
        self.max_tracks = max_tracks
        super().__init__(f"All {max_tracks} track lanes are occupied")


class ClipNotFound(PodmixError, KeyError):
    """Raised when a timeline operation names an unknown clip id."""

    def __init__(self, clip_id: int):
        self.clip_id = clip_id
        super().__init__(clip_id)

    def __str__(self) -> str:
        return f"No clip with id {self.clip_id}"


class InvalidPlacement(PodmixError, ValueError):
    """A clip window or lane index is outside what the timeline allows."""
