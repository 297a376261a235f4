"""
Centralized configuration for podmix.
All magic numbers and default settings in one place.
"""
from dataclasses import dataclass
from enum import Enum


class SyncMode(Enum):
    """How clip placement relates to the export start."""
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Timeline and mixing engine configuration."""
    max_tracks: int = 12
    fade_in_seconds: float = 0.5
    fade_out_seconds: float = 0.5
    timeline_floor_seconds: float = 300.0
    timeline_padding_seconds: float = 30.0  # Empty space kept after the last clip
    normalization_headroom: float = 0.95
    default_gain: float = 1.0
    max_gain: float = 2.0
    strict_track_allocation: bool = False  # Raise instead of falling back to lane 0
    resample_mismatched_rates: bool = False


@dataclass(frozen=True, slots=True)
class ViewConfig:
    """Timeline view geometry (pixels) and zoom limits."""
    min_zoom: float = 0.1
    max_zoom: float = 5.0
    wheel_zoom_step: float = 0.1
    button_zoom_step: float = 0.2
    scroll_step_pixels: float = 50.0
    tick_min_spacing_pixels: float = 50.0
    tick_intervals: tuple[float, ...] = (0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0)
    ruler_height: int = 30
    track_height: int = 60
    track_spacing: int = 10


@dataclass(frozen=True, slots=True)
class PcmConfig:
    """Uncompressed PCM container settings."""
    format_tag: int = 1  # Integer PCM
    bits_per_sample: int = 16
    full_scale: int = 32767
    header_size: int = 44


@dataclass(frozen=True, slots=True)
class WaveformConfig:
    """Waveform overview settings."""
    default_width: int = 1000
    db_floor_linear: float = 1e-5


@dataclass(frozen=True, slots=True)
class UndoConfig:
    """Undo/Redo configuration."""
    max_depth: int = 50


# Global config instances (immutable singletons)
ENGINE_CONFIG = EngineConfig()
VIEW_CONFIG = ViewConfig()
PCM_CONFIG = PcmConfig()
WAVEFORM_CONFIG = WaveformConfig()
UNDO_CONFIG = UndoConfig()
