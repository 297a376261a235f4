"""
podmix Core Module

This module contains the timeline and mixing engine:
- SampleBuffer: Immutable audio container
- ViewState: Time <-> pixel mapping for the timeline view
- TrackAllocator: Lane assignment for new clips
- Timeline / Clip: Clip placement model with undo
- mixer: Renders a timeline to a stereo master buffer
- wav: 16-bit PCM RIFF/WAVE encoder
- waveform: Peak overview and level analysis
- decode: soundfile-based source loading
"""
from .allocator import TrackAllocator
from .buffer import SampleBuffer
from .clip import Clip
from .config import (
    ENGINE_CONFIG,
    PCM_CONFIG,
    UNDO_CONFIG,
    VIEW_CONFIG,
    WAVEFORM_CONFIG,
    EngineConfig,
    SyncMode,
    ViewConfig,
)
from .coordinates import ViewState
from .decode import AudioFileLoader, load_sample_buffer
from .errors import (
    AllSourcesFailed,
    ClipNotFound,
    EmptyTimeline,
    InvalidPlacement,
    PodmixError,
    SourceDecodeFailure,
    TrackCapacityError,
)
from .mixer import MixResult, MixSettings, clip_envelope, export_duration, mix, mix_timeline, resolve_sources
from .timeline import Timeline
from .undo_manager import UndoManager
from .wav import decode_wav, encode_wav, write_wav
from .waveform import LevelStats, analyze_levels, reduce_peaks
from . import effects

__all__ = [
    # Main classes
    'SampleBuffer',
    'Clip',
    'Timeline',
    'TrackAllocator',
    'ViewState',
    'UndoManager',
    'AudioFileLoader',
    'MixSettings',
    'MixResult',
    'LevelStats',
    # Operations
    'mix',
    'mix_timeline',
    'clip_envelope',
    'export_duration',
    'resolve_sources',
    'encode_wav',
    'decode_wav',
    'write_wav',
    'reduce_peaks',
    'analyze_levels',
    'load_sample_buffer',
    # Errors
    'PodmixError',
    'EmptyTimeline',
    'AllSourcesFailed',
    'SourceDecodeFailure',
    'TrackCapacityError',
    'ClipNotFound',
    'InvalidPlacement',
    # Config
    'ENGINE_CONFIG',
    'VIEW_CONFIG',
    'PCM_CONFIG',
    'WAVEFORM_CONFIG',
    'UNDO_CONFIG',
    'EngineConfig',
    'ViewConfig',
    'SyncMode',
    # Submodules
    'effects',
]
