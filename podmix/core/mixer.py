"""
Mixing engine for podmix.
Renders the clips of a timeline into one stereo master buffer.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
import numpy as np
from scipy.signal import resample_poly

from .buffer import SampleBuffer
from .clip import Clip
from .config import ENGINE_CONFIG, EngineConfig, SyncMode
from .errors import AllSourcesFailed, EmptyTimeline, SourceDecodeFailure
from .timeline import Timeline
from .types import AudioArray, EnvelopeArray, SourceLoader, SourceMap
from podmix.utils.logger import logger

# Slack for float error when converting seconds to sample counts
_SAMPLE_EPSILON = 1e-6


@dataclass(frozen=True, slots=True)
class MixSettings:
    """Per-export mixing parameters."""
    fade_in: float = ENGINE_CONFIG.fade_in_seconds
    fade_out: float = ENGINE_CONFIG.fade_out_seconds
    audio_start_offset: float = 0.0  # Shift applied to every clip, in either sync mode
    video_start_offset: float = 0.0  # Extra length appended to the export duration
    sync_mode: SyncMode = SyncMode.AUTO

    def __post_init__(self) -> None:
        if self.fade_in < 0 or self.fade_out < 0:
            raise ValueError("Fade lengths must be >= 0")

    @classmethod
    def from_config(cls, config: EngineConfig = ENGINE_CONFIG, **overrides) -> MixSettings:
        params = {"fade_in": config.fade_in_seconds, "fade_out": config.fade_out_seconds}
        params.update(overrides)
        return cls(**params)


@dataclass(frozen=True, slots=True, eq=False)
class MixResult:
    """Master buffer plus a record of what happened while mixing."""
    buffer: SampleBuffer
    skipped: tuple[int, ...]  # Clip ids whose source could not be used
    peak: float  # Peak before normalization
    normalization_factor: float  # 1.0 when no normalization was needed


def seconds_to_samples_floor(seconds: float, samplerate: int) -> int:
    return math.floor(seconds * samplerate + _SAMPLE_EPSILON)


def seconds_to_samples_ceil(seconds: float, samplerate: int) -> int:
    return math.ceil(seconds * samplerate - _SAMPLE_EPSILON)


def prepare_clips(clips: Iterable[Clip], settings: MixSettings) -> list[Clip]:
    """
    Placement used for the export.
    Every clip is shifted by audio_start_offset whatever the sync mode.
    """
    clips = list(clips)
    if settings.audio_start_offset:
        return [c.shifted(settings.audio_start_offset) for c in clips]
    return clips


def export_duration(timeline: Timeline, settings: Optional[MixSettings] = None) -> float:
    """Length of the exported program: last clip end plus the video start offset."""
    settings = settings or MixSettings()
    clips = prepare_clips(timeline.clips, settings)
    if not clips:
        return 0.0
    return max(c.end_time for c in clips) + settings.video_start_offset


def resolve_sources(asset_ids: Iterable[str], loader: SourceLoader) -> dict[str, SampleBuffer]:
    """
    Decode every distinct asset before mixing starts.

    Assets whose loader raises SourceDecodeFailure are logged and left out;
    the mixer then skips the clips that reference them.
    """
    sources: dict[str, SampleBuffer] = {}
    for asset_id in dict.fromkeys(asset_ids):
        try:
            sources[asset_id] = loader(asset_id)
        except SourceDecodeFailure as e:
            logger.warning(f"Source unavailable: {e}")
    logger.debug(f"Resolved {len(sources)} sources")
    return sources


def clip_envelope(
    num_samples: int,
    samplerate: int,
    clip_duration: float,
    gain: float,
    fade_in: float,
    fade_out: float,
    source_start: float = 0.0,
) -> EnvelopeArray:
    """
    Per-sample gain for a clip.

    Time is measured in the source, starting at source_start. The fade-in
    ramps up over the first fade_in seconds of the source, the fade-out
    ramps down over its last fade_out seconds; where both apply their
    factors multiply. The fade factor is clamped to [0, 1] before gain is
    applied. Zero-length fades are disabled.
    """
    t = source_start + np.arange(num_samples, dtype=np.float64) / samplerate
    env = np.ones(num_samples, dtype=np.float64)

    if fade_in > 0:
        ramp = t < fade_in
        env[ramp] *= t[ramp] / fade_in

    if fade_out > 0:
        fade_start = clip_duration - fade_out
        ramp = t > fade_start
        env[ramp] *= 1.0 - (t[ramp] - fade_start) / fade_out

    np.clip(env, 0.0, 1.0, out=env)
    return (env * gain).astype(np.float32)


def normalize_headroom(data: AudioArray, headroom: float = ENGINE_CONFIG.normalization_headroom) -> tuple[float, float]:
    """
    Scale data in place so its peak does not exceed headroom.

    Returns:
        (peak before scaling, factor applied)
    """
    peak = float(np.max(np.abs(data))) if data.size else 0.0
    if peak > headroom:
        factor = headroom / peak
        data *= np.float32(factor)
        logger.info(f"Audio normalized with factor: {factor:.6f}")
        return peak, factor
    return peak, 1.0


def resample(buffer: SampleBuffer, samplerate: int) -> SampleBuffer:
    """Polyphase resampling to a new rate."""
    if buffer.samplerate == samplerate:
        return buffer
    g = math.gcd(samplerate, buffer.samplerate)
    up, down = samplerate // g, buffer.samplerate // g
    data = resample_poly(buffer.data, up, down, axis=0)
    return SampleBuffer(data.astype(np.float32), samplerate)


def _check_source(clip: Clip, sources: SourceMap) -> SampleBuffer:
    source = sources.get(clip.asset_id)
    if source is None:
        raise SourceDecodeFailure(clip.asset_id, "no decoded buffer")
    if not isinstance(source, SampleBuffer):
        raise SourceDecodeFailure(clip.asset_id, f"unexpected source type {type(source).__name__}")
    if source.num_samples == 0:
        raise SourceDecodeFailure(clip.asset_id, "empty buffer")
    if not source.is_finite():
        raise SourceDecodeFailure(clip.asset_id, "non-finite samples")
    return source


def _usable_sources(clips: Sequence[Clip], sources: SourceMap) -> tuple[list[tuple[Clip, SampleBuffer]], tuple[int, ...]]:
    usable = []
    skipped = []
    for clip in clips:
        try:
            usable.append((clip, _check_source(clip, sources)))
        except SourceDecodeFailure as e:
            logger.warning(f"Skipping clip {clip.id}: {e}")
            skipped.append(clip.id)
    return usable, tuple(skipped)


def mix_timeline(
    timeline: Timeline,
    sources: SourceMap,
    settings: Optional[MixSettings] = None,
    config: EngineConfig = ENGINE_CONFIG,
) -> MixResult:
    """
    Render a timeline to a stereo master buffer.

    Args:
        timeline: Clips to render
        sources: Decoded buffers keyed by asset id, all resolved up front
        settings: Fades and offsets; defaults to the configured fades
        config: Engine configuration (headroom, resampling policy)

    Returns:
        MixResult with the master buffer, skipped clip ids, peak and
        normalization factor

    Raises:
        EmptyTimeline: the timeline has no clips
        AllSourcesFailed: no clip had a usable source
    """
    settings = settings or MixSettings.from_config(config)
    if not len(timeline):
        raise EmptyTimeline("No audio clips to mix")

    clips = prepare_clips(timeline.clips, settings)
    usable, skipped = _usable_sources(clips, sources)
    if not usable:
        raise AllSourcesFailed(skipped)

    samplerate = usable[0][1].samplerate
    total_duration = max(clip.end_time for clip, _ in usable)
    total_samples = max(0, seconds_to_samples_ceil(total_duration, samplerate))
    master = np.zeros((total_samples, 2), dtype=np.float32)

    for clip, source in usable:
        if source.samplerate != samplerate:
            if config.resample_mismatched_rates:
                logger.info(f"Resampling clip {clip.id} from {source.samplerate} Hz to {samplerate} Hz")
                source = resample(source, samplerate)
            else:
                logger.warning(
                    f"Clip {clip.id} is {source.samplerate} Hz, mixing as {samplerate} Hz without resampling"
                )
        _add_clip(master, clip, source.to_stereo().data, samplerate, settings)

    peak, factor = normalize_headroom(master, config.normalization_headroom)
    logger.info(
        f"Mixed {len(usable)} clips into {total_duration:.2f}s buffer"
        + (f" ({len(skipped)} skipped)" if skipped else "")
    )
    return MixResult(SampleBuffer(master, samplerate), skipped, peak, factor)


def mix(
    timeline: Timeline,
    sources: SourceMap,
    settings: Optional[MixSettings] = None,
    config: EngineConfig = ENGINE_CONFIG,
) -> SampleBuffer:
    """Render a timeline and return only the master buffer."""
    return mix_timeline(timeline, sources, settings, config).buffer


def _add_clip(master: AudioArray, clip: Clip, stereo: AudioArray, samplerate: int, settings: MixSettings) -> None:
    """
    Sum one clip's enveloped samples into master, dropping anything outside it.

    The clip covers master samples [floor(start), floor(end)), so clips that
    share a boundary tile without gaps or double counting. Master sample k
    reads source sample k - origin, where origin is the master sample that
    source sample 0 lands on.
    """
    start_sample = seconds_to_samples_floor(clip.start_time, samplerate)
    end_sample = seconds_to_samples_floor(clip.end_time, samplerate)
    origin = seconds_to_samples_floor(clip.start_time - clip.source_offset, samplerate)

    lo = max(0, start_sample, origin)
    hi = min(master.shape[0], end_sample, origin + len(stereo))
    if lo >= hi:
        return

    env = clip_envelope(
        hi - lo, samplerate, clip.duration, clip.gain,
        settings.fade_in, settings.fade_out,
        source_start=(lo - origin) / samplerate,
    )
    master[lo:hi] += stereo[lo - origin:hi - origin] * env[:, np.newaxis]

