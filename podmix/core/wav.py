"""
RIFF/WAVE container with 16-bit linear PCM samples.

Layout (little-endian throughout):
    0  'RIFF', chunk size (36 + data size), 'WAVE'
    12 'fmt ', 16, format tag 1, channels, sample rate,
       byte rate, block align, bits per sample
    36 'data', data size, interleaved int16 frames
"""
from __future__ import annotations
import struct
from os import PathLike
from pathlib import Path
from typing import Union
import numpy as np

from .buffer import SampleBuffer
from .config import PCM_CONFIG, PcmConfig
from podmix.utils.logger import logger

_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
_CHUNK = struct.Struct('<4sI')
_FMT = struct.Struct('<HHIIHH')


def pcm16_samples(buffer: SampleBuffer, config: PcmConfig = PCM_CONFIG) -> np.ndarray:
    """
    Float samples as int16: clamp to [-1, 1], scale by full scale,
    truncate toward zero. NaN becomes 0.
    """
    data = np.nan_to_num(buffer.data.astype(np.float64), nan=0.0)
    np.clip(data, -1.0, 1.0, out=data)
    return np.trunc(data * config.full_scale).astype('<i2')


def encode_wav(buffer: SampleBuffer, config: PcmConfig = PCM_CONFIG) -> bytes:
    """Serialize a buffer into a canonical 44-byte-header PCM WAV file."""
    channels = buffer.channels
    bytes_per_sample = config.bits_per_sample // 8
    block_align = channels * bytes_per_sample
    data_size = buffer.num_samples * block_align

    header = _HEADER.pack(
        b'RIFF', 36 + data_size, b'WAVE',
        b'fmt ', 16, config.format_tag, channels, buffer.samplerate,
        buffer.samplerate * block_align, block_align, config.bits_per_sample,
        b'data', data_size,
    )
    # (samples, channels) in C order is already frame-interleaved
    frames = np.ascontiguousarray(pcm16_samples(buffer, config))
    return header + frames.tobytes()


def write_wav(buffer: SampleBuffer, path: Union[str, PathLike]) -> Path:
    path = Path(path)
    path.write_bytes(encode_wav(buffer))
    logger.info(f"Wrote {buffer.duration_seconds:.2f}s of audio to {path}")
    return path


def decode_wav(payload: bytes, config: PcmConfig = PCM_CONFIG) -> SampleBuffer:
    """
    Parse a 16-bit integer PCM WAV file back into a float buffer.
    Chunks other than 'fmt ' and 'data' are skipped.

    Raises:
        ValueError: not a RIFF/WAVE file, or not 16-bit integer PCM
    """
    if len(payload) < 12 or payload[0:4] != b'RIFF' or payload[8:12] != b'WAVE':
        raise ValueError("Not a RIFF/WAVE container")

    fmt = None
    frames = None
    pos = 12
    while pos + _CHUNK.size <= len(payload):
        chunk_id, size = _CHUNK.unpack_from(payload, pos)
        body = pos + _CHUNK.size
        if chunk_id == b'fmt ':
            fmt = _FMT.unpack_from(payload, body)
        elif chunk_id == b'data':
            frames = payload[body:body + size]
        pos = body + size + (size & 1)  # Chunks are word aligned

    if fmt is None or frames is None:
        raise ValueError("Missing 'fmt ' or 'data' chunk")

    format_tag, channels, samplerate, _, block_align, bits = fmt
    if format_tag != config.format_tag or bits != config.bits_per_sample:
        raise ValueError(f"Unsupported encoding: format {format_tag}, {bits} bits")
    if channels < 1 or block_align != channels * bits // 8:
        raise ValueError(f"Inconsistent block alignment {block_align} for {channels} channels")

    usable = len(frames) - len(frames) % block_align
    samples = np.frombuffer(frames[:usable], dtype='<i2').reshape(-1, channels)
    return SampleBuffer(samples.astype(np.float32) / config.full_scale, samplerate)
