"""
Decoding audio files into sample buffers for the mixer.
"""
from __future__ import annotations
from os import PathLike
from pathlib import Path
from typing import Mapping, Union
import soundfile as sf

from .buffer import SampleBuffer
from .errors import SourceDecodeFailure
from podmix.utils.logger import logger

PathType = Union[str, PathLike]


def load_sample_buffer(file_path: PathType, asset_id: str = "") -> SampleBuffer:
    """
    Decode an audio file with soundfile.

    Raises:
        SourceDecodeFailure: the file is missing, unreadable or empty
    """
    asset_id = asset_id or Path(file_path).name
    logger.info(f"Loading file: {file_path}")
    try:
        data, samplerate = sf.read(str(file_path), dtype='float32', always_2d=True)
    except (RuntimeError, OSError) as e:
        logger.error(f"Failed to load {file_path}: {e}", exc_info=True)
        raise SourceDecodeFailure(asset_id, str(e), cause=e) from e

    if data.shape[0] == 0:
        raise SourceDecodeFailure(asset_id, "file contains no samples")
    return SampleBuffer(data, samplerate)


class AudioFileLoader:
    """Loader for resolve_sources: maps asset ids to files on disk."""

    def __init__(self, paths: Mapping[str, PathType]) -> None:
        self.paths = dict(paths)

    def __call__(self, asset_id: str) -> SampleBuffer:
        try:
            path = self.paths[asset_id]
        except KeyError:
            raise SourceDecodeFailure(asset_id, "unknown asset") from None
        return load_sample_buffer(path, asset_id)
