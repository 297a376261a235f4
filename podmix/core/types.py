"""
Type definitions for the podmix core module.
Provides type aliases and protocols used across the engine.
"""
from typing import TYPE_CHECKING, Callable, Mapping, Protocol
import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from .buffer import SampleBuffer

# Audio data types
AudioArray = NDArray[np.float32]  # Shape: (samples, channels)
MonoArray = NDArray[np.float32]   # Shape: (samples,)
StereoArray = NDArray[np.float32] # Shape: (samples, 2)
EnvelopeArray = NDArray[np.float32]

# Callback types
UndoFunc = Callable[[], None]
RedoFunc = Callable[[], None]

# Decoded sources keyed by asset id
SourceMap = Mapping[str, "SampleBuffer"]


class SourceLoader(Protocol):
    """Decodes one asset into a buffer, raising SourceDecodeFailure on error."""
    def __call__(self, asset_id: str) -> "SampleBuffer": ...
