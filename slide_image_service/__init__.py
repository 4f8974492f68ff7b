"""Per-slide image acquisition: picking, generation and their lifecycle."""

from .collaborators import (
    ClientMediaPicker,
    GcsImageStore,
    ImageGenerator,
    ImageStore,
    LocalImageStore,
    MediaPicker,
    VertexImageGenerator,
)
from .controller import SlideImageController
from .errors import (
    ImageGenerationError,
    OperationInProgressError,
    SlideDiscardedError,
    SlideImageError,
)
from .models import (
    EmptyState,
    FailedState,
    GeneratingState,
    ImageRef,
    ImageSource,
    ImageState,
    ResolvedState,
)
from .registry import SlideSessionRegistry

__all__ = [
    "ClientMediaPicker",
    "EmptyState",
    "FailedState",
    "GcsImageStore",
    "GeneratingState",
    "ImageGenerationError",
    "ImageGenerator",
    "ImageRef",
    "ImageSource",
    "ImageState",
    "ImageStore",
    "LocalImageStore",
    "MediaPicker",
    "OperationInProgressError",
    "ResolvedState",
    "SlideDiscardedError",
    "SlideImageController",
    "SlideImageError",
    "SlideSessionRegistry",
]
