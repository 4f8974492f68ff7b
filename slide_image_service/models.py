from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Image references ---

class ImageSource(str, Enum):
    CAMERA = "camera"
    GALLERY = "gallery"

class ImageRef(BaseModel):
    """Opaque handle to an image held by the media/storage side. Never carries bytes."""
    model_config = ConfigDict(frozen=True)

    uri: str
    source: Literal["camera", "gallery", "generated"]

# --- Per-slide image state ---

class EmptyState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["empty"] = "empty"

class GeneratingState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["generating"] = "generating"

class ResolvedState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["resolved"] = "resolved"
    image: ImageRef

class FailedState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["failed"] = "failed"
    reason: str

ImageState = Annotated[
    Union[EmptyState, GeneratingState, ResolvedState, FailedState],
    Field(discriminator="kind"),
]

# --- Models for API communication ---

class OpenSlideRequest(BaseModel):
    image_prompt: Optional[str] = None

class PickRequest(BaseModel):
    source: ImageSource
    # The client's selection; null means the user closed the picker
    uri: Optional[str] = None

class SlideImageResponse(BaseModel):
    slide_id: str
    state: ImageState
