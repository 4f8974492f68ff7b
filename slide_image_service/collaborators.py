"""
External collaborators of the slide image controller: the media picker, the
image generator and the store that keeps generated bytes.
"""
import asyncio
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional, Protocol

from google.api_core.exceptions import ResourceExhausted
from google.cloud import storage

from .errors import ImageGenerationError
from .models import ImageRef, ImageSource

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_PROMPT = "A professional, clean and abstract illustration for a presentation slide"


class MediaPicker(Protocol):
    async def pick(self, source: ImageSource) -> Optional[ImageRef]:
        """Returns the picked image, or None when the user cancelled."""
        ...


class ImageGenerator(Protocol):
    async def generate(self, prompt: Optional[str]) -> ImageRef:
        """Returns the generated image or raises ImageGenerationError."""
        ...


class ImageStore(Protocol):
    def save(self, data: bytes, content_type: str = "image/png") -> ImageRef:
        ...


# --- Media picking ---

class ClientMediaPicker:
    """
    Picker for selections made on the client device. The service is offered
    what the user picked and hands it out once; nothing offered means the
    user closed the picker.
    """

    def __init__(self):
        self._offers: Dict[ImageSource, str] = {}

    def offer(self, source: ImageSource, uri: Optional[str]) -> None:
        if uri:
            self._offers[source] = uri
        else:
            self._offers.pop(source, None)

    async def pick(self, source: ImageSource) -> Optional[ImageRef]:
        uri = self._offers.pop(source, None)
        if uri is None:
            return None
        return ImageRef(uri=uri, source=source.value)


# --- Image storage ---

class LocalImageStore:
    """Writes generated images into a directory and refers to them by file URI."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def save(self, data: bytes, content_type: str = "image/png") -> ImageRef:
        self.directory.mkdir(parents=True, exist_ok=True)
        extension = "jpg" if content_type == "image/jpeg" else "png"
        path = self.directory / f"{uuid.uuid4().hex}.{extension}"
        path.write_bytes(data)
        return ImageRef(uri=path.resolve().as_uri(), source="generated")


class GcsImageStore:
    """Uploads generated images to a Cloud Storage bucket and refers to them by public URL."""

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None, prefix: str = "slide-images"):
        self.bucket_name = bucket_name
        self.prefix = prefix
        self._client = client

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def save(self, data: bytes, content_type: str = "image/png") -> ImageRef:
        bucket = self.client.bucket(self.bucket_name)
        blob = bucket.blob(f"{self.prefix}/{uuid.uuid4().hex}.png")
        blob.upload_from_string(data, content_type=content_type)
        logger.info(f"Upload complete. URL: {blob.public_url}")
        return ImageRef(uri=blob.public_url, source="generated")


# --- Image generation ---

class VertexImageGenerator:
    """
    Generates slide illustrations with an Imagen model.

    The model client is blocking, so each call runs in a worker thread. Calls
    are limited by a semaphore to stay inside the API quota and retried with
    a linear back-off.
    """

    def __init__(
        self,
        model,
        store: ImageStore,
        max_concurrent: int = 1,
        attempts: int = 3,
        quota_backoff: float = 20.0,
        error_backoff: float = 2.0,
    ):
        self.model = model
        self.store = store
        self.attempts = attempts
        self.quota_backoff = quota_backoff
        self.error_backoff = error_backoff
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def generate(self, prompt: Optional[str]) -> ImageRef:
        if self.model is None:
            raise ImageGenerationError("Imagen model not available.")
        prompt = prompt or DEFAULT_IMAGE_PROMPT

        async with self._semaphore:
            for attempt in range(self.attempts):
                try:
                    response = await asyncio.to_thread(
                        self.model.generate_images,
                        prompt=prompt,
                        number_of_images=1,
                        aspect_ratio="16:9",
                    )
                    image_bytes = response[0]._image_bytes
                    break
                except ResourceExhausted as e:
                    logger.warning(f"Quota exceeded on attempt {attempt + 1}. Retrying... Error: {e}")
                    await asyncio.sleep(self.quota_backoff * (attempt + 1))
                except Exception as e:
                    logger.warning(f"Image generation attempt {attempt + 1} failed. Retrying... Error: {e}")
                    await asyncio.sleep(self.error_backoff * (attempt + 1))
            else:
                raise ImageGenerationError(f"Failed to generate image for prompt '{prompt}' after retries.")

        return await asyncio.to_thread(self.store.save, image_bytes)
