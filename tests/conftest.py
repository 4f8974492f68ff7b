"""
Pytest configuration and shared collaborator stubs.
"""

import asyncio
from typing import List, Optional

import pytest

from slide_image_service.errors import ImageGenerationError
from slide_image_service.models import ImageRef, ImageSource


class DeferredGenerator:
    """Image generator whose calls stay pending until the test resolves them."""

    def __init__(self):
        self.prompts: List[Optional[str]] = []
        self.futures: List[asyncio.Future] = []

    async def generate(self, prompt: Optional[str]) -> ImageRef:
        self.prompts.append(prompt)
        future = asyncio.get_running_loop().create_future()
        self.futures.append(future)
        return await future

    def resolve(self, image: ImageRef, index: int = -1) -> None:
        self.futures[index].set_result(image)

    def fail(self, reason: str, index: int = -1) -> None:
        self.futures[index].set_exception(ImageGenerationError(reason))


class UninterruptibleGenerator(DeferredGenerator):
    """Generator that keeps waiting for its result even when the caller is cancelled."""

    async def generate(self, prompt: Optional[str]) -> ImageRef:
        self.prompts.append(prompt)
        future = asyncio.get_running_loop().create_future()
        self.futures.append(future)
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            return await future


class DeferredPicker:
    """Media picker whose picks stay pending until the test answers them."""

    def __init__(self):
        self.sources: List[ImageSource] = []
        self.futures: List[asyncio.Future] = []

    async def pick(self, source: ImageSource) -> Optional[ImageRef]:
        self.sources.append(source)
        future = asyncio.get_running_loop().create_future()
        self.futures.append(future)
        return await future

    def answer(self, image: Optional[ImageRef], index: int = -1) -> None:
        self.futures[index].set_result(image)


@pytest.fixture
def generator() -> DeferredGenerator:
    return DeferredGenerator()


@pytest.fixture
def picker() -> DeferredPicker:
    return DeferredPicker()


@pytest.fixture
def generated_image() -> ImageRef:
    return ImageRef(uri="gs://slide-images/generated.png", source="generated")


@pytest.fixture
def gallery_image() -> ImageRef:
    return ImageRef(uri="file:///photos/IMG_0001.jpg", source="gallery")


@pytest.fixture
def uninterruptible_generator() -> UninterruptibleGenerator:
    return UninterruptibleGenerator()
