"""Exceptions raised by the slide image controller and its collaborators."""


class SlideImageError(Exception):
    """Base class for slide image errors."""


class OperationInProgressError(SlideImageError):
    """Raised when a pick or generate is requested while another one is outstanding."""

    def __init__(self, slide_id: str = "", operation: str = ""):
        self.slide_id = slide_id
        self.operation = operation
        label = f" for slide '{slide_id}'" if slide_id else ""
        super().__init__(f"Operation in progress{label}: {operation or 'image request'} rejected")


class SlideDiscardedError(SlideImageError):
    """Raised when a request reaches a controller whose slide was discarded."""

    def __init__(self, slide_id: str = ""):
        self.slide_id = slide_id
        super().__init__(f"Slide '{slide_id}' was discarded" if slide_id else "Slide was discarded")


class ImageGenerationError(SlideImageError):
    """Raised by an image generator that could not produce an image."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
