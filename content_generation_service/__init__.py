"""Gemini-backed slide text generation sized to the slide's fit budget."""

from .generator import (
    ContentGenerationError,
    SlideContentGenerator,
    build_generation_prompt,
    describe_overflow,
    extract_json_from_string,
    parse_slide_content,
)
from .models import GeneratedSlide, SlideContentRequest

__all__ = [
    "ContentGenerationError",
    "GeneratedSlide",
    "SlideContentGenerator",
    "SlideContentRequest",
    "build_generation_prompt",
    "describe_overflow",
    "extract_json_from_string",
    "parse_slide_content",
]
