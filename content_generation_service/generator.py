"""
Slide text generation steered by the slide's fit budget.

The model is asked for one slide as JSON. Each reply is checked against the
budget; when it overflows, the model is asked again with a note on what to
shorten, up to a fixed number of attempts.
"""
import json
import logging
import re
from typing import List, Optional

from pydantic import ValidationError

from content_fit_service.config import FitCalibration, load_calibration
from content_fit_service.estimator import CONTENT_GUIDELINES, check_content, prompt_constraints
from content_fit_service.models import FitReport, SlideContent

from .models import GeneratedSlide, SlideContentRequest

logger = logging.getLogger(__name__)

MAX_FIT_ATTEMPTS = 3


class ContentGenerationError(Exception):
    """Raised when the model reply cannot be turned into slide content."""

    def __init__(self, message: str, raw_response: str = "N/A"):
        self.raw_response = raw_response
        super().__init__(message)


def extract_json_from_string(text: str) -> str:
    """
    Safely extracts a JSON object from a string, even with markdown fences.
    """
    match = re.search(r'```json\s*(\{.*\})\s*```', text, re.DOTALL)
    if match:
        return match.group(1)
    match = re.search(r'(\{.*\})', text, re.DOTALL)
    return match.group(1) if match else ""


def describe_overflow(report: FitReport) -> str:
    """Turns the failing axes of a fit report into shortening instructions."""
    budget = report.budget
    notes: List[str] = []
    if report.title_too_long:
        notes.append(f"The title has {report.title_chars} characters; keep it to at most {budget.max_title_chars}.")
    if report.too_many_paragraphs:
        notes.append(f"You wrote {report.paragraph_count} paragraphs; use at most {budget.max_paragraphs}.")
    if report.too_many_chars:
        notes.append(
            f"The content has {report.total_chars} characters; cut it to at most {budget.max_content_chars}."
        )
    if report.too_many_lines:
        notes.append(f"The content spans {report.line_count} lines; use at most {budget.max_lines}.")
    return "\n".join(f"- {note}" for note in notes)


def build_generation_prompt(request: SlideContentRequest, constraints: str, feedback: Optional[str] = None) -> str:
    image_instruction = (
        '- "image_prompt": a short (under 15 words) prompt for a clean, abstract illustration of the slide.'
        if request.with_image
        else '- "image_prompt": null. This slide has no image.'
    )
    prompt = f"""
    You are an expert in creating professional presentation slides.
    Write the content of ONE slide.

    # --- USER REQUEST ---
    - The slide topic is: "{request.topic}"
    - The target audience is: "{request.target_audience}"
    - The slide language MUST be: "{request.language}"

    # --- CONSTRAINTS ---
{constraints}

    # --- GUIDELINES ---
{CONTENT_GUIDELINES}

    # --- JSON STRUCTURE ---
    Your entire response MUST be a single JSON object, enclosed in ```json ... ```, with:
    - "title": the slide title.
    - "paragraphs": a list of markdown paragraphs.
    {image_instruction}
    """
    if feedback:
        prompt += f"""
    # --- YOUR PREVIOUS ANSWER DID NOT FIT THE SLIDE ---
{feedback}
    """
    return prompt


def parse_slide_content(text: str, with_image: bool) -> SlideContent:
    json_string = extract_json_from_string(text)
    if not json_string:
        raise ContentGenerationError("Failed to extract JSON from the AI's response.", text)
    try:
        data = json.loads(json_string)
        content = SlideContent(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise ContentGenerationError(f"AI response is not valid slide content: {e}", text) from e

    if not with_image:
        content.image_prompt = None
    elif not content.image_prompt:
        content.image_prompt = f"A professional, clean and abstract image about {content.title}"
    return content


class SlideContentGenerator:
    """Generates slide text with a Gemini model until it fits the slide budget."""

    def __init__(self, model, calibration: Optional[FitCalibration] = None, max_attempts: int = MAX_FIT_ATTEMPTS):
        self.model = model
        self.calibration = calibration or load_calibration()
        self.max_attempts = max(1, max_attempts)

    async def generate(self, request: SlideContentRequest) -> GeneratedSlide:
        constraints = prompt_constraints(request.width, request.with_image, self.calibration)
        feedback = None
        content = report = None

        for attempt in range(1, self.max_attempts + 1):
            prompt = build_generation_prompt(request, constraints, feedback)
            response = await self.model.generate_content_async(prompt)
            content = parse_slide_content(response.text, request.with_image)
            report = check_content(content, request.width, self.calibration)

            if report.fits:
                logger.info(f"Content for '{request.topic[:40]}' fits after {attempt} attempt(s)")
                return GeneratedSlide(content=content, fits=True, attempts=attempt, report=report)

            feedback = describe_overflow(report)
            logger.info(f"Attempt {attempt} for '{request.topic[:40]}' overflowed the slide:\n{feedback}")

        logger.warning(f"Content for '{request.topic[:40]}' still overflows after {self.max_attempts} attempts")
        return GeneratedSlide(content=content, fits=False, attempts=self.max_attempts, report=report)
