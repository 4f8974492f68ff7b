"""
Character and line budgeting for a single slide.

Everything here is a heuristic over the slide's authored width: the body font
size is a fixed share of the width and the average glyph is a fixed share of
the font size. No font metrics are consulted.
"""
import math
import logging
from typing import List, Optional, Sequence

from .config import FitCalibration, load_calibration
from .models import FitBudget, FitReport, SlideContent, SlideGeometry

logger = logging.getLogger(__name__)

# Formatting guidelines handed to the content model alongside the budget.
CONTENT_GUIDELINES = (
    "Presentation Guidelines:\n"
    "1. Format:\n"
    "   - Use markdown for clear visual hierarchy:\n"
    "     * `# ` for the main point\n"
    "     * `## ` for sub-points\n"
    "     * `**bold**` for key terms\n"
    "     * `*italic*` for supporting points\n"
    "     * `- ` for bullet points\n"
    "     * `` `highlighted` `` for technical terms\n"
    "2. Content Style:\n"
    "   - Keep title short and impactful\n"
    "   - One key idea per slide\n"
    "   - Use bullet points for clarity\n"
    "   - Be extremely concise\n"
    "   - Prioritize key information only"
)


def _round(value: float) -> int:
    # Half up; round() would send 2.5 to 2. Budget values are never negative.
    return int(math.floor(value + 0.5))


def _text_length(text: str) -> int:
    # UTF-16 code units: characters outside the BMP count twice, as in the rendering client
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def _calibration(calibration: Optional[FitCalibration]) -> FitCalibration:
    return calibration if calibration is not None else load_calibration()


def slide_height(width: float, calibration: Optional[FitCalibration] = None) -> float:
    return width * _calibration(calibration).aspect_ratio


def max_lines(has_image: bool, calibration: Optional[FitCalibration] = None) -> int:
    cal = _calibration(calibration)
    return cal.lines_with_image if has_image else cal.lines_without_image


def max_chars_per_line(width: float, calibration: Optional[FitCalibration] = None) -> int:
    """Estimated characters per body line; 0 for a non-positive width."""
    if width <= 0:
        return 0
    cal = _calibration(calibration)
    font_size = width * cal.font_ratio
    return _round(width / (font_size * cal.glyph_width_ratio))


def max_content_chars(width: float, has_image: bool, calibration: Optional[FitCalibration] = None) -> int:
    cal = _calibration(calibration)
    chars_per_line = max_chars_per_line(width, cal)
    return _round(chars_per_line * max_lines(has_image, cal) * cal.slack_factor)


def compute_budget(geometry: SlideGeometry, calibration: Optional[FitCalibration] = None) -> FitBudget:
    cal = _calibration(calibration)
    return FitBudget(
        max_chars_per_line=max_chars_per_line(geometry.width, cal),
        max_content_chars=max_content_chars(geometry.width, geometry.has_image, cal),
        max_lines=max_lines(geometry.has_image, cal),
        max_paragraphs=cal.max_paragraphs,
        max_title_chars=cal.max_title_chars,
        words_per_line=cal.words_per_line,
        slide_height=slide_height(geometry.width, cal),
    )


def check_fit(
    title: str,
    paragraphs: Sequence[str],
    width: float,
    has_image: bool,
    calibration: Optional[FitCalibration] = None,
) -> FitReport:
    """
    Measures the text against the budget for the given geometry.

    Paragraphs are counted joined by a single space for the character axis
    and joined by newlines for the line axis, so a paragraph with embedded
    newlines uses more than one line of the budget.
    """
    budget = compute_budget(SlideGeometry(width=width, has_image=has_image), calibration)

    title_too_long = _text_length(title) > budget.max_title_chars
    too_many_paragraphs = len(paragraphs) > budget.max_paragraphs
    total_chars = _text_length(" ".join(paragraphs))
    line_count = len("\n".join(paragraphs).split("\n"))

    if title_too_long or too_many_paragraphs:
        # Structural limits fail the check before the text is measured
        too_many_chars = too_many_lines = False
    else:
        too_many_chars = total_chars > budget.max_content_chars
        too_many_lines = line_count > budget.max_lines

    fits = not (title_too_long or too_many_paragraphs or too_many_chars or too_many_lines)
    logger.debug(
        f"Slide metrics: max chars per line={budget.max_chars_per_line}, "
        f"max total chars={budget.max_content_chars}, current content length={total_chars}, "
        f"lines={line_count}/{budget.max_lines}, fits={fits}"
    )
    return FitReport(
        fits=fits,
        budget=budget,
        title_chars=_text_length(title),
        paragraph_count=len(paragraphs),
        total_chars=total_chars,
        line_count=line_count,
        title_too_long=title_too_long,
        too_many_paragraphs=too_many_paragraphs,
        too_many_chars=too_many_chars,
        too_many_lines=too_many_lines,
    )


def does_content_fit(
    title: str,
    paragraphs: Sequence[str],
    width: float,
    has_image: bool,
    calibration: Optional[FitCalibration] = None,
) -> bool:
    return check_fit(title, paragraphs, width, has_image, calibration).fits


def check_content(content: SlideContent, width: float, calibration: Optional[FitCalibration] = None) -> FitReport:
    """Fit check for a whole slide; image space is reserved when it carries an image prompt."""
    geometry = SlideGeometry.for_content(content, width)
    return check_fit(content.title, content.paragraphs, geometry.width, geometry.has_image, calibration)


def prompt_constraints(width: float, has_image: bool, calibration: Optional[FitCalibration] = None) -> str:
    """Renders the slide budget as instructions for a content-generation model."""
    budget = compute_budget(SlideGeometry(width=width, has_image=has_image), calibration)
    lines: List[str] = [
        "Content Constraints:",
        f"- Title: Maximum {budget.max_title_chars} characters",
        f"- Total Content: Maximum {budget.max_content_chars} characters",
        f"- Maximum Lines: {budget.max_lines}",
        f"- Maximum Paragraphs: {budget.max_paragraphs}",
        f"- Words per Line: Target {budget.words_per_line} words",
        "",
        "Format:",
        "- Use concise, impactful statements",
        "- Focus on key points only",
        "- Avoid detailed explanations",
        "- Use active voice",
    ]
    return "\n".join(lines)
