"""Character/line budgeting and fit checks for presentation slides."""

from .config import FitCalibration, load_calibration
from .estimator import (
    CONTENT_GUIDELINES,
    check_content,
    check_fit,
    compute_budget,
    does_content_fit,
    max_chars_per_line,
    max_content_chars,
    max_lines,
    prompt_constraints,
    slide_height,
)
from .models import FitBudget, FitReport, SlideContent, SlideGeometry

__all__ = [
    "CONTENT_GUIDELINES",
    "FitBudget",
    "FitCalibration",
    "FitReport",
    "SlideContent",
    "SlideGeometry",
    "check_content",
    "check_fit",
    "compute_budget",
    "does_content_fit",
    "load_calibration",
    "max_chars_per_line",
    "max_content_chars",
    "max_lines",
    "prompt_constraints",
    "slide_height",
]
