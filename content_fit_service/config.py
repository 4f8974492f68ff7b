import os
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "SLIDE_FIT_"


class FitCalibration(BaseModel):
    """
    Layout constants tuned against one text renderer's metrics.
    Each value can be overridden with a SLIDE_FIT_<FIELD> environment variable.
    Ratios must be positive and counts at least one.
    """
    font_ratio: float = Field(0.022, gt=0)            # body font size as a share of slide width
    glyph_width_ratio: float = Field(0.65, gt=0)      # average glyph advance as a share of font size
    slack_factor: float = Field(0.8, gt=0, le=1)      # share of the theoretical maximum actually used
    aspect_ratio: float = Field(9 / 16, gt=0)         # height / width of the rendering surface
    lines_with_image: int = Field(6, ge=1)
    lines_without_image: int = Field(8, ge=1)
    max_paragraphs: int = Field(2, ge=1)
    max_title_chars: int = Field(40, ge=1)
    words_per_line: int = Field(8, ge=1)


def load_calibration() -> FitCalibration:
    """Builds the calibration from defaults plus any SLIDE_FIT_* overrides."""
    overrides = {}
    for field_name in FitCalibration.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is not None and raw.strip():
            overrides[field_name] = raw.strip()
    if overrides:
        logger.debug(f"Applying calibration overrides from environment: {overrides}")
    return FitCalibration(**overrides)
