"""
Tests for calibration loading.
"""

import pytest
from pydantic import ValidationError

from content_fit_service.config import FitCalibration, load_calibration
from content_fit_service.estimator import max_content_chars, max_lines


def test_defaults():
    calibration = load_calibration()

    assert calibration == FitCalibration()
    assert calibration.font_ratio == 0.022
    assert calibration.glyph_width_ratio == 0.65
    assert calibration.slack_factor == 0.8
    assert calibration.aspect_ratio == pytest.approx(9 / 16)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SLIDE_FIT_SLACK_FACTOR", "0.5")
    monkeypatch.setenv("SLIDE_FIT_LINES_WITH_IMAGE", "4")

    calibration = load_calibration()

    assert calibration.slack_factor == 0.5
    assert calibration.lines_with_image == 4
    assert calibration.lines_without_image == 8


def test_estimator_reads_environment_when_no_calibration_given(monkeypatch):
    monkeypatch.setenv("SLIDE_FIT_SLACK_FACTOR", "0.5")

    assert max_content_chars(375, False) == 280


def test_blank_override_is_ignored(monkeypatch):
    monkeypatch.setenv("SLIDE_FIT_LINES_WITHOUT_IMAGE", "  ")

    assert max_lines(False) == 8


def test_invalid_override_is_rejected(monkeypatch):
    monkeypatch.setenv("SLIDE_FIT_MAX_PARAGRAPHS", "two")

    with pytest.raises(ValidationError):
        load_calibration()


def test_zero_glyph_width_override_is_rejected(monkeypatch):
    monkeypatch.setenv("SLIDE_FIT_GLYPH_WIDTH_RATIO", "0")

    with pytest.raises(ValidationError):
        load_calibration()


@pytest.mark.parametrize("field_name, value", [
    ("font_ratio", 0),
    ("aspect_ratio", -1),
    ("slack_factor", 1.5),
    ("lines_with_image", 0),
    ("max_title_chars", 0),
])
def test_out_of_range_values_are_rejected(field_name, value):
    with pytest.raises(ValidationError):
        FitCalibration(**{field_name: value})
