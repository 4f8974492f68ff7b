import logging

from fastapi import APIRouter, Depends

from .config import FitCalibration, load_calibration
from .estimator import check_content, check_fit, compute_budget, prompt_constraints
from .models import (
    FitBudget,
    FitCheckRequest,
    FitReport,
    GeometryRequest,
    PromptConstraintsResponse,
    SlideGeometry,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_calibration() -> FitCalibration:
    return load_calibration()


@router.post("/budget", response_model=FitBudget)
async def get_budget(request: GeometryRequest, calibration: FitCalibration = Depends(get_calibration)):
    return compute_budget(SlideGeometry(width=request.width, has_image=request.has_image), calibration)


@router.post("/fit-check", response_model=FitReport)
async def fit_check(request: FitCheckRequest, calibration: FitCalibration = Depends(get_calibration)):
    """
    Checks whether the slide text fits its budget. Overflow is reported in the
    body (fits=false) rather than as an error status.
    """
    content = request.content
    if request.has_image is None:
        report = check_content(content, request.width, calibration)
    else:
        report = check_fit(content.title, content.paragraphs, request.width, request.has_image, calibration)
    if not report.fits:
        logger.info(f"Content for '{content.title[:40]}' does not fit at width {request.width}")
    return report


@router.post("/prompt-constraints", response_model=PromptConstraintsResponse)
async def get_prompt_constraints(request: GeometryRequest, calibration: FitCalibration = Depends(get_calibration)):
    geometry = SlideGeometry(width=request.width, has_image=request.has_image)
    return PromptConstraintsResponse(
        constraints=prompt_constraints(request.width, request.has_image, calibration),
        budget=compute_budget(geometry, calibration),
    )
