from pydantic import BaseModel, Field

from content_fit_service.models import FitReport, SlideContent

# --- Input Models ---

class SlideContentRequest(BaseModel):
    """
    A request for the text of one slide, with the geometry the text must fit.
    """
    topic: str
    target_audience: str = "Knowledgeable Audience"
    language: str = "English"
    width: float = Field(default=960.0, gt=0)
    with_image: bool = True

# --- Output/Result Models ---

class GeneratedSlide(BaseModel):
    """
    The generated slide text. `fits` is false when no attempt met the budget;
    the last attempt is returned as-is in that case.
    """
    content: SlideContent
    fits: bool
    attempts: int
    report: FitReport
