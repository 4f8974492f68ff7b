from pydantic import BaseModel, Field
from typing import List, Optional

# --- Slide value objects ---

class SlideContent(BaseModel):
    """Title, ordered markdown paragraphs and the optional illustration prompt of one slide."""
    title: str
    paragraphs: List[str] = Field(default_factory=list)
    image_prompt: Optional[str] = None

class SlideGeometry(BaseModel):
    width: float
    has_image: bool = False

    @classmethod
    def for_content(cls, content: SlideContent, width: float) -> "SlideGeometry":
        return cls(width=width, has_image=content.image_prompt is not None)

class FitBudget(BaseModel):
    max_chars_per_line: int
    max_content_chars: int
    max_lines: int
    max_paragraphs: int
    max_title_chars: int
    words_per_line: int
    slide_height: float

class FitReport(BaseModel):
    """Outcome of a fit check, with the axes that overflowed."""
    fits: bool
    budget: FitBudget
    title_chars: int
    paragraph_count: int
    total_chars: int
    line_count: int
    title_too_long: bool = False
    too_many_paragraphs: bool = False
    too_many_chars: bool = False
    too_many_lines: bool = False

# --- Models for API communication ---

class FitCheckRequest(BaseModel):
    content: SlideContent
    width: float = Field(gt=0)
    # Falls back to the presence of content.image_prompt when omitted
    has_image: Optional[bool] = None

class GeometryRequest(BaseModel):
    width: float = Field(gt=0)
    has_image: bool = False

class PromptConstraintsResponse(BaseModel):
    constraints: str
    budget: FitBudget
