import os
import logging

import vertexai
from vertexai.generative_models import GenerativeModel
from fastapi import FastAPI, HTTPException

from .generator import SlideContentGenerator
from .models import GeneratedSlide, SlideContentRequest

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - [%(levelname)s] - %(message)s')
logger = logging.getLogger(__name__)

# --- FastAPI App and Vertex AI Initialization ------------------------------
app = FastAPI(
    title="Content Generation Service",
    description="Generates slide content with Gemini, sized to fit the slide.",
    version="3.0.0",
)

try:
    PROJECT_ID = os.environ.get("GCP_PROJECT")
    LOCATION = os.environ.get("GCP_REGION")
    if not PROJECT_ID or not LOCATION:
        raise ValueError("GCP_PROJECT and GCP_REGION environment variables are not set.")
    vertexai.init(project=PROJECT_ID, location=LOCATION)
    model = GenerativeModel("gemini-2.5-flash")
    logger.info("✅ Vertex AI initialized successfully in Content Generation Service.")
except Exception as e:
    logger.error(f"❌ ERROR: Failed to initialize Vertex AI: {e}")
    model = None


# --- API Endpoint ------------------------------------------------------------
@app.post("/generate-slide", response_model=GeneratedSlide)
async def generate_slide(request: SlideContentRequest):
    """
    Generates the title and paragraphs of one slide, re-prompting the model
    until the text fits the slide's budget.
    """
    if not model:
        raise HTTPException(status_code=503, detail="Vertex AI model not available.")

    logger.info(f"--- Generating slide for topic: '{request.topic[:80]}' in {request.language} ---")
    try:
        return await SlideContentGenerator(model).generate(request)
    except Exception as e:
        logger.error(f"--- CRITICAL ERROR in Content Generation: {e} ---", exc_info=True)
        raw_response_text = getattr(e, "raw_response", "N/A")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate content: {e}. Raw AI Response: {raw_response_text}",
        )
