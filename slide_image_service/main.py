import os
import logging
from pathlib import Path

from fastapi import FastAPI
import vertexai
from vertexai.preview.vision_models import ImageGenerationModel

from .api import get_registry, router
from .collaborators import GcsImageStore, LocalImageStore, VertexImageGenerator
from .registry import SlideSessionRegistry

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(
    title="Slide Image Service",
    description="Tracks the picked or generated illustration of each slide being authored.",
)

# --- Initialize Vertex AI ---
try:
    PROJECT_ID = os.environ.get("GCP_PROJECT")
    LOCATION = os.environ.get("GCP_REGION", "us-central1")
    if not PROJECT_ID:
        raise ValueError("GCP_PROJECT environment variable is not set.")

    vertexai.init(project=PROJECT_ID, location=LOCATION)
    image_model = ImageGenerationModel.from_pretrained("imagen-3.0-generate-002")

    logging.info("✅ Vertex AI image model initialized successfully.")
except Exception as e:
    logging.critical(f"Failed to initialize Vertex AI image model: {e}", exc_info=True)
    image_model = None


def build_image_generator() -> VertexImageGenerator:
    bucket = os.environ.get("IMAGE_BUCKET")
    if bucket:
        store = GcsImageStore(bucket)
    else:
        store = LocalImageStore(Path(os.environ.get("IMAGE_STORE_DIR", "generated_images")))
    return VertexImageGenerator(image_model, store)


registry = SlideSessionRegistry(build_image_generator)

app.include_router(router)
app.dependency_overrides[get_registry] = lambda: registry
