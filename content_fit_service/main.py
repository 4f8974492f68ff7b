import logging

from fastapi import FastAPI

from .api import router

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - [%(levelname)s] - %(message)s')

app = FastAPI(
    title="Content Fit Service",
    description="Estimates whether slide text fits the slide's character and line budget.",
    version="1.0.0",
)
app.include_router(router)
