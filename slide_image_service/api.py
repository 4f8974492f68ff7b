import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from .controller import SlideImageController
from .errors import OperationInProgressError, SlideDiscardedError
from .models import OpenSlideRequest, PickRequest, SlideImageResponse
from .registry import SlideSessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slides")


def get_registry() -> SlideSessionRegistry:
    # Replaced by the application with the registry it owns
    raise HTTPException(status_code=503, detail="Slide image registry not configured.")


def _controller(slide_id: str, registry: SlideSessionRegistry) -> SlideImageController:
    try:
        controller = registry.get(slide_id)
    except SlideDiscardedError as e:
        raise HTTPException(status_code=410, detail=str(e))
    if controller is None:
        raise HTTPException(status_code=404, detail=f"No image session for slide '{slide_id}'.")
    return controller


def _response(slide_id: str, controller: SlideImageController) -> SlideImageResponse:
    return SlideImageResponse(slide_id=slide_id, state=controller.state)


@router.post("/{slide_id}", response_model=SlideImageResponse)
async def open_slide(slide_id: str, request: OpenSlideRequest, registry: SlideSessionRegistry = Depends(get_registry)):
    controller = registry.open(slide_id, image_prompt=request.image_prompt)
    return _response(slide_id, controller)


@router.get("/{slide_id}/image", response_model=SlideImageResponse)
async def get_image_state(slide_id: str, registry: SlideSessionRegistry = Depends(get_registry)):
    return _response(slide_id, _controller(slide_id, registry))


@router.post("/{slide_id}/pick", response_model=SlideImageResponse)
async def pick_image(slide_id: str, request: PickRequest, registry: SlideSessionRegistry = Depends(get_registry)):
    """
    Applies the image the user picked on their device. A null uri means the
    picker was closed without a selection and leaves the state unchanged.
    """
    controller = _controller(slide_id, registry)
    try:
        task = controller.request_pick(request.source)
        registry.picker(slide_id).offer(request.source, request.uri)
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await task
    return _response(slide_id, controller)


@router.post("/{slide_id}/generate", response_model=SlideImageResponse, status_code=202)
async def generate_image(
    slide_id: str,
    response: Response,
    wait: bool = False,
    registry: SlideSessionRegistry = Depends(get_registry),
):
    """
    Starts generating the slide image. Returns 202 while the state is still
    'generating', or 200 with the settled state when wait=true.
    """
    controller = _controller(slide_id, registry)
    try:
        task = controller.request_generate()
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if wait:
        await task
        response.status_code = 200
    return _response(slide_id, controller)


@router.post("/{slide_id}/clear", response_model=SlideImageResponse)
async def clear_image(slide_id: str, registry: SlideSessionRegistry = Depends(get_registry)):
    controller = _controller(slide_id, registry)
    controller.clear()
    return _response(slide_id, controller)


@router.delete("/{slide_id}", status_code=204)
async def discard_slide(slide_id: str, registry: SlideSessionRegistry = Depends(get_registry)):
    if not registry.discard(slide_id):
        raise HTTPException(status_code=404, detail=f"No image session for slide '{slide_id}'.")
