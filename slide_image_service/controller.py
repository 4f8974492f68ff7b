"""
State machine for the illustration attached to one slide.

    Empty --generate--> Generating --> Resolved(image) | Failed(reason)
    any   --pick------> Resolved(image)        (cancelled pick: no change)
    any   --clear-----> Empty

At most one pick or generate is outstanding per controller. Requests made
while one is outstanding are rejected with OperationInProgressError. Every
operation carries a token. clear() and discard() cancel the outstanding
operation and retire its token, so a completion that still arrives is
dropped without touching the state.
"""
import asyncio
import logging
from typing import Callable, List, Optional, Set

from .collaborators import ImageGenerator, MediaPicker
from .errors import ImageGenerationError, OperationInProgressError, SlideDiscardedError
from .models import (
    EmptyState,
    FailedState,
    GeneratingState,
    ImageSource,
    ImageState,
    ResolvedState,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[ImageState], None]


class SlideImageController:

    def __init__(
        self,
        picker: MediaPicker,
        generator: ImageGenerator,
        image_prompt: Optional[str] = None,
        slide_id: str = "",
    ):
        self.picker = picker
        self.generator = generator
        self.image_prompt = image_prompt
        self.slide_id = slide_id
        self._state: ImageState = EmptyState()
        self._listeners: List[StateListener] = []
        self._token = 0
        self._pending: Optional[str] = None
        self._discarded = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ImageState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._pending is not None

    @property
    def discarded(self) -> bool:
        return self._discarded

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Registers a listener called with the new state after every change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Intents ---

    def request_pick(self, source: ImageSource) -> "asyncio.Task[Optional[ImageState]]":
        """
        Starts picking an image from the camera or gallery.

        Must be called from the event loop that owns the slide. The returned
        task resolves to the new state, or None when the user cancelled or the
        result arrived after the operation was detached.
        """
        self._ensure_accepting("pick")
        loop = asyncio.get_running_loop()
        token = self._begin("pick")
        logger.info(f"[{self.slide_id}] Picking image from {source.value}")
        return self._track(loop.create_task(self._run_pick(token, source)))

    def request_generate(self) -> "asyncio.Task[Optional[ImageState]]":
        """
        Starts generating an image. The controller is in Generating when this
        returns; the returned task resolves to Resolved or Failed.
        """
        self._ensure_accepting("generate")
        loop = asyncio.get_running_loop()
        token = self._begin("generate")
        self._set_state(GeneratingState())
        return self._track(loop.create_task(self._run_generate(token)))

    def clear(self) -> None:
        """Returns to Empty from any state and cancels any outstanding operation."""
        if self._discarded:
            raise SlideDiscardedError(self.slide_id)
        self._detach()
        self._set_state(EmptyState())

    def discard(self) -> None:
        """Detaches the controller from its slide. Late results are dropped; further requests fail."""
        if self._discarded:
            return
        logger.info(f"[{self.slide_id}] Slide discarded")
        self._discarded = True
        self._detach()
        self._listeners.clear()

    # --- Operation plumbing ---

    def _ensure_accepting(self, operation: str) -> None:
        if self._discarded:
            raise SlideDiscardedError(self.slide_id)
        if self._pending is not None or isinstance(self._state, GeneratingState):
            logger.warning(f"[{self.slide_id}] Rejected {operation}: {self._pending} already in progress")
            raise OperationInProgressError(self.slide_id, operation)

    def _begin(self, operation: str) -> int:
        self._token += 1
        self._pending = operation
        return self._token

    def _detach(self) -> None:
        # A collaborator that ignores cancellation still cannot reach the state: its token is stale.
        self._token += 1
        self._pending = None
        for task in list(self._tasks):
            task.cancel()

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _is_current(self, token: int) -> bool:
        return not self._discarded and token == self._token

    def _complete(self, token: int, new_state: Optional[ImageState]) -> Optional[ImageState]:
        if not self._is_current(token):
            logger.info(f"[{self.slide_id}] Dropping result of a detached operation")
            return None
        self._pending = None
        if new_state is not None:
            self._set_state(new_state)
        return new_state

    async def _run_pick(self, token: int, source: ImageSource) -> Optional[ImageState]:
        try:
            image = await self.picker.pick(source)
        except asyncio.CancelledError:
            if not self._is_current(token):
                return None
            self._complete(token, None)
            raise
        except Exception as e:
            logger.error(f"[{self.slide_id}] Image pick from {source.value} failed: {e}", exc_info=True)
            return self._complete(token, FailedState(reason=f"Image pick failed: {e}"))

        if image is None:
            logger.info(f"[{self.slide_id}] Pick from {source.value} cancelled by user")
            return self._complete(token, None)
        return self._complete(token, ResolvedState(image=image))

    async def _run_generate(self, token: int) -> Optional[ImageState]:
        try:
            image = await self.generator.generate(self.image_prompt)
        except ImageGenerationError as e:
            logger.warning(f"[{self.slide_id}] Image generation failed: {e.reason}")
            return self._complete(token, FailedState(reason=e.reason))
        except asyncio.CancelledError:
            if not self._is_current(token):
                return None
            self._complete(token, FailedState(reason="Image generation was cancelled"))
            raise
        except Exception as e:
            logger.error(f"[{self.slide_id}] Unexpected image generation error: {e}", exc_info=True)
            return self._complete(token, FailedState(reason=str(e) or e.__class__.__name__))
        return self._complete(token, ResolvedState(image=image))

    def _set_state(self, new_state: ImageState) -> None:
        if new_state == self._state:
            return
        logger.info(f"[{self.slide_id}] Image state {self._state.kind} -> {new_state.kind}")
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception(f"[{self.slide_id}] Image state listener failed")
