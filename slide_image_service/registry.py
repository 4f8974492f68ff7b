import logging
from collections import OrderedDict
from typing import Callable, Dict, Optional

from .collaborators import ClientMediaPicker, ImageGenerator
from .controller import SlideImageController
from .errors import SlideDiscardedError
from .models import ImageState

logger = logging.getLogger(__name__)


class SlideSessionRegistry:
    """
    One image controller per slide id for the lifetime of an authoring session.
    Controllers share the generator but each gets its own picker.
    """

    def __init__(self, generator_factory: Callable[[], ImageGenerator], max_discarded: int = 1024):
        self._generator_factory = generator_factory
        self._generator: Optional[ImageGenerator] = None
        self._controllers: Dict[str, SlideImageController] = {}
        self._pickers: Dict[str, ClientMediaPicker] = {}
        # Most recently discarded ids, oldest first; older ones fall back to unknown
        self._discarded_ids: "OrderedDict[str, None]" = OrderedDict()
        self._max_discarded = max_discarded

    @property
    def generator(self) -> ImageGenerator:
        if self._generator is None:
            self._generator = self._generator_factory()
        return self._generator

    def open(self, slide_id: str, image_prompt: Optional[str] = None) -> SlideImageController:
        """Opens a session for the slide, replacing (and discarding) any previous one."""
        previous = self._controllers.get(slide_id)
        if previous is not None:
            previous.discard()
        self._discarded_ids.pop(slide_id, None)

        picker = ClientMediaPicker()
        controller = SlideImageController(picker, self.generator, image_prompt=image_prompt, slide_id=slide_id)
        controller.subscribe(lambda state: self._log_state(slide_id, state))
        self._controllers[slide_id] = controller
        self._pickers[slide_id] = picker
        logger.info(f"[{slide_id}] Opened image session")
        return controller

    def get(self, slide_id: str) -> Optional[SlideImageController]:
        """Returns the slide's controller, None if unknown; raises if the slide was discarded."""
        if slide_id in self._discarded_ids:
            raise SlideDiscardedError(slide_id)
        return self._controllers.get(slide_id)

    def picker(self, slide_id: str) -> ClientMediaPicker:
        return self._pickers[slide_id]

    def discard(self, slide_id: str) -> bool:
        controller = self._controllers.pop(slide_id, None)
        self._pickers.pop(slide_id, None)
        if controller is None:
            return False
        controller.discard()
        self._remember_discarded(slide_id)
        return True

    def _remember_discarded(self, slide_id: str) -> None:
        self._discarded_ids[slide_id] = None
        self._discarded_ids.move_to_end(slide_id)
        while len(self._discarded_ids) > self._max_discarded:
            self._discarded_ids.popitem(last=False)

    def __len__(self) -> int:
        return len(self._controllers)

    @staticmethod
    def _log_state(slide_id: str, state: ImageState) -> None:
        logger.debug(f"[{slide_id}] Image state is now '{state.kind}'")
