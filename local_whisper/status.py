"""StatusDisplay: renders coordinator snapshots as a one-line status."""
import logging

from local_whisper.constants import (
    MSG_LOAD_FAILED,
    STATUS_DOWNLOADING,
    STATUS_ERROR,
    STATUS_NOT_LOADED,
    STATUS_READY,
)
from local_whisper.coordinator import ModelCoordinator
from local_whisper.errors import TranscriptionError
from local_whisper.models import ModelState, ProgressSnapshot

logger = logging.getLogger(__name__)


def format_status(snapshot: ProgressSnapshot) -> str:
    match snapshot.state:
        case ModelState.NOT_LOADED:
            return STATUS_NOT_LOADED
        case ModelState.DOWNLOADING:
            return STATUS_DOWNLOADING % snapshot.percent
        case ModelState.READY:
            return STATUS_READY
        case ModelState.ERROR:
            return STATUS_ERROR


class StatusDisplay:
    """Progress subscriber that keeps the latest status line and logs changes."""

    def __init__(self, coordinator: ModelCoordinator) -> None:
        self._coordinator = coordinator
        self.text = format_status(coordinator.get_snapshot())

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        text = format_status(snapshot)
        match text == self.text:
            case True:
                pass
            case False:
                self.text = text
                logger.info(text)

    async def request_load(self) -> bool:
        """Click handler: loads only from NOT_LOADED or ERROR. Returns False on failure."""
        match self._coordinator.get_status():
            case ModelState.NOT_LOADED | ModelState.ERROR:
                pass
            case _:
                return True
        try:
            await self._coordinator.initialize()
        except TranscriptionError as exc:
            logger.error("%s (%s)", MSG_LOAD_FAILED, exc)
            return False
        return True
