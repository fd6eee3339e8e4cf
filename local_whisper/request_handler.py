"""TranscriptionRequestHandler: validates a request and runs it through the coordinator."""
import logging
import time
from collections.abc import Sequence
from typing import Optional

from local_whisper.constants import DEFAULT_LANGUAGE, MSG_TRANSCRIBING, MSG_TRANSCRIPTION_DONE
from local_whisper.coordinator import ModelCoordinator
from local_whisper.inference import normalize_language, validate_audio

logger = logging.getLogger(__name__)


class TranscriptionRequestHandler:
    """``language`` is the configured hint used when a request carries none."""

    def __init__(
        self,
        coordinator: ModelCoordinator,
        language: Optional[str] = None,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._coordinator = coordinator
        self._language = language
        self._default_language = default_language

    async def handle(self, audio: Sequence[float], language: Optional[str] = None) -> str:
        """Return the trimmed transcript; empty string means no speech.

        Raises ``EmptyInput`` before touching the coordinator, otherwise
        whatever ``ModelCoordinator.transcribe`` raises.
        """
        validate_audio(audio)
        hint = normalize_language(language or self._language, self._default_language)
        start = time.time()
        logger.info(MSG_TRANSCRIBING, len(audio))
        text = await self._coordinator.transcribe(audio, hint)
        logger.info(MSG_TRANSCRIPTION_DONE, time.time() - start)
        return text
