"""OpenAIWhisperBackend: hosted Whisper speech-to-text backend."""
import io
import logging
import wave
from array import array
from collections.abc import Sequence
from typing import Any, Optional

from openai import AsyncOpenAI

from local_whisper.backend.client import InferenceBackend, InferenceCallable, ProgressCallback
from local_whisper.constants import (
    AUDIO_FILENAME,
    LANGUAGE_CODES,
    OPTION_LANGUAGE,
    RESULT_TEXT_KEY,
    SAMPLE_RATE,
)
from local_whisper.models import LoadProgress

logger = logging.getLogger(__name__)

_PCM16_MAX = 32767


def encode_wav(samples: Sequence[float], sample_rate: int = SAMPLE_RATE) -> bytes:
    """Encode float samples in -1..1 as 16-bit mono PCM WAV."""
    pcm = array("h", (int(max(-1.0, min(1.0, s)) * _PCM16_MAX) for s in samples))
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def language_code(language: str) -> str:
    return LANGUAGE_CODES.get(language.lower(), language)


class OpenAIWhisperBackend(InferenceBackend):
    """Nothing to download: ``load`` only checks the model exists on the account."""

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def load(
        self,
        model_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> InferenceCallable:
        client = AsyncOpenAI(api_key=self._api_key)
        await client.models.retrieve(model_id)
        logger.debug("OpenAI model %s available", model_id)
        match on_progress:
            case None:
                pass
            case notify:
                notify(LoadProgress(progress=1.0, file=model_id))

        async def infer(audio: Sequence[float], options: dict[str, Any]) -> dict[str, Any]:
            audio_file = io.BytesIO(encode_wav(audio))
            audio_file.name = AUDIO_FILENAME
            kwargs: dict[str, Any] = {"model": model_id, "file": audio_file}
            match options.get(OPTION_LANGUAGE):
                case str() as lang if lang:
                    kwargs[OPTION_LANGUAGE] = language_code(lang)
                case _:
                    pass
            # Chunking happens server-side; chunk/stride options do not apply.
            response = await client.audio.transcriptions.create(**kwargs)
            return {RESULT_TEXT_KEY: response.text}

        return infer
