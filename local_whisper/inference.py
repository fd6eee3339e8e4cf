"""Pure helpers shared by the coordinator and the request handler."""
from collections.abc import Sequence
from typing import Any, Optional

from local_whisper.constants import (
    CHUNK_LENGTH_S,
    OPTION_CHUNK_LENGTH,
    OPTION_LANGUAGE,
    OPTION_STRIDE_LENGTH,
    STRIDE_LENGTH_S,
)
from local_whisper.errors import EmptyInput, InvalidResult


def validate_audio(audio: Optional[Sequence[float]]) -> None:
    match audio:
        case None:
            raise EmptyInput()
        case samples if len(samples) == 0:
            raise EmptyInput()
        case _:
            pass


def normalize_language(language: Optional[str], default_language: str) -> Optional[str]:
    """Return the hint to send, or None when the option should be omitted.

    Unknown languages are passed through; the backend decides validity.
    """
    match language:
        case None | "":
            return None
        case lang if lang == default_language:
            return None
        case lang:
            return lang


def build_inference_options(language: Optional[str], default_language: str) -> dict[str, Any]:
    options: dict[str, Any] = {
        OPTION_CHUNK_LENGTH: CHUNK_LENGTH_S,
        OPTION_STRIDE_LENGTH: STRIDE_LENGTH_S,
    }
    match normalize_language(language, default_language):
        case None:
            pass
        case lang:
            options[OPTION_LANGUAGE] = lang
    return options


def extract_text(result: Any) -> str:
    match result:
        case {"text": str() as text}:
            return text.strip()
        case _:
            raise InvalidResult(result)
