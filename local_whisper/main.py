"""Entry point: wires Config → backend → ModelCoordinator → StatusDisplay → request handler."""
import asyncio
import logging
import sys
from array import array
from pathlib import Path

from rich.logging import RichHandler

from local_whisper.backend.client import InferenceBackend
from local_whisper.config import Config
from local_whisper.constants import (
    BACKEND_OPENAI,
    MSG_NO_SPEECH,
    MSG_STARTING,
    MSG_TRANSCRIPTION_FAILED,
    MSG_UNREADABLE_AUDIO,
)
from local_whisper.coordinator import ModelCoordinator
from local_whisper.errors import TranscriptionError
from local_whisper.request_handler import TranscriptionRequestHandler
from local_whisper.status import StatusDisplay

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def _build_backend(config: Config) -> InferenceBackend:
    match config.backend:
        case b if b == BACKEND_OPENAI:
            from local_whisper.backend.openai import OpenAIWhisperBackend
            return OpenAIWhisperBackend(config.openai_api_key)
        case _:
            # transformers/torch are an optional extra; only import when selected
            from local_whisper.backend.huggingface import HuggingFaceBackend
            return HuggingFaceBackend()


def read_samples(path: Path) -> array:
    """Read raw little-endian float32 mono samples."""
    samples = array("f")
    samples.frombytes(path.read_bytes())
    match sys.byteorder:
        case "big":
            samples.byteswap()
        case _:
            pass
    return samples


async def run(
    coordinator: ModelCoordinator,
    handler: TranscriptionRequestHandler,
    status: StatusDisplay,
    paths: list[Path],
) -> int:
    try:
        match paths:
            case []:
                return 0 if await status.request_load() else 1
            case _:
                pass
        failures = 0
        for path in paths:
            try:
                samples = read_samples(path)
            except (OSError, ValueError):
                logger.exception(MSG_UNREADABLE_AUDIO, path)
                failures += 1
                continue
            try:
                text = await handler.handle(samples)
            except TranscriptionError:
                logger.exception(MSG_TRANSCRIPTION_FAILED)
                failures += 1
                continue
            print(text or MSG_NO_SPEECH)
        return 1 if failures else 0
    finally:
        coordinator.dispose()


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)
    logger.info(MSG_STARTING)

    coordinator = ModelCoordinator(
        _build_backend(config),
        config.model_name,
        switch_policy=config.model_switch_policy,
    )
    status = StatusDisplay(coordinator)
    coordinator.subscribe(status)
    handler = TranscriptionRequestHandler(coordinator, language=config.language)

    paths = list(map(Path, sys.argv[1:]))
    sys.exit(asyncio.run(run(coordinator, handler, status, paths)))


if __name__ == "__main__":
    main()
