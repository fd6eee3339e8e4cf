import pytest

from local_whisper.coordinator import ModelCoordinator
from local_whisper.errors import EmptyInput
from local_whisper.request_handler import TranscriptionRequestHandler

SAMPLES = [0.1, 0.2, 0.3]


def make_handler(backend, language=None) -> TranscriptionRequestHandler:
    coordinator = ModelCoordinator(backend, "openai/whisper-tiny")
    return TranscriptionRequestHandler(coordinator, language=language)


@pytest.mark.asyncio
async def test_handle_returns_trimmed_text(backend):
    handler = make_handler(backend)

    assert await handler.handle(SAMPLES) == "transcribed text"
    assert backend.load_calls == ["openai/whisper-tiny"]


@pytest.mark.asyncio
async def test_handle_rejects_empty_audio_without_backend_calls(backend):
    handler = make_handler(backend)

    with pytest.raises(EmptyInput):
        await handler.handle([])

    assert backend.load_calls == []
    backend.infer.assert_not_awaited()


@pytest.mark.asyncio
async def test_configured_language_used_when_request_has_none(backend):
    handler = make_handler(backend, language="german")

    await handler.handle(SAMPLES)

    _, options = backend.infer.await_args.args
    assert options["language"] == "german"


@pytest.mark.asyncio
async def test_request_language_overrides_configured(backend):
    handler = make_handler(backend, language="german")

    await handler.handle(SAMPLES, "japanese")

    _, options = backend.infer.await_args.args
    assert options["language"] == "japanese"


@pytest.mark.asyncio
async def test_default_language_is_not_sent(backend):
    handler = make_handler(backend, language="english")

    await handler.handle(SAMPLES)

    _, options = backend.infer.await_args.args
    assert "language" not in options


@pytest.mark.asyncio
async def test_empty_transcript_is_returned_as_empty_string(backend):
    backend.infer.return_value = {"text": "   "}
    handler = make_handler(backend)

    assert await handler.handle(SAMPLES) == ""
