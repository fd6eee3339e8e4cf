"""Shared fakes: a scriptable InferenceBackend."""
import asyncio
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from local_whisper.backend.client import InferenceBackend
from local_whisper.models import LoadProgress


class FakeBackend(InferenceBackend):
    """Records load calls; emits ``steps`` as progress, waits on ``gate`` if set."""

    def __init__(self) -> None:
        self.load_calls: list[str] = []
        self.steps: list[float] = []
        self.gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None
        self.infer = AsyncMock(return_value={"text": "  transcribed text  "})

    async def load(self, model_id, on_progress=None):
        self.load_calls.append(model_id)
        await asyncio.sleep(0)
        for step in self.steps:
            match on_progress:
                case None:
                    pass
                case notify:
                    notify(LoadProgress(progress=step, file=f"{model_id}/model.safetensors"))
        match self.gate:
            case None:
                pass
            case gate:
                await gate.wait()
        match self.error:
            case None:
                return self.infer
            case err:
                raise err


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
