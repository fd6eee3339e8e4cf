"""HuggingFaceBackend: local Whisper via transformers, weights from the Hub."""
import asyncio
import logging
from collections.abc import Sequence
from fnmatch import fnmatch
from typing import Any, Optional

import numpy as np
from huggingface_hub import hf_hub_download, list_repo_files
from transformers import pipeline

from local_whisper.backend.client import InferenceBackend, InferenceCallable, ProgressCallback
from local_whisper.constants import (
    ASR_TASK,
    LOCAL_MODEL_FILE_PATTERNS,
    OPTION_LANGUAGE,
)
from local_whisper.models import LoadProgress

logger = logging.getLogger(__name__)


def _wanted(filename: str) -> bool:
    return any(fnmatch(filename, p) for p in LOCAL_MODEL_FILE_PATTERNS)


class HuggingFaceBackend(InferenceBackend):
    """Downloads model files one by one so progress can be reported per file.

    Blocking Hub and torch calls run in worker threads; progress events are
    handed back to the event loop with ``call_soon_threadsafe``.
    """

    def __init__(self, device: Optional[str] = None) -> None:
        self._device = device

    async def load(
        self,
        model_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> InferenceCallable:
        loop = asyncio.get_running_loop()

        def report(event: LoadProgress) -> None:
            match on_progress:
                case None:
                    pass
                case notify:
                    loop.call_soon_threadsafe(notify, event)

        pipe = await asyncio.to_thread(self._load_blocking, model_id, report)

        async def infer(audio: Sequence[float], options: dict[str, Any]) -> Any:
            kwargs = dict(options)
            match kwargs.pop(OPTION_LANGUAGE, None):
                case str() as lang if lang:
                    kwargs["generate_kwargs"] = {OPTION_LANGUAGE: lang}
                case _:
                    pass
            samples = np.asarray(audio, dtype=np.float32)
            return await asyncio.to_thread(pipe, samples, **kwargs)

        return infer

    def _load_blocking(self, model_id: str, report) -> Any:
        files = list(filter(_wanted, list_repo_files(model_id)))
        report(LoadProgress(progress=0.0, file=None))
        for done, filename in enumerate(files, start=1):
            hf_hub_download(repo_id=model_id, filename=filename)
            report(LoadProgress(progress=done / len(files), file=filename))
            logger.debug("Fetched %s/%s", model_id, filename)
        return pipeline(ASR_TASK, model=model_id, device=self._device)
