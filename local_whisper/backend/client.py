"""InferenceBackend: abstract base for speech-to-text model providers."""
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Awaitable, Callable, Optional

from local_whisper.models import LoadProgress

# infer(audio, options) -> {"text": str}
InferenceCallable = Callable[[Sequence[float], dict[str, Any]], Awaitable[Any]]
ProgressCallback = Callable[[LoadProgress], None]


class InferenceBackend(ABC):
    @abstractmethod
    async def load(
        self,
        model_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> InferenceCallable:
        """Download/load ``model_id`` and return its inference callable. Raises on failure.

        ``on_progress`` must be called on the event loop thread.
        """
        ...
