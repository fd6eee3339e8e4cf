import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ModelState(str, Enum):
    NOT_LOADED = "not_loaded"
    DOWNLOADING = "downloading"
    READY = "ready"
    ERROR = "error"


class ModelSwitchPolicy(str, Enum):
    """What update_model does while a load is in flight."""

    DEFER = "defer"
    IMMEDIATE = "immediate"


@dataclass(frozen=True)
class ProgressSnapshot:
    state: ModelState
    percent: int
    message: Optional[str] = None


@dataclass(frozen=True)
class LoadProgress:
    """One progress event emitted by a backend while loading.

    ``progress`` is a fraction in 0..1; ``None`` means the event only
    carries a file name (e.g. "initiate" / "done" notifications).
    """

    progress: Optional[float] = None
    file: Optional[str] = None


@dataclass(frozen=True)
class LoadAttempt:
    """A load in flight for ``model_id``. Late callers await ``future``."""

    model_id: str
    future: asyncio.Future = field(compare=False)
