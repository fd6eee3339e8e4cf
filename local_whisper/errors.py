"""Exception taxonomy for the model lifecycle and transcription calls."""
from local_whisper.constants import (
    MSG_ERR_EMPTY_INPUT,
    MSG_ERR_INVALID_RESULT,
    MSG_ERR_NOT_READY,
)


class TranscriptionError(Exception):
    """Base class for every error raised by the coordinator."""


class LoadFailure(TranscriptionError):
    """The backend rejected a load. Every waiter of that attempt sees this one instance."""

    def __init__(self, model_id: str, cause: BaseException) -> None:
        super().__init__(f"Failed to load model {model_id}: {cause}")
        self.model_id = model_id
        self.cause = cause
        self.__cause__ = cause


class NotReady(TranscriptionError):

    def __init__(self, message: str = MSG_ERR_NOT_READY) -> None:
        super().__init__(message)


class InvalidResult(TranscriptionError):
    """Backend response had no string ``text`` field. The model stays usable."""

    def __init__(self, result: object) -> None:
        super().__init__(f"{MSG_ERR_INVALID_RESULT}: {result!r}")
        self.result = result


class EmptyInput(TranscriptionError):

    def __init__(self, message: str = MSG_ERR_EMPTY_INPUT) -> None:
        super().__init__(message)
