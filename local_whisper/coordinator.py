"""ModelCoordinator: lifecycle, single-flight loading and progress for one ASR model."""
import asyncio
import logging
from collections.abc import Sequence
from typing import Optional

from local_whisper.backend.client import InferenceBackend, InferenceCallable
from local_whisper.broadcaster import ProgressBroadcaster, Subscriber, Unsubscribe
from local_whisper.constants import (
    DEFAULT_LANGUAGE,
    MSG_DISPOSED,
    MSG_LOAD_IN_FLIGHT,
    MSG_LOAD_SUPERSEDED,
    MSG_LOADING_MODEL,
    MSG_MODEL_LOAD_FAILED,
    MSG_MODEL_LOADED,
    MSG_MODEL_SWITCH_DEFERRED,
    MSG_MODEL_SWITCHED,
    MSG_PROGRESS,
    MSG_STATE_CHANGED,
)
from local_whisper.errors import LoadFailure, NotReady
from local_whisper.inference import build_inference_options, extract_text, validate_audio
from local_whisper.models import (
    LoadAttempt,
    LoadProgress,
    ModelState,
    ModelSwitchPolicy,
    ProgressSnapshot,
)

logger = logging.getLogger(__name__)


def _retrieve_exception(future: asyncio.Future) -> None:
    # Every waiter may have been cancelled before the load failed.
    match future.cancelled():
        case True:
            pass
        case False:
            future.exception()


class ModelCoordinator:
    """Owns the loaded model and the NotLoaded/Downloading/Ready/Error state machine.

    All mutation happens on the event loop thread. Starting a load is a
    plain synchronous check-and-set, so concurrent ``initialize`` calls
    can never start two backend loads: late callers await the
    ``LoadAttempt`` future that the first caller created.

    Invariants: a session exists iff state is READY; an attempt exists
    iff state is DOWNLOADING.
    """

    def __init__(
        self,
        backend: InferenceBackend,
        model_id: str,
        default_language: str = DEFAULT_LANGUAGE,
        switch_policy: ModelSwitchPolicy = ModelSwitchPolicy.DEFER,
        broadcaster: Optional[ProgressBroadcaster] = None,
    ) -> None:
        self._backend = backend
        self._model_id = model_id
        self._default_language = default_language
        self._switch_policy = switch_policy
        self._broadcaster = broadcaster or ProgressBroadcaster()
        self._state = ModelState.NOT_LOADED
        self._percent = 0
        self._message: Optional[str] = None
        self._session: Optional[InferenceCallable] = None
        self._attempt: Optional[LoadAttempt] = None
        self._tasks: set[asyncio.Task] = set()
        # bumped by dispose(); loads awaited across a bump are abandoned
        self._generation = 0

    # ── status ────────────────────────────────────────────────────────────────

    def get_status(self) -> ModelState:
        return self._state

    def get_progress(self) -> int:
        return self._percent

    def get_model(self) -> str:
        return self._model_id

    def get_snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(state=self._state, percent=self._percent, message=self._message)

    def subscribe(self, subscriber: Subscriber) -> Unsubscribe:
        return self._broadcaster.subscribe(subscriber)

    # ── lifecycle ─────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Load the configured model, or join the load already in flight.

        Returns immediately when READY. Raises ``LoadFailure`` (the same
        instance for every caller of one attempt) when the backend fails.
        """
        match (self._state, self._attempt):
            case (ModelState.READY, _):
                return
            case (ModelState.DOWNLOADING, LoadAttempt() as attempt):
                logger.debug(MSG_LOAD_IN_FLIGHT, attempt.model_id)
            case _:
                attempt = self._start_attempt()
        # shield: a cancelled waiter must not cancel the shared attempt
        await asyncio.shield(attempt.future)

    def update_model(self, model_id: str) -> None:
        match model_id == self._model_id:
            case True:
                return
            case False:
                pass
        self._model_id = model_id
        match (self._state, self._switch_policy):
            case (ModelState.NOT_LOADED, _):
                logger.info(MSG_MODEL_SWITCHED, model_id)
            case (ModelState.DOWNLOADING, ModelSwitchPolicy.DEFER):
                logger.info(MSG_MODEL_SWITCH_DEFERRED, model_id, self._attempt.model_id)
            case _:
                logger.info(MSG_MODEL_SWITCHED, model_id)
                self._reset()

    def dispose(self) -> None:
        """Release the model and drop every subscriber. Safe to call repeatedly.

        A load still in flight runs to completion but its result is discarded.
        """
        self._generation += 1
        self._session = None
        self._attempt = None
        match (self._state, self._percent):
            case (ModelState.NOT_LOADED, 0):
                pass
            case _:
                self._transition(ModelState.NOT_LOADED, 0)
        self._broadcaster.clear()
        logger.debug(MSG_DISPOSED)

    # ── transcription ─────────────────────────────────────────────────────────

    async def transcribe(self, audio: Sequence[float], language: Optional[str] = None) -> str:
        """Transcribe ``audio``, loading the model first if needed.

        Raises ``NotReady`` if the coordinator is disposed while waiting on the load.
        """
        validate_audio(audio)
        while self._session is None:
            generation = self._generation
            await self.initialize()
            match self._generation == generation:
                case True:
                    pass
                case False:
                    raise NotReady()
        return await self._infer(self._session, audio, language)

    async def transcribe_loaded(self, audio: Sequence[float], language: Optional[str] = None) -> str:
        """Transcribe without the implicit load; raises ``NotReady`` unless READY."""
        validate_audio(audio)
        match self._session:
            case None:
                raise NotReady()
            case session:
                return await self._infer(session, audio, language)

    async def _infer(
        self,
        session: InferenceCallable,
        audio: Sequence[float],
        language: Optional[str],
    ) -> str:
        options = build_inference_options(language, self._default_language)
        result = await session(audio, options)
        return extract_text(result)

    # ── load attempt ──────────────────────────────────────────────────────────

    def _start_attempt(self) -> LoadAttempt:
        # No await between the state check in initialize() and here.
        loop = asyncio.get_running_loop()
        attempt = LoadAttempt(model_id=self._model_id, future=loop.create_future())
        attempt.future.add_done_callback(_retrieve_exception)
        self._attempt = attempt
        self._session = None
        logger.info(MSG_LOADING_MODEL, attempt.model_id)
        self._transition(ModelState.DOWNLOADING, 0, attempt.model_id)
        task = loop.create_task(self._run_attempt(attempt))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return attempt

    async def _run_attempt(self, attempt: LoadAttempt) -> None:
        try:
            session = await self._backend.load(
                attempt.model_id,
                lambda event: self._on_progress(attempt, event),
            )
        except Exception as exc:
            failure = LoadFailure(attempt.model_id, exc)
            self._settle_failure(attempt, failure)
            attempt.future.set_exception(failure)
            return
        self._settle_success(attempt, session)
        attempt.future.set_result(None)

    def _on_progress(self, attempt: LoadAttempt, event: LoadProgress) -> None:
        match (self._attempt is attempt, event.progress):
            case (False, _):
                return
            case (True, None):
                percent = self._percent
            case (True, fraction):
                percent = max(0, min(100, int(round(fraction * 100))))
        message = event.file or self._message
        logger.debug(MSG_PROGRESS, percent, message)
        self._transition(ModelState.DOWNLOADING, percent, message)

    def _settle_success(self, attempt: LoadAttempt, session: InferenceCallable) -> None:
        match self._attempt is attempt:
            case False:
                logger.info(MSG_LOAD_SUPERSEDED, attempt.model_id)
                return
            case True:
                pass
        self._attempt = None
        self._session = session
        logger.info(MSG_MODEL_LOADED, attempt.model_id)
        self._transition(ModelState.READY, 100)
        self._apply_deferred_switch(attempt)

    def _settle_failure(self, attempt: LoadAttempt, failure: LoadFailure) -> None:
        match self._attempt is attempt:
            case False:
                logger.info(MSG_LOAD_SUPERSEDED, attempt.model_id)
                return
            case True:
                pass
        self._attempt = None
        self._session = None
        logger.error(MSG_MODEL_LOAD_FAILED, attempt.model_id, failure.cause)
        self._transition(ModelState.ERROR, self._percent, str(failure.cause))
        self._apply_deferred_switch(attempt)

    def _apply_deferred_switch(self, attempt: LoadAttempt) -> None:
        match self._model_id == attempt.model_id:
            case True:
                pass
            case False:
                logger.info(MSG_MODEL_SWITCHED, self._model_id)
                self._reset()

    # ── state ─────────────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._session = None
        self._attempt = None
        self._transition(ModelState.NOT_LOADED, 0)

    def _transition(self, state: ModelState, percent: int, message: Optional[str] = None) -> None:
        previous = self._state
        self._state, self._percent, self._message = state, percent, message
        match previous == state:
            case False:
                logger.info(MSG_STATE_CHANGED, previous.value, state.value, percent)
            case True:
                pass
        self._broadcaster.publish(self.get_snapshot())
