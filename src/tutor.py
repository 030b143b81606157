"""
Tutor: the core side of the advisory boundary.

The tutor turns user actions into advisory gateway calls, shows a single
advisory message with a loading flag, and applies results to the
ProjectStore.

Every call gets a ticket from a monotonically increasing sequence, taken
when the call is issued. Only the result of the most recently issued call is
applied; a response that arrives for an older ticket is discarded. Gateway
errors never escape: the message becomes the fallback text and the project
is left as it was.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from advisory import AdvisoryFailure, AdvisoryGateway
from config import TutorConfig
from logging_utils import get_logger
from state import ProjectStore

logger = get_logger(__name__)


class AdvisoryKind(str, Enum):
    FEEDBACK = "feedback"
    CONTROL_CODE = "control_code"
    MODEL_EXPLANATION = "model_explanation"


@dataclass(frozen=True)
class AdvisoryOutcome:
    """What happened to one advisory call."""
    kind: AdvisoryKind
    ticket: int
    text: str | None = None
    failed: bool = False
    applied: bool = False


@dataclass(frozen=True)
class _Request:
    kind: AdvisoryKind
    ticket: int
    call: Callable[[], str]


class Tutor:
    """
    Issues advisory requests on behalf of one session.

    Usage:
        tutor = Tutor(store, gateway)
        tutor.ask("¿Son realistas mis requerimientos?")
        tutor.message      # reply, or the fallback text on failure

        future = tutor.submit(AdvisoryKind.MODEL_EXPLANATION, "Dinámica de un motor DC")
        tutor.is_loading   # True until the latest call completes
    """

    def __init__(
        self,
        store: ProjectStore,
        gateway: AdvisoryGateway,
        config: TutorConfig | None = None,
        executor: Executor | None = None,
    ):
        self.store = store
        self.gateway = gateway
        self.config = config or TutorConfig()
        self._executor = executor
        self._owns_executor = False
        self._lock = threading.Lock()
        self._message = self.config.greeting
        self._sequence = 0
        self._latest_done = True

    @property
    def message(self) -> str:
        return self._message

    @property
    def is_loading(self) -> bool:
        return not self._latest_done

    @property
    def latest_ticket(self) -> int:
        return self._sequence

    # === Synchronous entry points ===

    def ask(self, prompt: str) -> AdvisoryOutcome:
        """Ask for feedback on the current project."""
        return self._execute(self._issue(AdvisoryKind.FEEDBACK, prompt))

    def draft_code(self, control_logic: str | None = None) -> AdvisoryOutcome:
        """Generate a control-code draft for the selected components."""
        return self._execute(self._issue(AdvisoryKind.CONTROL_CODE, control_logic))

    def explain_model(self, concept: str) -> AdvisoryOutcome:
        """Explain the mathematical model behind a physics concept."""
        return self._execute(self._issue(AdvisoryKind.MODEL_EXPLANATION, concept))

    # === Background entry point ===

    def submit(self, kind: AdvisoryKind | str, argument: str | None = None) -> "Future[AdvisoryOutcome]":
        """
        Run an advisory request on a worker thread.

        The ticket and the request inputs are taken now, in the caller's
        thread, so the order of submit() calls decides which result wins.
        """
        request = self._issue(AdvisoryKind(kind), argument)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="advisory")
            self._owns_executor = True
        return self._executor.submit(self._execute, request)

    def close(self) -> None:
        """Shut down the worker pool this tutor created, waiting for in-flight calls."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._owns_executor = False

    # === Internals ===

    def _issue(self, kind: AdvisoryKind, argument: str | None) -> _Request:
        """Capture the request inputs and take the next ticket."""
        if kind == AdvisoryKind.FEEDBACK:
            prompt = argument or ""
            snapshot = self.store.snapshot()
            call = lambda: self.gateway.request_feedback(prompt, snapshot)  # noqa: E731
        elif kind == AdvisoryKind.CONTROL_CODE:
            names = [c.name for c in self.store.data.selected_components]
            logic = argument or self.config.default_control_logic
            call = lambda: self.gateway.request_control_code_draft(names, logic)  # noqa: E731
        else:
            concept = argument or ""
            call = lambda: self.gateway.request_model_explanation(concept)  # noqa: E731

        with self._lock:
            self._sequence += 1
            self._latest_done = False
            ticket = self._sequence

        logger.info("Advisory %s request issued (ticket %d)", kind.value, ticket)
        return _Request(kind=kind, ticket=ticket, call=call)

    def _execute(self, request: _Request) -> AdvisoryOutcome:
        try:
            text = request.call()
        except AdvisoryFailure as e:
            logger.warning("Advisory %s failed (ticket %d): %s", request.kind.value, request.ticket, e)
            return self._finish(request, None)
        except Exception:
            logger.exception("Unexpected advisory error (ticket %d)", request.ticket)
            return self._finish(request, None)
        return self._finish(request, text or "")

    def _finish(self, request: _Request, text: str | None) -> AdvisoryOutcome:
        failed = text is None
        with self._lock:
            if request.ticket != self._sequence:
                logger.info(
                    "Discarding stale %s response (ticket %d, latest %d)",
                    request.kind.value, request.ticket, self._sequence,
                )
                return AdvisoryOutcome(request.kind, request.ticket, text, failed, applied=False)

            if failed:
                self._message = self.config.fallback_message
            else:
                self._apply_success(request.kind, text)
            self._latest_done = True

        return AdvisoryOutcome(request.kind, request.ticket, text, failed, applied=True)

    def _apply_success(self, kind: AdvisoryKind, text: str) -> None:
        if kind == AdvisoryKind.FEEDBACK:
            self._message = text or self.config.empty_reply_message
        elif kind == AdvisoryKind.CONTROL_CODE:
            self.store.set_arduino_code(text)
            self._message = self.config.code_ready_message
        else:
            self.store.set_math_model(text)
            self._message = self.config.model_ready_message
