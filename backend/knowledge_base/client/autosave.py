"""
Debounced autosave for one page editing session.

The coordinator is a plain state machine driven by ``poll()``: callers feed it
edits, and on every poll it settles a finished request and fires the debounce
timer once it has expired. Time comes from an injectable ``clock`` and
persistence from an injectable ``persist(page_id, patch)`` callable, which may
return a plain value (synchronous save) or a ``concurrent.futures.Future``
(request still in flight).

Guarantees:
- edits inside the debounce window coalesce into one sparse patch
- at most one request is in flight; an expired timer waits for it to settle
- failures move to ``error`` without touching local values and without retrying;
  errors outside the taxonomy are reported as ``PersistenceFailure``
- ``cancel()`` never cancels a request that was already sent
- a closed session still settles its in-flight request and sends what was
  queued behind it on later polls (``idle`` tells when nothing is left)
"""

import logging
import time
from concurrent.futures import Executor, Future
from typing import Any, Callable, Dict, Optional

from knowledge_base.domain.lifecycle.autosave import SaveStatus, assert_save_transition
from knowledge_base.exceptions import KnowledgeBaseError, NetworkFailure, PersistenceFailure

logger = logging.getLogger(__name__)

Persist = Callable[[str, Dict[str, Any]], Any]

DEFAULT_DEBOUNCE_SECONDS = 0.8


class AutosaveCoordinator:
    FIELDS = ("title", "content")

    def __init__(
        self,
        page_id: str,
        persist: Persist,
        *,
        initial: Optional[Dict[str, Any]] = None,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page_id = page_id
        self.values: Dict[str, Any] = {
            field: (initial or {}).get(field) for field in self.FIELDS
        }
        self.status = SaveStatus.IDLE
        self.last_error: Optional[BaseException] = None
        self.last_result: Any = None
        self.last_saved_patch: Dict[str, Any] = {}

        self._persist = persist
        self._delay = delay
        self._clock = clock
        self._pending: Dict[str, Any] = {}
        self._deadline: Optional[float] = None
        self._in_flight: Optional[Future] = None
        self._in_flight_patch: Dict[str, Any] = {}
        self._closed = False

    # ------------------------
    # Introspection
    # ------------------------

    @property
    def pending_patch(self) -> Dict[str, Any]:
        return dict(self._pending)

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def timer_pending(self) -> bool:
        return self._deadline is not None

    @property
    def idle(self) -> bool:
        """Nothing in flight and nothing left to send."""
        return self._in_flight is None and not self._pending

    # ------------------------
    # Inputs
    # ------------------------

    def edit(self, field: str, value: Any) -> None:
        """Record a keystroke-level change and restart the debounce timer."""
        if field not in self.FIELDS:
            raise ValueError(f"Autosave does not track field '{field}'")
        if self._closed:
            raise RuntimeError("Editing session is closed")

        self.values[field] = value
        self._pending[field] = value
        self._deadline = self._clock() + self._delay

        # while a request is in flight the status stays 'saving'
        if self.status is not SaveStatus.SAVING:
            self._transition(SaveStatus.UNSAVED)

    def poll(self) -> Optional[Future]:
        """
        Settle a finished request, then fire the timer if it has expired.

        Returns the request issued during this call, if any.
        """
        self._settle()

        if (
            self._deadline is not None
            and self._in_flight is None
            and self._clock() >= self._deadline
        ):
            return self._fire()
        return None

    def flush(self) -> Optional[Future]:
        """
        Persist pending edits now. With a request in flight the pending patch
        fires on the first poll after that request settles.
        """
        self._settle()
        if not self._pending:
            self._deadline = None
            return None

        if self._in_flight is not None:
            self._deadline = self._clock()
            return None
        return self._fire()

    def cancel(self) -> None:
        """Drop the pending timer and its edits without persisting."""
        if self._deadline is not None:
            logger.debug("Autosave for %s cancelled with %s pending", self.page_id, sorted(self._pending))
        self._deadline = None
        self._pending.clear()

    def retry(self) -> Optional[Future]:
        """Explicit user retry after a failed save."""
        if self.status is not SaveStatus.ERROR:
            return None
        return self.flush()

    def close(self, *, flush: bool = True) -> Optional[Future]:
        """End the session deterministically: flush (default) or cancel."""
        request = self.flush() if flush else None
        if not flush:
            self.cancel()
        self._closed = True
        return request

    # ------------------------
    # Internals
    # ------------------------

    def _transition(self, to_status: SaveStatus) -> None:
        if to_status is self.status:
            return
        assert_save_transition(from_status=self.status, to_status=to_status)
        logger.debug("Autosave %s: %s -> %s", self.page_id, self.status.value, to_status.value)
        self.status = to_status

    def _fire(self) -> Future:
        patch = dict(self._pending)
        self._pending.clear()
        self._deadline = None

        if self.status is SaveStatus.ERROR:
            self._transition(SaveStatus.UNSAVED)
        self._transition(SaveStatus.SAVING)
        self._in_flight_patch = patch

        future: Future
        try:
            outcome = self._persist(self.page_id, patch)
        except Exception as exc:
            future = Future()
            future.set_exception(exc)
        else:
            if isinstance(outcome, Future):
                future = outcome
            else:
                future = Future()
                future.set_result(outcome)

        self._in_flight = future
        self._settle()
        return future

    def _settle(self) -> None:
        future = self._in_flight
        if future is None or not future.done():
            return

        self._in_flight = None
        patch, self._in_flight_patch = self._in_flight_patch, {}

        if future.cancelled():
            error: Optional[BaseException] = NetworkFailure("Save request was cancelled")
        else:
            error = future.exception()

        if error is not None and not isinstance(error, KnowledgeBaseError):
            logger.error(
                "Autosave for %s hit an unexpected error",
                self.page_id,
                exc_info=(type(error), error, error.__traceback__),
            )
            wrapped = PersistenceFailure(f"Save failed: {error}")
            wrapped.__cause__ = error
            error = wrapped

        if error is None:
            self.last_result = future.result()
            self.last_saved_patch = patch
            self.last_error = None
            self._transition(SaveStatus.UNSAVED if self._pending else SaveStatus.SAVED)
            return

        # failed fields stay queued underneath anything typed since
        self._pending = {**patch, **self._pending}
        self._deadline = None
        self.last_error = error
        self._transition(SaveStatus.ERROR)
        logger.warning("Autosave for %s failed: %s", self.page_id, error)


def background_persist(client, executor: Executor) -> Persist:
    """Run ``client.update_page`` on ``executor`` so saves stay in flight."""

    def persist(page_id: str, patch: Dict[str, Any]) -> Future:
        return executor.submit(client.update_page, page_id, patch)

    return persist
