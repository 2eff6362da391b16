from __future__ import annotations

"""Background simulation worker: one thread, one request queue.

Requests are processed strictly in arrival order. Every outgoing message
(RESULT / ERROR / PROGRESS, camelCase dicts) goes through ``on_message``, which
is called from the worker thread. A failing request becomes an ERROR message
and the loop keeps going; an exception escaping the loop itself (for example
from ``on_message``) ends the thread and is reported through ``on_exit``.
"""

import logging
import queue
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from errors import WorkerTerminatedError

from .handlers import HandlerContext, dispatch
from .protocol import ResultMessage, error_message, parse_request, progress_message, to_wire
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

MessageCallback = Callable[[Dict[str, Any]], None]
ExitCallback = Callable[[Optional[BaseException]], None]

_STOP = object()


class SimulationWorker:
    def __init__(
        self,
        on_message: MessageCallback,
        *,
        on_exit: Optional[ExitCallback] = None,
        sessions: Optional[SessionRegistry] = None,
        name: str = "SimulationWorker",
    ) -> None:
        self._on_message = on_message
        self._on_exit = on_exit
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.name = name
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self.running = False

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_alive:
            return
        self.running = True
        self._thread = threading.Thread(target=self._worker_loop, daemon=True, name=self.name)
        self._thread.start()
        logger.info("WORKER_STARTED name=%s", self.name)

    def submit(self, request: Mapping[str, Any]) -> None:
        """Queue a ``{type, correlationId, payload}`` request."""
        if not self.running:
            raise WorkerTerminatedError()
        self._queue.put(request)

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loop and drop queued work. Live sessions are cleared."""
        was_running = self.running
        self.running = False
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
                dropped += 1
            except queue.Empty:
                break
        self._queue.put(_STOP)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self.sessions.reset()
        if was_running:
            logger.warning("WORKER_TERMINATED name=%s dropped=%d", self.name, dropped)

    # -------------------------
    # Loop
    # -------------------------

    def _worker_loop(self) -> None:
        error: Optional[BaseException] = None
        try:
            while self.running:
                item = self._queue.get()
                if item is _STOP or not self.running:
                    break
                self._process(item)
        except Exception as exc:
            error = exc
            logger.warning("WORKER_CRASHED name=%s", self.name, exc_info=True)
        finally:
            self.running = False
            if self._on_exit is not None:
                self._on_exit(error)

    def _check_running(self) -> None:
        # Called between games of a batch; a stop request aborts the batch.
        if not self.running:
            raise WorkerTerminatedError()

    def _emit(self, message: Any) -> None:
        self._on_message(to_wire(message))

    def _process(self, raw: Any) -> None:
        cid = ""
        if isinstance(raw, Mapping):
            cid = str(raw.get("correlationId") or raw.get("correlation_id") or "")

        def on_progress(progress: Dict[str, Any]) -> None:
            self._emit(progress_message(cid, progress))

        ctx = HandlerContext(self.sessions, on_progress=on_progress, on_yield=self._check_running)
        try:
            request = parse_request(raw)
            result = dispatch(request.type, request.payload, ctx)
        except Exception as exc:
            kind = raw.get("type") if isinstance(raw, Mapping) else None
            logger.warning("WORKER_REQUEST_FAILED correlation_id=%s type=%s", cid, kind, exc_info=True)
            self._emit(error_message(cid, exc))
            return
        self._emit(ResultMessage(correlationId=cid, result=result))


__all__ = ["SimulationWorker", "MessageCallback", "ExitCallback"]
