from __future__ import annotations

"""Caller-side handle on a ``SimulationWorker``.

``submit`` returns a ``concurrent.futures.Future`` per request and keeps it in
a pending map keyed by correlation id until the matching RESULT or ERROR
arrives. Terminating the client (or the worker thread dying) fails every
pending future with ``WorkerTerminatedError``.
"""

import logging
import uuid
from concurrent.futures import Future
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Mapping, Optional

from errors import WorkerRequestError, WorkerTerminatedError

from .protocol import RequestKind
from .sessions import SessionRegistry
from .worker import SimulationWorker

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


@dataclass
class _Pending:
    kind: RequestKind
    future: "Future[Any]"
    on_progress: Optional[ProgressCallback] = None


class WorkerClient:
    def __init__(self, *, sessions: Optional[SessionRegistry] = None, autostart: bool = True) -> None:
        self._lock = Lock()
        self._pending: Dict[str, _Pending] = {}
        self._terminated = False
        self.worker = SimulationWorker(self._on_message, on_exit=self._on_worker_exit, sessions=sessions)
        if autostart:
            self.worker.start()

    def __enter__(self) -> "WorkerClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.terminate()

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(
        self,
        kind: Any,
        payload: Optional[Mapping[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> "Future[Any]":
        request_kind = RequestKind.parse(kind)
        future: "Future[Any]" = Future()
        cid = uuid.uuid4().hex
        with self._lock:
            if self._terminated or not self.worker.running:
                future.set_exception(WorkerTerminatedError())
                return future
            self._pending[cid] = _Pending(request_kind, future, on_progress)
        try:
            self.worker.submit({"type": request_kind.value, "correlationId": cid, "payload": dict(payload or {})})
        except WorkerTerminatedError:
            self._fail_pending()
        return future

    def request(self, kind: Any, payload: Optional[Mapping[str, Any]] = None, timeout: Optional[float] = None) -> Any:
        """Blocking ``submit``; raises the request's error."""
        return self.submit(kind, payload).result(timeout=timeout)

    def terminate(self) -> None:
        with self._lock:
            if self._terminated:
                return
            self._terminated = True
        self.worker.stop()
        self._fail_pending()

    # -------------------------
    # Worker callbacks
    # -------------------------

    def _on_message(self, message: Dict[str, Any]) -> None:
        cid = message.get("correlationId")
        kind = message.get("type")
        with self._lock:
            entry = self._pending.get(cid) if kind == "PROGRESS" else self._pending.pop(cid, None)
        if entry is None:
            # late reply for a request that was already failed by terminate()
            logger.debug("WORKER_REPLY_DROPPED correlation_id=%s type=%s", cid, kind)
            return

        if kind == "PROGRESS":
            if entry.on_progress is not None:
                entry.on_progress(message.get("progress") or {})
        elif kind == "RESULT":
            entry.future.set_result(message.get("result"))
        else:
            err = (message.get("error") or {}).get("message") or "worker request failed"
            entry.future.set_exception(WorkerRequestError(err))

    def _on_worker_exit(self, error: Optional[BaseException]) -> None:
        if error is not None:
            logger.warning("WORKER_EXITED_WITH_ERROR pending=%d", self.pending_count)
            with self._lock:
                self._terminated = True
        self._fail_pending()

    def _fail_pending(self) -> None:
        with self._lock:
            pending = list(self._pending.values())
            self._pending.clear()
        for entry in pending:
            if not entry.future.done():
                entry.future.set_exception(WorkerTerminatedError("Worker terminated"))


__all__ = ["WorkerClient", "ProgressCallback"]
