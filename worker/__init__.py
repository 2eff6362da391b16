"""Background execution of simulation requests.

Public API
----------
- WorkerClient.submit(kind, payload, on_progress) -> Future
- WorkerClient.terminate()
- SimulationWorker (thread + queue; messages out through a callback)
- SessionRegistry (live quarter-by-quarter games keyed by session id)
- RequestKind, WorkerRequest, ResultMessage, ErrorMessage, ProgressMessage
- dispatch(kind, payload, ctx) (synchronous, used by the HTTP layer)
"""

from .client import WorkerClient
from .handlers import DEFAULT_SESSION_ID, HANDLERS, HandlerContext, dispatch
from .protocol import (
    ErrorMessage,
    ProgressMessage,
    RequestKind,
    ResultMessage,
    WorkerRequest,
    parse_request,
)
from .sessions import LiveSession, SessionRegistry
from .worker import SimulationWorker

__all__ = [
    "DEFAULT_SESSION_ID",
    "ErrorMessage",
    "HANDLERS",
    "HandlerContext",
    "LiveSession",
    "ProgressMessage",
    "RequestKind",
    "ResultMessage",
    "SessionRegistry",
    "SimulationWorker",
    "WorkerClient",
    "WorkerRequest",
    "dispatch",
    "parse_request",
]
