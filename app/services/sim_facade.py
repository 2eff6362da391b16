from __future__ import annotations

"""Synchronous bridge from the HTTP routes to the worker request handlers.

Routes run requests in-process through ``worker.dispatch`` against one shared
``SessionRegistry``; domain errors are mapped to ``HTTPException`` here so the
route modules stay thin.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi import HTTPException

from errors import ConfigurationError, GameStateError, SessionNotFoundError
from worker import HandlerContext, RequestKind, SessionRegistry, dispatch

logger = logging.getLogger(__name__)

_SESSIONS = SessionRegistry()


def get_sessions() -> SessionRegistry:
    return _SESSIONS


def http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, SessionNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, GameStateError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ConfigurationError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=f"simulation failed: {exc}")


def run_request(
    kind: RequestKind,
    payload: Mapping[str, Any],
    *,
    on_progress: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> Any:
    ctx = HandlerContext(_SESSIONS, on_progress=on_progress)
    try:
        return dispatch(kind, payload, ctx)
    except (ConfigurationError, GameStateError) as e:
        raise http_error(e) from e
    except Exception as e:
        logger.warning("API_REQUEST_FAILED kind=%s", kind.value, exc_info=True)
        raise http_error(e) from e
