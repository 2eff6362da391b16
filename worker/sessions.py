from __future__ import annotations

"""Live-game sessions keyed by id.

A session holds the latest ``LiveGameState`` snapshot (JSON-safe dict) of one
quarter-by-quarter game. Each session is single-flight: ``checkout`` marks it
busy for the duration of one continue / sim-to-end call and a second caller
gets ``GameStateError`` instead of racing on the same state.
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional

from errors import GameStateError, SessionNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class LiveSession:
    session_id: str
    game_state: Optional[Dict[str, Any]] = None
    busy: bool = False
    quarters_played: int = 0


class SessionRegistry:
    def __init__(self) -> None:
        self._lock = RLock()
        self._sessions: Dict[str, LiveSession] = {}

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def create(self, session_id: Optional[str] = None) -> LiveSession:
        sid = str(session_id) if session_id else uuid.uuid4().hex
        with self._lock:
            existing = self._sessions.get(sid)
            if existing is not None and existing.busy:
                raise GameStateError(f"session {sid} is busy")
            session = LiveSession(session_id=sid)
            self._sessions[sid] = session
        logger.info("LIVE_SESSION_CREATED session_id=%s", sid)
        return session

    def get(self, session_id: str) -> LiveSession:
        with self._lock:
            session = self._sessions.get(str(session_id))
        if session is None:
            raise SessionNotFoundError(f"No live game for session {session_id}")
        return session

    def find(self, session_id: Optional[str]) -> Optional[LiveSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(str(session_id))

    @contextmanager
    def checkout(self, session_id: str) -> Iterator[LiveSession]:
        """Hold ``session_id`` exclusively for one operation."""
        with self._lock:
            session = self.get(session_id)
            if session.busy:
                raise GameStateError(f"session {session_id} is busy")
            session.busy = True
        try:
            yield session
        finally:
            with self._lock:
                session.busy = False

    def clear(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(str(session_id), None)
        if removed is not None:
            logger.info("LIVE_SESSION_CLEARED session_id=%s", session_id)
        return removed is not None

    def reset(self) -> None:
        with self._lock:
            ids = list(self._sessions)
            self._sessions.clear()
        if ids:
            logger.info("LIVE_SESSIONS_RESET count=%d", len(ids))


__all__ = ["LiveSession", "SessionRegistry"]
