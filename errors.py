from __future__ import annotations

"""Exception taxonomy for the simulation core.

The worker and HTTP layers map these to structured error payloads; the core
itself only raises.
"""


class SimulationError(Exception):
    pass


class ConfigurationError(SimulationError, ValueError):
    """Malformed input: empty roster, bad record field, unknown request kind."""


class GameStateError(SimulationError):
    """A live-game operation was invoked without a usable game in progress."""


class SessionNotFoundError(GameStateError, KeyError):
    """No live session is registered under the requested id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "session not found"


class WorkerRequestError(SimulationError):
    """A request failed inside the worker; carries the structured error message."""


class WorkerTerminatedError(SimulationError):
    """Raised into every outstanding request when the worker goes away."""

    def __init__(self, message: str = "Worker terminated") -> None:
        super().__init__(message)


__all__ = [
    "SimulationError",
    "ConfigurationError",
    "GameStateError",
    "SessionNotFoundError",
    "WorkerRequestError",
    "WorkerTerminatedError",
]
