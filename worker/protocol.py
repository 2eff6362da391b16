from __future__ import annotations

"""Message shapes exchanged with the simulation worker.

Every request is ``{type, correlationId, payload}``. Replies carry the same
correlation id and are one of RESULT, ERROR or (for batches) PROGRESS.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from errors import ConfigurationError


class RequestKind(str, Enum):
    INIT = "INIT"
    SIMULATE_GAME = "SIMULATE_GAME"
    SIMULATE_QUARTER = "SIMULATE_QUARTER"
    SIM_TO_END = "SIM_TO_END"
    SIMULATE_BULK = "SIMULATE_BULK"
    PROCESS_POST_GAME = "PROCESS_POST_GAME"
    PROCESS_WEEKLY = "PROCESS_WEEKLY"
    PROCESS_MONTHLY = "PROCESS_MONTHLY"
    PROCESS_REST_DAY = "PROCESS_REST_DAY"
    PROCESS_SEASON_END = "PROCESS_SEASON_END"
    RECALCULATE_OVERALL = "RECALCULATE_OVERALL"

    @classmethod
    def parse(cls, value: Any) -> "RequestKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ConfigurationError(f"Unknown request kind: {value}") from None


class WorkerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: RequestKind
    correlation_id: str = Field(..., alias="correlationId")
    payload: Dict[str, Any] = Field(default_factory=dict)


class ProgressInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed: int
    total: int
    current_item_id: Optional[str] = Field(None, alias="currentItemId")


class ErrorInfo(BaseModel):
    message: str


class ResultMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["RESULT"] = "RESULT"
    correlation_id: str = Field(..., alias="correlationId")
    result: Any = None


class ErrorMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["ERROR"] = "ERROR"
    correlation_id: str = Field(..., alias="correlationId")
    error: ErrorInfo


class ProgressMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["PROGRESS"] = "PROGRESS"
    correlation_id: str = Field(..., alias="correlationId")
    progress: ProgressInfo


OutgoingMessage = Union[ResultMessage, ErrorMessage, ProgressMessage]


def parse_request(raw: Any) -> WorkerRequest:
    """Validate an incoming request; unknown kinds raise ConfigurationError."""
    if isinstance(raw, WorkerRequest):
        return raw
    if not isinstance(raw, dict):
        raise ConfigurationError(f"request must be an object, got {type(raw).__name__}")
    kind = RequestKind.parse(raw.get("type"))
    cid = raw.get("correlationId", raw.get("correlation_id"))
    if cid is None or str(cid) == "":
        raise ConfigurationError("request is missing correlationId")
    payload = raw.get("payload") or {}
    if not isinstance(payload, dict):
        raise ConfigurationError("payload must be an object")
    return WorkerRequest(type=kind, correlationId=str(cid), payload=payload)


def error_message(correlation_id: str, exc: BaseException) -> ErrorMessage:
    return ErrorMessage(correlationId=correlation_id, error=ErrorInfo(message=str(exc) or type(exc).__name__))


def progress_message(correlation_id: str, progress: Dict[str, Any]) -> ProgressMessage:
    return ProgressMessage(correlationId=correlation_id, progress=ProgressInfo.model_validate(progress))


def to_wire(message: OutgoingMessage) -> Dict[str, Any]:
    """camelCase JSON-safe dict."""
    return message.model_dump(by_alias=True, mode="json")


__all__ = [
    "RequestKind",
    "WorkerRequest",
    "ProgressInfo",
    "ErrorInfo",
    "ResultMessage",
    "ErrorMessage",
    "ProgressMessage",
    "OutgoingMessage",
    "parse_request",
    "error_message",
    "progress_message",
    "to_wire",
]
