from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CamelModel(BaseModel):
    """Accepts camelCase aliases and snake_case field names alike."""

    model_config = ConfigDict(populate_by_name=True)
