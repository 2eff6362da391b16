from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router

logging.basicConfig(
    level=os.environ.get("SIM_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


def _cors_origins() -> list:
    raw = (os.environ.get("SIM_CORS_ORIGINS") or "*").strip()
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


app = FastAPI(title="Basketball simulation core")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("SIM_HOST", "127.0.0.1"), port=int(os.environ.get("SIM_PORT", "8000")))
