"""FastAPI application -- hpt-check entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import hptcheck.deps as deps
from hptcheck.api.validate import router as validate_router
from hptcheck.config import load_options

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load options on startup, clear them on shutdown."""
    log_level = logging.DEBUG if os.environ.get("HPTCHECK_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    deps._options = load_options()
    logger.info("hpt-check starting with options: %s", deps._options.model_dump(mode="json"))

    yield

    deps._options = None


app = FastAPI(
    title="hpt-check",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(validate_router)
