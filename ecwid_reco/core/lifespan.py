# ecwid_reco/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from ecwid_reco.db import mongo, redis as r
from ecwid_reco.core.config import get_settings
from ecwid_reco.domain.repositories.indexes import ensure_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Mongo is required: it holds the catalog cache
    try:
        await mongo.connect()
    except Exception as e:
        logger.error("mongo connection failed err=%s", e)
        raise
    try:
        await ensure_indexes(mongo.get_db())
    except Exception as e:
        logger.warning("mongo index creation failed (ignored) err=%s", e)

    # Redis optional
    if settings.REDIS_URL:
        await r.connect()
    else:
        logger.warning("no REDIS_URL provided, recommendation reads are not cached")

    yield

    # --- Shutdown ---
    try:
        await r.disconnect()
    except Exception as e:
        logger.warning("redis disconnect failed err=%s", e)

    await mongo.disconnect()
    logger.info("mongo disconnected")
