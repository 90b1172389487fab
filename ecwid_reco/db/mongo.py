# ecwid_reco/db/mongo.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from ecwid_reco.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


def _new_client() -> AsyncIOMotorClient:
    settings = get_settings()
    kwargs = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
    )
    if settings.MONGO_TLS:
        kwargs.update(tls=True, tlsCAFile=certifi.where())  # explicit CA bundle for containers
    return AsyncIOMotorClient(settings.MONGO_URI, **kwargs)


async def connect():
    """
    Create the Motor client. A failed ping at startup does not crash the app:
    the client is kept and the first real query retries the connection.
    """
    global _client, _db
    settings = get_settings()

    try:
        _client = _new_client()
        _db = _client[settings.MONGO_DB]
        await _client.admin.command("ping")
        logger.info("mongo connected (ping ok) db=%s", settings.MONGO_DB)
    except Exception as e:
        logger.warning("mongo ping at startup failed err=%s", e)
        try:
            _client = _new_client()
            _db = _client[settings.MONGO_DB]
            logger.warning("mongo will attempt lazy connection on first query")
        except Exception as e2:
            # routes that need the DB will assert
            _client = None
            _db = None
            logger.error("mongo client init failed err=%s", e2)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
