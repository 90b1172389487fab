# ecwid_reco/api/deps.py
from fastapi import Depends, HTTPException
from ecwid_reco.core.config import get_settings
from ecwid_reco.db.mongo import get_db
from ecwid_reco.db.redis import get_redis
from ecwid_reco.domain.models.store import Store
from ecwid_reco.domain.repositories.category_repo import CategoryRepo
from ecwid_reco.domain.repositories.order_repo import OrderRepo
from ecwid_reco.domain.repositories.product_repo import ProductRepo
from ecwid_reco.domain.repositories.reco_cache_repo import RecoCacheRepo
from ecwid_reco.domain.repositories.store_repo import StoreRepo

# Dependency for injecting the MongoDB database into endpoints/services
async def mongo_db(db = Depends(get_db)):
    return db

# Dependency for injecting the Redis client (may be None)
def redis_dep():
    return get_redis()

def product_repo_dep(db = Depends(mongo_db)) -> ProductRepo:
    return ProductRepo(db)

def order_repo_dep(db = Depends(mongo_db)) -> OrderRepo:
    return OrderRepo(db)

def category_repo_dep(db = Depends(mongo_db)) -> CategoryRepo:
    return CategoryRepo(db)

def store_repo_dep(db = Depends(mongo_db)) -> StoreRepo:
    return StoreRepo(db)

def reco_cache_dep(redis = Depends(redis_dep)) -> RecoCacheRepo:
    return RecoCacheRepo(redis, ttl=get_settings().recommendations_cache_ttl)

# Store guard: the store must have completed OAuth (token present). Nothing more is checked.
async def require_store(store_id: str, stores = Depends(store_repo_dep)) -> Store:
    store = await stores.find_by_store_id(store_id)
    if store is None or not store.is_authenticated:
        raise HTTPException(status_code=401, detail="Store not authenticated. Please complete OAuth setup first.")
    return store
