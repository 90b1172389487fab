from fastapi import FastAPI
from ecwid_reco.core.config import get_settings
from ecwid_reco.core.lifespan import lifespan
from ecwid_reco.api.v1.routers.health import router as health_router
from ecwid_reco.api.v1.routers.recommendations import router as recommendations_router
from ecwid_reco.api.v1.routers.categories import router as categories_router
from ecwid_reco.api.v1.routers.settings import router as settings_router
from ecwid_reco.api.v1.routers.importer import router as import_router
from ecwid_reco.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging, os

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# The storefront widget runs on the merchant's domain; ALLOWED_ORIGINS is a CSV.
# Example: ALLOWED_ORIGINS="https://shop.example.com,https://store123.company.site"
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"],
    allow_credentials=False,                        # no cookies; "*" stays valid
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router)
app.include_router(recommendations_router, prefix=settings.api_prefix)   # per-product cross-sell / upsell
app.include_router(categories_router, prefix=settings.api_prefix)        # per-category
app.include_router(settings_router, prefix=settings.api_prefix)          # widget placement
app.include_router(import_router, prefix=settings.api_prefix)            # sync push
