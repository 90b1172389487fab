import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    # Storefront widget and admin UI speak camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpsellLocations(_CamelModel):
    product_page: bool = False
    cart_page: bool = False


class CrossSellLocations(_CamelModel):
    cart_page: bool = False
    checkout_page: bool = False


class RecommendationLocations(_CamelModel):
    category_page: bool = False
    product_page: bool = False
    thank_you_page: bool = False


class RecommendationSettings(_CamelModel):
    """Where the storefront widget may render each block. Everything off until the merchant opts in."""
    show_upsells: bool = False
    show_cross_sells: bool = False
    show_recommendations: bool = False
    upsell_locations: UpsellLocations = Field(default_factory=UpsellLocations)
    cross_sell_locations: CrossSellLocations = Field(default_factory=CrossSellLocations)
    recommendation_locations: RecommendationLocations = Field(default_factory=RecommendationLocations)


class Store(BaseModel):
    store_id: str
    store_name: Optional[str] = None
    access_token: Optional[str] = None
    recommendation_settings: Optional[RecommendationSettings] = None

    @field_validator("store_id", mode="before")
    @classmethod
    def _store_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("recommendation_settings", mode="before")
    @classmethod
    def _settings(cls, v: Any) -> Any:
        # Legacy rows keep the settings as JSON text
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError as e:
                logger.warning("store malformed recommendation_settings err=%s", e)
                return None
        return v

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)
