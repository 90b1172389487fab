import json
import logging
from typing import Annotated, Any, Callable, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, Field, PrivateAttr, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


def parse_id_list(value: Any, *, field: str = "ids", owner: Optional[str] = None) -> List[str]:
    """
    Normalize an id list read from storage.

    Accepts a native list or the legacy JSON-array text written by the old
    SQLite cache ("[1, \"2\"]"). Anything unparsable is logged and becomes [].
    Elements are coerced to str so numeric Ecwid ids compare equal to string ids.
    """
    if value is None or value == "":
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning("catalog malformed id list field=%s owner=%s err=%s", field, owner, e)
            return []
    if not isinstance(value, (list, tuple)):
        logger.warning("catalog id list is not an array field=%s owner=%s type=%s", field, owner, type(value).__name__)
        return []
    return [str(x) for x in value if x is not None]


def _coerce_id(v: Any) -> Any:
    # Ecwid ids are numeric in the API payloads; the cache keys on their text form
    return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


EntityId = Annotated[str, BeforeValidator(_coerce_id)]


class Product(BaseModel):
    store_id: EntityId
    product_id: EntityId
    name: Optional[str] = None
    sku: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    category_ids: List[str] = []
    cross_sells: List[str] = []
    upsells: List[str] = []

    model_config = {"frozen": True}  # immuable = safe

    @field_validator("category_ids", "cross_sells", "upsells", mode="before")
    @classmethod
    def _id_lists(cls, v: Any, info: ValidationInfo) -> List[str]:
        return parse_id_list(v, field=info.field_name, owner=info.data.get("product_id"))

    @property
    def category_set(self) -> frozenset:
        return frozenset(self.category_ids)


class Order(BaseModel):
    store_id: EntityId
    order_id: EntityId
    product_ids: List[str] = []

    model_config = {"frozen": True}

    @field_validator("product_ids", mode="before")
    @classmethod
    def _product_ids(cls, v: Any, info: ValidationInfo) -> List[str]:
        return parse_id_list(v, field="product_ids", owner=info.data.get("order_id"))


class Category(BaseModel):
    store_id: EntityId
    category_id: EntityId
    recommended_products: List[str] = []

    model_config = {"frozen": True}

    @field_validator("recommended_products", mode="before")
    @classmethod
    def _recommended(cls, v: Any, info: ValidationInfo) -> List[str]:
        return parse_id_list(v, field="recommended_products", owner=info.data.get("category_id"))


class ProductRecommendations(BaseModel):
    source_product_id: str
    cross_sell: List[str] = []
    upsell: List[str] = []
    strategies: List[str] = []
    model_config = {"frozen": True}

    @property
    def combined(self) -> List[str]:
        return [*self.cross_sell, *self.upsell]


def completion_rate(successful: int, total: int) -> str:
    return f"{(successful / total * 100):.2f}%" if total > 0 else "0.00%"


class BatchSummary(BaseModel):
    store_id: str
    total_products: int
    processed: int = 0
    successful: int = 0
    errors: int = 0
    completion_rate: str = "0.00%"


class CategoryBatchSummary(BaseModel):
    store_id: str
    total_categories: int
    processed: int = 0
    successful: int = 0
    errors: int = 0
    completion_rate: str = "0.00%"


class BatchProgress(BaseModel):
    store_id: str
    processed: int
    total: int
    model_config = {"frozen": True}


ProgressCallback = Callable[[BatchProgress], None]


class CatalogSnapshot(BaseModel):
    """Products and orders of one store, read once and shared across a batch run."""
    store_id: str
    products: List[Product] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    model_config = {"frozen": True}

    _by_id: Dict[str, Product] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        # batch runs look up every product once; first row wins on duplicate ids
        for p in self.products:
            self._by_id.setdefault(p.product_id, p)

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)
