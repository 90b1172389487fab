# api/v1/schemas/reco.py
from pydantic import BaseModel
from typing import List, Optional

from ecwid_reco.domain.models.catalog import BatchSummary, CategoryBatchSummary, ProductRecommendations
from ecwid_reco.domain.models.store import RecommendationSettings


class ProductCardOut(BaseModel):
    product_id: str
    name: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None

class ProductRecommendationsOut(BaseModel):
    success: bool = True
    source_product_id: str
    cross_sells: List[ProductCardOut]
    upsells: List[ProductCardOut]

class CategoryRecommendationsOut(BaseModel):
    success: bool = True
    category_id: str
    products: List[ProductCardOut]

class GenerateOut(BaseModel):
    success: bool = True
    recommendations: ProductRecommendations
    message: str = "Recommendations generated successfully"

class CategoryGenerateOut(BaseModel):
    success: bool = True
    category_id: str
    recommended_products: List[str]

class BatchOut(BaseModel):
    success: bool = True
    summary: BatchSummary
    message: str = "Recommendations generated for all products"

class CategoryBatchOut(BaseModel):
    success: bool = True
    summary: CategoryBatchSummary
    message: str = "Recommendations generated for all categories"

class SettingsOut(BaseModel):
    success: bool = True
    settings: RecommendationSettings

class ImportResult(BaseModel):
    success: bool = True
    store_id: str
    collection: str
    inserted: int
    rejected: int = 0
