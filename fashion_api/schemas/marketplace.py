"""
Marketplace listing models.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from fashion_api.schemas.common import CamelModel, Pagination


ListingCondition = Literal['new', 'like_new', 'good', 'fair', 'poor']
ListingStatus = Literal['active', 'reserved', 'sold', 'inactive']
SortBy = Literal['newest', 'price_low', 'price_high', 'most_liked', 'most_viewed']


class ListingCreate(CamelModel):
    item_id: str | None = None
    title: str = Field(..., min_length=3, max_length=200)
    description: str = ''
    price: float = Field(..., gt=0)
    currency: str = Field(default='BRL', min_length=3, max_length=3)
    condition: ListingCondition
    category: str = Field(..., min_length=1)
    brand: str | None = None
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(..., min_length=1)


class ListingUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    condition: ListingCondition | None = None
    category: str | None = None
    brand: str | None = None
    tags: list[str] | None = None
    images: list[str] | None = None


class ListingStatusUpdate(CamelModel):
    status: ListingStatus


class ListingResponse(CamelModel):
    id: str
    item_id: str | None
    seller_id: str
    title: str
    description: str
    price: float
    currency: str
    condition: str
    category: str
    brand: str | None
    tags: list[str]
    images: list[str]
    status: str
    views: int
    likes_count: int
    created_at: datetime
    updated_at: datetime


class ListingSearchFilters(CamelModel):
    q: str | None = None
    category: str | None = None
    brand: str | None = None
    condition: list[ListingCondition] | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    sort_by: SortBy = 'newest'

    @model_validator(mode='after')
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError('minPrice cannot be greater than maxPrice')
        return self


class ListingList(CamelModel):
    listings: list[ListingResponse]
    pagination: Pagination


class LikeToggleResponse(CamelModel):
    liked: bool
    likes_count: int
