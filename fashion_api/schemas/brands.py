"""
Brand partner accounts, official catalogs and brand analytics.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, Field, model_validator

from fashion_api.schemas.common import CamelModel, Pagination


BusinessType = Literal['brand', 'store', 'designer', 'manufacturer']
VerificationStatus = Literal['pending', 'verified', 'rejected']
PartnershipTier = Literal['basic', 'premium', 'enterprise']
AvailabilityStatus = Literal['available', 'out_of_stock', 'discontinued', 'pre_order']

HexColor = Annotated[str, Field(pattern=r'^#[0-9A-Fa-f]{6}$')]
EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


def _check_http_url(value: str) -> str:
    if not value.startswith(('http://', 'https://')):
        raise ValueError('must be an http(s) URL')
    return value


HttpUrlStr = Annotated[str, Field(max_length=500), AfterValidator(_check_http_url)]


class SocialLink(CamelModel):
    platform: str = Field(..., min_length=1, max_length=50)
    url: HttpUrlStr


# =============================================================================
# Accounts
# =============================================================================
class BrandRegister(CamelModel):
    brand_name: str = Field(..., min_length=2, max_length=100)
    business_type: BusinessType
    description: str | None = Field(default=None, max_length=500)
    website: HttpUrlStr | None = None
    contact_email: str | None = Field(default=None, max_length=254, pattern=EMAIL_PATTERN)
    contact_phone: str | None = Field(default=None, max_length=20)


class BrandUpdate(CamelModel):
    """Owner-editable profile and page customization fields."""

    description: str | None = Field(default=None, max_length=500)
    website: HttpUrlStr | None = None
    logo: HttpUrlStr | None = None
    banner: HttpUrlStr | None = None
    brand_colors: list[HexColor] | None = None
    social_links: list[SocialLink] | None = None
    contact_email: str | None = Field(default=None, max_length=254, pattern=EMAIL_PATTERN)
    contact_phone: str | None = Field(default=None, max_length=20)


class BrandVerify(CamelModel):
    status: Literal['verified', 'rejected']
    notes: str | None = Field(default=None, max_length=500)


class BrandTierUpdate(CamelModel):
    tier: PartnershipTier


class BrandResponse(CamelModel):
    id: str
    user_id: str
    brand_name: str
    slug: str
    business_type: str
    description: str | None
    website: str | None
    logo: str | None
    banner: str | None
    brand_colors: list[str]
    social_links: list[dict[str, str]]
    contact_email: str | None
    contact_phone: str | None
    verification_status: str
    partnership_tier: str
    badges: list[str]
    created_at: datetime
    updated_at: datetime


class BrandProfileResponse(CamelModel):
    brand: BrandResponse
    catalog_item_count: int


class BrandList(CamelModel):
    brands: list[BrandResponse]
    pagination: Pagination


# =============================================================================
# Catalog
# =============================================================================
class CatalogItemCreate(CamelModel):
    wardrobe_item_id: str = Field(..., min_length=1)
    official_price: float | None = Field(default=None, ge=0)
    availability_status: AvailabilityStatus = 'available'
    purchase_link: HttpUrlStr | None = None
    brand_data: dict[str, Any] = Field(default_factory=dict, description='sku, collection, season, launchDate')


class CatalogItemUpdate(CamelModel):
    official_price: float | None = Field(default=None, ge=0)
    availability_status: AvailabilityStatus | None = None
    purchase_link: HttpUrlStr | None = None
    brand_data: dict[str, Any] | None = None


class CatalogItemResponse(CamelModel):
    id: str
    brand_id: str
    wardrobe_item_id: str
    official_price: float | None
    availability_status: str
    purchase_link: str | None
    brand_data: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class CatalogFilters(CamelModel):
    availability_status: AvailabilityStatus | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    collection: str | None = None
    season: str | None = None
    q: str | None = None

    @model_validator(mode='after')
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError('minPrice cannot be greater than maxPrice')
        return self


class CatalogList(CamelModel):
    items: list[CatalogItemResponse]
    pagination: Pagination


# =============================================================================
# Analytics
# =============================================================================
class BrandOverview(CamelModel):
    total_catalog_items: int = 0
    available_items: int = 0
    marketplace_listings: int = 0
    active_listings: int = 0
    sold_listings: int = 0
    listing_views: int = 0
    listing_likes: int = 0


class GroupCount(CamelModel):
    name: str
    item_count: int


class CatalogBreakdown(CamelModel):
    availability: dict[str, int] = Field(default_factory=dict)
    collections: list[GroupCount] = Field(default_factory=list)
    seasons: list[GroupCount] = Field(default_factory=list)
    average_official_price: float | None = None


class BrandAnalytics(CamelModel):
    brand_id: str
    overview: BrandOverview
    catalog: CatalogBreakdown
