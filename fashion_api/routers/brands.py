"""
Brands Router.

Brand partner registration and dashboard: account management, official
catalog, analytics, plus admin verification and tier changes.
"""

import logging

from fastapi import APIRouter, Query, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.exceptions import ValidationError
from fashion_api.core.security import AdminUserDep, CurrentUserDep
from fashion_api.schemas.brands import (
    AvailabilityStatus,
    BrandAnalytics,
    BrandList,
    BrandProfileResponse,
    BrandRegister,
    BrandResponse,
    BrandTierUpdate,
    BrandUpdate,
    BrandVerify,
    BusinessType,
    CatalogFilters,
    CatalogItemCreate,
    CatalogItemResponse,
    CatalogItemUpdate,
    CatalogList,
    PartnershipTier,
    VerificationStatus,
)
from fashion_api.services.brands import BrandService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/brands', tags=['Brands'])


# =============================================================================
# Own account
# =============================================================================
@router.post('/register', response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
def register_brand(user: CurrentUserDep, db: DbDep, data: BrandRegister):
    """Open a brand account (pending verification, basic tier)."""
    return BrandResponse.model_validate(BrandService(db).register(user.id, data))


@router.get('/me', response_model=BrandResponse)
def get_my_brand(user: CurrentUserDep, db: DbDep):
    return BrandResponse.model_validate(BrandService(db).get_for_user(user.id))


@router.patch('/me', response_model=BrandResponse)
def update_my_brand(user: CurrentUserDep, db: DbDep, data: BrandUpdate):
    """Update profile details and page customization (logo, banner, colors, links)."""
    return BrandResponse.model_validate(BrandService(db).update_account(user.id, data))


@router.get('/search', response_model=BrandList)
def search_brands(
    user: CurrentUserDep,
    db: DbDep,
    q: str | None = Query(default=None, max_length=100),
    verification_status: VerificationStatus | None = Query(default=None, alias='verificationStatus'),
    partnership_tier: PartnershipTier | None = Query(default=None, alias='partnershipTier'),
    business_type: BusinessType | None = Query(default=None, alias='businessType'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    brands, pagination = BrandService(db).search(
        q,
        page,
        limit,
        verification_status=verification_status,
        partnership_tier=partnership_tier,
        business_type=business_type,
    )
    return BrandList(brands=[BrandResponse.model_validate(b) for b in brands], pagination=pagination)


# =============================================================================
# Public profile
# =============================================================================
@router.get('/{brand_id}', response_model=BrandProfileResponse)
def get_brand_profile(brand_id: str, user: CurrentUserDep, db: DbDep):
    brand, catalog_count = BrandService(db).public_profile(brand_id)
    return BrandProfileResponse(brand=BrandResponse.model_validate(brand), catalog_item_count=catalog_count)


# =============================================================================
# Catalog
# =============================================================================
@router.get('/{brand_id}/catalog', response_model=CatalogList)
def list_catalog(
    brand_id: str,
    user: CurrentUserDep,
    db: DbDep,
    availability_status: AvailabilityStatus | None = Query(default=None, alias='availabilityStatus'),
    min_price: float | None = Query(default=None, alias='minPrice', ge=0),
    max_price: float | None = Query(default=None, alias='maxPrice', ge=0),
    collection: str | None = Query(default=None, max_length=100),
    season: str | None = Query(default=None, max_length=50),
    q: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError('minPrice cannot be greater than maxPrice')

    filters = CatalogFilters(
        availability_status=availability_status,
        min_price=min_price,
        max_price=max_price,
        collection=collection,
        season=season,
        q=q,
    )
    items, pagination = BrandService(db).list_catalog(brand_id, filters, page, limit)
    return CatalogList(items=[CatalogItemResponse.model_validate(i) for i in items], pagination=pagination)


@router.post('/{brand_id}/catalog', response_model=CatalogItemResponse, status_code=status.HTTP_201_CREATED)
def add_catalog_item(brand_id: str, user: CurrentUserDep, db: DbDep, data: CatalogItemCreate):
    """Publish a wardrobe item as an official product (verified brands only)."""
    return CatalogItemResponse.model_validate(BrandService(db).add_catalog_item(brand_id, user.id, data))


@router.patch('/{brand_id}/catalog/{catalog_item_id}', response_model=CatalogItemResponse)
def update_catalog_item(
    brand_id: str, catalog_item_id: str, user: CurrentUserDep, db: DbDep, data: CatalogItemUpdate
):
    item = BrandService(db).update_catalog_item(brand_id, catalog_item_id, user.id, data)
    return CatalogItemResponse.model_validate(item)


# =============================================================================
# Analytics
# =============================================================================
@router.get('/{brand_id}/analytics', response_model=BrandAnalytics)
def brand_analytics(brand_id: str, user: CurrentUserDep, db: DbDep):
    """Catalog breakdown and marketplace activity for the brand (owner or admin)."""
    return BrandService(db).analytics(brand_id, user.id, is_admin=user.is_admin)


# =============================================================================
# Admin
# =============================================================================
@router.patch('/{brand_id}/verify', response_model=BrandResponse)
def verify_brand(brand_id: str, admin: AdminUserDep, db: DbDep, data: BrandVerify):
    return BrandResponse.model_validate(BrandService(db).verify(brand_id, data.status, data.notes))


@router.patch('/{brand_id}/tier', response_model=BrandResponse)
def change_brand_tier(brand_id: str, admin: AdminUserDep, db: DbDep, data: BrandTierUpdate):
    return BrandResponse.model_validate(BrandService(db).change_tier(brand_id, data.tier))
