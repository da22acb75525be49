"""
Marketplace Router.

Listings CRUD, search/filter with pagination, status changes and likes.
"""

import logging

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.exceptions import ValidationError
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.marketplace import (
    LikeToggleResponse,
    ListingCondition,
    ListingCreate,
    ListingList,
    ListingResponse,
    ListingSearchFilters,
    ListingStatusUpdate,
    ListingUpdate,
    SortBy,
)
from fashion_api.services.marketplace import MarketplaceService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/marketplace', tags=['Marketplace'])


@router.post('/listings', response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
def create_listing(user: CurrentUserDep, db: DbDep, data: ListingCreate):
    return ListingResponse.model_validate(MarketplaceService(db).create_listing(user.id, data))


@router.get('/listings', response_model=ListingList)
def search_listings(
    user: CurrentUserDep,
    db: DbDep,
    q: str | None = Query(default=None, max_length=200),
    category: str | None = None,
    brand: str | None = None,
    condition: list[ListingCondition] | None = Query(default=None),
    min_price: float | None = Query(default=None, alias='minPrice', ge=0),
    max_price: float | None = Query(default=None, alias='maxPrice', ge=0),
    sort_by: SortBy = Query(default='newest', alias='sortBy'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    """
    Search active listings.

    Filters combine with AND; `condition` may be repeated.
    """
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError('minPrice cannot be greater than maxPrice')

    filters = ListingSearchFilters(
        q=q,
        category=category,
        brand=brand,
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
    )
    listings, pagination = MarketplaceService(db).search(filters, page, limit)
    return ListingList(listings=[ListingResponse.model_validate(x) for x in listings], pagination=pagination)


@router.get('/listings/{listing_id}', response_model=ListingResponse)
def get_listing(listing_id: str, user: CurrentUserDep, db: DbDep):
    return ListingResponse.model_validate(MarketplaceService(db).get_listing(listing_id, user.id))


@router.patch('/listings/{listing_id}', response_model=ListingResponse)
def update_listing(listing_id: str, user: CurrentUserDep, db: DbDep, data: ListingUpdate):
    return ListingResponse.model_validate(MarketplaceService(db).update_listing(listing_id, user.id, data))


@router.patch('/listings/{listing_id}/status', response_model=ListingResponse)
def update_listing_status(listing_id: str, user: CurrentUserDep, db: DbDep, data: ListingStatusUpdate):
    return ListingResponse.model_validate(
        MarketplaceService(db).update_status(listing_id, user.id, data.status)
    )


@router.delete('/listings/{listing_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_listing(listing_id: str, user: CurrentUserDep, db: DbDep):
    MarketplaceService(db).delete_listing(listing_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post('/listings/{listing_id}/like', response_model=LikeToggleResponse)
def toggle_listing_like(listing_id: str, user: CurrentUserDep, db: DbDep):
    liked, count = MarketplaceService(db).toggle_like(listing_id, user.id)
    return LikeToggleResponse(liked=liked, likes_count=count)


@router.get('/sellers/{seller_id}/listings', response_model=ListingList)
def seller_listings(
    seller_id: str,
    user: CurrentUserDep,
    db: DbDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    """A seller's active listings; sellers also see their own inactive ones."""
    listings, pagination = MarketplaceService(db).seller_listings(
        seller_id, page, limit, include_inactive=user.id == seller_id
    )
    return ListingList(listings=[ListingResponse.model_validate(x) for x in listings], pagination=pagination)
