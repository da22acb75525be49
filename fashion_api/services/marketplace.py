"""
Marketplace listings: publishing, search/filter and likes.
"""

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from fashion_api.db.models import ListingLike, MarketplaceListing, WardrobeItem
from fashion_api.schemas.common import Pagination
from fashion_api.schemas.marketplace import ListingCreate, ListingSearchFilters, ListingUpdate
from fashion_api.services.pagination import paginate


logger = logging.getLogger(__name__)

SORT_ORDERS = {
    'newest': (MarketplaceListing.created_at.desc(),),
    'price_low': (MarketplaceListing.price.asc(),),
    'price_high': (MarketplaceListing.price.desc(),),
    'most_liked': (MarketplaceListing.likes_count.desc(), MarketplaceListing.created_at.desc()),
    'most_viewed': (MarketplaceListing.views.desc(), MarketplaceListing.created_at.desc()),
}


class MarketplaceService:
    def __init__(self, db: Session):
        self.db = db

    def create_listing(self, seller_id: str, data: ListingCreate) -> MarketplaceListing:
        if data.item_id:
            item = self.db.get(WardrobeItem, data.item_id)
            if item is None:
                raise NotFoundError('Wardrobe item', data.item_id)
            if item.owner_id != seller_id:
                raise PermissionDeniedError('You can only list items from your own wardrobe')

        listing = MarketplaceListing(seller_id=seller_id, **data.model_dump())
        self.db.add(listing)
        self.db.commit()
        logger.info(f'Listing {listing.id} published by {seller_id} at {listing.price} {listing.currency}')
        return listing

    def _get(self, listing_id: str) -> MarketplaceListing:
        listing = self.db.get(MarketplaceListing, listing_id)
        if listing is None:
            raise NotFoundError('Listing', listing_id)
        return listing

    def _owned(self, listing_id: str, seller_id: str) -> MarketplaceListing:
        listing = self._get(listing_id)
        if listing.seller_id != seller_id:
            raise PermissionDeniedError('Only the seller can modify this listing')
        return listing

    def get_listing(self, listing_id: str, viewer_id: str | None = None) -> MarketplaceListing:
        """Fetch a listing; views by anyone other than the seller are counted."""
        listing = self._get(listing_id)
        if viewer_id != listing.seller_id:
            listing.views += 1
            self.db.commit()
        return listing

    def search(
        self, filters: ListingSearchFilters, page: int, limit: int
    ) -> tuple[list[MarketplaceListing], Pagination]:
        """Active listings matching every given filter."""
        stmt = select(MarketplaceListing).where(MarketplaceListing.status == 'active')

        if filters.q:
            pattern = f'%{filters.q.strip()}%'
            stmt = stmt.where(
                or_(
                    MarketplaceListing.title.ilike(pattern),
                    MarketplaceListing.description.ilike(pattern),
                    MarketplaceListing.brand.ilike(pattern),
                )
            )
        if filters.category:
            stmt = stmt.where(MarketplaceListing.category == filters.category)
        if filters.brand:
            stmt = stmt.where(MarketplaceListing.brand == filters.brand)
        if filters.condition:
            stmt = stmt.where(MarketplaceListing.condition.in_(filters.condition))
        if filters.min_price is not None:
            stmt = stmt.where(MarketplaceListing.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(MarketplaceListing.price <= filters.max_price)

        stmt = stmt.order_by(*SORT_ORDERS[filters.sort_by], MarketplaceListing.id)
        return paginate(self.db, stmt, page, limit)

    def seller_listings(
        self, seller_id: str, page: int, limit: int, include_inactive: bool = False
    ) -> tuple[list[MarketplaceListing], Pagination]:
        stmt = select(MarketplaceListing).where(MarketplaceListing.seller_id == seller_id)
        if not include_inactive:
            stmt = stmt.where(MarketplaceListing.status == 'active')
        stmt = stmt.order_by(MarketplaceListing.created_at.desc(), MarketplaceListing.id)
        return paginate(self.db, stmt, page, limit)

    def update_listing(self, listing_id: str, seller_id: str, data: ListingUpdate) -> MarketplaceListing:
        listing = self._owned(listing_id, seller_id)
        if listing.status == 'sold':
            raise ValidationError('Sold listings cannot be edited')
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(listing, field, value)
        self.db.commit()
        return listing

    def update_status(self, listing_id: str, seller_id: str, status: str) -> MarketplaceListing:
        listing = self._owned(listing_id, seller_id)
        if listing.status == 'sold' and status != 'sold':
            raise ValidationError('Sold listings cannot be reopened')
        listing.status = status
        self.db.commit()
        logger.info(f'Listing {listing_id} status -> {status}')
        return listing

    def delete_listing(self, listing_id: str, seller_id: str) -> None:
        listing = self._owned(listing_id, seller_id)
        self.db.execute(delete(ListingLike).where(ListingLike.listing_id == listing_id))
        self.db.delete(listing)
        self.db.commit()

    def toggle_like(self, listing_id: str, user_id: str) -> tuple[bool, int]:
        """Like or unlike a listing; returns (liked, likes_count)."""
        listing = self._get(listing_id)
        existing = self.db.scalar(
            select(ListingLike).where(ListingLike.listing_id == listing_id, ListingLike.user_id == user_id)
        )
        if existing is not None:
            self.db.delete(existing)
            listing.likes_count = max(listing.likes_count - 1, 0)
            liked = False
        else:
            self.db.add(ListingLike(listing_id=listing_id, user_id=user_id))
            listing.likes_count += 1
            liked = True
        self.db.commit()
        return liked, listing.likes_count
