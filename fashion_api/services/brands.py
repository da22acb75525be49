"""
Brand partner accounts and official catalogs.

Each user may own one brand account. New accounts start pending until an
admin verifies or rejects them; only verified brands can publish catalog
items or move above the basic partnership tier.
"""

import logging
import uuid
from collections import Counter

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from fashion_api.db.models import BrandAccount, BrandCatalogItem, MarketplaceListing, WardrobeItem
from fashion_api.schemas.brands import (
    BrandAnalytics,
    BrandOverview,
    BrandRegister,
    BrandUpdate,
    CatalogBreakdown,
    CatalogFilters,
    CatalogItemCreate,
    CatalogItemUpdate,
    GroupCount,
)
from fashion_api.schemas.common import Pagination
from fashion_api.services.pagination import paginate
from fashion_api.services.social import slugify
from fashion_api.services.vufs import strip_mark


logger = logging.getLogger(__name__)

VERIFIED_BADGE = 'verified_brand'
PREMIUM_BADGE = 'premium_partner'
PREMIUM_TIERS = {'premium', 'enterprise'}


def _with_badge(badges: list[str], badge: str) -> list[str]:
    return badges if badge in badges else [*badges, badge]


class BrandService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Accounts
    # =========================================================================
    def _unique_slug(self, brand_name: str) -> str:
        base = slugify(brand_name) or 'brand'
        if self.db.scalar(select(BrandAccount.id).where(BrandAccount.slug == base)) is None:
            return base
        return f'{base}-{uuid.uuid4().hex[:6]}'

    def register(self, user_id: str, data: BrandRegister) -> BrandAccount:
        """
        Open a pending, basic-tier brand account for a user.

        Raises:
            ConflictError: The user already owns a brand or the name is taken
        """
        if self.db.scalar(select(BrandAccount.id).where(BrandAccount.user_id == user_id)) is not None:
            raise ConflictError('User already has a brand account')
        name_taken = self.db.scalar(
            select(BrandAccount.id).where(func.lower(BrandAccount.brand_name) == data.brand_name.lower())
        )
        if name_taken is not None:
            raise ConflictError(f'Brand name {data.brand_name} is already registered')

        brand = BrandAccount(
            user_id=user_id,
            slug=self._unique_slug(data.brand_name),
            verification_status='pending',
            partnership_tier='basic',
            **data.model_dump(),
        )
        self.db.add(brand)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError('User already has a brand account') from e

        logger.info(f'Brand {brand.slug} registered by {user_id}')
        return brand

    def get_brand(self, brand_id: str) -> BrandAccount:
        brand = self.db.get(BrandAccount, brand_id)
        if brand is None:
            raise NotFoundError('Brand', brand_id)
        return brand

    def get_for_user(self, user_id: str) -> BrandAccount:
        brand = self.db.scalar(select(BrandAccount).where(BrandAccount.user_id == user_id))
        if brand is None:
            raise NotFoundError('Brand account for user', user_id)
        return brand

    def _owned(self, brand_id: str, user_id: str) -> BrandAccount:
        brand = self.get_brand(brand_id)
        if brand.user_id != user_id:
            raise PermissionDeniedError('You can only manage your own brand')
        return brand

    def update_account(self, user_id: str, data: BrandUpdate) -> BrandAccount:
        brand = self.get_for_user(user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(brand, field, value)
        self.db.commit()
        return brand

    def public_profile(self, brand_id: str) -> tuple[BrandAccount, int]:
        """The brand plus how many catalog items it publishes."""
        brand = self.get_brand(brand_id)
        count = self.db.scalar(
            select(func.count()).select_from(BrandCatalogItem).where(BrandCatalogItem.brand_id == brand_id)
        )
        return brand, count or 0

    def search(
        self,
        q: str | None,
        page: int,
        limit: int,
        verification_status: str | None = None,
        partnership_tier: str | None = None,
        business_type: str | None = None,
    ) -> tuple[list[BrandAccount], Pagination]:
        stmt = select(BrandAccount)
        if q:
            pattern = f'%{q}%'
            stmt = stmt.where(or_(BrandAccount.brand_name.ilike(pattern), BrandAccount.description.ilike(pattern)))
        if verification_status:
            stmt = stmt.where(BrandAccount.verification_status == verification_status)
        if partnership_tier:
            stmt = stmt.where(BrandAccount.partnership_tier == partnership_tier)
        if business_type:
            stmt = stmt.where(BrandAccount.business_type == business_type)
        stmt = stmt.order_by(func.lower(BrandAccount.brand_name), BrandAccount.id)
        return paginate(self.db, stmt, page, limit)

    # =========================================================================
    # Admin
    # =========================================================================
    def verify(self, brand_id: str, status: str, notes: str | None = None) -> BrandAccount:
        brand = self.get_brand(brand_id)
        brand.verification_status = status
        if status == 'verified':
            brand.badges = _with_badge(brand.badges, VERIFIED_BADGE)
        self.db.commit()
        logger.info(f'Brand {brand.slug} {status} (notes: {notes or "-"})')
        return brand

    def change_tier(self, brand_id: str, tier: str) -> BrandAccount:
        brand = self.get_brand(brand_id)
        if brand.verification_status != 'verified':
            raise ValidationError('Brand must be verified to change partnership tier')
        brand.partnership_tier = tier
        if tier in PREMIUM_TIERS:
            brand.badges = _with_badge(brand.badges, PREMIUM_BADGE)
        self.db.commit()
        logger.info(f'Brand {brand.slug} tier -> {tier}')
        return brand

    # =========================================================================
    # Catalog
    # =========================================================================
    def add_catalog_item(self, brand_id: str, user_id: str, data: CatalogItemCreate) -> BrandCatalogItem:
        brand = self._owned(brand_id, user_id)
        if brand.verification_status != 'verified':
            raise ValidationError('Brand must be verified to add catalog items')
        if self.db.get(WardrobeItem, data.wardrobe_item_id) is None:
            raise NotFoundError('Wardrobe item', data.wardrobe_item_id)

        item = BrandCatalogItem(brand_id=brand_id, **data.model_dump())
        self.db.add(item)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError('Item is already in this brand catalog') from e
        return item

    def update_catalog_item(
        self, brand_id: str, catalog_item_id: str, user_id: str, data: CatalogItemUpdate
    ) -> BrandCatalogItem:
        self._owned(brand_id, user_id)
        item = self.db.get(BrandCatalogItem, catalog_item_id)
        if item is None or item.brand_id != brand_id:
            raise NotFoundError('Catalog item', catalog_item_id)

        updates = data.model_dump(exclude_unset=True)
        brand_data = updates.pop('brand_data', None)
        for field, value in updates.items():
            if value is not None:
                setattr(item, field, value)
        if brand_data is not None:
            item.brand_data = {**item.brand_data, **brand_data}
        self.db.commit()
        return item

    def list_catalog(
        self, brand_id: str, filters: CatalogFilters, page: int, limit: int
    ) -> tuple[list[BrandCatalogItem], Pagination]:
        self.get_brand(brand_id)
        stmt = select(BrandCatalogItem).where(BrandCatalogItem.brand_id == brand_id)
        if filters.availability_status:
            stmt = stmt.where(BrandCatalogItem.availability_status == filters.availability_status)
        if filters.min_price is not None:
            stmt = stmt.where(BrandCatalogItem.official_price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(BrandCatalogItem.official_price <= filters.max_price)
        if filters.collection:
            stmt = stmt.where(BrandCatalogItem.brand_data['collection'].as_string() == filters.collection)
        if filters.season:
            stmt = stmt.where(BrandCatalogItem.brand_data['season'].as_string() == filters.season)
        if filters.q:
            pattern = f'%{filters.q}%'
            stmt = stmt.where(
                or_(
                    BrandCatalogItem.brand_data['sku'].as_string().ilike(pattern),
                    BrandCatalogItem.brand_data['collection'].as_string().ilike(pattern),
                )
            )
        stmt = stmt.order_by(BrandCatalogItem.created_at.desc(), BrandCatalogItem.id)
        return paginate(self.db, stmt, page, limit)

    # =========================================================================
    # Analytics
    # =========================================================================
    def analytics(self, brand_id: str, user_id: str, is_admin: bool = False) -> BrandAnalytics:
        """
        Catalog breakdown plus marketplace activity for listings of this brand.

        Listings match on brand name, case-insensitively and ignoring the ®
        mark. Visible to the owner and to admins.
        """
        brand = self.get_brand(brand_id)
        if brand.user_id != user_id and not is_admin:
            raise PermissionDeniedError('You can only view analytics for your own brand')

        items = list(self.db.scalars(select(BrandCatalogItem).where(BrandCatalogItem.brand_id == brand_id)))
        availability = Counter(item.availability_status for item in items)
        collections = Counter(c for c in (item.brand_data.get('collection') for item in items) if c)
        seasons = Counter(s for s in (item.brand_data.get('season') for item in items) if s)
        prices = [item.official_price for item in items if item.official_price is not None]

        name = strip_mark(brand.brand_name).lower()
        listing_brand = func.lower(func.replace(MarketplaceListing.brand, '®', ''))
        row = self.db.execute(
            select(
                func.count(MarketplaceListing.id),
                func.count(MarketplaceListing.id).filter(MarketplaceListing.status == 'active'),
                func.count(MarketplaceListing.id).filter(MarketplaceListing.status == 'sold'),
                func.coalesce(func.sum(MarketplaceListing.views), 0),
                func.coalesce(func.sum(MarketplaceListing.likes_count), 0),
            ).where(func.trim(listing_brand) == name)
        ).one()

        return BrandAnalytics(
            brand_id=brand_id,
            overview=BrandOverview(
                total_catalog_items=len(items),
                available_items=availability.get('available', 0),
                marketplace_listings=row[0],
                active_listings=row[1],
                sold_listings=row[2],
                listing_views=row[3],
                listing_likes=row[4],
            ),
            catalog=CatalogBreakdown(
                availability=dict(availability),
                collections=[GroupCount(name=k, item_count=v) for k, v in collections.most_common()],
                seasons=[GroupCount(name=k, item_count=v) for k, v in seasons.most_common()],
                average_official_price=round(sum(prices) / len(prices), 2) if prices else None,
            ),
        )
