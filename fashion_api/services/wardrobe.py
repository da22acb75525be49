"""
Wardrobe cataloging service.

Items are owned by a single user; only the owner may read private items
or change any item.
"""

import logging
import time
from pathlib import PurePath

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from fashion_api.db.models import WardrobeItem
from fashion_api.schemas.common import Pagination
from fashion_api.schemas.wardrobe import WardrobeItemCreate, WardrobeItemUpdate
from fashion_api.services.pagination import paginate
from fashion_api.services.vufs import code_prefix, generate_vufs_code


logger = logging.getLogger(__name__)

CODE_ALLOCATION_ATTEMPTS = 5


class WardrobeService:
    def __init__(self, db: Session):
        self.db = db

    def _next_sequence(self, prefix: str) -> int:
        codes = self.db.scalars(
            select(WardrobeItem.vufs_code).where(WardrobeItem.vufs_code.like(f'{prefix}%'))
        )
        sequences = [int(code[len(prefix):]) for code in codes if code[len(prefix):].isdigit()]
        return max(sequences, default=0) + 1

    def create_item(self, owner_id: str, data: WardrobeItemCreate) -> WardrobeItem:
        """
        Catalog a new item under the next free VUFS code for its prefix.

        Concurrent creates can pick the same sequence; the unique constraint
        on vufs_code rejects the loser, which re-reads the sequence and retries.
        """
        prefix = code_prefix(data.domain, data.brand, data.piece_type)
        category = {'whiteSubcategory': data.piece_type, **data.category}
        brand = {'brand': data.brand, **data.brand_details}

        for attempt in range(1, CODE_ALLOCATION_ATTEMPTS + 1):
            code = generate_vufs_code(data.domain, data.brand, data.piece_type, self._next_sequence(prefix))
            item = WardrobeItem(
                owner_id=owner_id,
                vufs_code=code,
                domain=data.domain,
                category=category,
                brand=brand,
                item_metadata=data.metadata,
                condition=data.condition,
                images=data.images,
                visibility=data.visibility,
            )
            self.db.add(item)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(f'VUFS code {code} already taken (attempt {attempt}/{CODE_ALLOCATION_ATTEMPTS})')
                continue

            logger.info(f'Created wardrobe item {code} for user {owner_id}')
            return item

        raise ConflictError(f'Could not allocate a VUFS code for {prefix}, please retry')

    def get_item(self, item_id: str, viewer_id: str) -> WardrobeItem:
        item = self.db.get(WardrobeItem, item_id)
        if item is None or (item.visibility == 'private' and item.owner_id != viewer_id):
            raise NotFoundError('Wardrobe item', item_id)
        return item

    def _owned_item(self, item_id: str, owner_id: str) -> WardrobeItem:
        item = self.db.get(WardrobeItem, item_id)
        if item is None:
            raise NotFoundError('Wardrobe item', item_id)
        if item.owner_id != owner_id:
            raise PermissionDeniedError('You can only modify your own wardrobe items')
        return item

    def list_items(
        self,
        owner_id: str,
        page: int,
        limit: int,
        domain: str | None = None,
    ) -> tuple[list[WardrobeItem], Pagination]:
        stmt = select(WardrobeItem).where(WardrobeItem.owner_id == owner_id)
        if domain:
            stmt = stmt.where(WardrobeItem.domain == domain)
        stmt = stmt.order_by(WardrobeItem.created_at.desc(), WardrobeItem.id)
        return paginate(self.db, stmt, page, limit)

    def update_item(self, item_id: str, owner_id: str, data: WardrobeItemUpdate) -> WardrobeItem:
        item = self._owned_item(item_id, owner_id)
        changes = data.model_dump(exclude_unset=True)

        # JSON sections are merged so partial edits keep untouched keys
        if changes.get('category') is not None:
            item.category = {**item.category, **changes['category']}
        if changes.get('brand_details') is not None:
            item.brand = {**item.brand, **changes['brand_details']}
        if changes.get('metadata') is not None:
            item.item_metadata = {**item.item_metadata, **changes['metadata']}
        if changes.get('condition') is not None:
            item.condition = {**item.condition, **changes['condition']}
        if changes.get('images') is not None:
            item.images = changes['images']
        if changes.get('visibility') is not None:
            item.visibility = changes['visibility']

        self.db.commit()
        return item

    def delete_item(self, item_id: str, owner_id: str) -> None:
        item = self._owned_item(item_id, owner_id)
        self.db.delete(item)
        self.db.commit()
        logger.info(f'Deleted wardrobe item {item.vufs_code}')

    @staticmethod
    def upload_key(owner_id: str, filename: str) -> str:
        """Object key for a direct client upload of an original item photo."""
        name = PurePath(filename).name.replace(' ', '-') or 'image.jpg'
        return f'wardrobe/{owner_id}/{int(time.time() * 1000)}-{name}'
