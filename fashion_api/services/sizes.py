"""
Size standards and size definitions (admin configuration).

A size definition carries one conversion per standard, e.g. M ->
[{standard: BR, value: 40}, {standard: US, value: 8}]. Every conversion
must name an existing standard code.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from fashion_api.db.models import SizeDefinition, SizeStandard
from fashion_api.schemas.admin import (
    SizeConversion,
    SizeCreate,
    SizeStandardCreate,
    SizeStandardUpdate,
    SizeUpdate,
)


logger = logging.getLogger(__name__)


class SizeService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Standards
    # =========================================================================
    def list_standards(self, active_only: bool = False) -> list[SizeStandard]:
        stmt = select(SizeStandard).order_by(SizeStandard.code)
        if active_only:
            stmt = stmt.where(SizeStandard.is_active.is_(True))
        return list(self.db.scalars(stmt))

    def _standard(self, standard_id: str) -> SizeStandard:
        standard = self.db.get(SizeStandard, standard_id)
        if standard is None:
            raise NotFoundError('Size standard', standard_id)
        return standard

    def create_standard(self, data: SizeStandardCreate) -> SizeStandard:
        code = data.code.strip().upper()
        if self.db.scalar(select(SizeStandard.id).where(SizeStandard.code == code)):
            raise ConflictError(f"Size standard '{code}' already exists")

        standard = SizeStandard(code=code, name=data.name, region=data.region, is_active=data.is_active)
        self.db.add(standard)
        self.db.commit()
        logger.info(f'Size standard {code} created')
        return standard

    def update_standard(self, standard_id: str, data: SizeStandardUpdate) -> SizeStandard:
        standard = self._standard(standard_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == 'region' or value is not None:
                setattr(standard, field, value)
        self.db.commit()
        return standard

    def delete_standard(self, standard_id: str) -> None:
        standard = self._standard(standard_id)
        in_use = [
            size.name
            for size in self.db.scalars(select(SizeDefinition))
            if any(c.get('standard') == standard.code for c in size.conversions)
        ]
        if in_use:
            raise ConflictError(f"Size standard '{standard.code}' is used by sizes: {', '.join(in_use)}")
        self.db.delete(standard)
        self.db.commit()

    # =========================================================================
    # Sizes
    # =========================================================================
    def list_sizes(self, active_only: bool = False) -> list[SizeDefinition]:
        stmt = select(SizeDefinition).order_by(SizeDefinition.sort_order, SizeDefinition.name)
        if active_only:
            stmt = stmt.where(SizeDefinition.is_active.is_(True))
        return list(self.db.scalars(stmt))

    def _size(self, size_id: str) -> SizeDefinition:
        size = self.db.get(SizeDefinition, size_id)
        if size is None:
            raise NotFoundError('Size', size_id)
        return size

    def _validated_conversions(self, conversions: list[SizeConversion]) -> list[dict[str, str]]:
        known = set(self.db.scalars(select(SizeStandard.code)))
        normalized = []
        seen = set()
        for conversion in conversions:
            code = conversion.standard.strip().upper()
            if code not in known:
                raise ValidationError(f"Unknown size standard '{conversion.standard}'")
            if code in seen:
                raise ValidationError(f"Duplicate conversion for standard '{code}'")
            seen.add(code)
            normalized.append({'standard': code, 'value': conversion.value})
        return normalized

    def _check_name_free(self, name: str, exclude_id: str | None = None) -> None:
        stmt = select(SizeDefinition.id).where(SizeDefinition.name == name)
        if exclude_id:
            stmt = stmt.where(SizeDefinition.id != exclude_id)
        if self.db.scalar(stmt):
            raise ConflictError(f"Size '{name}' already exists")

    def create_size(self, data: SizeCreate) -> SizeDefinition:
        name = data.name.strip()
        self._check_name_free(name)
        size = SizeDefinition(
            name=name,
            sort_order=data.sort_order,
            conversions=self._validated_conversions(data.conversions),
            valid_category_ids=sorted(set(data.valid_category_ids)),
            is_active=data.is_active,
        )
        self.db.add(size)
        self.db.commit()
        logger.info(f'Size {name} created with {len(size.conversions)} conversions')
        return size

    def update_size(self, size_id: str, data: SizeUpdate) -> SizeDefinition:
        size = self._size(size_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get('name') is not None:
            name = data.name.strip()
            self._check_name_free(name, exclude_id=size_id)
            size.name = name
        if data.conversions is not None:
            size.conversions = self._validated_conversions(data.conversions)
        if data.valid_category_ids is not None:
            size.valid_category_ids = sorted(set(data.valid_category_ids))
        if data.sort_order is not None:
            size.sort_order = data.sort_order
        if data.is_active is not None:
            size.is_active = data.is_active

        self.db.commit()
        return size

    def delete_size(self, size_id: str) -> None:
        size = self._size(size_id)
        self.db.delete(size)
        self.db.commit()
