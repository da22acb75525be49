"""
Admin Router.

Size standards and size definitions. Mutations require the admin role;
the public catalog at GET /sizes only returns active entries.
"""

import logging

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.security import AdminUserDep
from fashion_api.schemas.admin import (
    SizeCatalog,
    SizeCreate,
    SizeResponse,
    SizeStandardCreate,
    SizeStandardResponse,
    SizeStandardUpdate,
    SizeUpdate,
)
from fashion_api.services.sizes import SizeService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/admin', tags=['Admin'])
catalog_router = APIRouter(tags=['Sizes'])


# =============================================================================
# Size Standards
# =============================================================================
@router.get('/size-standards', response_model=list[SizeStandardResponse])
def list_size_standards(admin: AdminUserDep, db: DbDep, active_only: bool = Query(default=False, alias='activeOnly')):
    return [SizeStandardResponse.model_validate(s) for s in SizeService(db).list_standards(active_only)]


@router.post('/size-standards', response_model=SizeStandardResponse, status_code=status.HTTP_201_CREATED)
def create_size_standard(admin: AdminUserDep, db: DbDep, data: SizeStandardCreate):
    standard = SizeService(db).create_standard(data)
    logger.info(f'Admin {admin.id} created size standard {standard.code}')
    return SizeStandardResponse.model_validate(standard)


@router.patch('/size-standards/{standard_id}', response_model=SizeStandardResponse)
def update_size_standard(standard_id: str, admin: AdminUserDep, db: DbDep, data: SizeStandardUpdate):
    return SizeStandardResponse.model_validate(SizeService(db).update_standard(standard_id, data))


@router.delete('/size-standards/{standard_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_size_standard(standard_id: str, admin: AdminUserDep, db: DbDep):
    """Refused with 409 while any size still converts to this standard."""
    SizeService(db).delete_standard(standard_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Sizes
# =============================================================================
@router.get('/sizes', response_model=list[SizeResponse])
def list_sizes(admin: AdminUserDep, db: DbDep, active_only: bool = Query(default=False, alias='activeOnly')):
    return [SizeResponse.model_validate(s) for s in SizeService(db).list_sizes(active_only)]


@router.post('/sizes', response_model=SizeResponse, status_code=status.HTTP_201_CREATED)
def create_size(admin: AdminUserDep, db: DbDep, data: SizeCreate):
    return SizeResponse.model_validate(SizeService(db).create_size(data))


@router.patch('/sizes/{size_id}', response_model=SizeResponse)
def update_size(size_id: str, admin: AdminUserDep, db: DbDep, data: SizeUpdate):
    return SizeResponse.model_validate(SizeService(db).update_size(size_id, data))


@router.delete('/sizes/{size_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_size(size_id: str, admin: AdminUserDep, db: DbDep):
    SizeService(db).delete_size(size_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Public catalog
# =============================================================================
@catalog_router.get('/sizes', response_model=SizeCatalog)
def size_catalog(db: DbDep):
    """Active standards and sizes, used by item and listing forms."""
    service = SizeService(db)
    return SizeCatalog(
        standards=[SizeStandardResponse.model_validate(s) for s in service.list_standards(active_only=True)],
        sizes=[SizeResponse.model_validate(s) for s in service.list_sizes(active_only=True)],
    )
