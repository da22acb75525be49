"""
Wardrobe Router.

CRUD over the caller's VUFS wardrobe plus presigned direct uploads.
All endpoints are SYNC (database + boto3 signing only).
"""

import logging
from typing import Literal

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import AWSClientDep, DbDep, SettingsDep
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.wardrobe import (
    UploadUrlRequest,
    UploadUrlResponse,
    WardrobeItemCreate,
    WardrobeItemList,
    WardrobeItemResponse,
    WardrobeItemUpdate,
)
from fashion_api.services.wardrobe import WardrobeService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/wardrobe', tags=['Wardrobe'])


@router.post('/items', response_model=WardrobeItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(user: CurrentUserDep, db: DbDep, data: WardrobeItemCreate):
    """Catalog a new item; the VUFS code is assigned by the server."""
    item = WardrobeService(db).create_item(user.id, data)
    return WardrobeItemResponse.model_validate(item)


@router.get('/items', response_model=WardrobeItemList)
def list_items(
    user: CurrentUserDep,
    db: DbDep,
    domain: Literal['APPAREL', 'FOOTWEAR'] | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    items, pagination = WardrobeService(db).list_items(user.id, page, limit, domain=domain)
    return WardrobeItemList(
        items=[WardrobeItemResponse.model_validate(i) for i in items], pagination=pagination
    )


@router.get('/items/{item_id}', response_model=WardrobeItemResponse)
def get_item(item_id: str, user: CurrentUserDep, db: DbDep):
    return WardrobeItemResponse.model_validate(WardrobeService(db).get_item(item_id, user.id))


@router.patch('/items/{item_id}', response_model=WardrobeItemResponse)
def update_item(item_id: str, user: CurrentUserDep, db: DbDep, data: WardrobeItemUpdate):
    return WardrobeItemResponse.model_validate(WardrobeService(db).update_item(item_id, user.id, data))


@router.delete('/items/{item_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: str, user: CurrentUserDep, db: DbDep):
    WardrobeService(db).delete_item(item_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post('/upload-url', response_model=UploadUrlResponse)
def create_upload_url(user: CurrentUserDep, aws: AWSClientDep, settings: SettingsDep, data: UploadUrlRequest):
    """
    Presigned PUT URL for uploading an item photo straight to S3.

    The returned imageUrl is what the client stores on the item once the
    upload completes.
    """
    key = WardrobeService.upload_key(user.id, data.filename)
    upload_url = aws.generate_presigned_upload(key, data.content_type, settings.presigned_url_expires)
    logger.debug(f'Presigned upload for {user.id}: {key}')
    return UploadUrlResponse(
        upload_url=upload_url,
        key=key,
        image_url=aws.object_url(key),
        expires_in=settings.presigned_url_expires,
    )
