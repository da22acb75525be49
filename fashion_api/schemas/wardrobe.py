"""
Wardrobe item models (VUFS-described pieces).
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from fashion_api.schemas.common import CamelModel, Pagination


Visibility = Literal['public', 'followers', 'private']


class WardrobeItemCreate(CamelModel):
    domain: Literal['APPAREL', 'FOOTWEAR']
    brand: str = Field(..., min_length=1, description='Brand name, e.g. Nike®')
    piece_type: str = Field(..., min_length=1, description='Apparel piece type or footwear type')
    category: dict[str, Any] = Field(default_factory=dict, description='page/blue/white/gray subcategories')
    brand_details: dict[str, Any] = Field(default_factory=dict, description='line, collaboration')
    metadata: dict[str, Any] = Field(default_factory=dict, description='composition, colors, size, care')
    condition: dict[str, Any] = Field(default_factory=dict)
    images: list[str] = Field(default_factory=list)
    visibility: Visibility = 'private'


class WardrobeItemUpdate(CamelModel):
    category: dict[str, Any] | None = None
    brand_details: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    condition: dict[str, Any] | None = None
    images: list[str] | None = None
    visibility: Visibility | None = None


class WardrobeItemResponse(CamelModel):
    id: str
    owner_id: str
    vufs_code: str
    domain: str
    category: dict[str, Any]
    brand: dict[str, Any]
    metadata: dict[str, Any] = Field(validation_alias='item_metadata')
    condition: dict[str, Any]
    images: list[str]
    visibility: str
    created_at: datetime
    updated_at: datetime


class WardrobeItemList(CamelModel):
    items: list[WardrobeItemResponse]
    pagination: Pagination


class UploadUrlRequest(CamelModel):
    filename: str = Field(..., min_length=1)
    content_type: Literal['image/jpeg', 'image/png', 'image/webp'] = 'image/jpeg'


class UploadUrlResponse(CamelModel):
    upload_url: str
    key: str
    image_url: str
    expires_in: int
