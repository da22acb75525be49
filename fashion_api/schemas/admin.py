"""
Admin configuration models: size standards and size definitions.
"""

from datetime import datetime

from pydantic import Field

from fashion_api.schemas.common import CamelModel


class SizeStandardCreate(CamelModel):
    code: str = Field(..., min_length=1, max_length=16, description='e.g. BR, US, EU, UK')
    name: str = Field(..., min_length=1, max_length=100)
    region: str | None = None
    is_active: bool = True


class SizeStandardUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    region: str | None = None
    is_active: bool | None = None


class SizeStandardResponse(CamelModel):
    id: str
    code: str
    name: str
    region: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SizeConversion(CamelModel):
    standard: str = Field(..., description='Size standard code')
    value: str = Field(..., min_length=1)


class SizeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=32)
    sort_order: int = 0
    conversions: list[SizeConversion] = Field(default_factory=list)
    valid_category_ids: list[int] = Field(default_factory=list)
    is_active: bool = True


class SizeUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=32)
    sort_order: int | None = None
    conversions: list[SizeConversion] | None = None
    valid_category_ids: list[int] | None = None
    is_active: bool | None = None


class SizeResponse(CamelModel):
    id: str
    name: str
    sort_order: int
    conversions: list[SizeConversion]
    valid_category_ids: list[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SizeCatalog(CamelModel):
    standards: list[SizeStandardResponse]
    sizes: list[SizeResponse]
