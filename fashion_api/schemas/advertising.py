"""
Advertising campaign models and analytics.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from fashion_api.schemas.common import CamelModel


CampaignType = Literal['brand_awareness', 'product_promotion', 'marketplace_listing', 'sponsored_content']
CampaignStatus = Literal['draft', 'active', 'paused', 'completed', 'cancelled']
Placement = Literal['feed', 'discovery', 'product_page', 'stories']
ConversionType = Literal['purchase', 'signup', 'add_to_cart', 'wishlist', 'follow']


class CampaignCreate(CamelModel):
    name: str = Field(..., min_length=3, max_length=200)
    campaign_type: CampaignType
    total_budget: float = Field(..., gt=0)
    daily_budget: float = Field(..., gt=0)
    cost_per_click: float = Field(default=0.5, gt=0)
    currency: str = Field(default='BRL', min_length=3, max_length=3)
    targeting: dict[str, Any] = Field(default_factory=dict)
    creative_assets: dict[str, Any] = Field(default_factory=dict)
    placements: list[Placement] = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime | None = None

    @model_validator(mode='after')
    def check_budget_and_schedule(self):
        if self.daily_budget > self.total_budget:
            raise ValueError('dailyBudget cannot exceed totalBudget')
        if self.end_date is not None:
            start, end = self.start_date, self.end_date
            if (start.tzinfo is None) != (end.tzinfo is None):
                raise ValueError('startDate and endDate must both carry a timezone or neither')
            if end <= start:
                raise ValueError('endDate must be after startDate')
        return self


class CampaignUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=3, max_length=200)
    daily_budget: float | None = Field(default=None, gt=0)
    total_budget: float | None = Field(default=None, gt=0)
    cost_per_click: float | None = Field(default=None, gt=0)
    targeting: dict[str, Any] | None = None
    creative_assets: dict[str, Any] | None = None
    placements: list[Placement] | None = None
    end_date: datetime | None = None


class CampaignStatusUpdate(CamelModel):
    status: CampaignStatus


class CampaignResponse(CamelModel):
    id: str
    advertiser_id: str
    name: str
    campaign_type: str
    status: str
    total_budget: float
    daily_budget: float
    cost_per_click: float
    spent_amount: float
    currency: str
    targeting: dict[str, Any]
    creative_assets: dict[str, Any]
    placements: list[str]
    start_date: datetime
    end_date: datetime | None
    created_at: datetime
    updated_at: datetime


class CampaignList(CamelModel):
    campaigns: list[CampaignResponse]


class ImpressionCreate(CamelModel):
    placement: Placement
    user_context: dict[str, Any] = Field(default_factory=dict)


class ImpressionResponse(CamelModel):
    id: str
    campaign_id: str
    user_id: str
    placement: str
    created_at: datetime


class ClickCreate(CamelModel):
    impression_id: str
    destination_url: str = Field(..., min_length=1)


class ClickResponse(CamelModel):
    id: str
    impression_id: str
    campaign_id: str
    cost: float
    created_at: datetime


class ConversionCreate(CamelModel):
    click_id: str
    conversion_type: ConversionType
    conversion_value: float = Field(default=0.0, ge=0)


class ConversionResponse(CamelModel):
    id: str
    click_id: str
    campaign_id: str
    conversion_type: str
    conversion_value: float
    created_at: datetime


class DailyMetrics(CamelModel):
    date: str = Field(..., description='ISO day (YYYY-MM-DD)')
    impressions: int
    clicks: int
    conversions: int
    spend: float


class CampaignMetrics(CamelModel):
    impressions: int
    clicks: int
    conversions: int
    ctr: float = Field(..., description='Click-through rate, percent')
    conversion_rate: float = Field(..., description='Conversions per click, percent')
    spend: float
    cpc: float
    cpm: float
    roas: float
    conversion_value: float


class CampaignAnalytics(CamelModel):
    campaign_id: str
    overview: CampaignMetrics
    daily_breakdown: list[DailyMetrics]
