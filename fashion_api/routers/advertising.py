"""
Advertising Router.

Campaign management for advertisers plus impression/click/conversion
tracking and analytics.
"""

import logging

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.advertising import (
    CampaignAnalytics,
    CampaignCreate,
    CampaignList,
    CampaignResponse,
    CampaignStatus,
    CampaignStatusUpdate,
    CampaignUpdate,
    ClickCreate,
    ClickResponse,
    ConversionCreate,
    ConversionResponse,
    ImpressionCreate,
    ImpressionResponse,
)
from fashion_api.services.advertising import AdvertisingService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/advertising', tags=['Advertising'])


# =============================================================================
# Campaigns
# =============================================================================
@router.post('/campaigns', response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(user: CurrentUserDep, db: DbDep, data: CampaignCreate):
    """Create a campaign in draft status."""
    return CampaignResponse.model_validate(AdvertisingService(db).create_campaign(user.id, data))


@router.get('/campaigns', response_model=CampaignList)
def list_campaigns(
    user: CurrentUserDep,
    db: DbDep,
    campaign_status: CampaignStatus | None = Query(default=None, alias='status'),
):
    campaigns = AdvertisingService(db).list_campaigns(user.id, campaign_status)
    return CampaignList(campaigns=[CampaignResponse.model_validate(c) for c in campaigns])


@router.get('/campaigns/{campaign_id}', response_model=CampaignResponse)
def get_campaign(campaign_id: str, user: CurrentUserDep, db: DbDep):
    return CampaignResponse.model_validate(AdvertisingService(db).get_campaign(campaign_id, user.id))


@router.patch('/campaigns/{campaign_id}', response_model=CampaignResponse)
def update_campaign(campaign_id: str, user: CurrentUserDep, db: DbDep, data: CampaignUpdate):
    return CampaignResponse.model_validate(AdvertisingService(db).update_campaign(campaign_id, user.id, data))


@router.patch('/campaigns/{campaign_id}/status', response_model=CampaignResponse)
def update_campaign_status(campaign_id: str, user: CurrentUserDep, db: DbDep, data: CampaignStatusUpdate):
    campaign = AdvertisingService(db).update_status(campaign_id, user.id, data.status)
    return CampaignResponse.model_validate(campaign)


@router.delete('/campaigns/{campaign_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(campaign_id: str, user: CurrentUserDep, db: DbDep):
    AdvertisingService(db).delete_campaign(campaign_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get('/campaigns/{campaign_id}/analytics', response_model=CampaignAnalytics)
def campaign_analytics(campaign_id: str, user: CurrentUserDep, db: DbDep):
    """Totals, rates (CTR, conversion rate), costs (CPC, CPM), ROAS and a daily breakdown."""
    return AdvertisingService(db).analytics(campaign_id, user.id)


# =============================================================================
# Tracking (called by client surfaces showing the ad)
# =============================================================================
@router.post(
    '/campaigns/{campaign_id}/impressions',
    response_model=ImpressionResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_impression(campaign_id: str, user: CurrentUserDep, db: DbDep, data: ImpressionCreate):
    return ImpressionResponse.model_validate(AdvertisingService(db).record_impression(campaign_id, user.id, data))


@router.post('/campaigns/{campaign_id}/clicks', response_model=ClickResponse, status_code=status.HTTP_201_CREATED)
def record_click(campaign_id: str, user: CurrentUserDep, db: DbDep, data: ClickCreate):
    return ClickResponse.model_validate(AdvertisingService(db).record_click(campaign_id, user.id, data))


@router.post(
    '/campaigns/{campaign_id}/conversions',
    response_model=ConversionResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_conversion(campaign_id: str, user: CurrentUserDep, db: DbDep, data: ConversionCreate):
    return ConversionResponse.model_validate(AdvertisingService(db).record_conversion(campaign_id, user.id, data))
