"""
Advertising campaign management and tracking.

Campaign lifecycle:
    draft  -> active | cancelled
    active -> paused | completed | cancelled
    paused -> active | completed | cancelled
completed and cancelled are terminal.

Each click charges the campaign's cost per click; once spend reaches the
total budget the campaign completes automatically.
"""

import logging
from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from fashion_api.db.models import AdCampaign, AdClick, AdConversion, AdImpression
from fashion_api.schemas.advertising import (
    CampaignAnalytics,
    CampaignCreate,
    CampaignMetrics,
    CampaignUpdate,
    ClickCreate,
    ConversionCreate,
    DailyMetrics,
    ImpressionCreate,
)


logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    'draft': {'active', 'cancelled'},
    'active': {'paused', 'completed', 'cancelled'},
    'paused': {'active', 'completed', 'cancelled'},
    'completed': set(),
    'cancelled': set(),
}

EDITABLE_STATUSES = {'draft', 'active', 'paused'}


class AdvertisingService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Campaigns
    # =========================================================================
    def create_campaign(self, advertiser_id: str, data: CampaignCreate) -> AdCampaign:
        campaign = AdCampaign(advertiser_id=advertiser_id, status='draft', **data.model_dump())
        self.db.add(campaign)
        self.db.commit()
        logger.info(f'Campaign {campaign.id} created by {advertiser_id} (budget {campaign.total_budget})')
        return campaign

    def _get(self, campaign_id: str) -> AdCampaign:
        campaign = self.db.get(AdCampaign, campaign_id)
        if campaign is None:
            raise NotFoundError('Campaign', campaign_id)
        return campaign

    def get_campaign(self, campaign_id: str, advertiser_id: str) -> AdCampaign:
        campaign = self._get(campaign_id)
        if campaign.advertiser_id != advertiser_id:
            raise PermissionDeniedError('You can only manage your own campaigns')
        return campaign

    def list_campaigns(self, advertiser_id: str, status: str | None = None) -> list[AdCampaign]:
        stmt = select(AdCampaign).where(AdCampaign.advertiser_id == advertiser_id)
        if status:
            stmt = stmt.where(AdCampaign.status == status)
        return list(self.db.scalars(stmt.order_by(AdCampaign.created_at.desc(), AdCampaign.id)))

    def update_campaign(self, campaign_id: str, advertiser_id: str, data: CampaignUpdate) -> AdCampaign:
        campaign = self.get_campaign(campaign_id, advertiser_id)
        if campaign.status not in EDITABLE_STATUSES:
            raise ValidationError(f'Cannot edit a {campaign.status} campaign')

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(campaign, field, value)

        if campaign.daily_budget > campaign.total_budget:
            raise ValidationError('dailyBudget cannot exceed totalBudget')
        if campaign.total_budget < campaign.spent_amount:
            raise ValidationError('totalBudget cannot be lower than the amount already spent')

        self.db.commit()
        return campaign

    def update_status(self, campaign_id: str, advertiser_id: str, status: str) -> AdCampaign:
        campaign = self.get_campaign(campaign_id, advertiser_id)
        if status == campaign.status:
            return campaign
        if status not in STATUS_TRANSITIONS[campaign.status]:
            raise ValidationError(f'Invalid status transition: {campaign.status} -> {status}')
        if status == 'active' and campaign.spent_amount >= campaign.total_budget:
            raise ValidationError('Campaign budget is exhausted')

        campaign.status = status
        self.db.commit()
        logger.info(f'Campaign {campaign_id} status -> {status}')
        return campaign

    def delete_campaign(self, campaign_id: str, advertiser_id: str) -> None:
        campaign = self.get_campaign(campaign_id, advertiser_id)
        if campaign.status != 'draft':
            raise ValidationError('Only draft campaigns can be deleted; cancel the campaign instead')
        self.db.delete(campaign)
        self.db.commit()

    # =========================================================================
    # Tracking
    # =========================================================================
    def record_impression(self, campaign_id: str, user_id: str, data: ImpressionCreate) -> AdImpression:
        campaign = self._get(campaign_id)
        if campaign.status != 'active':
            raise ValidationError('Impressions can only be recorded for active campaigns')
        if data.placement not in campaign.placements:
            raise ValidationError(f'Campaign does not run on placement {data.placement}')

        impression = AdImpression(
            campaign_id=campaign_id,
            user_id=user_id,
            placement=data.placement,
            user_context=data.user_context,
        )
        self.db.add(impression)
        self.db.commit()
        return impression

    def record_click(self, campaign_id: str, user_id: str, data: ClickCreate) -> AdClick:
        campaign = self._get(campaign_id)
        impression = self.db.get(AdImpression, data.impression_id)
        if impression is None or impression.campaign_id != campaign_id:
            raise NotFoundError('Impression', data.impression_id)
        if campaign.status != 'active':
            raise ValidationError('Clicks can only be recorded for active campaigns')
        if self.db.scalar(select(AdClick.id).where(AdClick.impression_id == impression.id)):
            raise ValidationError('Click already recorded for this impression')

        cost = min(campaign.cost_per_click, campaign.total_budget - campaign.spent_amount)
        click = AdClick(
            impression_id=impression.id,
            campaign_id=campaign_id,
            user_id=user_id,
            destination_url=data.destination_url,
            cost=round(cost, 2),
        )
        self.db.add(click)
        campaign.spent_amount = round(campaign.spent_amount + cost, 2)
        if campaign.spent_amount >= campaign.total_budget:
            campaign.status = 'completed'
            logger.info(f'Campaign {campaign_id} completed: budget {campaign.total_budget} spent')
        self.db.commit()
        return click

    def record_conversion(self, campaign_id: str, user_id: str, data: ConversionCreate) -> AdConversion:
        click = self.db.get(AdClick, data.click_id)
        if click is None or click.campaign_id != campaign_id:
            raise NotFoundError('Click', data.click_id)

        conversion = AdConversion(
            click_id=click.id,
            campaign_id=campaign_id,
            user_id=user_id,
            conversion_type=data.conversion_type,
            conversion_value=data.conversion_value,
        )
        self.db.add(conversion)
        self.db.commit()
        return conversion

    # =========================================================================
    # Analytics
    # =========================================================================
    def analytics(self, campaign_id: str, advertiser_id: str) -> CampaignAnalytics:
        """
        Aggregate campaign performance.

        CTR and conversion rate are percentages; CPM is spend per thousand
        impressions; ROAS is conversion value divided by spend.
        """
        campaign = self.get_campaign(campaign_id, advertiser_id)

        impressions = self.db.scalar(
            select(func.count(AdImpression.id)).where(AdImpression.campaign_id == campaign_id)
        ) or 0
        clicks = self.db.scalar(select(func.count(AdClick.id)).where(AdClick.campaign_id == campaign_id)) or 0
        conversions, conversion_value = self.db.execute(
            select(func.count(AdConversion.id), func.coalesce(func.sum(AdConversion.conversion_value), 0.0))
            .where(AdConversion.campaign_id == campaign_id)
        ).one()
        spend = campaign.spent_amount

        overview = CampaignMetrics(
            impressions=impressions,
            clicks=clicks,
            conversions=conversions,
            ctr=round(clicks / impressions * 100, 2) if impressions else 0.0,
            conversion_rate=round(conversions / clicks * 100, 2) if clicks else 0.0,
            spend=round(spend, 2),
            cpc=round(spend / clicks, 2) if clicks else 0.0,
            cpm=round(spend / impressions * 1000, 2) if impressions else 0.0,
            roas=round(float(conversion_value) / spend, 2) if spend else 0.0,
            conversion_value=round(float(conversion_value), 2),
        )

        return CampaignAnalytics(
            campaign_id=campaign_id,
            overview=overview,
            daily_breakdown=self._daily_breakdown(campaign_id),
        )

    def _daily_breakdown(self, campaign_id: str, days: int = 30) -> list[DailyMetrics]:
        daily: dict[str, dict[str, float]] = defaultdict(
            lambda: {'impressions': 0, 'clicks': 0, 'conversions': 0, 'spend': 0.0}
        )

        for created_at in self.db.scalars(
            select(AdImpression.created_at).where(AdImpression.campaign_id == campaign_id)
        ):
            daily[created_at.date().isoformat()]['impressions'] += 1
        for created_at, cost in self.db.execute(
            select(AdClick.created_at, AdClick.cost).where(AdClick.campaign_id == campaign_id)
        ):
            day = daily[created_at.date().isoformat()]
            day['clicks'] += 1
            day['spend'] += cost
        for created_at in self.db.scalars(
            select(AdConversion.created_at).where(AdConversion.campaign_id == campaign_id)
        ):
            daily[created_at.date().isoformat()]['conversions'] += 1

        return [
            DailyMetrics(
                date=day,
                impressions=int(values['impressions']),
                clicks=int(values['clicks']),
                conversions=int(values['conversions']),
                spend=round(values['spend'], 2),
            )
            for day, values in sorted(daily.items(), reverse=True)[:days]
        ]
