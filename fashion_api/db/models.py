"""
SQLAlchemy database models.

Flexible sub-documents (category hierarchy, targeting, conversions, ...)
are stored in JSON columns; everything that is filtered or sorted on has
its own column.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fashion_api.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


# =============================================================================
# Wardrobe
# =============================================================================
class WardrobeItem(TimestampMixin, Base):
    """A cataloged wardrobe piece described with the VUFS taxonomy."""

    __tablename__ = 'wardrobe_items'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    vufs_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    domain: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    brand: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    item_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    condition: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    visibility: Mapped[str] = mapped_column(String(16), default='private', nullable=False)


# =============================================================================
# Marketplace
# =============================================================================
class MarketplaceListing(TimestampMixin, Base):
    __tablename__ = 'marketplace_listings'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    item_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey('wardrobe_items.id', ondelete='SET NULL'), nullable=True
    )
    seller_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default='', nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default='BRL', nullable=False)
    condition: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    brand: Mapped[str | None] = mapped_column(String(100), index=True, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default='active', index=True, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class ListingLike(Base):
    __tablename__ = 'listing_likes'
    __table_args__ = (UniqueConstraint('listing_id', 'user_id'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    listing_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('marketplace_listings.id', ondelete='CASCADE'), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


# =============================================================================
# Social
# =============================================================================
class SocialPost(TimestampMixin, Base):
    __tablename__ = 'social_posts'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    post_type: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_urls: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    wardrobe_item_ids: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    visibility: Mapped[str] = mapped_column(String(16), default='public', nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class PostLike(Base):
    __tablename__ = 'post_likes'
    __table_args__ = (UniqueConstraint('post_id', 'user_id'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('social_posts.id', ondelete='CASCADE'), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class PostComment(Base):
    __tablename__ = 'post_comments'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('social_posts.id', ondelete='CASCADE'), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Follow(Base):
    __tablename__ = 'follows'
    __table_args__ = (UniqueConstraint('follower_id', 'following_id'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    follower_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    following_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


# =============================================================================
# Messaging
# =============================================================================
class Conversation(TimestampMixin, Base):
    __tablename__ = 'conversations'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    conversation_type: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)

    participants: Mapped[list['ConversationParticipant']] = relationship(
        back_populates='conversation', cascade='all, delete-orphan', lazy='selectin'
    )


class ConversationParticipant(Base):
    __tablename__ = 'conversation_participants'
    __table_args__ = (UniqueConstraint('conversation_id', 'user_id'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    role: Mapped[str] = mapped_column(String(16), default='member', nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    conversation: Mapped[Conversation] = relationship(back_populates='participants')


class Message(Base):
    __tablename__ = 'messages'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    conversation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('conversations.id', ondelete='CASCADE'), index=True, nullable=False
    )
    sender_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


# =============================================================================
# Advertising
# =============================================================================
class AdCampaign(TimestampMixin, Base):
    __tablename__ = 'advertising_campaigns'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    advertiser_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    campaign_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), default='draft', index=True, nullable=False)
    total_budget: Mapped[float] = mapped_column(Float, nullable=False)
    daily_budget: Mapped[float] = mapped_column(Float, nullable=False)
    cost_per_click: Mapped[float] = mapped_column(Float, nullable=False)
    spent_amount: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default='BRL', nullable=False)
    targeting: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    creative_assets: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    placements: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class AdImpression(Base):
    __tablename__ = 'ad_impressions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    campaign_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('advertising_campaigns.id', ondelete='CASCADE'), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    placement: Mapped[str] = mapped_column(String(32), nullable=False)
    user_context: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class AdClick(Base):
    __tablename__ = 'ad_clicks'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    impression_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('ad_impressions.id', ondelete='CASCADE'), unique=True, nullable=False
    )
    campaign_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    destination_url: Mapped[str] = mapped_column(String(500), nullable=False)
    cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class AdConversion(Base):
    __tablename__ = 'ad_conversions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    click_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('ad_clicks.id', ondelete='CASCADE'), nullable=False
    )
    campaign_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    conversion_type: Mapped[str] = mapped_column(String(32), nullable=False)
    conversion_value: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


# =============================================================================
# Brand partners
# =============================================================================
class BrandAccount(TimestampMixin, Base):
    """A brand, store or designer partner account; one per owning user."""

    __tablename__ = 'brand_accounts'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    brand_name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    business_type: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    banner: Mapped[str | None] = mapped_column(String(500), nullable=True)
    brand_colors: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    social_links: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    verification_status: Mapped[str] = mapped_column(String(16), default='pending', index=True, nullable=False)
    partnership_tier: Mapped[str] = mapped_column(String(16), default='basic', index=True, nullable=False)
    badges: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)


class BrandCatalogItem(TimestampMixin, Base):
    """A wardrobe item a brand lists as an official product."""

    __tablename__ = 'brand_catalog_items'
    __table_args__ = (UniqueConstraint('brand_id', 'wardrobe_item_id'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    brand_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('brand_accounts.id', ondelete='CASCADE'), index=True, nullable=False
    )
    wardrobe_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey('wardrobe_items.id', ondelete='CASCADE'), nullable=False
    )
    official_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    availability_status: Mapped[str] = mapped_column(String(16), default='available', nullable=False)
    purchase_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    brand_data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)


# =============================================================================
# Admin configuration
# =============================================================================
class SizeStandard(TimestampMixin, Base):
    """A sizing system such as BR, US, EU or UK."""

    __tablename__ = 'size_standards'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class SizeDefinition(TimestampMixin, Base):
    """A size label with its conversions into each standard."""

    __tablename__ = 'size_definitions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    conversions: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)
    valid_category_ids: Mapped[list[int]] = mapped_column(JSON, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


# =============================================================================
# AI feedback
# =============================================================================
class AIFeedback(Base):
    __tablename__ = 'ai_feedback'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    item_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    feedback_type: Mapped[str] = mapped_column(String(32), nullable=False)
    ai_suggestions: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    user_corrections: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
