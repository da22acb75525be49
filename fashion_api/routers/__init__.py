"""
FastAPI routers for each area of the API.

- health: service info and health checks
- ai: image analysis, batch processing, VUFS extraction and feedback
- wardrobe: VUFS wardrobe items and presigned uploads
- marketplace: listings, search and likes
- social: posts, comments, follows and feed
- messaging: direct and group conversations
- advertising: campaigns, tracking and analytics
- brands: brand partner accounts, official catalogs and analytics
- admin: size standards and sizes (plus the public size catalog)
"""

from fashion_api.routers.admin import catalog_router as sizes_router
from fashion_api.routers.admin import router as admin_router
from fashion_api.routers.advertising import router as advertising_router
from fashion_api.routers.ai import router as ai_router
from fashion_api.routers.brands import router as brands_router
from fashion_api.routers.health import router as health_router
from fashion_api.routers.marketplace import router as marketplace_router
from fashion_api.routers.messaging import router as messaging_router
from fashion_api.routers.social import router as social_router
from fashion_api.routers.wardrobe import router as wardrobe_router


__all__ = [
    'admin_router',
    'advertising_router',
    'ai_router',
    'brands_router',
    'health_router',
    'marketplace_router',
    'messaging_router',
    'sizes_router',
    'social_router',
    'wardrobe_router',
]
