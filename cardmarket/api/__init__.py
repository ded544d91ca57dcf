from cardmarket.api.cards import router as cards_router
from cardmarket.api.health import router as health_router
from cardmarket.api.listings import router as listings_router

__all__ = [
    "cards_router",
    "health_router",
    "listings_router",
]
