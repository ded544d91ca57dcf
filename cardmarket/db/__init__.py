from cardmarket.db.cards import (
    card_to_model,
    count_cards,
    create_card,
    delete_card,
    get_card,
    get_cards_by_archetype,
    get_cards_window,
    get_random_cards,
    list_cards,
    update_card,
)
from cardmarket.db.database import get_session, init_db, store_errors
from cardmarket.db.listings import (
    create_listing,
    delete_listing,
    get_listing,
    get_listings_for_card,
    get_sales_for_card,
    list_listings,
    listing_to_model,
    mark_sold,
    update_listing_fields,
)
from cardmarket.db.users import create_user, get_user, user_to_ref

__all__ = [
    "card_to_model",
    "count_cards",
    "create_card",
    "create_listing",
    "create_user",
    "delete_card",
    "delete_listing",
    "get_card",
    "get_cards_by_archetype",
    "get_cards_window",
    "get_listing",
    "get_listings_for_card",
    "get_random_cards",
    "get_sales_for_card",
    "get_session",
    "get_user",
    "init_db",
    "list_cards",
    "list_listings",
    "listing_to_model",
    "mark_sold",
    "store_errors",
    "update_card",
    "update_listing_fields",
    "user_to_ref",
]
