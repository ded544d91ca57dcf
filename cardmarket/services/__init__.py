"""
CardMarket services.

Business logic for the card catalog and the marketplace.
"""

from cardmarket.services.cards import (
    add_card,
    edit_card,
    fetch_all_cards,
    fetch_card,
    remove_card,
    validate_new_card,
)
from cardmarket.services.catalog import (
    CardFilters,
    PageRequest,
    build_filter_criteria,
    count_pages,
    list_cards_page,
    parse_page_params,
    pick_without_replacement,
    random_sample,
    search_cards,
)
from cardmarket.services.marketplace import (
    create_listing,
    delete_listing,
    get_all_listings,
    get_listing,
    listings_for_card,
    purchase_listing,
    sales_for_card,
    update_listing,
    validate_price,
)

__all__ = [
    "CardFilters",
    "PageRequest",
    "add_card",
    "build_filter_criteria",
    "count_pages",
    "create_listing",
    "delete_listing",
    "edit_card",
    "fetch_all_cards",
    "fetch_card",
    "get_all_listings",
    "get_listing",
    "list_cards_page",
    "listings_for_card",
    "parse_page_params",
    "pick_without_replacement",
    "purchase_listing",
    "random_sample",
    "remove_card",
    "sales_for_card",
    "search_cards",
    "update_listing",
    "validate_price",
]
