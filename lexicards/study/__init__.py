"""Card browsing for the dashboard views."""

from lexicards.study.browse import ALL_CATEGORIES, Page, filter_cards, paginate

__all__ = ["ALL_CATEGORIES", "Page", "filter_cards", "paginate"]
