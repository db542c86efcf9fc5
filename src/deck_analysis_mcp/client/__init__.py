"""Card catalog client module."""

from .tcg_client import (
    CardNotFoundError,
    CatalogAPIError,
    CatalogClient,
    CatalogConnectionError,
    card_from_api,
    get_catalog_client,
)

__all__ = [
    "CardNotFoundError",
    "CatalogAPIError",
    "CatalogClient",
    "CatalogConnectionError",
    "card_from_api",
    "get_catalog_client",
]
