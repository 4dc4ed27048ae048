"""Product catalog loading."""

from renewals.config import get_logger, get_settings
from renewals.core.entities.catalog import CatalogEntry, ProductCatalog
from renewals.core.entities.renewal import EndDateType, UrgencyLevel
from renewals.infrastructure.catalog.uk_products import CATALOG_VERSION, build_entries

logger = get_logger(__name__)

_catalog: ProductCatalog | None = None


def build_product_catalog(default_offsets: list[int] | None = None) -> ProductCatalog:
    """
    Build the catalog from the seed table.

    Unknown product types resolve to a standard entry carrying the
    configured default offsets.
    """
    offsets = default_offsets or get_settings().reminders.default_offsets
    fallback = CatalogEntry(
        name="Standard",
        category="Other",
        default_offsets=tuple(sorted(set(offsets), reverse=True)),
        urgency_level=UrgencyLevel.STANDARD,
        end_date_type=EndDateType.HARD_END,
        requires_action=True,
    )
    return ProductCatalog(CATALOG_VERSION, build_entries(), fallback)


def get_product_catalog() -> ProductCatalog:
    """Get the process-wide catalog, loading it on first use."""
    global _catalog
    if _catalog is None:
        _catalog = build_product_catalog()
        logger.info("product_catalog_loaded", version=_catalog.version, entries=len(_catalog))
    return _catalog


def reset_product_catalog() -> None:
    """Drop the cached catalog (for testing)."""
    global _catalog
    _catalog = None


__all__ = [
    "CATALOG_VERSION",
    "build_product_catalog",
    "get_product_catalog",
    "reset_product_catalog",
]
