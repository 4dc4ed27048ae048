"""
Product catalog endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from renewals.api.dependencies import get_catalog
from renewals.application.dto.responses import CatalogEntryResponse, CatalogResponse
from renewals.core.entities.catalog import ProductCatalog

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("", response_model=CatalogResponse)
async def list_catalog(
    category: str | None = None,
    catalog: ProductCatalog = Depends(get_catalog),
) -> CatalogResponse:
    """Catalog version and entries, optionally filtered by category."""
    entries = [e for e in catalog if category is None or e.category == category]
    return CatalogResponse(
        version=catalog.version,
        categories=catalog.categories(),
        entries=[CatalogEntryResponse.from_entity(e) for e in entries],
        total=len(entries),
    )


@router.get("/{product_type}", response_model=CatalogEntryResponse)
async def get_catalog_entry(
    product_type: str,
    catalog: ProductCatalog = Depends(get_catalog),
) -> CatalogEntryResponse:
    entry = catalog.get(product_type)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product type not in catalog: {product_type}",
        )
    return CatalogEntryResponse.from_entity(entry)
