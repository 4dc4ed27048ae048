"""Product policy catalog entities."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from renewals.core.entities.renewal import EndDateType, UrgencyLevel


class CatalogEntry(BaseModel):
    """Static definition of one item type."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    default_offsets: tuple[int, ...]
    urgency_level: UrgencyLevel = UrgencyLevel.STANDARD
    end_date_type: EndDateType = EndDateType.HARD_END
    requires_action: bool = True
    regulatory_type: str | None = None
    notice_period: int | None = None
    renewal_notes: str | None = None


class ProductCatalog:
    """
    Immutable, versioned lookup table of catalog entries.

    Loaded once at process start and shared by reference. Unknown
    product types resolve to the fallback entry.
    """

    def __init__(
        self,
        version: str,
        entries: Mapping[str, CatalogEntry],
        fallback: CatalogEntry,
    ) -> None:
        self._version = version
        self._entries = MappingProxyType(dict(entries))
        self._fallback = fallback

    @property
    def version(self) -> str:
        return self._version

    @property
    def entries(self) -> Mapping[str, CatalogEntry]:
        return self._entries

    @property
    def fallback(self) -> CatalogEntry:
        return self._fallback

    def get(self, product_type: str | None) -> CatalogEntry | None:
        """Exact lookup, None when unknown."""
        if product_type is None:
            return None
        return self._entries.get(product_type)

    def lookup(self, product_type: str | None) -> CatalogEntry:
        """Lookup that falls back to the standard entry."""
        return self.get(product_type) or self._fallback

    def categories(self) -> list[str]:
        return sorted({entry.category for entry in self._entries.values()})

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, product_type: object) -> bool:
        return product_type in self._entries
