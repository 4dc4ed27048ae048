"""Tracked item entities with embedded renewal information."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class RenewalCycle(str, Enum):
    """Recurrence pattern governing how an end date advances."""

    NONE = "none"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi_annually"
    ANNUALLY = "annually"
    CUSTOM = "custom"


class EndDateType(str, Enum):
    """What happens when the end date passes without action."""

    HARD_END = "hard_end"
    REVIEW_DATE = "review_date"
    EXPIRY_DATE = "expiry_date"
    AUTO_RENEWAL = "auto_renewal"

    @property
    def is_terminal(self) -> bool:
        """A missed date ends tracking unless the item auto-renews."""
        return self in (EndDateType.HARD_END, EndDateType.EXPIRY_DATE)


class UrgencyLevel(str, Enum):
    """Urgency classification of a catalog item type."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    STRATEGIC = "strategic"
    STANDARD = "standard"


class RenewalInfo(BaseModel):
    """
    Renewal tracking data embedded in an item.

    `renewal_cycle` is kept as the raw stored string; it is parsed by the
    cycle calculator so that malformed values surface as configuration
    errors for the one item instead of failing the whole load.
    """

    start_date: date | None = None
    end_date: date | None = None
    renewal_cycle: str = RenewalCycle.ANNUALLY.value
    custom_cycle_days: int | None = None
    reminder_offsets: list[int] = Field(default_factory=list)
    is_active: bool = True
    auto_renewal: bool = False

    # Catalog linkage
    product_type: str | None = None
    end_date_type: EndDateType | None = None
    notice_period: int | None = None
    regulatory_type: str | None = None


class TrackedItem(BaseModel):
    """
    A renewable obligation owned by a user.

    Owned by the CRUD surface; read-only to the reminder engine.
    `renewal_info` is None when the stored renewal data is missing
    or in a legacy shape.
    """

    id: int
    user_id: int
    title: str
    provider: str | None = None
    category_id: int | None = None
    renewal_info: RenewalInfo | None = None


class Category(BaseModel):
    """Node of the user's category tree."""

    id: int
    user_id: int | None = None
    name: str
    parent_id: int | None = None
