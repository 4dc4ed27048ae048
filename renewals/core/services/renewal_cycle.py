"""
Renewal Cycle Calculator.

Pure date arithmetic: computes an item's current renewal date and
whether a lead-time reminder fires on a given day.
"""

from __future__ import annotations

import calendar
import math
import re
from datetime import date, timedelta

from renewals.core.entities.renewal import EndDateType, RenewalCycle, RenewalInfo
from renewals.core.exceptions import ConfigurationError

_CYCLE_MONTHS: dict[RenewalCycle, int] = {
    RenewalCycle.MONTHLY: 1,
    RenewalCycle.QUARTERLY: 3,
    RenewalCycle.SEMI_ANNUALLY: 6,
    RenewalCycle.ANNUALLY: 12,
}

# Spellings found in older records
_CYCLE_ALIASES: dict[str, RenewalCycle] = {
    "annual": RenewalCycle.ANNUALLY,
    "yearly": RenewalCycle.ANNUALLY,
    "bi-annually": RenewalCycle.SEMI_ANNUALLY,
    "biannually": RenewalCycle.SEMI_ANNUALLY,
    "one_time": RenewalCycle.NONE,
}

_CUSTOM_CYCLE = re.compile(r"^custom-(\d+)-days?$")


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class RenewalCycleCalculator:
    """
    Computes next renewal dates across cycle boundaries.

    Stateless; every cycle advance is counted from the original end date
    so month-end clamping never accumulates drift.
    """

    def parse_cycle(
        self, info: RenewalInfo, item_id: int | None = None
    ) -> tuple[RenewalCycle, int | None]:
        """
        Resolve the stored cycle string.

        Returns:
            The cycle and, for custom cycles, its length in days.

        Raises:
            ConfigurationError: If the value is not a known cycle.
        """
        raw = (info.renewal_cycle or "").strip().lower()

        match = _CUSTOM_CYCLE.match(raw)
        if match:
            cycle = RenewalCycle.CUSTOM
            custom_days: int | None = int(match.group(1))
        else:
            try:
                cycle = _CYCLE_ALIASES.get(raw) or RenewalCycle(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Unknown renewal cycle: {info.renewal_cycle!r}",
                    item_id=item_id,
                    details={"renewal_cycle": info.renewal_cycle},
                ) from None
            custom_days = info.custom_cycle_days if cycle == RenewalCycle.CUSTOM else None

        if cycle == RenewalCycle.CUSTOM and (custom_days is None or custom_days <= 0):
            raise ConfigurationError(
                "Custom renewal cycle requires a positive day count",
                item_id=item_id,
                details={
                    "renewal_cycle": info.renewal_cycle,
                    "custom_cycle_days": info.custom_cycle_days,
                },
            )

        return cycle, custom_days

    def advance(
        self,
        anchor: date,
        cycle: RenewalCycle,
        steps: int = 1,
        custom_days: int | None = None,
    ) -> date:
        """Move a date forward by whole cycles."""
        if cycle == RenewalCycle.NONE:
            return anchor
        if cycle == RenewalCycle.CUSTOM:
            if not custom_days:
                raise ConfigurationError("Custom renewal cycle requires a positive day count")
            return anchor + timedelta(days=custom_days * steps)
        return add_months(anchor, _CYCLE_MONTHS[cycle] * steps)

    def next_renewal_date(
        self,
        info: RenewalInfo,
        as_of: date,
        end_date_type: EndDateType | None = None,
        item_id: int | None = None,
    ) -> date | None:
        """
        Compute the renewal date that is current on `as_of`.

        A date equal to `as_of` is due today, not missed.

        Args:
            info: Renewal data of the item.
            as_of: Evaluation day.
            end_date_type: Effective end-date semantics; defaults to the
                item's own tag, then hard_end.
            item_id: Included in configuration errors.

        Returns:
            The renewal date, or None when the item has lapsed terminally
            or has no end date at all.
        """
        cycle, custom_days = self.parse_cycle(info, item_id)
        end = info.end_date

        if end is None:
            if cycle == RenewalCycle.NONE and not info.auto_renewal:
                return None
            raise ConfigurationError(
                "end_date is required for recurring or auto-renewing items",
                item_id=item_id,
                details={"renewal_cycle": info.renewal_cycle},
            )

        if end >= as_of:
            return end

        if cycle == RenewalCycle.NONE:
            # One-time deadline: stays overdue only while it auto-renews
            return end if info.auto_renewal else None

        semantics = end_date_type or info.end_date_type or EndDateType.HARD_END
        if semantics.is_terminal and not info.auto_renewal:
            return None

        return self._roll_forward(end, cycle, custom_days, as_of)

    def _roll_forward(
        self,
        anchor: date,
        cycle: RenewalCycle,
        custom_days: int | None,
        as_of: date,
    ) -> date:
        """First occurrence on or after `as_of`, counted from the anchor."""
        if cycle == RenewalCycle.CUSTOM:
            assert custom_days
            steps = math.ceil((as_of - anchor).days / custom_days)
            return self.advance(anchor, cycle, steps, custom_days)

        months = _CYCLE_MONTHS[cycle]
        month_gap = (as_of.year - anchor.year) * 12 + (as_of.month - anchor.month)
        steps = max(1, month_gap // months)
        candidate = self.advance(anchor, cycle, steps)
        while candidate < as_of:
            steps += 1
            candidate = self.advance(anchor, cycle, steps)
        return candidate

    def needs_reminder(
        self,
        info: RenewalInfo,
        offset_days: int,
        as_of: date,
        offsets: list[int] | None = None,
        end_date_type: EndDateType | None = None,
        item_id: int | None = None,
    ) -> bool:
        """
        Decide whether the lead-time reminder at `offset_days` fires today.

        Fires on an exact day match. Once the renewal date is overdue the
        smallest configured offset keeps firing so the item never goes
        silent.
        """
        renewal_date = self.next_renewal_date(info, as_of, end_date_type, item_id)
        if renewal_date is None:
            return False

        days_until = (renewal_date - as_of).days
        if days_until == offset_days:
            return True

        configured = offsets if offsets is not None else info.reminder_offsets
        return days_until < 0 and bool(configured) and offset_days == min(configured)

    def is_active(
        self,
        info: RenewalInfo,
        as_of: date,
        end_date_type: EndDateType | None = None,
        item_id: int | None = None,
    ) -> bool:
        """Tracking enabled and the item has not lapsed terminally."""
        if not info.is_active:
            return False
        return self.next_renewal_date(info, as_of, end_date_type, item_id) is not None
