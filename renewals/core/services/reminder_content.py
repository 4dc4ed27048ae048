"""
Reminder Content Builder.

Turns a due reminder into the content handed to the notifier:
subject, escalated priority, compliance warnings and action items.
"""

from __future__ import annotations

from renewals.core.entities.catalog import CatalogEntry
from renewals.core.entities.ledger import ContentSnapshot
from renewals.core.entities.reminder import ComplianceWarning, DueReminder, ReminderContent
from renewals.core.entities.renewal import UrgencyLevel

_SUBJECT_PREFIX = {
    "overdue": "OVERDUE",
    "urgent": "URGENT",
    "upcoming": "REMINDER",
    "early_warning": "UPCOMING",
}


def reminder_type_for(days_until: int) -> str:
    if days_until <= 0:
        return "overdue"
    if days_until <= 7:
        return "urgent"
    if days_until <= 30:
        return "upcoming"
    return "early_warning"


def escalate_urgency(base: UrgencyLevel, days_until: int) -> UrgencyLevel:
    """Raise the catalog urgency as the renewal date approaches."""
    if days_until <= 3:
        return UrgencyLevel.CRITICAL
    if days_until <= 7 and base == UrgencyLevel.CRITICAL:
        return UrgencyLevel.CRITICAL
    if days_until <= 14 and base != UrgencyLevel.STRATEGIC:
        return UrgencyLevel.IMPORTANT
    return base


class ReminderContentBuilder:
    """Builds notifier content for due reminders."""

    def build(self, due: DueReminder, entry: CatalogEntry) -> ReminderContent:
        """
        Build content for one due reminder.

        Args:
            due: The reminder that fires.
            entry: Catalog entry of the item's product type.

        Returns:
            ReminderContent ready for dispatch.
        """
        item = due.item
        info = item.renewal_info
        days = due.days_until_renewal
        reminder_type = reminder_type_for(days)

        return ReminderContent(
            subject=self.subject(item.title, reminder_type, days),
            reminder_type=reminder_type,
            priority=escalate_urgency(entry.urgency_level, days),
            item={
                "id": item.id,
                "title": item.title,
                "provider": item.provider,
                "product_type": info.product_type if info else None,
            },
            timeline={
                "days_until_renewal": days,
                "renewal_date": due.renewal_date.isoformat(),
                "offset_days": due.offset_days,
                "kind": due.kind.value,
            },
            actions=self.actions(due, entry),
            warnings=self.warnings(due, entry),
            guidance=entry.renewal_notes,
            links={"item_url": f"/items/{item.id}"},
        )

    def subject(self, title: str, reminder_type: str, days_until: int) -> str:
        prefix = _SUBJECT_PREFIX[reminder_type]
        if days_until < 0:
            return f"{prefix}: {title} expired {abs(days_until)} days ago"
        if days_until == 0:
            return f"{prefix}: {title} expires today"
        return f"{prefix}: {title} expires in {days_until} days"

    def warnings(self, due: DueReminder, entry: CatalogEntry) -> list[ComplianceWarning]:
        info = due.item.renewal_info
        days = due.days_until_renewal
        regulatory_type = (info.regulatory_type if info else None) or entry.regulatory_type
        notice_period = (info.notice_period if info else None) or entry.notice_period
        auto_renewal = bool(info and info.auto_renewal)

        warnings: list[ComplianceWarning] = []

        if days < 0:
            warnings.append(
                ComplianceWarning(
                    type="expired",
                    severity="critical",
                    message=(
                        f"This item expired {abs(days)} days ago "
                        "and requires immediate attention"
                    ),
                )
            )

        if regulatory_type == "government_required" and days <= 7:
            warnings.append(
                ComplianceWarning(
                    type="legal",
                    severity="high",
                    message="Legal requirement - action needed to avoid penalties",
                )
            )

        if regulatory_type == "fca_regulated" and days <= 14:
            warnings.append(
                ComplianceWarning(
                    type="regulatory",
                    severity="medium",
                    message="FCA regulated product - review terms before renewal",
                )
            )

        if notice_period and days <= notice_period:
            warnings.append(
                ComplianceWarning(
                    type="notice_period",
                    severity="high",
                    message=f"{notice_period} days notice required - deadline approaching",
                )
            )

        if auto_renewal and days <= 30:
            warnings.append(
                ComplianceWarning(
                    type="auto_renewal",
                    severity="medium",
                    message="Auto-renewal product - compare alternatives before deadline",
                )
            )

        return warnings

    def actions(self, due: DueReminder, entry: CatalogEntry) -> list[str]:
        info = due.item.renewal_info
        days = due.days_until_renewal
        notice_period = (info.notice_period if info else None) or entry.notice_period

        actions: list[str] = []
        if entry.requires_action:
            if days <= 7:
                actions.append("Take immediate action to renew or cancel")
            elif days <= 30:
                actions.append("Start renewal process or research alternatives")
            else:
                actions.append("Review product and prepare for renewal decision")

        if info and info.auto_renewal:
            actions.append("Compare alternatives before auto-renewal")

        if notice_period and days <= notice_period:
            actions.append(f"Give {notice_period} days notice if cancelling")

        return actions

    def snapshot(self, due: DueReminder, content: ReminderContent) -> ContentSnapshot:
        """Denormalized audit copy stored on the ledger entry."""
        info = due.item.renewal_info
        return ContentSnapshot(
            title=due.item.title,
            provider=due.item.provider,
            renewal_cycle=info.renewal_cycle if info else None,
            subject=content.subject,
            reminder_type=content.reminder_type,
        )
