"""
Preference Resolver.

Merges category overrides, global settings and catalog defaults into
the effective notification policy for one item, field by field.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from renewals.core.entities.catalog import CatalogEntry
from renewals.core.entities.preference import (
    NotificationChannel,
    NotificationSettings,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.exceptions import ValidationError

_DEFAULT_CHANNELS = [NotificationChannel.EMAIL]


def validate_offsets(offsets: Sequence[int] | None, field: str = "offsets") -> None:
    """
    Check an offsets list: non-empty, positive, unique, strictly descending.

    None is accepted and means "inherit".

    Raises:
        ValidationError: On the first violated rule.
    """
    if offsets is None:
        return
    if len(offsets) == 0:
        raise ValidationError(field, "must not be empty", value=list(offsets))
    if any(offset <= 0 for offset in offsets):
        raise ValidationError(field, "must contain positive day counts", value=list(offsets))
    if len(set(offsets)) != len(offsets):
        raise ValidationError(field, "must not contain duplicates", value=list(offsets))
    if any(a <= b for a, b in zip(offsets, offsets[1:], strict=False)):
        raise ValidationError(field, "must be in descending order", value=list(offsets))


def validate_partial(partial: PartialNotificationSettings) -> None:
    validate_offsets(partial.offsets)
    if partial.channels is not None and len(partial.channels) == 0:
        raise ValidationError("channels", "must not be empty", value=[])


def aggregate_catalog_defaults(
    entries: Iterable[CatalogEntry], fallback: Sequence[int]
) -> list[int]:
    """Union of catalog default offsets, descending; `fallback` when empty."""
    merged: set[int] = set()
    for entry in entries:
        merged.update(entry.default_offsets)
    if not merged:
        return sorted(set(fallback), reverse=True)
    return sorted(merged, reverse=True)


class PreferenceResolver:
    """
    Resolves effective notification settings.

    Layers, highest precedence first: the item's category override,
    overrides of its ancestor categories (nearest first), the user's
    global settings, the catalog entry. Each field is taken from the
    first layer that sets it; offsets replace and never merge.
    """

    def __init__(self, default_channels: Sequence[NotificationChannel] | None = None) -> None:
        self._default_channels = list(default_channels or _DEFAULT_CHANNELS)

    def layers(
        self,
        preference: UserPreference | None,
        category_id: int | None,
        category_ancestors: Sequence[int] = (),
    ) -> list[PartialNotificationSettings]:
        """Preference layers in precedence order, catalog layer excluded."""
        if preference is None:
            return []

        ordered: list[PartialNotificationSettings] = []
        for cid in (category_id, *category_ancestors):
            override = preference.override_for(cid)
            if override is not None:
                ordered.append(override)
        ordered.append(preference.global_settings)
        return ordered

    def catalog_layer(
        self, catalog_defaults: CatalogEntry, item_offsets: Sequence[int] = ()
    ) -> NotificationSettings:
        """
        Bottom layer. Offsets stored on the item were materialized from
        the catalog when it was created and take the catalog's place.
        """
        offsets = sorted({o for o in item_offsets if o > 0}, reverse=True)
        return NotificationSettings(
            enabled=True,
            offsets=offsets or list(catalog_defaults.default_offsets),
            channels=list(self._default_channels),
        )

    def effective_settings(
        self,
        preference: UserPreference | None,
        category_id: int | None,
        catalog_defaults: CatalogEntry,
        category_ancestors: Sequence[int] = (),
        item_offsets: Sequence[int] = (),
    ) -> NotificationSettings:
        """
        Resolve the complete settings for one item.

        Args:
            preference: The user's stored preference, or None.
            category_id: Category of the item.
            catalog_defaults: Catalog entry of the item's product type.
            category_ancestors: Parent category ids, nearest first.
            item_offsets: Offsets stored on the item itself, if any.

        Returns:
            NotificationSettings with every field populated.
        """
        base = self.catalog_layer(catalog_defaults, item_offsets)
        layers = self.layers(preference, category_id, category_ancestors)

        enabled = next((p.enabled for p in layers if p.enabled is not None), base.enabled)
        offsets = next((p.offsets for p in layers if p.offsets is not None), base.offsets)
        channels = next((p.channels for p in layers if p.channels is not None), base.channels)

        return NotificationSettings(
            enabled=enabled,
            offsets=list(offsets),
            channels=list(channels),
        )
