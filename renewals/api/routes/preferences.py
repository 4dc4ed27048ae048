"""
Reminder preference endpoints.
"""

from fastapi import APIRouter, Depends

from renewals.api.dependencies import get_manage_preferences_use_case
from renewals.application.dto.requests import NotificationSettingsRequest
from renewals.application.dto.responses import (
    EffectiveSettingsResponse,
    ErrorResponse,
    NotificationSettingsResponse,
    PreferenceResponse,
)
from renewals.application.use_cases import ManagePreferencesUseCase

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("/{user_id}", response_model=PreferenceResponse)
async def get_preferences(
    user_id: int,
    use_case: ManagePreferencesUseCase = Depends(get_manage_preferences_use_case),
) -> PreferenceResponse:
    """Get a user's preferences, seeding defaults on first access."""
    preference = await use_case.get_or_create_for_user(user_id)
    return PreferenceResponse.from_entity(preference)


@router.put(
    "/{user_id}/global",
    response_model=PreferenceResponse,
    responses={400: {"model": ErrorResponse}},
)
async def update_global_settings(
    user_id: int,
    request: NotificationSettingsRequest,
    use_case: ManagePreferencesUseCase = Depends(get_manage_preferences_use_case),
) -> PreferenceResponse:
    """Replace the global settings layer."""
    preference = await use_case.update_global_settings(user_id, request.to_partial())
    return PreferenceResponse.from_entity(preference)


@router.put(
    "/{user_id}/categories/{category_id}",
    response_model=PreferenceResponse,
    responses={400: {"model": ErrorResponse}},
)
async def set_category_override(
    user_id: int,
    category_id: int,
    request: NotificationSettingsRequest,
    use_case: ManagePreferencesUseCase = Depends(get_manage_preferences_use_case),
) -> PreferenceResponse:
    """Set the override for one category. Unset fields inherit."""
    preference = await use_case.set_category_override(
        user_id, category_id, request.to_partial()
    )
    return PreferenceResponse.from_entity(preference)


@router.delete("/{user_id}/categories/{category_id}", response_model=PreferenceResponse)
async def remove_category_override(
    user_id: int,
    category_id: int,
    use_case: ManagePreferencesUseCase = Depends(get_manage_preferences_use_case),
) -> PreferenceResponse:
    preference = await use_case.remove_category_override(user_id, category_id)
    return PreferenceResponse.from_entity(preference)


@router.get(
    "/{user_id}/categories/{category_id}/settings",
    response_model=EffectiveSettingsResponse,
)
async def get_category_settings(
    user_id: int,
    category_id: int,
    product_type: str | None = None,
    use_case: ManagePreferencesUseCase = Depends(get_manage_preferences_use_case),
) -> EffectiveSettingsResponse:
    """
    Effective settings for items in a category.

    Resolution order: category override, parent categories, global
    settings, then catalog defaults for `product_type`.
    """
    settings = await use_case.get_reminder_settings_for_category(
        user_id, category_id, product_type
    )
    return EffectiveSettingsResponse(
        user_id=user_id,
        category_id=category_id,
        product_type=product_type,
        settings=NotificationSettingsResponse.from_entity(settings),
    )
