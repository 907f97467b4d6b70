"""User-editable settings and the Pushover connectivity check."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_gateway, get_settings_store
from app.schemas import Acknowledgement, SettingUpdate, SettingUpdated
from datastore.app_settings import SettingsStore
from services.notifier import (
    TOKEN_KEY,
    USER_KEY,
    NotificationGateway,
    NotificationPreferences,
)

router = APIRouter(prefix="/api", tags=["settings"])

MASK = "••••"
SECRET_KEYS = frozenset({TOKEN_KEY, USER_KEY})


def mask_secret(value: str) -> str:
    if not value:
        return ""
    return f"{MASK}{value[-4:]}"


def _public_value(key: str, value: str) -> str:
    return mask_secret(value) if key in SECRET_KEYS else value


@router.get("/settings", response_model=Dict[str, str], summary="All settings, secrets masked.")
async def get_all_settings(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> Dict[str, str]:
    return {key: _public_value(key, value) for key, value in settings_store.all().items()}


@router.put("/settings/{key}", response_model=SettingUpdated, summary="Create or replace a setting.")
async def put_setting(
    key: str,
    payload: SettingUpdate,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> SettingUpdated:
    # A masked secret echoed back by the UI means "unchanged".
    if key in SECRET_KEYS and payload.value.startswith(MASK):
        current = settings_store.get(key, "") or ""
        return SettingUpdated(key=key, value=_public_value(key, current))

    settings_store.put(key, payload.value)
    return SettingUpdated(key=key, value=_public_value(key, payload.value))


@router.post(
    "/pushover/test",
    response_model=Acknowledgement,
    summary="Send a test push notification with the stored credentials.",
)
async def test_pushover(
    settings_store: SettingsStore = Depends(get_settings_store),
    gateway: NotificationGateway = Depends(get_gateway),
) -> Acknowledgement:
    preferences = NotificationPreferences.from_settings(settings_store.all())
    notifier = gateway.notifier(preferences)
    if notifier is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Pushover token and user key are required",
        )
    result = notifier.send(
        "Aquarium Monitor", "Test notification from your aquarium monitor.", 0
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.error or "Failed to send",
        )
    return Acknowledgement()
