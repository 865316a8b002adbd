from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.crud import notification as notification_crud
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.notification import (
    DeviceListResponse, DeviceRegisterRequest, DeviceResponse,
    NotificationSettingsResponse, NotificationSettingsUpdate, StatusResponse
)
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/devices", response_model=DeviceResponse)
async def register_device(
    payload: DeviceRegisterRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        device = notification_crud.register_device(db, current_user.id, payload.token, payload.platform)
        logger.info(f"Registered {payload.platform or 'unknown'} device for user {current_user.id}")
        return DeviceResponse.from_orm(device)
    except Exception as e:
        logger.exception(f"Error registering device: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/devices", response_model=DeviceListResponse)
async def list_devices(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        devices = notification_crud.list_active_devices(db, current_user.id)
        return DeviceListResponse(devices=[DeviceResponse.from_orm(d) for d in devices])
    except Exception as e:
        logger.exception(f"Error listing devices: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/devices", response_model=StatusResponse)
async def deactivate_device(
    token: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not notification_crud.deactivate_device(db, current_user.id, token):
            raise HTTPException(status_code=404, detail="Device not found")
        return StatusResponse(message="Device deactivated")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deactivating device: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/settings", response_model=NotificationSettingsResponse)
async def get_notification_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Saved settings, or the defaults when none have been saved."""
    try:
        row = notification_crud.get_settings(db, current_user.id)
        if row is None:
            return NotificationSettingsResponse(**notification_crud.default_settings())
        return NotificationSettingsResponse.from_orm(row)
    except Exception as e:
        logger.exception(f"Error getting notification settings: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/settings", response_model=NotificationSettingsResponse)
async def update_notification_settings(
    payload: NotificationSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        row = notification_crud.upsert_settings(db, current_user.id, payload.dict(exclude_unset=True))
        return NotificationSettingsResponse.from_orm(row)
    except Exception as e:
        logger.exception(f"Error updating notification settings: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
