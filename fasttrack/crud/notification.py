from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from typing import Any, Dict, List, Optional
from fasttrack.config import settings
from fasttrack.models import DeviceToken, NotificationSettings

SETTING_FIELDS = ("fast_reminder", "milestone_reached", "streak_at_risk", "daily_motivation", "reminder_hour")


def register_device(db: Session, user_id: str, token: str, platform: Optional[str]) -> DeviceToken:
    """
    Re-activate a known token, or deactivate the user's other tokens on the
    same platform and store the new one.
    """
    device = db.query(DeviceToken).filter(DeviceToken.user_id == user_id, DeviceToken.token == token).first()
    if device:
        device.is_active = True
        device.platform = platform or device.platform
        device.last_seen = func.now()
    else:
        if platform:
            db.query(DeviceToken).filter(
                DeviceToken.user_id == user_id,
                DeviceToken.platform == platform,
                DeviceToken.is_active.is_(True),
            ).update({DeviceToken.is_active: False}, synchronize_session=False)
        device = DeviceToken(user_id=user_id, token=token, platform=platform, is_active=True)
        db.add(device)
    db.commit()
    db.refresh(device)
    return device


def list_active_devices(db: Session, user_id: str) -> List[DeviceToken]:
    return db.query(DeviceToken).filter(
        DeviceToken.user_id == user_id, DeviceToken.is_active.is_(True)
    ).order_by(DeviceToken.created_at.desc()).all()


def deactivate_device(db: Session, user_id: str, token: str) -> bool:
    device = db.query(DeviceToken).filter(DeviceToken.user_id == user_id, DeviceToken.token == token).first()
    if not device:
        return False
    device.is_active = False
    db.commit()
    return True


def default_settings() -> Dict[str, Any]:
    return {
        "fast_reminder": True,
        "milestone_reached": True,
        "streak_at_risk": True,
        "daily_motivation": True,
        "reminder_hour": settings.DEFAULT_REMINDER_HOUR,
    }


def get_settings(db: Session, user_id: str) -> Optional[NotificationSettings]:
    return db.query(NotificationSettings).filter(NotificationSettings.user_id == user_id).first()


def upsert_settings(db: Session, user_id: str, updates: Dict[str, Any]) -> NotificationSettings:
    row = get_settings(db, user_id)
    if row is None:
        row = NotificationSettings(user_id=user_id, **default_settings())
        db.add(row)
    for name in SETTING_FIELDS:
        if updates.get(name) is not None:
            setattr(row, name, updates[name])
    db.commit()
    db.refresh(row)
    return row
