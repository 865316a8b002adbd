from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional
import pytz
from fasttrack.config import settings
from fasttrack.models import Profile
from fasttrack.services.sync import merge_badges
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

# Columns a client may set through PUT /profile or sync
PROFILE_FIELDS = (
    "display_name", "avatar_id", "custom_avatar_uri", "weight_unit",
    "notifications_enabled", "timezone",
)


def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def get_or_create_profile(db: Session, user_id: str) -> Profile:
    profile = get_profile(db, user_id)
    if profile is None:
        profile = Profile(user_id=user_id, timezone=settings.DEFAULT_TIMEZONE, unlocked_badges=[])
        db.add(profile)
        db.commit()
        db.refresh(profile)
        logger.info(f"Created default profile for user {user_id}")
    return profile


def profile_timezone(profile: Optional[Profile]) -> str:
    """The profile's timezone if it is a known IANA name, else the default."""
    tz_name = profile.timezone if profile else None
    if tz_name and tz_name in pytz.all_timezones_set:
        return tz_name
    return settings.DEFAULT_TIMEZONE


def add_unlocked_badges(db: Session, profile: Profile, badge_ids: Iterable[str], commit: bool = True) -> List[str]:
    """Union ``badge_ids`` into the profile; returns the ids that were new."""
    existing = list(profile.unlocked_badges or [])
    merged = merge_badges(existing, badge_ids)
    added = merged[len(existing):]
    if added:
        # Reassign so SQLAlchemy sees the JSON column change
        profile.unlocked_badges = merged
        if commit:
            db.commit()
            db.refresh(profile)
    return added


def update_profile(db: Session, profile: Profile, updates: Dict[str, Any]) -> Profile:
    """Apply a partial update; unlocked badges can only grow."""
    for name in PROFILE_FIELDS:
        if updates.get(name) is not None:
            setattr(profile, name, updates[name])
    if updates.get("unlocked_badges"):
        add_unlocked_badges(db, profile, updates["unlocked_badges"], commit=False)
    db.commit()
    db.refresh(profile)
    return profile
