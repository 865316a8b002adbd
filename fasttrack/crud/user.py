from sqlalchemy.orm import Session
from sqlalchemy import func
from fasttrack.models import User, Profile
from fasttrack.config import settings
from typing import Optional
import re

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20


def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email (emails are stored lower-cased)."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get a user by username (case-insensitive)."""
    return db.query(User).filter(func.lower(User.username) == func.lower(username)).first()


def clean_username(raw: str) -> str:
    """Lower-case and strip everything outside [a-z0-9_]."""
    return re.sub(r"[^a-z0-9_]", "", (raw or "").lower())


def is_valid_username(username: str) -> bool:
    return USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH


def is_username_available(db: Session, username: str, exclude_user_id: str = None) -> bool:
    query = db.query(User).filter(func.lower(User.username) == username.lower())
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is None


def search_users_by_username(db: Session, fragment: str, exclude_user_id: str = None, limit: int = 20) -> list:
    """Public users whose username contains ``fragment``, with their profiles."""
    query = db.query(User, Profile).join(Profile, Profile.user_id == User.id).filter(
        User.username.isnot(None),
        Profile.is_public.is_(True),
        func.lower(User.username).like(f"%{fragment.lower()}%"),
    )
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return query.order_by(User.username).limit(limit).all()


def create_user(db: Session, email: str, password_hash: str, display_name: Optional[str] = None) -> User:
    """
    Create a user together with its default profile.

    Args:
        db: Database session
        email: Email address, stored lower-cased
        password_hash: bcrypt hash of the password
        display_name: Optional display name for the profile

    Returns:
        Created User object
    """
    db_user = User(email=email.strip().lower(), password_hash=password_hash)
    db.add(db_user)
    db.flush()
    db.add(Profile(
        user_id=db_user.id,
        display_name=display_name,
        timezone=settings.DEFAULT_TIMEZONE,
        unlocked_badges=[],
    ))
    db.commit()
    db.refresh(db_user)
    return db_user


def set_username(db: Session, user: User, username: str) -> User:
    user.username = username
    db.commit()
    db.refresh(user)
    return user
