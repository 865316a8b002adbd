"""
Fasting circles: membership, roles and the circle chat.

Joining and leaving post a ``system`` message to the circle. A circle whose
last member leaves is deleted along with its messages.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fasttrack.crud.challenge import generate_invite_code, INVITE_CODE_ATTEMPTS
from fasttrack.models import Circle, CircleMember, CircleMessage, Profile, User
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
SYSTEM_MESSAGE = "system"


def get_circle(db: Session, circle_id: str) -> Optional[Circle]:
    return db.query(Circle).filter(Circle.id == circle_id).first()


def get_circle_by_invite_code(db: Session, invite_code: str) -> Optional[Circle]:
    return db.query(Circle).filter(Circle.invite_code == invite_code.strip().upper()).first()


def get_membership(db: Session, circle_id: str, user_id: str) -> Optional[CircleMember]:
    return db.query(CircleMember).filter(
        CircleMember.circle_id == circle_id,
        CircleMember.user_id == user_id,
    ).first()


def member_count(db: Session, circle_id: str) -> int:
    return db.query(func.count(CircleMember.id)).filter(CircleMember.circle_id == circle_id).scalar() or 0


def admin_count(db: Session, circle_id: str) -> int:
    return db.query(func.count(CircleMember.id)).filter(
        CircleMember.circle_id == circle_id,
        CircleMember.role == ROLE_ADMIN,
    ).scalar() or 0


def _display_name(db: Session, user_id: str) -> str:
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    return (profile.display_name if profile else None) or "Someone"


def _add_system_message(db: Session, circle_id: str, user_id: str, content: str) -> None:
    db.add(CircleMessage(circle_id=circle_id, user_id=user_id, type=SYSTEM_MESSAGE, content=content))


def create_circle(db: Session, creator_id: str, name: str, description: Optional[str],
                  max_members: int, is_private: bool) -> Circle:
    """Create a circle with a fresh invite code; the creator joins as admin."""
    for attempt in range(INVITE_CODE_ATTEMPTS):
        circle = Circle(
            creator_id=creator_id,
            name=name,
            description=description,
            max_members=max_members,
            is_private=is_private,
            invite_code=generate_invite_code(),
        )
        db.add(circle)
        try:
            db.flush()
            break
        except IntegrityError:
            db.rollback()
            logger.warning(f"Circle invite code collision on attempt {attempt + 1}, retrying")
    else:
        raise RuntimeError("Could not allocate a unique invite code")

    db.add(CircleMember(circle_id=circle.id, user_id=creator_id, role=ROLE_ADMIN))
    db.commit()
    db.refresh(circle)
    logger.info(f"User {creator_id} created circle {circle.id}")
    return circle


def list_user_circles(db: Session, user_id: str) -> List[Tuple[Circle, CircleMember]]:
    rows = db.query(Circle, CircleMember).join(
        CircleMember, CircleMember.circle_id == Circle.id
    ).filter(
        CircleMember.user_id == user_id
    ).order_by(CircleMember.joined_at.desc()).all()
    return [(circle, membership) for circle, membership in rows]


def last_message(db: Session, circle_id: str) -> Optional[CircleMessage]:
    return db.query(CircleMessage).filter(
        CircleMessage.circle_id == circle_id
    ).order_by(CircleMessage.created_at.desc(), CircleMessage.id.desc()).first()


def list_members(db: Session, circle_id: str) -> List[Tuple[CircleMember, User, Optional[Profile]]]:
    """Admins first, then members by join time."""
    return db.query(CircleMember, User, Profile).join(
        User, User.id == CircleMember.user_id
    ).outerjoin(
        Profile, Profile.user_id == CircleMember.user_id
    ).filter(
        CircleMember.circle_id == circle_id
    ).order_by(
        (CircleMember.role == ROLE_ADMIN).desc(),
        CircleMember.joined_at.asc(),
    ).all()


def join_circle(db: Session, circle: Circle, user_id: str) -> Optional[str]:
    """None on success, otherwise the reason the join was refused."""
    if get_membership(db, circle.id, user_id):
        return "Already a member"
    if circle.max_members and member_count(db, circle.id) >= circle.max_members:
        return "Circle is full"

    db.add(CircleMember(circle_id=circle.id, user_id=user_id, role=ROLE_MEMBER))
    _add_system_message(db, circle.id, user_id, f"{_display_name(db, user_id)} joined the circle")
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return "Already a member"
    logger.info(f"User {user_id} joined circle {circle.id}")
    return None


def leave_circle(db: Session, circle: Circle, user_id: str) -> Optional[str]:
    """
    None on success, otherwise the reason. The only admin of a circle that
    still has other members must hand the role over first.
    """
    membership = get_membership(db, circle.id, user_id)
    if not membership:
        return "Not a member"

    if membership.role == ROLE_ADMIN:
        if admin_count(db, circle.id) == 1 and member_count(db, circle.id) > 1:
            return "Transfer admin role before leaving"

    db.delete(membership)
    db.flush()
    if member_count(db, circle.id) == 0:
        db.delete(circle)
        logger.info(f"Circle {circle.id} deleted after its last member left")
    else:
        _add_system_message(db, circle.id, user_id, f"{_display_name(db, user_id)} left the circle")
    db.commit()
    return None


def set_member_role(db: Session, circle_id: str, user_id: str, role: str) -> Optional[CircleMember]:
    membership = get_membership(db, circle_id, user_id)
    if not membership:
        return None
    membership.role = role
    db.commit()
    db.refresh(membership)
    return membership


def update_circle(db: Session, circle: Circle, updates: Dict[str, Any]) -> Circle:
    for key, value in updates.items():
        setattr(circle, key, value)
    db.commit()
    db.refresh(circle)
    return circle


def delete_circle(db: Session, circle: Circle) -> None:
    db.delete(circle)
    db.commit()
    logger.info(f"Circle {circle.id} deleted by its creator")


def get_messages(db: Session, circle_id: str, limit: int, before: Optional[datetime] = None) -> List[CircleMessage]:
    """Newest first; ``before`` pages back from an earlier page's oldest message."""
    query = db.query(CircleMessage).filter(CircleMessage.circle_id == circle_id)
    if before is not None:
        query = query.filter(CircleMessage.created_at < before)
    return query.order_by(CircleMessage.created_at.desc(), CircleMessage.id.desc()).limit(limit).all()


def create_message(db: Session, circle_id: str, user_id: str, content: str,
                   message_type: str = "text", metadata: Optional[Dict[str, Any]] = None) -> CircleMessage:
    message = CircleMessage(
        circle_id=circle_id,
        user_id=user_id,
        type=message_type,
        content=content,
        metadata_json=metadata,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def get_message(db: Session, circle_id: str, message_id: str) -> Optional[CircleMessage]:
    return db.query(CircleMessage).filter(
        CircleMessage.id == message_id,
        CircleMessage.circle_id == circle_id,
    ).first()


def delete_message(db: Session, message: CircleMessage) -> None:
    db.delete(message)
    db.commit()
