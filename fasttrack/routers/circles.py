from datetime import datetime
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fasttrack.auth import get_current_user
from fasttrack.config import settings
from fasttrack.crud import circle as circle_crud
from fasttrack.crud.challenge import to_utc
from fasttrack.database import get_db
from fasttrack.models import Circle, CircleMember, CircleMessage, Profile, User
from fasttrack.schemas.circle import (
    CircleCreate, CircleDetailResponse, CircleJoinRequest, CircleJoinResponse, CircleListResponse,
    CircleMemberResponse, CircleMessageCreate, CircleMessageResponse, CircleMessagesResponse,
    CircleResponse, CircleSummary, CircleUpdate, MemberRoleUpdate
)
from fasttrack.schemas.notification import StatusResponse
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social/circles", tags=["circles"])

MIN_NAME_LENGTH = 2
INVITE_CODE_LENGTH = 6


def _authors(db: Session, user_ids: List[str]) -> Tuple[Dict[str, User], Dict[str, Profile]]:
    if not user_ids:
        return {}, {}
    users = {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}
    profiles = {p.user_id: p for p in db.query(Profile).filter(Profile.user_id.in_(user_ids)).all()}
    return users, profiles


def _message_response(message: CircleMessage, user: Optional[User], profile: Optional[Profile],
                      current_user_id: str) -> CircleMessageResponse:
    return CircleMessageResponse(
        id=message.id,
        circle_id=message.circle_id,
        user_id=message.user_id,
        username=user.username if user else None,
        display_name=(profile.display_name if profile else None) or "Anonymous",
        avatar_id=profile.avatar_id if profile else 0,
        type=message.type,
        content=message.content,
        metadata=message.metadata_json,
        is_own=message.user_id == current_user_id,
        created_at=message.created_at,
    )


def _circle_response(db: Session, circle: Circle, membership: Optional[CircleMember],
                     current_user_id: str, with_last_message: bool = False) -> CircleResponse:
    last = None
    if with_last_message:
        message = circle_crud.last_message(db, circle.id)
        if message:
            users, profiles = _authors(db, [message.user_id])
            last = _message_response(message, users.get(message.user_id), profiles.get(message.user_id), current_user_id)
    return CircleResponse(
        id=circle.id,
        creator_id=circle.creator_id,
        name=circle.name,
        description=circle.description,
        # Only members see the invite code
        invite_code=circle.invite_code if membership else None,
        max_members=circle.max_members,
        is_private=circle.is_private,
        member_count=circle_crud.member_count(db, circle.id),
        user_role=membership.role if membership else None,
        last_message=last,
        created_at=circle.created_at,
    )


def _member_circle(db: Session, circle_id: str, user_id: str) -> Tuple[Circle, CircleMember]:
    circle = circle_crud.get_circle(db, circle_id)
    if not circle:
        raise HTTPException(status_code=404, detail="Circle not found")
    membership = circle_crud.get_membership(db, circle.id, user_id)
    if not membership:
        raise HTTPException(status_code=403, detail="Not a member of this circle")
    return circle, membership


@router.get("", response_model=CircleListResponse)
async def list_circles(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Circles the caller belongs to, each with its latest message."""
    try:
        return CircleListResponse(circles=[
            _circle_response(db, circle, membership, current_user.id, with_last_message=True)
            for circle, membership in circle_crud.list_user_circles(db, current_user.id)
        ])
    except Exception as e:
        logger.exception(f"Error listing circles: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=CircleResponse, status_code=status.HTTP_201_CREATED)
async def create_circle(
    payload: CircleCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        name = payload.name.strip()
        if len(name) < MIN_NAME_LENGTH:
            raise HTTPException(status_code=400, detail="Circle name must be at least 2 characters")

        circle = circle_crud.create_circle(
            db,
            current_user.id,
            name=name,
            description=(payload.description or "").strip() or None,
            max_members=payload.max_members or settings.CIRCLE_MAX_MEMBERS,
            is_private=payload.is_private,
        )
        membership = circle_crud.get_membership(db, circle.id, current_user.id)
        return _circle_response(db, circle, membership, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error creating circle: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/lookup", response_model=CircleSummary)
async def lookup_circle(
    code: str = Query(..., description="6-character invite code"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Preview a circle from its invite code before joining."""
    try:
        if len(code.strip()) != INVITE_CODE_LENGTH:
            raise HTTPException(status_code=400, detail="Invalid invite code")
        circle = circle_crud.get_circle_by_invite_code(db, code)
        if not circle:
            raise HTTPException(status_code=404, detail="Circle not found")
        return CircleSummary(
            id=circle.id,
            name=circle.name,
            description=circle.description,
            member_count=circle_crud.member_count(db, circle.id),
            max_members=circle.max_members,
            is_private=circle.is_private,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error looking up circle: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/join", response_model=CircleJoinResponse)
async def join_circle(
    payload: CircleJoinRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join by invite code, or by id when the circle is not private."""
    try:
        if payload.invite_code:
            circle = circle_crud.get_circle_by_invite_code(db, payload.invite_code)
        elif payload.circle_id:
            circle = circle_crud.get_circle(db, payload.circle_id)
            if circle and circle.is_private:
                circle = None
        else:
            raise HTTPException(status_code=400, detail="circle_id or invite_code is required")
        if not circle:
            raise HTTPException(status_code=404, detail="Circle not found")

        reason = circle_crud.join_circle(db, circle, current_user.id)
        if reason:
            raise HTTPException(status_code=400, detail=reason)
        return CircleJoinResponse(circle_id=circle.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error joining circle: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{circle_id}", response_model=CircleDetailResponse)
async def get_circle(
    circle_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        circle, membership = _member_circle(db, circle_id, current_user.id)
        return CircleDetailResponse(
            circle=_circle_response(db, circle, membership, current_user.id),
            members=[
                CircleMemberResponse(
                    user_id=user.id,
                    username=user.username,
                    display_name=(profile.display_name if profile else None) or "Anonymous",
                    avatar_id=profile.avatar_id if profile else 0,
                    role=member.role,
                    joined_at=member.joined_at,
                )
                for member, user, profile in circle_crud.list_members(db, circle.id)
            ],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error getting circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{circle_id}", response_model=CircleResponse)
async def update_circle(
    circle_id: str,
    payload: CircleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Admins only. ``max_members`` cannot drop below the current head count."""
    try:
        circle, membership = _member_circle(db, circle_id, current_user.id)
        if membership.role != circle_crud.ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="Only admins can update circle settings")

        updates = payload.dict(exclude_unset=True)
        if "name" in updates:
            name = (updates["name"] or "").strip()
            if len(name) < MIN_NAME_LENGTH:
                raise HTTPException(status_code=400, detail="Circle name must be at least 2 characters")
            updates["name"] = name
        if "description" in updates:
            updates["description"] = (updates["description"] or "").strip() or None
        if updates.get("max_members") is not None and updates["max_members"] < circle_crud.member_count(db, circle.id):
            raise HTTPException(status_code=400, detail="max_members is below the current member count")
        updates = {k: v for k, v in updates.items() if v is not None or k == "description"}

        circle = circle_crud.update_circle(db, circle, updates)
        return _circle_response(db, circle, membership, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error updating circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{circle_id}/membership", response_model=StatusResponse)
async def leave_circle(
    circle_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        circle = circle_crud.get_circle(db, circle_id)
        if not circle:
            raise HTTPException(status_code=404, detail="Circle not found")
        reason = circle_crud.leave_circle(db, circle, current_user.id)
        if reason:
            raise HTTPException(status_code=400, detail=reason)
        return StatusResponse(message="Left circle")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error leaving circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{circle_id}/members/{user_id}", response_model=CircleMemberResponse)
async def set_member_role(
    circle_id: str,
    user_id: str,
    payload: MemberRoleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Promote or demote a member. A circle always keeps one admin."""
    try:
        circle, membership = _member_circle(db, circle_id, current_user.id)
        if membership.role != circle_crud.ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="Only admins can change roles")

        target = circle_crud.get_membership(db, circle.id, user_id)
        if not target:
            raise HTTPException(status_code=404, detail="Member not found")
        if (target.role == circle_crud.ROLE_ADMIN and payload.role != circle_crud.ROLE_ADMIN
                and circle_crud.admin_count(db, circle.id) == 1):
            raise HTTPException(status_code=400, detail="A circle needs at least one admin")

        target = circle_crud.set_member_role(db, circle.id, user_id, payload.role)
        users, profiles = _authors(db, [user_id])
        user, profile = users.get(user_id), profiles.get(user_id)
        return CircleMemberResponse(
            user_id=user_id,
            username=user.username if user else None,
            display_name=(profile.display_name if profile else None) or "Anonymous",
            avatar_id=profile.avatar_id if profile else 0,
            role=target.role,
            joined_at=target.joined_at,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error changing role in circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{circle_id}", response_model=StatusResponse)
async def delete_circle(
    circle_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Creator only; removes members and messages with the circle."""
    try:
        circle = circle_crud.get_circle(db, circle_id)
        if not circle:
            raise HTTPException(status_code=404, detail="Circle not found")
        if circle.creator_id != current_user.id:
            raise HTTPException(status_code=403, detail="Only the creator can delete the circle")
        circle_crud.delete_circle(db, circle)
        return StatusResponse(message="Circle deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{circle_id}/messages", response_model=CircleMessagesResponse)
async def get_messages(
    circle_id: str,
    limit: int = Query(settings.CIRCLE_MESSAGE_PAGE_SIZE, ge=1, le=100),
    before: Optional[datetime] = Query(None, description="created_at of the oldest message already loaded"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    A page of chat, oldest first for display. Pass the first message's
    ``created_at`` as ``before`` to load the page above it.
    """
    try:
        circle, _ = _member_circle(db, circle_id, current_user.id)
        cursor = to_utc(before).replace(tzinfo=None) if before is not None else None
        messages = circle_crud.get_messages(db, circle.id, limit, cursor)
        users, profiles = _authors(db, list({m.user_id for m in messages}))
        return CircleMessagesResponse(
            messages=[
                _message_response(m, users.get(m.user_id), profiles.get(m.user_id), current_user.id)
                for m in reversed(messages)
            ],
            has_more=len(messages) == limit,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error getting messages for circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{circle_id}/messages", response_model=CircleMessageResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    circle_id: str,
    payload: CircleMessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        circle, _ = _member_circle(db, circle_id, current_user.id)
        content = payload.content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="Message content required")
        if len(content) > settings.CIRCLE_MESSAGE_MAX_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Message too long (max {settings.CIRCLE_MESSAGE_MAX_LENGTH} characters)",
            )
        if payload.type == circle_crud.SYSTEM_MESSAGE:
            raise HTTPException(status_code=400, detail="Invalid message type")

        message = circle_crud.create_message(
            db, circle.id, current_user.id, content, payload.type, payload.metadata
        )
        _, profiles = _authors(db, [current_user.id])
        return _message_response(message, current_user, profiles.get(current_user.id), current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error posting message to circle {circle_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{circle_id}/messages/{message_id}", response_model=StatusResponse)
async def delete_message(
    circle_id: str,
    message_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Authors can delete their own messages; admins can delete any."""
    try:
        circle, membership = _member_circle(db, circle_id, current_user.id)
        message = circle_crud.get_message(db, circle.id, message_id)
        if not message:
            raise HTTPException(status_code=404, detail="Message not found")
        if message.user_id != current_user.id and membership.role != circle_crud.ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="Cannot delete this message")
        circle_crud.delete_message(db, message)
        return StatusResponse(message="Message deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting message {message_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
