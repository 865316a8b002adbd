from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from fasttrack import crud
from fasttrack.auth import get_current_user
from fasttrack.crud.friends import FriendsCRUD
from fasttrack.crud.stats import now_ms
from fasttrack.database import get_db
from fasttrack.models import User
from fasttrack.schemas.friends import (
    FriendRequestCreate, FriendRequestResponse, FriendshipResponse, FriendsListResponse,
    FriendRequestsListResponse, FriendRequestStatusResponse
)
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/social/friends", tags=["friends"])


@router.post("/request", response_model=FriendRequestResponse)
async def send_friend_request(
    request: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Send a friend request to another user by username"""
    try:
        if not current_user.username:
            raise HTTPException(
                status_code=400,
                detail="You must set a username before sending friend requests."
            )

        friend_request = FriendsCRUD.send_friend_request(db, current_user.id, request.recipient_username)
        if not friend_request:
            raise HTTPException(
                status_code=400,
                detail="Unable to send friend request. User not found, already friends, or request already exists."
            )

        recipient = crud.get_user(db, friend_request.recipient_id)
        return FriendRequestResponse(
            id=friend_request.id,
            requester_id=friend_request.requester_id,
            recipient_id=friend_request.recipient_id,
            status=friend_request.status,
            created_at=friend_request.created_at,
            requester_username=current_user.username,
            recipient_username=recipient.username if recipient else None
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in send_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/request/{request_id}/accept", response_model=FriendRequestStatusResponse)
async def accept_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        friendship = FriendsCRUD.accept_friend_request(db, current_user.id, request_id)
        if not friendship:
            raise HTTPException(status_code=404, detail="Friend request not found or already processed")
        return FriendRequestStatusResponse(message="Friend request accepted successfully", status="accepted")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in accept_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/request/{request_id}/reject", response_model=FriendRequestStatusResponse)
async def reject_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if not FriendsCRUD.reject_friend_request(db, current_user.id, request_id):
            raise HTTPException(status_code=404, detail="Friend request not found or already processed")
        return FriendRequestStatusResponse(message="Friend request rejected successfully", status="rejected")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in reject_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/request/{request_id}", response_model=FriendRequestStatusResponse)
async def cancel_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel a sent friend request"""
    try:
        if not FriendsCRUD.cancel_friend_request(db, current_user.id, request_id):
            raise HTTPException(status_code=404, detail="Friend request not found or already processed")
        return FriendRequestStatusResponse(message="Friend request cancelled successfully", status="cancelled")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in cancel_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/requests", response_model=FriendRequestsListResponse)
async def get_friend_requests(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending friend requests received by the current user"""
    try:
        requests, total = FriendsCRUD.get_friend_requests(db, current_user.id, page, page_size)
        return FriendRequestsListResponse(
            requests=[
                FriendRequestResponse(
                    id=req.id,
                    requester_id=req.requester_id,
                    recipient_id=req.recipient_id,
                    status=req.status,
                    created_at=req.created_at,
                    requester_username=req.requester.username if req.requester else None,
                    recipient_username=current_user.username
                ) for req in requests
            ],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.exception(f"Error in get_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/requests/sent", response_model=FriendRequestsListResponse)
async def get_sent_friend_requests(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        requests, total = FriendsCRUD.get_sent_friend_requests(db, current_user.id, page, page_size)
        return FriendRequestsListResponse(
            requests=[
                FriendRequestResponse(
                    id=req.id,
                    requester_id=req.requester_id,
                    recipient_id=req.recipient_id,
                    status=req.status,
                    created_at=req.created_at,
                    requester_username=current_user.username,
                    recipient_username=req.recipient.username if req.recipient else None
                ) for req in requests
            ],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.exception(f"Error in get_sent_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/list", response_model=FriendsListResponse)
async def get_friends_list(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Friends of the current user with streaks computed from their fasts"""
    try:
        items, total = FriendsCRUD.get_friends_list(db, current_user.id, now_ms(), page, page_size)
        return FriendsListResponse(
            friends=[FriendshipResponse(**item) for item in items],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.exception(f"Error in get_friends_list: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{friend_username}", response_model=FriendRequestStatusResponse)
async def remove_friend(
    friend_username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a friend (unfriend) by username"""
    try:
        friend = crud.get_user_by_username(db, friend_username)
        if not friend:
            raise HTTPException(status_code=404, detail="User not found")

        if not FriendsCRUD.remove_friend(db, current_user.id, friend.id):
            raise HTTPException(status_code=404, detail="Friendship not found")

        return FriendRequestStatusResponse(message="Friend removed successfully", status="removed")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in remove_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
