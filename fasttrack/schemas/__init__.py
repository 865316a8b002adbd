from fasttrack.schemas.auth import RegisterRequest, LoginRequest, UserOut, AuthResponse
from fasttrack.schemas.fast import FastUpsert, FastResponse, FastSaveResponse, FastListResponse, ActiveFastResponse
from fasttrack.schemas.weight import WeightUpsert, WeightResponse, WeightListResponse
from fasttrack.schemas.profile import ProfileResponse, ProfileUpdate, MeResponse
from fasttrack.schemas.stats import StatsResponse, BadgeResponse, BadgeListResponse, BadgeEvaluateResponse
from fasttrack.schemas.sync import SyncRequest, SyncResponse
from fasttrack.schemas.friends import (
    FriendRequestCreate, FriendRequestResponse, FriendshipResponse, FriendsListResponse,
    FriendRequestsListResponse, FriendRequestStatusResponse
)

__all__ = [
    "RegisterRequest", "LoginRequest", "UserOut", "AuthResponse",
    "FastUpsert", "FastResponse", "FastSaveResponse", "FastListResponse", "ActiveFastResponse",
    "WeightUpsert", "WeightResponse", "WeightListResponse",
    "ProfileResponse", "ProfileUpdate", "MeResponse",
    "StatsResponse", "BadgeResponse", "BadgeListResponse", "BadgeEvaluateResponse",
    "SyncRequest", "SyncResponse",
    "FriendRequestCreate", "FriendRequestResponse", "FriendshipResponse", "FriendsListResponse",
    "FriendRequestsListResponse", "FriendRequestStatusResponse",
]
