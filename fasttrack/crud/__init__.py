from fasttrack.crud.user import (
    get_user,
    get_user_by_email,
    get_user_by_username,
    create_user,
    clean_username,
    is_valid_username,
    is_username_available,
    search_users_by_username,
    set_username,
)
from fasttrack.crud.profile import (
    get_profile,
    get_or_create_profile,
    profile_timezone,
    update_profile,
    add_unlocked_badges,
)
from fasttrack.crud.fast import (
    get_fasts,
    get_fast,
    get_active_fast,
    validate_fast,
    upsert_fast,
    delete_fast,
)
from fasttrack.crud.weight import (
    get_weights,
    upsert_weight,
    delete_weight,
)
from fasttrack.crud.stats import (
    user_stats,
    evaluate_and_store_badges,
)
from fasttrack.crud.friends import FriendsCRUD

__all__ = [
    # User operations
    "get_user",
    "get_user_by_email",
    "get_user_by_username",
    "create_user",
    "clean_username",
    "is_valid_username",
    "is_username_available",
    "search_users_by_username",
    "set_username",

    # Profile operations
    "get_profile",
    "get_or_create_profile",
    "profile_timezone",
    "update_profile",
    "add_unlocked_badges",

    # Fast operations
    "get_fasts",
    "get_fast",
    "get_active_fast",
    "validate_fast",
    "upsert_fast",
    "delete_fast",

    # Weight operations
    "get_weights",
    "upsert_weight",
    "delete_weight",

    # Statistics
    "user_stats",
    "evaluate_and_store_badges",

    # Friends operations
    "FriendsCRUD"
]
