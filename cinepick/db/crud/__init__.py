"""CRUD operations module (the interaction store)."""

from cinepick.db.crud.items import (
    get_cached_item_by_local_id,
    get_cached_item_by_remote_id,
    upsert_cached_item,
)
from cinepick.db.crud.preferences import get_preferences, save_preferences
from cinepick.db.crud.ratings import get_ratings_for_user, record_rating
from cinepick.db.crud.users import (
    create_user,
    get_user,
    get_user_by_name,
    list_users,
    seed_demo_users,
)

__all__ = [
    "create_user",
    "get_cached_item_by_local_id",
    "get_cached_item_by_remote_id",
    "get_preferences",
    "get_ratings_for_user",
    "get_user",
    "get_user_by_name",
    "list_users",
    "record_rating",
    "save_preferences",
    "seed_demo_users",
    "upsert_cached_item",
]
