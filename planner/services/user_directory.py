"""User directory - display names and a TTL cache for assignee resolution."""

import time
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from planner.models.base import validate_items
from planner.models.unified_task import UnifiedTask
from planner.models.user import User
from planner.utils.config import PlannerConfig
from planner.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

UNKNOWN_USER = "Unknown User"


def get_user_display_name(user: User) -> str:
    """Best available name: display name, full name, first, last, email local part."""
    if user.display_name and user.display_name.strip():
        return user.display_name

    if user.first_name and user.last_name:
        return f"{user.first_name} {user.last_name}".strip()

    if user.first_name:
        return user.first_name

    if user.last_name:
        return user.last_name

    if user.email:
        return user.email.split("@")[0]

    return UNKNOWN_USER


class UserCache:
    """Users fetched from the directory, valid for ``ttl_seconds``."""

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = PlannerConfig.USER_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._users: list[User] = []
        self._fetched_at: Optional[float] = None

    def is_fresh(self) -> bool:
        if not self._users or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.ttl_seconds

    def get(self) -> Optional[list[User]]:
        """Cached users, or ``None`` when empty or expired."""
        if not self.is_fresh():
            return None
        return list(self._users)

    def set(self, users: list[User]) -> None:
        self._users = list(users)
        self._fetched_at = self._clock()

    def clear(self) -> None:
        self._users = []
        self._fetched_at = None
        logger.debug("User cache cleared")


class UserDirectory:
    """Fetches users through ``fetch_users`` and caches them."""

    def __init__(
        self,
        fetch_users: Callable[[], Awaitable[list[Any]]],
        cache: Optional[UserCache] = None,
    ):
        self._fetch_users = fetch_users
        self.cache = cache if cache is not None else UserCache()

    async def get_all_users(self) -> list[User]:
        """All users; an unreachable directory yields an empty list."""
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Returning cached users", user_count=len(cached))
            return cached

        try:
            rows = await self._fetch_users()
        except Exception as e:
            logger.error("Error fetching users", error=str(e))
            return []

        users = validate_items(User, rows, "user")
        self.cache.set(users)
        logger.info("Fetched users", user_count=len(users))
        return users


def resolve_assignee_names(tasks: list[UnifiedTask], users: list[User]) -> list[UnifiedTask]:
    """
    Copies of ``tasks`` with ``assigned_to_name`` filled in.

    Unknown assignees keep their raw ID as the name so the planner still has
    something to show.
    """
    names = {user.id: get_user_display_name(user) for user in users}

    resolved = []
    for task in tasks:
        name = names.get(task.assigned_to) if task.assigned_to else None
        if task.assigned_to and name is None:
            logger.debug("Assignee not in user directory", assigned_to=mask_user_id(task.assigned_to))
        resolved.append(task.model_copy(update={"assigned_to_name": name or task.assigned_to}))
    return resolved
