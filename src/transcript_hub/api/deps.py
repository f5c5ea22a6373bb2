"""Request dependencies: storage, identity, roles and rate limiting."""

import asyncio
import logging
import time
from collections import deque
from functools import partial
from typing import Callable, Iterator, TypeVar

from cachetools import TTLCache
from fastapi import Depends, Request

from transcript_hub.db import User
from transcript_hub.errors import ForbiddenError, RateLimitError, UnauthorizedError
from transcript_hub.models import Role
from transcript_hub.storage import Storage

logger = logging.getLogger(__name__)

ARABIC = "ar"
EDITOR_ROLES = (Role.ADMIN, Role.ARABIC_EDITOR, Role.TRANSLATIONS_EDITOR)
DRAFT_ROLES = (Role.ADMIN, Role.ARABIC_EDITOR)

T = TypeVar("T")


def get_storage(request: Request) -> Iterator[Storage]:
    session = request.app.state.db.session()
    try:
        yield Storage(session)
    finally:
        session.close()


def optional_user(request: Request, storage: Storage = Depends(get_storage)) -> User | None:
    """The signed-in user as asserted by the identity proxy, if any.

    Users are created on first sight and their profile refreshed afterwards.
    """
    settings = request.app.state.settings
    user_id = request.headers.get(settings.user_id_header)
    if not user_id:
        return None

    email = request.headers.get(settings.user_email_header) or None
    role = None
    if storage.get_user(user_id) is None:
        admins = {e.lower() for e in settings.admin_emails}
        if email and email.lower() in admins:
            role = Role.ADMIN

    return storage.upsert_user(
        user_id,
        email=email,
        first_name=request.headers.get(settings.user_first_name_header) or None,
        last_name=request.headers.get(settings.user_last_name_header) or None,
        role=role,
    )


def current_user(user: User | None = Depends(optional_user)) -> User:
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user


def require_role(*roles: Role):
    allowed = {r.value for r in roles}

    def dependency(user: User = Depends(current_user)) -> User:
        if (user.role or Role.VIEWER.value) not in allowed:
            logger.warning(
                f"Insufficient permissions: user={user.id} role={user.role} required={sorted(allowed)}"
            )
            raise ForbiddenError("Insufficient permissions")
        return user

    return dependency


def check_language_access(user: User, language: str) -> None:
    """Arabic editors write Arabic only; translation editors everything else."""
    if user.role == Role.ARABIC_EDITOR.value and language != ARABIC:
        raise ForbiddenError("Arabic transcript editors can only edit Arabic transcripts")
    if user.role == Role.TRANSLATIONS_EDITOR.value and language == ARABIC:
        raise ForbiddenError("Translation editors cannot edit Arabic transcripts")


def check_draft_access(user: User) -> None:
    """Unpublished drafts are written by admins and Arabic editors only."""
    if user.role not in {r.value for r in DRAFT_ROLES}:
        logger.warning(f"Insufficient permissions: user={user.id} role={user.role} wrote a draft")
        raise ForbiddenError("Insufficient permissions")


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """Run synchronous storage work in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


class RateLimiter:
    """Sliding window rate limit per client key.

    Windows of clients idle for a full minute expire, so memory stays bounded
    by the number of recently active clients.
    """

    def __init__(
        self,
        limit_per_minute: int = 10,
        max_clients: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit_per_minute
        self._timer = timer
        self._windows: TTLCache = TTLCache(maxsize=max_clients, ttl=60, timer=timer)

    def __len__(self) -> int:
        return len(self._windows)

    def check(self, key: str) -> None:
        now = self._timer()
        window = self._windows.get(key) or deque()
        while window and window[0] <= now - 60:
            window.popleft()
        if len(window) >= self.limit:
            raise RateLimitError(
                f"Rate limit exceeded ({self.limit}/min). Try again in a few seconds."
            )
        window.append(now)
        # Re-inserting restarts the key's expiry and drops expired keys
        self._windows[key] = window

    def reset(self) -> None:
        self._windows.clear()


def report_rate_limit(request: Request) -> None:
    client = request.client.host if request.client else "unknown"
    request.app.state.report_limiter.check(client)
