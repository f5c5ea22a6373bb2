"""Signed-in user, dashboard and user administration."""

import logging

from fastapi import APIRouter, Depends

from transcript_hub.db import User
from transcript_hub.models import DashboardStats, Role, RoleUpdate, UserOut
from transcript_hub.storage import Storage
from .deps import current_user, get_storage, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/auth/user", response_model=UserOut)
def get_signed_in_user(user: User = Depends(current_user)):
    return UserOut.model_validate(user)


@router.get("/dashboard/stats", response_model=DashboardStats)
def get_dashboard_stats(
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    return DashboardStats(**storage.dashboard_stats())


@router.get("/admin/users", response_model=list[UserOut])
def list_users(
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    return [UserOut.model_validate(u) for u in storage.list_users()]


@router.patch("/admin/users/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: str,
    body: RoleUpdate,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    updated = storage.update_user_role(user_id, body.role)
    logger.info(f"Role of {user_id} set to {body.role.value} by {user.id}")
    return UserOut.model_validate(updated)
