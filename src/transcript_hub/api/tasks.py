"""Task assignment endpoints."""

from fastapi import APIRouter, Depends, Query

from transcript_hub.db import User
from transcript_hub.errors import ForbiddenError
from transcript_hub.models import Message, Role, TaskCreate, TaskOut, TaskStatus, TaskUpdate
from transcript_hub.storage import Storage
from .deps import current_user, get_storage, require_role

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskOut])
def list_tasks(
    user_id: str | None = Query(None, alias="userId"),
    status: TaskStatus | None = Query(None),
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Admins see every task (optionally filtered by assignee); others see their own."""
    assignee = user_id if user.role == Role.ADMIN.value else user.id
    tasks = storage.list_tasks(assignee, status.value if status else None)
    return [TaskOut.model_validate(t) for t in tasks]


@router.post("", response_model=TaskOut)
def create_task(
    body: TaskCreate,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    task = storage.create_task(
        description=body.description,
        assigned_to_user_id=body.assigned_to_user_id,
        created_by_user_id=user.id,
        task_link=body.task_link,
        status=body.status,
    )
    return TaskOut.model_validate(task)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    body: TaskUpdate,
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Admins may change anything; assignees may only change the status."""
    task = storage.get_task(task_id)
    is_admin = user.role == Role.ADMIN.value
    if not is_admin and task.assigned_to_user_id != user.id:
        raise ForbiddenError("Access denied")

    changes = body.model_dump(exclude_unset=True)
    if not is_admin:
        changes = {k: v for k, v in changes.items() if k == "status"}
    changes = {k: v for k, v in changes.items() if v is not None or k == "task_link"}
    return TaskOut.model_validate(storage.update_task(task_id, changes))


@router.delete("/{task_id}", response_model=Message)
def delete_task(
    task_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.delete_task(task_id)
    return Message(message="Task deleted successfully")
