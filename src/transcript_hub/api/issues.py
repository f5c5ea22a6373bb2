"""Reported issues: anyone may report, admins triage."""

import logging

from fastapi import APIRouter, Depends

from transcript_hub.db import User
from transcript_hub.models import IssueCreate, IssueOut, IssueUpdate, Message, Role
from transcript_hub.storage import Storage
from .deps import get_storage, optional_user, report_rate_limit, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reported-issues", tags=["reported-issues"])


@router.post("", response_model=IssueOut, dependencies=[Depends(report_rate_limit)])
def report_issue(
    body: IssueCreate,
    user: User | None = Depends(optional_user),
    storage: Storage = Depends(get_storage),
):
    issue = storage.create_issue(
        reported_by_user_id=user.id if user else None,
        **body.model_dump(),
    )
    logger.info(f"Issue {issue.id} reported (video={issue.video_id}, segment={issue.segment_index})")
    return IssueOut.model_validate(issue)


@router.get("", response_model=list[IssueOut])
def list_issues(
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    return [IssueOut.model_validate(i) for i in storage.list_issues()]


@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(
    issue_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    return IssueOut.model_validate(storage.get_issue(issue_id))


@router.put("/{issue_id}", response_model=IssueOut)
def update_issue(
    issue_id: int,
    body: IssueUpdate,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    changes = body.model_dump(exclude_unset=True)
    if changes.get("status") is None:
        changes.pop("status", None)
    return IssueOut.model_validate(storage.update_issue(issue_id, changes))


@router.delete("/{issue_id}", response_model=Message)
def delete_issue(
    issue_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.delete_issue(issue_id)
    return Message(message="Issue deleted successfully")
