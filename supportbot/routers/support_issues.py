"""Support issues API."""

from fastapi import APIRouter, Depends

from supportbot.infra.logging_config import get_logger
from supportbot.routers.utils.dependencies import get_store, get_support_issue_by_id
from supportbot.schemas.support_issue import (
    SupportIssueRead,
    SupportIssueStatus,
    SupportIssueUpdate,
)
from supportbot.storage.base import RecordStore
from supportbot.utils.time import utcnow

logger = get_logger("support_issues")

router = APIRouter(
    prefix="/support-issues",
    tags=["support-issues"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{issue_id}", response_model=SupportIssueRead)
def get_support_issue(
    issue: SupportIssueRead = Depends(get_support_issue_by_id),
) -> SupportIssueRead:
    return issue


@router.patch("/{issue_id}", response_model=SupportIssueRead)
def update_support_issue(
    data: SupportIssueUpdate,
    issue: SupportIssueRead = Depends(get_support_issue_by_id),
    store: RecordStore = Depends(get_store),
) -> SupportIssueRead:
    """Update status, title or assignee. Closing stamps closed_at unless given."""
    if data.status == SupportIssueStatus.CLOSED and data.closed_at is None:
        data = data.model_copy(update={"closed_at": utcnow()})
    updated = store.update_support_issue(issue.id, data)
    if data.status is not None and data.status != issue.status:
        logger.info(
            "Support issue %s moved %s -> %s",
            issue.id,
            issue.status.value,
            data.status.value,
        )
    return updated
