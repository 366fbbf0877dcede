"""SupportIssue CRUD and per-user listing."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from supportbot.models.support_issue import SupportIssue
from supportbot.schemas.common import update_values
from supportbot.schemas.support_issue import (
    SupportIssueCreate,
    SupportIssueStatus,
    SupportIssueUpdate,
)
from supportbot.services.base import RecordService, column_values
from supportbot.utils.time import Clock


class SupportIssueService(RecordService[SupportIssue]):
    def __init__(self, db: Session, clock: Optional[Clock] = None) -> None:
        super().__init__(db, SupportIssue, clock)

    def get_support_issue(self, issue_id: int) -> Optional[SupportIssue]:
        return self.get_record(issue_id)

    def get_support_issue_by_conversation_id(
        self, conversation_id: int
    ) -> Optional[SupportIssue]:
        return (
            self.db.query(SupportIssue)
            .filter(SupportIssue.conversation_id == conversation_id)
            .order_by(SupportIssue.id)
            .first()
        )

    def get_support_issues(
        self,
        user_id: Optional[str] = None,
        status: Optional[SupportIssueStatus] = None,
        limit: Optional[int] = None,
    ) -> List[SupportIssue]:
        """Support issues, most recently opened first."""
        query = self.db.query(SupportIssue)
        if user_id is not None:
            query = query.filter(SupportIssue.user_id == user_id)
        if status is not None:
            query = query.filter(
                SupportIssue.status == SupportIssueStatus(status).value
            )
        query = query.order_by(SupportIssue.opened_at.desc(), SupportIssue.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create_support_issue(self, data: SupportIssueCreate) -> SupportIssue:
        issue = SupportIssue(**column_values(data.model_dump()), opened_at=self.clock())
        return self.save(issue)

    def update_support_issue(
        self, issue_id: int, data: SupportIssueUpdate
    ) -> Optional[SupportIssue]:
        issue = self.get_support_issue(issue_id)
        if issue is None:
            return None
        return self.apply(issue, update_values(data))
