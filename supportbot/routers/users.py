"""Users API."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi_pagination import Page, Params, paginate

from supportbot.routers.utils.dependencies import get_store, get_user_by_id
from supportbot.schemas.support_issue import SupportIssueRead, SupportIssueStatus
from supportbot.schemas.user import UserDetail, UserRead
from supportbot.storage.base import RecordStore

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[UserRead])
def list_users(
    params: Params = Depends(),
    store: RecordStore = Depends(get_store),
) -> Page[UserRead]:
    """List users, most recently joined first."""
    return paginate(store.list_users(limit=None), params=params)


@router.get("/{user_id}", response_model=UserDetail)
def get_user(
    user: UserRead = Depends(get_user_by_id),
    store: RecordStore = Depends(get_store),
) -> UserDetail:
    """Get a user with their support issues."""
    return UserDetail(
        user=user,
        support_issues=store.list_support_issues(user_id=user.telegram_id, limit=None),
    )


@router.get("/{user_id}/support-issues", response_model=list[SupportIssueRead])
def list_user_support_issues(
    status: Optional[SupportIssueStatus] = None,
    user: UserRead = Depends(get_user_by_id),
    store: RecordStore = Depends(get_store),
) -> list[SupportIssueRead]:
    return store.list_support_issues(user_id=user.telegram_id, status=status, limit=None)
