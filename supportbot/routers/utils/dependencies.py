from fastapi import Depends, HTTPException, Request

from supportbot.adapters.base import MessagingGateway
from supportbot.core.app_state import AppState
from supportbot.core.support_channel import SupportChannel
from supportbot.schemas.conversation import ConversationRead
from supportbot.schemas.support_issue import SupportIssueRead
from supportbot.schemas.user import UserRead
from supportbot.storage.base import RecordStore


def get_app_state(request: Request) -> AppState:
    """FastAPI dependency for the components wired at startup."""
    return request.app.state.supportbot


def get_store(state: AppState = Depends(get_app_state)) -> RecordStore:
    return state.store


def get_gateway(state: AppState = Depends(get_app_state)) -> MessagingGateway:
    return state.gateway


def get_support_channel(state: AppState = Depends(get_app_state)) -> SupportChannel:
    return state.support_channel


def get_user_by_id(
    user_id: int,
    store: RecordStore = Depends(get_store),
) -> UserRead:
    """FastAPI dependency to get a user by ID."""
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_conversation_by_id(
    conversation_id: int,
    store: RecordStore = Depends(get_store),
) -> ConversationRead:
    """FastAPI dependency to get a conversation by ID."""
    conversation = store.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


def get_support_issue_by_id(
    issue_id: int,
    store: RecordStore = Depends(get_store),
) -> SupportIssueRead:
    """FastAPI dependency to get a support issue by ID."""
    issue = store.get_support_issue(issue_id)
    if issue is None:
        raise HTTPException(status_code=404, detail="Support issue not found")
    return issue
