"""Conversations API: browse conversations and their message history."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi_pagination import Page, Params, paginate

from supportbot.routers.utils.dependencies import get_conversation_by_id, get_store
from supportbot.schemas.conversation import (
    ConversationDetail,
    ConversationRead,
    ConversationStatus,
    ConversationUpdate,
)
from supportbot.storage.base import DEFAULT_LIST_LIMIT, RecordStore

router = APIRouter(
    prefix="/conversations",
    tags=["conversations"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[ConversationRead])
def list_conversations(
    status: Optional[ConversationStatus] = None,
    params: Params = Depends(),
    store: RecordStore = Depends(get_store),
) -> Page[ConversationRead]:
    """List conversations, most recently active first."""
    return paginate(store.list_conversations(status=status, limit=None), params=params)


@router.get("/{conversation_id}", response_model=ConversationRead)
def get_conversation(
    conversation: ConversationRead = Depends(get_conversation_by_id),
) -> ConversationRead:
    return conversation


@router.patch("/{conversation_id}", response_model=ConversationRead)
def update_conversation(
    data: ConversationUpdate,
    conversation: ConversationRead = Depends(get_conversation_by_id),
    store: RecordStore = Depends(get_store),
) -> ConversationRead:
    """Update status or thread reference of a conversation."""
    return store.update_conversation(conversation.id, data)


@router.get("/{conversation_id}/messages", response_model=ConversationDetail)
def get_conversation_messages(
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=500),
    conversation: ConversationRead = Depends(get_conversation_by_id),
    store: RecordStore = Depends(get_store),
) -> ConversationDetail:
    """The conversation with its most recent messages, oldest first."""
    return ConversationDetail(
        conversation=conversation,
        messages=store.get_messages_by_conversation_id(conversation.id, limit=limit),
        user=store.get_user_by_telegram_id(conversation.telegram_user_id),
        support_issue=store.get_support_issue_by_conversation_id(conversation.id),
    )
