"""Tests for the conversations, users and support-issues APIs."""

import pytest
from fastapi.testclient import TestClient

from supportbot.schemas.conversation import ConversationCreate, ConversationUpdate, ConversationStatus
from supportbot.schemas.message import MessageCreate, SenderType
from supportbot.schemas.support_issue import SupportIssueCreate
from supportbot.schemas.user import UserCreate


@pytest.fixture
def seeded(memory_store, faker):
    """One user with a conversation, three messages and a pending support issue."""
    user = memory_store.create_user(
        UserCreate(telegram_id="111", first_name=faker.first_name())
    )
    conversation = memory_store.create_conversation(
        ConversationCreate(telegram_user_id="111")
    )
    for i in range(3):
        memory_store.create_message(
            MessageCreate(
                conversation_id=conversation.id,
                sender_id="111",
                sender_type=SenderType.USER,
                content=f"m{i}",
            )
        )
    issue = memory_store.create_support_issue(
        SupportIssueCreate(
            user_id="111", conversation_id=conversation.id, title="New Support Request"
        )
    )
    return user, conversation, issue


def test_list_conversations_paginated(client: TestClient, memory_store):
    for i in range(3):
        memory_store.create_conversation(ConversationCreate(telegram_user_id=str(i)))

    resp = client.get("/conversations", params={"page": 1, "size": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert len(body["items"]) == 2
    assert body["items"][0]["telegram_user_id"] == "2"


def test_list_conversations_status_filter(client: TestClient, memory_store):
    memory_store.create_conversation(ConversationCreate(telegram_user_id="1"))
    closed = memory_store.create_conversation(ConversationCreate(telegram_user_id="2"))
    memory_store.update_conversation(
        closed.id, ConversationUpdate(status=ConversationStatus.CLOSED)
    )

    resp = client.get("/conversations", params={"status": "closed"})

    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()["items"]] == [closed.id]


def test_get_conversation(client: TestClient, seeded):
    _, conversation, _ = seeded
    resp = client.get(f"/conversations/{conversation.id}")
    assert resp.status_code == 200
    assert resp.json()["telegram_user_id"] == "111"
    assert resp.json()["status"] == "open"


def test_get_conversation_not_found(client: TestClient):
    resp = client.get("/conversations/999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Conversation not found"


def test_update_conversation_status(client: TestClient, seeded):
    _, conversation, _ = seeded
    resp = client.patch(f"/conversations/{conversation.id}", json={"status": "closed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "closed"


def test_update_conversation_invalid_status(client: TestClient, seeded):
    _, conversation, _ = seeded
    resp = client.patch(f"/conversations/{conversation.id}", json={"status": "archived"})
    assert resp.status_code == 422


def test_get_conversation_messages(client: TestClient, seeded):
    user, conversation, issue = seeded
    resp = client.get(f"/conversations/{conversation.id}/messages", params={"limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert [m["content"] for m in body["messages"]] == ["m1", "m2"]
    assert body["user"]["id"] == user.id
    assert body["support_issue"]["id"] == issue.id
    assert body["conversation"]["id"] == conversation.id


def test_list_users(client: TestClient, seeded):
    resp = client.get("/users")
    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert resp.json()["items"][0]["telegram_id"] == "111"


def test_get_user_with_support_issues(client: TestClient, seeded):
    user, _, issue = seeded
    resp = client.get(f"/users/{user.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["telegram_id"] == "111"
    assert [i["id"] for i in body["support_issues"]] == [issue.id]


def test_get_user_not_found(client: TestClient):
    assert client.get("/users/999").status_code == 404


def test_list_user_support_issues_by_status(client: TestClient, seeded):
    user, _, _ = seeded
    resp = client.get(f"/users/{user.id}/support-issues", params={"status": "resolved"})
    assert resp.status_code == 200
    assert resp.json() == []
    resp = client.get(f"/users/{user.id}/support-issues", params={"status": "pending"})
    assert len(resp.json()) == 1


def test_get_support_issue(client: TestClient, seeded):
    _, _, issue = seeded
    resp = client.get(f"/support-issues/{issue.id}")
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"
    assert resp.json()["title"] == "New Support Request"


def test_assign_support_issue(client: TestClient, seeded, faker):
    _, _, issue = seeded
    agent = faker.name()
    resp = client.patch(
        f"/support-issues/{issue.id}",
        json={"status": "in_progress", "assigned_to": agent},
    )
    assert resp.status_code == 200
    assert resp.json()["assigned_to"] == agent
    assert resp.json()["closed_at"] is None


def test_closing_support_issue_stamps_closed_at(client: TestClient, seeded):
    _, _, issue = seeded
    resp = client.patch(f"/support-issues/{issue.id}", json={"status": "closed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "closed"
    assert resp.json()["closed_at"] is not None


def test_support_issue_not_found(client: TestClient):
    assert client.get("/support-issues/999").status_code == 404
    assert client.patch("/support-issues/999", json={"status": "closed"}).status_code == 404


def test_update_conversation_null_status_rejected(client: TestClient, seeded, memory_store):
    _, conversation, _ = seeded
    resp = client.patch(f"/conversations/{conversation.id}", json={"status": None})
    assert resp.status_code == 422
    assert memory_store.get_conversation(conversation.id).status == ConversationStatus.OPEN


def test_update_conversation_null_thread_clears_it(client: TestClient, seeded, memory_store):
    _, conversation, _ = seeded
    memory_store.update_conversation(conversation.id, ConversationUpdate(thread_id="1001"))
    resp = client.patch(f"/conversations/{conversation.id}", json={"thread_id": None})
    assert resp.status_code == 200
    assert resp.json()["thread_id"] is None


def test_update_support_issue_null_title_rejected(client: TestClient, seeded, memory_store):
    _, _, issue = seeded
    resp = client.patch(f"/support-issues/{issue.id}", json={"title": None})
    assert resp.status_code == 422
    assert memory_store.get_support_issue(issue.id).title == "New Support Request"


def test_update_support_issue_null_status_rejected(client: TestClient, seeded):
    _, _, issue = seeded
    resp = client.patch(f"/support-issues/{issue.id}", json={"status": None})
    assert resp.status_code == 422
