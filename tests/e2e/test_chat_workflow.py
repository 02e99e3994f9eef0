# tests/e2e/test_chat_workflow.py
"""
Full user journey over HTTP: sign in, get access to an agent, chat with
it, title the chat and look back at the history.
"""

import pytest
from httpx import AsyncClient

from tests.factories import AgentCategoryFactory, AgentFactory


@pytest.fixture
async def catalog_agent(db_session):
    category = await AgentCategoryFactory.create_async(session=db_session, name="Travel")
    return await AgentFactory.create_async(
        session=db_session,
        name="Trip Planner",
        category_id=category.id,
        model="llama3.2",
        system_prompt="You plan trips.",
        temperature=0.4,
    )


@pytest.mark.e2e
async def test_login_to_titled_conversation(async_client: AsyncClient, catalog_agent, llm_factory):
    login = await async_client.post(
        "/api/v1/users",
        json={"email": "linus@example.com", "name": "Linus", "provider": "google"},
    )
    assert login.status_code == 201
    user_id = login.json()["data"]["id"]
    assert async_client.cookies.get("user_id") == user_id

    # Identity now comes from the cookie alone
    me = await async_client.get("/api/v1/users/me")
    assert me.json()["data"]["email"] == "linus@example.com"

    denied = await async_client.post("/api/v1/chats", json={"agentId": catalog_agent.id})
    assert denied.status_code == 403

    grant = await async_client.post("/api/v1/user-agents", json={"agentId": catalog_agent.id})
    assert grant.status_code == 201

    access = await async_client.get(f"/api/v1/user-agents/{catalog_agent.id}/access")
    assert access.json()["data"]["hasAccess"] is True

    created = await async_client.post("/api/v1/chats", json={}, headers={"x-agent-id": catalog_agent.id})
    assert created.status_code == 201
    chat_id = created.json()["data"]["id"]

    sent = await async_client.post("/api/v1/messages", json={"chatId": chat_id, "content": "Hello"})
    assert sent.status_code == 201
    reply = sent.json()["aiResponse"]
    assert reply["role"] == "assistant"
    assert reply["metadata"]["provider"] == "ollama"

    prompt = llm_factory.prompts[-1]
    assert prompt[0] == {"role": "system", "content": "You plan trips."}
    assert prompt[-1] == {"role": "user", "content": "Hello"}
    assert llm_factory.created[-1]["temperature"] == 0.4

    streamed = await async_client.post(f"/api/v1/chats/{chat_id}/stream", json={"content": "Any tips?"})
    assert streamed.text == "Hello, world!"

    llm_factory.reply = '"Friendly Greeting."'
    titled = await async_client.post(f"/api/v1/chats/{chat_id}/generate-title")
    assert titled.json()["data"]["title"] == "Friendly Greeting"

    chat = await async_client.get(f"/api/v1/chats/{chat_id}")
    assert chat.json()["data"]["messageCount"] == 4
    assert chat.json()["data"]["title"] == "Friendly Greeting"

    history = await async_client.get("/api/v1/messages", params={"chatId": chat_id})
    assert [m["role"] for m in history.json()["data"]] == ["user", "assistant", "user", "assistant"]
