"""
Tests for the Flask API.
"""

import uuid

import pytest

from chatprompt.api import create_app
from chatprompt.services import prompt_service


@pytest.fixture
def client():
    app = create_app({"TESTING": True})
    with app.test_client() as client:
        yield client


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


class TestSearchRoutes:

    def test_user_id_is_required(self, client):
        response = client.get("/api/search?q=test")

        assert response.status_code == 400
        assert response.get_json() == {"error": "User ID is required", "code": 400}

    def test_invalid_user_id(self, client):
        response = client.get("/api/search?user_id=nope")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid user ID format"

    def test_get_search(self, client, user_id, make_prompt, make_conversation):
        make_prompt(user_id, "Greeting", content="Hello {name}")
        make_conversation(user_id, "Unrelated")

        response = client.get(f"/api/search?user_id={user_id}&q=greeting&type=prompts")

        body = response.get_json()
        assert response.status_code == 200
        assert body["total"] == 1
        assert body["results"][0]["title"] == "Greeting"
        assert body["results"][0]["type"] == "prompt"
        assert body["results"][0]["metadata"]["kind"] == "prompt"
        assert [f["range"] for f in body["facets"]["dateRanges"]] == [
            "Last 7 days", "Last 30 days", "Last 3 months", "Older"
        ]

    def test_post_search_with_camel_case_filters(self, client, user_id, make_prompt):
        make_prompt(user_id, "Rare", usage_count=1)
        make_prompt(user_id, "Popular", usage_count=5)

        response = client.post("/api/search", json={
            "userId": str(user_id),
            "filters": {"type": "prompts", "sortBy": "usage", "sortOrder": "asc"},
        })

        assert response.status_code == 200
        assert [r["title"] for r in response.get_json()["results"]] == ["Rare", "Popular"]

    def test_invalid_filter_value(self, client, user_id):
        response = client.get(f"/api/search?user_id={user_id}&type=media")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid request"

    def test_limit_caps_results(self, client, user_id, make_conversation):
        for i in range(3):
            make_conversation(user_id, f"Topic {i}")

        body = client.get(f"/api/search?user_id={user_id}&limit=2").get_json()

        assert len(body["results"]) == 2
        assert body["total"] == 3

    def test_suggestions(self, client, user_id, make_conversation):
        make_conversation(user_id, "Release checklist", tags=["release"])

        body = client.get(f"/api/search/suggestions?user_id={user_id}&q=rel").get_json()

        assert body["suggestions"] == ["Release checklist", "release"]


class TestCursorRoutes:

    def test_export(self, client, user_id, make_prompt):
        make_prompt(user_id, "Exported")

        body = client.get(f"/api/cursor?user_id={user_id}&action=export").get_json()

        assert body["version"] == "1.0"
        assert [p["title"] for p in body["prompts"]] == ["Exported"]

    def test_sync(self, client, user_id, make_prompt):
        make_prompt(user_id, "Synced")

        body = client.get(f"/api/cursor?user_id={user_id}&action=sync").get_json()

        assert body["success"] is True
        assert body["data"]["config"]["chatprompt.prompts"][0]["title"] == "Synced"

    def test_unknown_action(self, client, user_id):
        response = client.get(f"/api/cursor?user_id={user_id}&action=explode")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid action"

    def test_get_prompts(self, client, user_id, make_prompt, make_category):
        category_id = make_category("Ops")
        make_prompt(user_id, "Deploy", usage_count=2, category_id=category_id)
        make_prompt(user_id, "Rollback", usage_count=7)

        body = client.post("/api/cursor", json={"userId": str(user_id), "action": "get_prompts"}).get_json()

        assert [p["title"] for p in body["prompts"]] == ["Rollback", "Deploy"]
        assert body["prompts"][1]["category"] == "Ops"

    def test_record_usage(self, client, user_id, make_prompt):
        prompt_id = make_prompt(user_id, "Tracked")

        response = client.post("/api/cursor", json={
            "userId": str(user_id), "action": "record_usage", "data": {"promptId": str(prompt_id)},
        })

        assert response.get_json() == {"success": True}
        assert prompt_service.get_prompt(prompt_id, user_id).usage_count == 1

    def test_record_usage_needs_prompt_id(self, client, user_id):
        response = client.post("/api/cursor", json={"userId": str(user_id), "action": "record_usage"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Prompt ID is required"

    def test_import(self, client, user_id):
        response = client.post("/api/cursor", json={
            "user_id": str(user_id),
            "action": "import",
            "data": {"prompts": [{"title": "Greeting", "content": "Hello {name}"}, {"title": "Broken"}]},
        })

        body = response.get_json()
        assert body["conversations"] == 0
        assert body["prompts"] == 1
        assert len(body["errors"]) == 1


class TestRecordRoutes:

    def test_conversation_lifecycle(self, client, user_id):
        created = client.post("/api/conversations", json={"user_id": str(user_id), "title": "API chat"})
        assert created.status_code == 201
        conversation_id = created.get_json()["id"]

        message = client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"user_id": str(user_id), "role": "user", "content": "hello"},
        )
        assert message.status_code == 201

        messages = client.get(f"/api/conversations/{conversation_id}/messages?user_id={user_id}").get_json()
        assert [m["content"] for m in messages["messages"]] == ["hello"]

        patched = client.patch(
            f"/api/conversations/{conversation_id}", json={"user_id": str(user_id), "status": "archived"}
        )
        assert patched.get_json()["status"] == "archived"

        assert client.delete(f"/api/conversations/{conversation_id}?user_id={user_id}").status_code == 200
        assert client.get(f"/api/conversations/{conversation_id}?user_id={user_id}").status_code == 404

    def test_conversation_validation(self, client, user_id, make_conversation):
        conversation_id = make_conversation(user_id, "Strict")

        bad_role = client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"user_id": str(user_id), "role": "tool", "content": "x"},
        )
        bad_id = client.get(f"/api/conversations/123?user_id={user_id}")

        assert bad_role.status_code == 400
        assert bad_id.status_code == 400

    def test_foreign_conversation_is_not_found(self, client, user_id, other_user_id, make_conversation):
        conversation_id = make_conversation(other_user_id, "Not yours")

        response = client.get(f"/api/conversations/{conversation_id}?user_id={user_id}")

        assert response.status_code == 404
        assert response.get_json()["error"] == "Conversation not found"

    def test_prompt_lifecycle(self, client, user_id, make_category):
        make_category("General")
        categories = client.get("/api/prompts/categories").get_json()["categories"]

        created = client.post("/api/prompts", json={
            "user_id": str(user_id),
            "title": "Explain",
            "content": "Explain {topic}",
            "category_id": categories[0]["id"],
        })
        assert created.status_code == 201
        prompt_id = created.get_json()["id"]
        assert created.get_json()["category"]["name"] == "General"

        snippet = client.get(f"/api/prompts/{prompt_id}/snippet?user_id={user_id}").get_json()["snippet"]
        assert snippet.startswith("// ChatPrompt Manager - Explain\n")

        listed = client.get(f"/api/prompts?user_id={user_id}").get_json()
        assert listed["total"] == 1

        patched = client.patch(f"/api/prompts/{prompt_id}", json={"user_id": str(user_id), "is_public": True})
        assert patched.get_json()["is_public"] is True

        assert client.delete(f"/api/prompts/{prompt_id}?user_id={user_id}").status_code == 200
        assert client.get(f"/api/prompts/{prompt_id}?user_id={user_id}").status_code == 404

    def test_prompt_requires_content(self, client, user_id):
        response = client.post("/api/prompts", json={"user_id": str(user_id), "title": "Empty"})

        assert response.status_code == 400

    def test_dashboard(self, client, user_id, make_conversation, make_prompt):
        make_conversation(user_id, "Recent")
        make_prompt(user_id, "Popular", usage_count=3)

        body = client.get(f"/api/dashboard?user_id={user_id}").get_json()

        assert body["stats"]["total_conversations"] == 1
        assert [c["title"] for c in body["recent_conversations"]] == ["Recent"]
        assert [p["title"] for p in body["popular_prompts"]] == ["Popular"]


def test_unknown_user_sees_empty_results(client):
    body = client.get(f"/api/search?user_id={uuid.uuid4()}").get_json()

    assert body["results"] == []
    assert body["total"] == 0
