"""
Tests for the conversation, prompt and dashboard services.
"""

import uuid

import pytest

from chatprompt.database.models import PromptUsage
from chatprompt.database.session import get_session
from chatprompt.services import conversation_service, dashboard, prompt_service


class TestConversationService:

    def test_create_and_get(self, user_id):
        created = conversation_service.create_conversation(user_id, "Kickoff", "Planning", ["q3"])

        fetched = conversation_service.get_conversation(str(created.id), user_id)

        assert fetched.title == "Kickoff"
        assert fetched.status == "active"
        assert fetched.tags == ["q3"]

    def test_other_users_conversation_is_invisible(self, user_id, other_user_id, make_conversation):
        conversation_id = make_conversation(other_user_id, "Private")

        assert conversation_service.get_conversation(conversation_id, user_id) is None
        assert conversation_service.update_conversation(conversation_id, user_id, {"title": "x"}) is None
        assert conversation_service.delete_conversation(conversation_id, user_id) is False

    def test_malformed_id_reads_as_missing(self, user_id):
        assert conversation_service.get_conversation("not-a-uuid", user_id) is None

    def test_list_filters_and_orders_by_update(self, user_id, make_conversation):
        make_conversation(user_id, "Old", tags=["a"], minutes=0)
        make_conversation(user_id, "New", tags=["b"], minutes=10)
        make_conversation(user_id, "Archived", status="archived", minutes=5)

        everything, total = conversation_service.list_conversations(user_id)
        tagged, _ = conversation_service.list_conversations(user_id, tags=["a"])
        archived, _ = conversation_service.list_conversations(user_id, status="archived")

        assert [c.title for c in everything] == ["New", "Archived", "Old"]
        assert total == 3
        assert [c.title for c in tagged] == ["Old"]
        assert [c.title for c in archived] == ["Archived"]

    def test_update_ignores_unknown_fields(self, user_id, make_conversation):
        conversation_id = make_conversation(user_id, "Draft")

        updated = conversation_service.update_conversation(
            conversation_id, user_id, {"title": "Final", "is_pinned": True, "user_id": str(uuid.uuid4())}
        )

        assert updated.title == "Final"
        assert updated.is_pinned is True
        assert updated.user_id == user_id

    def test_delete_is_soft(self, user_id, make_conversation):
        conversation_id = make_conversation(user_id, "Temporary", messages=[("user", "hi")])

        assert conversation_service.delete_conversation(conversation_id, user_id) is True

        assert conversation_service.get_conversation(conversation_id, user_id) is None
        assert conversation_service.get_conversation_messages(conversation_id, user_id) is None
        assert conversation_service.list_conversations(user_id) == ([], 0)

    def test_add_message_touches_conversation(self, user_id, make_conversation):
        conversation_id = make_conversation(user_id, "Chat", messages=[("user", "first")])
        before = conversation_service.get_conversation(conversation_id, user_id).updated_at

        message = conversation_service.add_message(
            conversation_id, user_id, "assistant", "reply", {"model": "local"}
        )

        assert message.metadata == {"model": "local"}
        messages = conversation_service.get_conversation_messages(conversation_id, user_id)
        assert [m.content for m in messages] == ["first", "reply"]
        assert conversation_service.get_conversation(conversation_id, user_id).updated_at > before


class TestPromptService:

    def test_visible_prompts_order_by_usage(self, user_id, other_user_id, make_prompt):
        make_prompt(user_id, "Mine", usage_count=1)
        make_prompt(other_user_id, "Popular public", is_public=True, usage_count=9)
        make_prompt(other_user_id, "Hidden", usage_count=50)

        prompts = prompt_service.list_visible_prompts(user_id)

        assert [p.title for p in prompts] == ["Popular public", "Mine"]

    def test_only_owner_can_change_a_prompt(self, user_id, other_user_id, make_prompt):
        prompt_id = make_prompt(other_user_id, "Shared", is_public=True)

        assert prompt_service.get_prompt(prompt_id, user_id).title == "Shared"
        assert prompt_service.update_prompt(prompt_id, user_id, {"title": "Hijacked"}) is None
        assert prompt_service.delete_prompt(prompt_id, user_id) is False

    def test_create_update_delete(self, user_id, make_category):
        category_id = make_category("Writing")

        prompt = prompt_service.create_prompt(
            user_id, "Summarize", "Summarize {text}", category_id=str(category_id), tags=["tldr"]
        )
        assert prompt.category.name == "Writing"

        updated = prompt_service.update_prompt(prompt.id, user_id, {"tags": ["short"], "category_id": None})
        assert updated.tags == ["short"]
        assert updated.category is None

        assert prompt_service.delete_prompt(prompt.id, user_id) is True
        assert prompt_service.get_prompt(prompt.id, user_id) is None

    def test_record_usage_increments_counter(self, user_id, make_prompt):
        prompt_id = make_prompt(user_id, "Counter", usage_count=2)

        assert prompt_service.record_prompt_usage(prompt_id, user_id) is True
        assert prompt_service.record_prompt_usage(str(prompt_id), user_id) is True

        assert prompt_service.get_prompt(prompt_id, user_id).usage_count == 4
        with get_session() as session:
            assert session.query(PromptUsage).filter(PromptUsage.prompt_id == prompt_id).count() == 2

    def test_record_usage_requires_visibility(self, user_id, other_user_id, make_prompt):
        prompt_id = make_prompt(other_user_id, "Private")

        assert prompt_service.record_prompt_usage(prompt_id, user_id) is False
        assert prompt_service.record_prompt_usage("garbage", user_id) is False

    def test_categories(self):
        prompt_service.create_category("Zeta")
        created = prompt_service.create_category("Alpha", color="#ff0000")

        assert created.color == "#ff0000"
        assert [c.name for c in prompt_service.list_categories()] == ["Alpha", "Zeta"]
        assert prompt_service.list_categories()[1].color == "#6b7280"


class TestDashboard:

    def test_stats_skip_deleted_conversations(self, user_id, make_conversation, make_prompt):
        make_conversation(user_id, "Live", messages=[("user", "a"), ("assistant", "b")])
        make_conversation(user_id, "Archived", status="archived")
        make_conversation(user_id, "Deleted", status="deleted", messages=[("user", "c")])
        prompt_id = make_prompt(user_id, "Used")
        prompt_service.record_prompt_usage(prompt_id, user_id)

        stats = dashboard.get_dashboard_stats(user_id)

        assert stats.total_conversations == 2
        assert stats.active_conversations == 1
        assert stats.total_messages == 2
        assert stats.total_prompts == 1
        assert stats.prompts_used_today == 1

    def test_recent_and_popular(self, user_id, make_conversation, make_prompt):
        for i in range(7):
            make_conversation(user_id, f"C{i}", minutes=i)
        make_prompt(user_id, "Low", usage_count=1)
        make_prompt(user_id, "High", usage_count=10)

        recent = dashboard.get_recent_conversations(user_id)
        popular = dashboard.get_popular_prompts(user_id, limit=1)

        assert [c.title for c in recent] == ["C6", "C5", "C4", "C3", "C2"]
        assert [p.title for p in popular] == ["High"]


@pytest.mark.parametrize("bad_id", ["", "1234", "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz"])
def test_bad_ids_never_raise(user_id, bad_id):
    assert prompt_service.get_prompt(bad_id, user_id) is None
    assert conversation_service.get_conversation_messages(bad_id, user_id) is None
