"""
Tests for the unified search manager and its adapters.
"""

from chatprompt.search.unified import (
    DateRange, ResultKind, SearchFilters, SearchManager, SearchType, SortBy, SortOrder, Visibility,
)

from conftest import at


def _search(user_id, limit=20, offset=0, **filters):
    return SearchManager().search(user_id, SearchFilters(**filters), limit=limit, offset=offset)


def test_only_owned_conversations_and_visible_prompts(user_id, other_user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Mine")
    make_conversation(other_user_id, "Theirs")
    make_prompt(user_id, "My prompt")
    make_prompt(other_user_id, "Shared prompt", is_public=True)
    make_prompt(other_user_id, "Secret prompt")

    titles = {r.title for r in _search(user_id).results}

    assert titles == {"Mine", "My prompt", "Shared prompt"}


def test_deleted_conversations_and_their_messages_are_hidden(user_id, make_conversation):
    make_conversation(user_id, "Gone", status="deleted", messages=[("user", "needle in deleted")])
    make_conversation(user_id, "Kept", messages=[("user", "needle in kept")])

    response = _search(user_id, query="needle")

    assert [r.content for r in response.results if r.type == ResultKind.MESSAGE] == ["needle in kept"]
    assert all(r.title != "Gone" for r in response.results)


def test_user_without_conversations_gets_no_messages(user_id, other_user_id, make_conversation):
    make_conversation(other_user_id, "Other", messages=[("user", "hello")])

    response = _search(user_id, type=SearchType.MESSAGES)

    assert response.results == []
    assert response.total == 0


def test_results_ranked_by_relevance(user_id, make_conversation):
    long_text = "python " + "filler " * 30
    make_conversation(user_id, "Notes", messages=[("assistant", long_text)], minutes=1)
    make_conversation(user_id, "Python", minutes=0)

    results = _search(user_id, query="python").results

    assert results[0].title == "Python"
    assert results[0].score == 17
    assert results[-1].type == ResultKind.MESSAGE
    assert results[-1].score == 12


def test_merged_list_is_capped_but_total_sums_adapters(user_id, make_conversation, make_prompt):
    for i in range(3):
        make_conversation(user_id, f"Report {i}", minutes=i)
        make_prompt(user_id, f"Report prompt {i}", minutes=i)

    response = _search(user_id, limit=2, query="report")

    assert len(response.results) == 2
    assert response.total == 6


def test_type_filter_limits_entity_kinds(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Alpha", messages=[("user", "alpha")])
    make_prompt(user_id, "Alpha prompt")

    response = _search(user_id, type=SearchType.PROMPTS, query="alpha")

    assert [r.type for r in response.results] == [ResultKind.PROMPT]
    assert response.total == 1


def test_empty_query_scores_everything_equally(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Older", minutes=0)
    make_conversation(user_id, "Newer", minutes=5)
    make_prompt(user_id, "Prompt")

    results = _search(user_id).results

    assert {r.score for r in results} == {1}
    # Stable sort keeps adapter order, and adapters return newest first
    assert [r.title for r in results] == ["Newer", "Older", "Prompt"]


def test_sort_by_date_ascending(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Middle", minutes=5)
    make_prompt(user_id, "Last", minutes=10)
    make_prompt(user_id, "First", minutes=0)

    results = _search(user_id, sort_by=SortBy.DATE, sort_order=SortOrder.ASC).results

    assert [r.title for r in results] == ["First", "Middle", "Last"]


def test_sort_by_usage_treats_non_prompts_as_zero(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Conversation")
    make_prompt(user_id, "Rare", usage_count=1)
    make_prompt(user_id, "Popular", usage_count=5)

    results = _search(user_id, sort_by=SortBy.USAGE).results

    assert [r.title for r in results] == ["Popular", "Rare", "Conversation"]


def test_tag_filter_matches_any_shared_tag(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "Tagged", tags=["python", "work"])
    make_conversation(user_id, "Untagged")
    make_prompt(user_id, "Tagged prompt", tags=["rust"])

    titles = {r.title for r in _search(user_id, tags=["work", "rust"]).results}

    assert titles == {"Tagged", "Tagged prompt"}


def test_status_and_date_filters(user_id, make_conversation):
    make_conversation(user_id, "Archived", status="archived", minutes=0)
    make_conversation(user_id, "Active early", minutes=0)
    make_conversation(user_id, "Active late", minutes=60)

    archived = _search(user_id, type=SearchType.CONVERSATIONS, status=["archived"]).results
    window = _search(
        user_id,
        type=SearchType.CONVERSATIONS,
        date_range=DateRange(start=at(30), end=at(60)),
    ).results

    assert [r.title for r in archived] == ["Archived"]
    assert [r.title for r in window] == ["Active late"]


def test_prompt_visibility_and_category_filters(user_id, other_user_id, make_prompt, make_category):
    category_id = make_category("Coding")
    make_prompt(user_id, "Private mine")
    make_prompt(user_id, "Public mine", is_public=True, category_id=category_id)
    make_prompt(other_user_id, "Public theirs", is_public=True)

    private = _search(user_id, type=SearchType.PROMPTS, visibility=Visibility.PRIVATE).results
    public = _search(user_id, type=SearchType.PROMPTS, visibility=Visibility.PUBLIC).results
    coding = _search(user_id, type=SearchType.PROMPTS, categories=[str(category_id), "not-a-uuid"]).results

    assert [r.title for r in private] == ["Private mine"]
    assert {r.title for r in public} == {"Public mine", "Public theirs"}
    assert [r.title for r in coding] == ["Public mine"]
    assert coding[0].metadata.category.name == "Coding"


def test_result_shapes(user_id, make_conversation):
    conversation_id = make_conversation(
        user_id, "Design review", description="d" * 200, messages=[("user", "short note")]
    )

    results = {r.type: r for r in _search(user_id).results}

    conversation = results[ResultKind.CONVERSATION]
    assert conversation.excerpt == "d" * 150 + "..."
    assert conversation.metadata.kind == "conversation"

    message = results[ResultKind.MESSAGE]
    assert message.title == 'Message in "Design review"'
    assert message.excerpt == "short note"
    assert message.metadata.conversation_id == conversation_id
    assert message.metadata.role == "user"


def test_offset_applies_per_adapter(user_id, make_conversation, make_prompt):
    make_conversation(user_id, "C0", minutes=0)
    make_conversation(user_id, "C1", minutes=1)
    make_prompt(user_id, "P0", minutes=0)
    make_prompt(user_id, "P1", minutes=1)

    response = _search(user_id, limit=1, offset=1, type=SearchType.ALL)

    assert response.total == 4
    assert [r.title for r in response.results] == ["C0"]


def test_facets_are_zero_filled(user_id, make_conversation):
    make_conversation(user_id, "Something")

    facets = _search(user_id).facets

    assert [(f.type, f.count) for f in facets.types] == [
        ("conversations", 0), ("prompts", 0), ("messages", 0)
    ]
    assert facets.tags == [] and facets.categories == []
    assert [f.range for f in facets.date_ranges] == [
        "Last 7 days", "Last 30 days", "Last 3 months", "Older"
    ]


def test_like_wildcards_in_query_match_literally(user_id, make_prompt):
    make_prompt(user_id, "100% coverage")
    make_prompt(user_id, "1000 coverage")
    make_prompt(user_id, "snake_case names")
    make_prompt(user_id, "snakeXcase names")

    percent = _search(user_id, type=SearchType.PROMPTS, query="100%").results
    underscore = _search(user_id, type=SearchType.PROMPTS, query="snake_case").results

    assert [r.title for r in percent] == ["100% coverage"]
    assert [r.title for r in underscore] == ["snake_case names"]
