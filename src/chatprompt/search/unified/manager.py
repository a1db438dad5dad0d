"""
Unified search manager for chatprompt.

This module fans a single query out to the conversation, prompt and message
adapters, merges their results, ranks them and caps the merged list.
"""

import logging
import time
from typing import Dict, List, Optional, Union
from uuid import UUID

from chatprompt.core.utils import as_uuid
from chatprompt.database.session import get_session
from chatprompt.search.unified.adapters import (
    ConversationSearch,
    EntitySearch,
    MessageSearch,
    PromptSearch,
)
from chatprompt.search.unified.schemas import (
    DateRangeFacet,
    SearchFacets,
    SearchFilters,
    SearchResponse,
    SearchResult,
    SearchType,
    SortBy,
    SortOrder,
    TypeFacet,
)

logger = logging.getLogger(__name__)

DATE_RANGE_BUCKETS = ["Last 7 days", "Last 30 days", "Last 3 months", "Older"]


class SearchManager:
    """
    Manager for unified search across conversations, prompts and messages.

    Adapters are queried in a fixed order (conversations, prompts, messages)
    with the same filters, limit and offset. The reported total is the sum of
    the adapters' own totals, so it can exceed what the globally capped result
    list lets a caller page through.
    """

    def __init__(self) -> None:
        self.adapters: Dict[SearchType, EntitySearch] = {
            SearchType.CONVERSATIONS: ConversationSearch(),
            SearchType.PROMPTS: PromptSearch(),
            SearchType.MESSAGES: MessageSearch(),
        }

    def search(
        self,
        user_id: Union[str, UUID],
        filters: Optional[SearchFilters] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchResponse:
        """
        Execute a search for a user.

        Args:
            user_id: The acting user
            filters: Search filters; None searches everything
            limit: Page size, applied per adapter and again to the merged list
            offset: Offset applied per adapter

        Returns:
            SearchResponse with merged results, summed total and facets

        Database errors propagate; a failed search yields no partial results.
        """
        start_time = time.time()
        user_id = as_uuid(user_id)
        filters = filters or SearchFilters()

        all_results: List[SearchResult] = []
        total_count = 0

        with get_session() as session:
            for search_type in self._get_types_to_search(filters.type):
                results, count = self.adapters[search_type].search(
                    session, user_id, filters, limit, offset
                )
                all_results.extend(results)
                total_count += count

        sorted_results = self.sort_results(all_results, filters.sort_by, filters.sort_order)

        logger.debug(
            "Search %r for user %s: %d merged, total %d in %.1f ms",
            filters.query, user_id, len(all_results), total_count,
            (time.time() - start_time) * 1000,
        )

        return SearchResponse(
            results=sorted_results[:limit],
            total=total_count,
            facets=self.generate_facets(),
        )

    def _get_types_to_search(self, search_type: SearchType) -> List[SearchType]:
        """
        Determine which adapters to run, in their fixed order.

        Args:
            search_type: Requested entity kind

        Returns:
            Ordered list of entity kinds
        """
        order = [SearchType.CONVERSATIONS, SearchType.PROMPTS, SearchType.MESSAGES]
        if search_type is None or search_type == SearchType.ALL:
            return order
        return [search_type]

    @staticmethod
    def sort_results(
        results: List[SearchResult],
        sort_by: SortBy = SortBy.RELEVANCE,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> List[SearchResult]:
        """
        Sort merged results. Descending by default; "asc" flips the direction.

        The sort is stable, so ties keep adapter order.
        """
        if sort_by == SortBy.DATE:
            key = lambda r: r.updated_at
        elif sort_by == SortBy.USAGE:
            key = lambda r: getattr(r.metadata, "usage_count", 0) or 0
        else:
            key = lambda r: r.score

        return sorted(results, key=key, reverse=sort_order != SortOrder.ASC)

    @staticmethod
    def generate_facets() -> SearchFacets:
        """
        Facet scaffolding with zero counts.

        Cross-kind facet aggregation is not computed; clients receive the
        stable structure so they can render empty facet panels.
        """
        return SearchFacets(
            types=[TypeFacet(type=t.value) for t in
                   (SearchType.CONVERSATIONS, SearchType.PROMPTS, SearchType.MESSAGES)],
            tags=[],
            categories=[],
            date_ranges=[DateRangeFacet(range=label) for label in DATE_RANGE_BUCKETS],
        )
