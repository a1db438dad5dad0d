"""
Unified search system for the chatprompt application.

This package provides a single search entry point that fans out across
conversations, prompts and messages and ranks the merged results.
"""

from chatprompt.search.unified.schemas import (
    SearchFilters, SearchResult, SearchResponse, SearchFacets,
    SearchType, SortBy, SortOrder, Visibility, DateRange, ResultKind,
    ConversationMeta, PromptMeta, MessageMeta,
)
from chatprompt.search.unified.scoring import calculate_relevance_score
from chatprompt.search.unified.manager import SearchManager

__all__ = [
    'SearchManager',
    'SearchFilters',
    'SearchResult',
    'SearchResponse',
    'SearchFacets',
    'SearchType',
    'SortBy',
    'SortOrder',
    'Visibility',
    'DateRange',
    'ResultKind',
    'ConversationMeta',
    'PromptMeta',
    'MessageMeta',
    'calculate_relevance_score',
]
