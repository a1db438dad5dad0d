"""
API endpoints for search functionality.
"""

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from chatprompt.api.routes.utils import (
    api_route, parse_list_param, parse_pagination_params, request_payload, require_user_id
)
from chatprompt.core.config import settings
from chatprompt.search.suggestions import get_search_suggestions
from chatprompt.search.unified import SearchFilters, SearchManager

bp = Blueprint('search', __name__, url_prefix='/api/search')

search_manager = SearchManager()


def _filters_from_args() -> Dict[str, Any]:
    args = request.args
    data: Dict[str, Any] = {
        'query': args.get('q', args.get('query')),
        'tags': parse_list_param('tags'),
        'categories': parse_list_param('categories'),
        'status': parse_list_param('status'),
    }
    for key in ('type', 'visibility', 'sort_by', 'sort_order'):
        if args.get(key):
            data[key] = args[key]
    if args.get('date_from') or args.get('date_to'):
        data['date_range'] = {'from': args.get('date_from'), 'to': args.get('date_to')}
    return data


def _filters_from_body(body: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(body.get('filters') or body)
    if 'q' in data and 'query' not in data:
        data['query'] = data.pop('q')
    return data


@bp.route('', methods=['GET', 'POST'])
@api_route
def search():
    """Search conversations, prompts and messages for the acting user."""
    user_id = require_user_id()
    limit, offset = parse_pagination_params(settings.default_search_limit)

    body = request_payload()
    data = _filters_from_body(body) if body else _filters_from_args()
    filters = SearchFilters.model_validate(data)

    response = search_manager.search(user_id, filters, limit=limit, offset=offset)
    return jsonify(response.model_dump(mode='json', by_alias=True))


@bp.route('/suggestions', methods=['GET'])
@api_route
def suggestions():
    """Autocomplete suggestions for a partial query."""
    user_id = require_user_id()
    query = request.args.get('q', '')
    return jsonify({'query': query, 'suggestions': get_search_suggestions(user_id, query)})
