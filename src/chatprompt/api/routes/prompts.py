"""
API endpoints for prompts, prompt categories and the dashboard.
"""

from flask import Blueprint, jsonify, request

from chatprompt.api.routes.utils import (
    ApiError, api_route, parse_list_param, parse_pagination_params,
    request_payload, require_user_id, require_uuid
)
from chatprompt.interchange import generate_snippet
from chatprompt.services import dashboard, prompt_service

bp = Blueprint('prompts', __name__, url_prefix='/api/prompts')
dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


def _parse_bool(value):
    if value is None:
        return None
    return value.lower() in ('1', 'true', 'yes')


@bp.route('', methods=['GET'])
@api_route
def get_prompts():
    """Get a page of prompts visible to the user, most used first."""
    user_id = require_user_id()
    limit, offset = parse_pagination_params()

    prompts, total = prompt_service.list_prompts(
        user_id,
        category_id=request.args.get('category_id'),
        search=request.args.get('search'),
        tags=parse_list_param('tags'),
        is_public=_parse_bool(request.args.get('is_public')),
        limit=limit,
        offset=offset,
    )
    return jsonify({
        'prompts': [p.model_dump(mode='json') for p in prompts],
        'total': total,
        'limit': limit,
        'offset': offset,
    })


@bp.route('', methods=['POST'])
@api_route
def create_prompt():
    user_id = require_user_id()
    body = request_payload()
    if not body.get('title') or not body.get('content'):
        raise ApiError(400, "Title and content are required")

    prompt = prompt_service.create_prompt(
        user_id,
        title=body['title'],
        content=body['content'],
        description=body.get('description'),
        category_id=body.get('category_id'),
        tags=body.get('tags'),
        is_public=bool(body.get('is_public', False)),
    )
    return jsonify(prompt.model_dump(mode='json')), 201


@bp.route('/categories', methods=['GET'])
@api_route
def get_categories():
    return jsonify({'categories': [c.model_dump(mode='json') for c in prompt_service.list_categories()]})


@bp.route('/<prompt_id>', methods=['GET'])
@api_route
def get_prompt(prompt_id: str):
    user_id = require_user_id()
    prompt = prompt_service.get_prompt(require_uuid(prompt_id, "prompt ID"), user_id)
    if prompt is None:
        raise ApiError(404, "Prompt not found")
    return jsonify(prompt.model_dump(mode='json'))


@bp.route('/<prompt_id>/snippet', methods=['GET'])
@api_route
def get_prompt_snippet(prompt_id: str):
    user_id = require_user_id()
    prompt = prompt_service.get_prompt(require_uuid(prompt_id, "prompt ID"), user_id)
    if prompt is None:
        raise ApiError(404, "Prompt not found")
    return jsonify({'id': str(prompt.id), 'snippet': generate_snippet(prompt)})


@bp.route('/<prompt_id>', methods=['PATCH'])
@api_route
def update_prompt(prompt_id: str):
    user_id = require_user_id()
    prompt = prompt_service.update_prompt(require_uuid(prompt_id, "prompt ID"), user_id, request_payload())
    if prompt is None:
        raise ApiError(404, "Prompt not found")
    return jsonify(prompt.model_dump(mode='json'))


@bp.route('/<prompt_id>', methods=['DELETE'])
@api_route
def delete_prompt(prompt_id: str):
    user_id = require_user_id()
    if not prompt_service.delete_prompt(require_uuid(prompt_id, "prompt ID"), user_id):
        raise ApiError(404, "Prompt not found")
    return jsonify({'success': True})


@dashboard_bp.route('', methods=['GET'])
@api_route
def get_dashboard():
    """Stats, recent conversations and popular prompts in one payload."""
    user_id = require_user_id()
    return jsonify({
        'stats': dashboard.get_dashboard_stats(user_id).model_dump(),
        'recent_conversations': [
            c.model_dump(mode='json') for c in dashboard.get_recent_conversations(user_id)
        ],
        'popular_prompts': [
            p.model_dump(mode='json') for p in dashboard.get_popular_prompts(user_id)
        ],
    })
