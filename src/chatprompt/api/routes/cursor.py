"""
API endpoints for IDE integration: export, sync, prompt listing, usage
recording and import.
"""

from flask import Blueprint, jsonify, request

from chatprompt.api.routes.utils import ApiError, api_route, request_payload, require_user_id
from chatprompt.interchange import export_corpus, import_corpus, sync_workspace
from chatprompt.services.prompt_service import list_visible_prompts, record_prompt_usage

bp = Blueprint('cursor', __name__, url_prefix='/api/cursor')


@bp.route('', methods=['GET'])
@api_route
def cursor_get():
    """Export the corpus or prepare sync data (`action=export|sync`)."""
    user_id = require_user_id()
    action = request.args.get('action', 'export')

    if action == 'export':
        return jsonify(export_corpus(user_id).model_dump(mode='json'))
    if action == 'sync':
        return jsonify(sync_workspace(user_id, request.args.get('api_endpoint')))
    raise ApiError(400, "Invalid action", {"action": action})


@bp.route('', methods=['POST'])
@api_route
def cursor_post():
    """Dispatch on `action`: get_prompts, record_usage or import."""
    user_id = require_user_id()
    body = request_payload()
    action = body.get('action')
    data = body.get('data') or {}

    if action == 'get_prompts':
        prompts = list_visible_prompts(user_id)
        return jsonify({
            'prompts': [
                {
                    'id': str(p.id),
                    'title': p.title,
                    'content': p.content,
                    'description': p.description,
                    'tags': p.tags,
                    'category': p.category.name if p.category else None,
                    'usage_count': p.usage_count,
                }
                for p in prompts
            ]
        })

    if action == 'record_usage':
        prompt_id = data.get('prompt_id') or data.get('promptId')
        if not prompt_id:
            raise ApiError(400, "Prompt ID is required")
        if not record_prompt_usage(prompt_id, user_id, data.get('conversation_id')):
            raise ApiError(404, "Prompt not found")
        return jsonify({'success': True})

    if action == 'import':
        result = import_corpus(user_id, data)
        return jsonify(result.model_dump())

    raise ApiError(400, "Invalid action", {"action": action})
