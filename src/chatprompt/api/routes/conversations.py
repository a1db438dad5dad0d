"""
API endpoints for conversations and their messages.
"""

from flask import Blueprint, jsonify, request

from chatprompt.api.routes.utils import (
    ApiError, api_route, parse_list_param, parse_pagination_params,
    request_payload, require_user_id, require_uuid
)
from chatprompt.core.settings import CONVERSATION_STATUSES, MESSAGE_ROLES
from chatprompt.services import conversation_service

bp = Blueprint('conversations', __name__, url_prefix='/api/conversations')


@bp.route('', methods=['GET'])
@api_route
def get_conversations():
    """Get a page of the user's conversations."""
    user_id = require_user_id()
    limit, offset = parse_pagination_params()

    conversations, total = conversation_service.list_conversations(
        user_id,
        status=request.args.get('status'),
        search=request.args.get('search'),
        tags=parse_list_param('tags'),
        limit=limit,
        offset=offset,
    )
    return jsonify({
        'conversations': [c.model_dump(mode='json') for c in conversations],
        'total': total,
        'limit': limit,
        'offset': offset,
    })


@bp.route('', methods=['POST'])
@api_route
def create_conversation():
    user_id = require_user_id()
    body = request_payload()
    if not body.get('title'):
        raise ApiError(400, "Title is required")

    conversation = conversation_service.create_conversation(
        user_id, body['title'], body.get('description'), body.get('tags')
    )
    return jsonify(conversation.model_dump(mode='json')), 201


@bp.route('/<conversation_id>', methods=['GET'])
@api_route
def get_conversation(conversation_id: str):
    user_id = require_user_id()
    conversation = conversation_service.get_conversation(require_uuid(conversation_id, "conversation ID"), user_id)
    if conversation is None:
        raise ApiError(404, "Conversation not found")
    return jsonify(conversation.model_dump(mode='json'))


@bp.route('/<conversation_id>', methods=['PATCH'])
@api_route
def update_conversation(conversation_id: str):
    user_id = require_user_id()
    body = request_payload()
    if 'status' in body and body['status'] not in CONVERSATION_STATUSES:
        raise ApiError(400, f"Invalid status. Must be one of: {', '.join(CONVERSATION_STATUSES)}")

    conversation = conversation_service.update_conversation(
        require_uuid(conversation_id, "conversation ID"), user_id, body
    )
    if conversation is None:
        raise ApiError(404, "Conversation not found")
    return jsonify(conversation.model_dump(mode='json'))


@bp.route('/<conversation_id>', methods=['DELETE'])
@api_route
def delete_conversation(conversation_id: str):
    """Soft delete; the conversation disappears from every read path."""
    user_id = require_user_id()
    if not conversation_service.delete_conversation(require_uuid(conversation_id, "conversation ID"), user_id):
        raise ApiError(404, "Conversation not found")
    return jsonify({'success': True})


@bp.route('/<conversation_id>/messages', methods=['GET'])
@api_route
def get_messages(conversation_id: str):
    user_id = require_user_id()
    messages = conversation_service.get_conversation_messages(
        require_uuid(conversation_id, "conversation ID"), user_id
    )
    if messages is None:
        raise ApiError(404, "Conversation not found")
    return jsonify({'messages': [m.model_dump(mode='json') for m in messages]})


@bp.route('/<conversation_id>/messages', methods=['POST'])
@api_route
def add_message(conversation_id: str):
    user_id = require_user_id()
    body = request_payload()
    if body.get('role') not in MESSAGE_ROLES:
        raise ApiError(400, f"Invalid role. Must be one of: {', '.join(MESSAGE_ROLES)}")
    if not body.get('content'):
        raise ApiError(400, "Content is required")

    message = conversation_service.add_message(
        require_uuid(conversation_id, "conversation ID"),
        user_id,
        body['role'],
        body['content'],
        body.get('metadata'),
    )
    if message is None:
        raise ApiError(404, "Conversation not found")
    return jsonify(message.model_dump(mode='json')), 201
