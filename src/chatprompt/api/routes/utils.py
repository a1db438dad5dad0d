"""
Utility functions for API routes.
"""

from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar
import uuid

from flask import Response, current_app, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

T = TypeVar('T')


class ApiError(Exception):
    """An error that maps directly onto an HTTP error response."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def validate_uuid(uuid_string: str) -> bool:
    """Validate that a string is a valid UUID."""
    try:
        uuid_obj = uuid.UUID(uuid_string)
        return str(uuid_obj) == uuid_string.lower()
    except (ValueError, AttributeError, TypeError):
        return False


def request_payload() -> Dict[str, Any]:
    """JSON body of the request, or an empty dict when there is none."""
    if request.method in ('POST', 'PUT', 'PATCH'):
        body = request.get_json(silent=True)
        if body is not None and not isinstance(body, dict):
            raise ApiError(400, "Request body must be a JSON object")
        return body or {}
    return {}


def require_user_id() -> uuid.UUID:
    """
    Read the acting user from the JSON body or the query string.

    Both `user_id` and `userId` are accepted.
    """
    body = request_payload()
    value = (
        body.get('user_id') or body.get('userId')
        or request.args.get('user_id') or request.args.get('userId')
    )
    if not value:
        raise ApiError(400, "User ID is required")
    if not validate_uuid(str(value)):
        raise ApiError(400, "Invalid user ID format")
    return uuid.UUID(str(value))


def require_uuid(value: str, name: str = "ID") -> uuid.UUID:
    if not validate_uuid(value):
        raise ApiError(400, f"Invalid {name} format")
    return uuid.UUID(value)


def parse_pagination_params(default_limit: int = 20) -> Tuple[int, int]:
    """Parse limit/offset from the query string or JSON body."""
    body = request_payload()
    try:
        limit = int(body.get('limit', request.args.get('limit', default_limit)))
        offset = int(body.get('offset', request.args.get('offset', 0)))
    except (TypeError, ValueError):
        raise ApiError(400, "limit and offset must be integers")

    # Ensure reasonable values
    limit = max(1, min(100, limit))
    offset = max(0, offset)

    return limit, offset


def parse_list_param(name: str) -> Optional[List[str]]:
    """Read a list from repeated query args or one comma-separated value."""
    values = request.args.getlist(name)
    if len(values) == 1:
        values = values[0].split(',')
    values = [v.strip() for v in values if v.strip()]
    return values or None


def error_response(status_code: int, message: str, details: Optional[Dict[str, Any]] = None) -> Response:
    """Create a standardized error response."""
    response = {
        'error': message,
        'code': status_code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def api_route(f: Callable[..., T]) -> Callable[..., T]:
    """Decorator that turns request and database failures into error responses."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except HTTPException:
            # Let Flask handle HTTP exceptions
            raise
        except ApiError as e:
            return error_response(e.status_code, e.message, e.details)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False, include_input=False)
            return error_response(400, "Invalid request", {"errors": errors})
        except SQLAlchemyError as e:
            current_app.logger.error(f"Database error: {str(e)}")
            return error_response(500, "Database error occurred",
                                  {"detail": str(e)})
        except Exception as e:
            current_app.logger.exception(f"Unexpected error: {str(e)}")
            return error_response(500, "An unexpected error occurred",
                                  {"detail": str(e) if current_app.debug else None})
    return wrapper
