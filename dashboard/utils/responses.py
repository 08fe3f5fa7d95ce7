"""JSON envelope helpers shared by the API blueprints."""
from flask import jsonify, request

from dashboard.exceptions import ValidationException

MAX_PAGE_LIMIT = 100
MAX_PAGE = 1_000_000


def api_success(data=None, status=200, message=None):
    payload = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return jsonify(payload), status


def api_error(error, status=400):
    return jsonify({'success': False, 'error': error}), status


def is_api_request():
    return request.path.startswith('/api/') or request.is_json


def get_json_body():
    """Request body as a dict; anything else (missing, invalid, a list) becomes {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_bool(value, default=None):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_positive_int(value, default, name, maximum=None):
    """Parse a query-string integer that must be >= 1 (and <= maximum when given)."""
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{name} must be a positive integer")
    if number < 1:
        raise ValidationException(f"{name} must be a positive integer")
    if maximum is not None and number > maximum:
        raise ValidationException(f"{name} must be at most {maximum}")
    return number


def parse_paging(default_limit):
    """page and limit query arguments, bounded so the offset fits a database integer."""
    page = parse_positive_int(request.args.get('page'), 1, 'page', maximum=MAX_PAGE)
    limit = parse_positive_int(request.args.get('limit'), default_limit, 'limit', maximum=MAX_PAGE_LIMIT)
    return page, limit


def build_pagination(page, limit, total, total_key='totalItems'):
    total_pages = (total + limit - 1) // limit if limit else 0
    return {
        'currentPage': page,
        'totalPages': total_pages,
        total_key: total,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }
