from flask import Blueprint, current_app, request

from dashboard.exceptions import DashboardException
from dashboard.services.activity_service import list_activity
from dashboard.utils.decorators import api_permission_required
from dashboard.utils.responses import api_error, api_success, build_pagination, parse_paging

logs_bp = Blueprint('logs', __name__, url_prefix='/api/logs')


@logs_bp.route('', methods=['GET'])
@api_permission_required('activityLogs')
def list_logs():
    """Newest-first activity log, filterable by resource and action."""
    try:
        page, limit = parse_paging(current_app.config['LOGS_PAGE_SIZE'])
        entries, total = list_activity(
            page,
            limit,
            resource=request.args.get('resource') or None,
            action=request.args.get('action') or None
        )
        return api_success({
            'logs': [entry.to_dict() for entry in entries],
            'pagination': build_pagination(page, limit, total, total_key='totalLogs'),
        })
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error fetching activity logs: {e}', exc_info=True)
        return api_error('Failed to fetch activity logs', 500)
