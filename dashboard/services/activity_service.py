"""
Activity Service
Records dashboard mutations and lists them for the activity log page.
"""
import logging
from typing import Optional, Tuple

from flask import has_request_context, request
from flask_login import current_user

from dashboard.constants import LOG_ACTIONS, LOG_RESOURCES
from dashboard.exceptions import ValidationException
from dashboard.extensions import db
from dashboard.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


def _client_ip() -> Optional[str]:
    if not has_request_context():
        return None
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


def log_activity(
    action: str,
    resource: str,
    resource_id=None,
    details: Optional[str] = None,
    user=None
) -> Optional[ActivityLog]:
    """
    Record an activity log entry for the acting user.

    Must be called after the mutation it describes has been committed: a failure
    here is logged and swallowed so it can never undo or fail that mutation.
    """
    if user is None and has_request_context() and current_user.is_authenticated:
        user = current_user

    try:
        entry = ActivityLog(
            user_id=getattr(user, 'id', None),
            user_name=getattr(user, 'name', None),
            user_email=getattr(user, 'email', None),
            action=action,
            resource=resource,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
            ip_address=_client_ip()
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to record activity {action} {resource}:{resource_id}: {e}", exc_info=True)
        return None


def list_activity(
    page: int = 1,
    limit: int = 20,
    resource: Optional[str] = None,
    action: Optional[str] = None
) -> Tuple[list, int]:
    """
    Newest-first page of activity log entries.

    Returns:
        Tuple of (entries, total matching entries)
    """
    if resource and resource not in LOG_RESOURCES:
        raise ValidationException(f"Invalid resource filter: {resource}")
    if action and action not in LOG_ACTIONS:
        raise ValidationException(f"Invalid action filter: {action}")

    query = ActivityLog.query
    if resource:
        query = query.filter(ActivityLog.resource == resource)
    if action:
        query = query.filter(ActivityLog.action == action)

    total = query.count()
    entries = query.order_by(
        ActivityLog.created_at.desc(),
        ActivityLog.id.desc()
    ).offset((page - 1) * limit).limit(limit).all()
    return entries, total
