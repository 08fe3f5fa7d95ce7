from functools import wraps

from flask import flash, redirect, request, url_for
from flask_babel import gettext as _
from flask_login import current_user

from dashboard.exceptions import AuthorizationException
from dashboard.utils.responses import api_error


def admin_required(f):
    """Page decorator: any signed-in dashboard user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            flash(_('Please sign in to continue'), 'error')
            return redirect(url_for('auth.login', next=request.full_path))
        return f(*args, **kwargs)
    return decorated_function


def page_permission_required(page_key):
    """Page decorator: signed-in user whose role or allowed pages include page_key."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                flash(_('Please sign in to continue'), 'error')
                return redirect(url_for('auth.login', next=request.full_path))
            if not current_user.can_access(page_key):
                flash(_('You do not have access to this page'), 'error')
                return redirect(url_for('pages.dashboard_home'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def api_login_required(f):
    """Decorator to require a signed-in user for API endpoints."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return api_error('Authentication required', 401)
        return f(*args, **kwargs)
    return decorated_function


def api_permission_required(page_key):
    """Decorator to require access to page_key for API endpoints."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return api_error('Authentication required', 401)
            if not current_user.can_access(page_key):
                raise AuthorizationException('Access denied')
            return f(*args, **kwargs)
        return decorated_function
    return decorator
