"""
Authentication Routes
Session login for dashboard operators, as a form page and as a JSON API.
"""
from datetime import datetime
from urllib.parse import urlparse

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_babel import gettext as _
from flask_login import current_user, login_required, login_user, logout_user

from dashboard.extensions import csrf, db
from dashboard.forms import LoginForm
from dashboard.models.user import AdminUser
from dashboard.services.activity_service import log_activity
from dashboard.utils.decorators import api_login_required
from dashboard.utils.responses import api_error, api_success, get_json_body

auth_bp = Blueprint('auth', __name__)


def _authenticate(email, password):
    """Return the active user matching the credentials, or None."""
    if not email or not password:
        return None
    user = AdminUser.query.filter(db.func.lower(AdminUser.email) == email.strip().lower()).first()
    if user is None or not user.is_active or not user.check_password(password):
        return None
    return user


def _sign_in(user, remember=False):
    login_user(user, remember=remember)
    user.last_login_at = datetime.utcnow()
    db.session.commit()
    log_activity('login', 'auth', user.id, f'{user.email} signed in', user=user)


def _safe_next(target):
    """Only allow redirects back into this site."""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.netloc or parsed.scheme:
        return None
    return target if target.startswith('/') else None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('pages.dashboard_home'))

    form = LoginForm()
    if form.validate_on_submit():
        user = _authenticate(form.email.data, form.password.data)
        if user:
            _sign_in(user, remember=form.remember.data)
            return redirect(_safe_next(request.args.get('next')) or url_for('pages.dashboard_home'))
        current_app.logger.warning(f'Failed dashboard login for {form.email.data}')
        flash(_('Invalid email or password'), 'error')

    return render_template('login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    user = current_user._get_current_object()
    logout_user()
    log_activity('logout', 'auth', user.id, f'{user.email} signed out', user=user)
    flash(_('You have been logged out.'), 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/api/auth/login', methods=['POST'])
@csrf.exempt
def api_login():
    """
    Request:
        {"email": "admin@example.com", "password": "..."}
    """
    data = get_json_body()
    email = data.get('email') if isinstance(data.get('email'), str) else None
    password = data.get('password') if isinstance(data.get('password'), str) else None
    if not email or not password:
        return api_error('Email and password are required', 400)

    user = _authenticate(email, password)
    if user is None:
        current_app.logger.warning(f'Failed API login for {email}')
        return api_error('Invalid email or password', 401)

    _sign_in(user)
    return api_success(user.to_dict(), message='Logged in successfully')


@auth_bp.route('/api/auth/logout', methods=['POST'])
@csrf.exempt
@api_login_required
def api_logout():
    user = current_user._get_current_object()
    logout_user()
    log_activity('logout', 'auth', user.id, f'{user.email} signed out', user=user)
    return api_success(None, message='Logged out successfully')


@auth_bp.route('/api/auth/me', methods=['GET'])
@api_login_required
def me():
    return api_success(current_user.to_dict())
