"""
Project Settings API Routes
Appearance image rows and payment method selection for each storefront project.
"""

from flask import Blueprint, current_app, request

from dashboard.exceptions import DashboardException
from dashboard.extensions import db
from dashboard.services.activity_service import log_activity
from dashboard.services.settings_service import AppearanceService, PaymentSettingsService
from dashboard.utils.decorators import api_permission_required
from dashboard.utils.responses import api_error, api_success, get_json_body

appearance_bp = Blueprint('appearance', __name__, url_prefix='/api/appearance')
payment_settings_bp = Blueprint('payment_settings', __name__, url_prefix='/api/admin/payment-settings')


def _get_appearance(project):
    try:
        return api_success(AppearanceService.get_works_images(project))
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error fetching appearance: {e}', exc_info=True)
        return api_error('Failed to fetch appearance settings', 500)


def _save_appearance(project):
    works_images = get_json_body().get('worksImages')
    try:
        appearance = AppearanceService.save_works_images(project, works_images)
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating appearance: {e}', exc_info=True)
        return api_error('Failed to update appearance settings', 500)

    log_activity(
        'update', 'appearance', project,
        f'Updated {project} appearance ({len(appearance.row1)} row1 imgs, {len(appearance.row2)} row2 imgs)'
    )
    return api_success(appearance.to_dict())


@appearance_bp.route('', methods=['GET'])
def get_default_appearance():
    """Single-storefront clients predating projects read the default project."""
    return _get_appearance(current_app.config['DEFAULT_PROJECT'])


@appearance_bp.route('', methods=['PUT'])
@api_permission_required('appearance')
def update_default_appearance():
    return _save_appearance(current_app.config['DEFAULT_PROJECT'])


@appearance_bp.route('/<project>', methods=['GET'])
def get_appearance(project):
    return _get_appearance(project)


@appearance_bp.route('/<project>', methods=['PUT'])
@api_permission_required('appearance')
def update_appearance(project):
    """
    Request:
        {"worksImages": {"row1": ["https://..."], "row2": []}}
    """
    return _save_appearance(project)


@payment_settings_bp.route('', methods=['GET'])
@api_permission_required('paymentSettings')
def get_payment_settings():
    """Settings of one project (?project=) or of every project. Missing records get the default method."""
    project = request.args.get('project')
    try:
        if project:
            return api_success(PaymentSettingsService.get_or_create(project).to_dict())
        return api_success([settings.to_dict() for settings in PaymentSettingsService.get_all()])
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error fetching payment settings: {e}', exc_info=True)
        return api_error('Failed to fetch payment settings', 500)


@payment_settings_bp.route('', methods=['PUT'])
@api_permission_required('paymentSettings')
def update_payment_settings():
    data = get_json_body()
    try:
        settings = PaymentSettingsService.update(data.get('project'), data.get('paymentMethod'))
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating payment settings: {e}', exc_info=True)
        return api_error('Failed to update payment settings', 500)

    log_activity(
        'update', 'paymentSettings', settings.id,
        f'Updated {settings.project} payment method to {settings.payment_method}'
    )
    return api_success(settings.to_dict(), message='Payment settings updated successfully')
