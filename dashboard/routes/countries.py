"""
Country API Routes
Country listing for the storefronts and admin endpoints for activation and ordering.
"""

from flask import Blueprint, current_app, request

from dashboard.exceptions import DashboardException
from dashboard.extensions import db
from dashboard.services.activity_service import log_activity
from dashboard.services.country_service import CountryService
from dashboard.utils.decorators import api_permission_required
from dashboard.utils.responses import api_error, api_success, get_json_body, parse_bool

countries_bp = Blueprint('countries', __name__, url_prefix='/api/countries')


def _request_locale():
    locale = (request.args.get('locale') or '').lower()
    return locale if locale in current_app.config['LANGUAGES'] else current_app.config['BABEL_DEFAULT_LOCALE']


@countries_bp.route('', methods=['GET'])
def list_countries():
    """
    List countries in display order.

    Query:
        active: "false" to include inactive countries (default: active only)
        locale: "ar" or "en", used to break ties between unordered countries
    """
    try:
        active_only = parse_bool(request.args.get('active'), default=True)
        countries = CountryService.list_countries(active_only=active_only, locale=_request_locale())
        return api_success([country.to_dict() for country in countries])
    except Exception as e:
        current_app.logger.error(f'Error fetching countries: {e}', exc_info=True)
        return api_error('Failed to fetch countries', 500)


@countries_bp.route('/<country_id>', methods=['GET'])
def get_country(country_id):
    try:
        country = CountryService.get_country(country_id)
        return api_success(country.to_dict())
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error fetching country {country_id}: {e}', exc_info=True)
        return api_error('Failed to fetch country', 500)


@countries_bp.route('', methods=['POST'])
@api_permission_required('countries')
def create_country():
    try:
        country = CountryService.create_country(get_json_body())
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating country: {e}', exc_info=True)
        return api_error('Failed to create country', 500)

    log_activity('create', 'country', country.id, f'Created country {country.name_en} ({country.code})')
    return api_success(country.to_dict(), 201)


@countries_bp.route('/reorder', methods=['PUT'])
@api_permission_required('countries')
def reorder_countries():
    """
    Reorder active countries.

    Request:
        {"orderedIds": ["3", "1", "7"]}

    Every country not listed gets a null sortOrder. Responds with the full
    country list in display order.
    """
    data = get_json_body()
    try:
        countries = CountryService.reorder_countries(data.get('orderedIds'))
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error reordering countries: {e}', exc_info=True)
        return api_error('Failed to reorder countries', 500)

    log_activity('update', 'country', 'bulk', f"Reordered {len(data['orderedIds'])} countries")
    return api_success(
        [country.to_dict() for country in countries],
        message='Countries reordered successfully'
    )


@countries_bp.route('/<country_id>', methods=['PUT'])
@api_permission_required('countries')
def update_country(country_id):
    data = get_json_body()
    try:
        country = CountryService.update_country(country_id, data)
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating country {country_id}: {e}', exc_info=True)
        return api_error('Failed to update country', 500)

    if 'isActive' in data:
        details = f"{'Activated' if country.is_active else 'Deactivated'} country {country.name_en} ({country.code})"
    else:
        details = f'Updated country {country.name_en} ({country.code})'
    log_activity('update', 'country', country.id, details)
    return api_success(country.to_dict())


@countries_bp.route('/<country_id>', methods=['DELETE'])
@api_permission_required('countries')
def delete_country(country_id):
    try:
        country = CountryService.delete_country(country_id)
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting country {country_id}: {e}', exc_info=True)
        return api_error('Failed to delete country', 500)

    log_activity('delete', 'country', country_id, f'Deleted country {country.name_en} ({country.code})')
    return api_success(None, message='Country deleted successfully')
