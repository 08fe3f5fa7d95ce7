"""
Currency Rate API Routes
Stored exchange rates used by product auto-pricing.
"""

from flask import Blueprint, current_app

from dashboard.exceptions import DashboardException
from dashboard.extensions import db
from dashboard.services import currency_service
from dashboard.services.activity_service import log_activity
from dashboard.services.country_service import CountryService
from dashboard.utils.decorators import api_permission_required
from dashboard.utils.responses import api_error, api_success, get_json_body

currency_bp = Blueprint('currency', __name__, url_prefix='/api/currency-rates')


@currency_bp.route('', methods=['GET'])
@api_permission_required('currencyRates')
def list_rates():
    try:
        return api_success([rate.to_dict() for rate in currency_service.list_rates()])
    except Exception as e:
        current_app.logger.error(f'Error fetching currency rates: {e}', exc_info=True)
        return api_error('Failed to fetch currency rates', 500)


@currency_bp.route('', methods=['PUT'])
@api_permission_required('currencyRates')
def upsert_rate():
    """
    Request:
        {"from": "USD", "to": "EGP", "rate": 48.5, "notes": "optional"}
    """
    data = get_json_body()
    try:
        rate = currency_service.upsert_rate(data.get('from'), data.get('to'), data.get('rate'), notes=data.get('notes'))
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error saving currency rate: {e}', exc_info=True)
        return api_error('Failed to save currency rate', 500)

    log_activity('update', 'currencyRate', rate.id, f'Set 1 {rate.from_currency} = {rate.rate} {rate.to_currency}')
    return api_success(rate.to_dict())


@currency_bp.route('/sync', methods=['POST'])
@api_permission_required('currencyRates')
def sync_rates():
    """Refresh USD rates for the currencies of active countries."""
    try:
        stored = currency_service.sync_rates(CountryService.active_currency_codes())
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error syncing currency rates: {e}', exc_info=True)
        return api_error('Failed to sync currency rates', 500)

    log_activity('update', 'currencyRate', 'bulk', f'Synced {len(stored)} USD rates')
    return api_success(stored, message='Currency rates synced successfully')
