"""
Dashboard Pages
Server-rendered admin screens. Each form post goes through the same services as
the JSON API, then redirects back with a flashed result.
"""
from flask import Blueprint, current_app, flash, make_response, redirect, render_template, request, url_for
from flask_babel import get_locale
from flask_babel import gettext as _

from dashboard.constants import LOG_ACTIONS, LOG_RESOURCES, PAYMENT_METHODS, PROJECTS, is_valid_project
from dashboard.exceptions import DashboardException, ValidationException
from dashboard.extensions import db
from dashboard.models.activity_log import ActivityLog
from dashboard.models.country import Country
from dashboard.models.product import Product
from dashboard.services import currency_service
from dashboard.services.activity_service import list_activity, log_activity
from dashboard.services.country_service import CountryService
from dashboard.services.product_service import ProductService
from dashboard.services.settings_service import ROWS, AppearanceService, PaymentSettingsService
from dashboard.utils.cloudinary_utils import delete_image, extract_public_id, is_cloudinary_url, upload_image
from dashboard.utils.decorators import admin_required, page_permission_required
from dashboard.utils.responses import MAX_PAGE, build_pagination

pages_bp = Blueprint('pages', __name__)

COOKIE_MAX_AGE = 365 * 24 * 3600
THEMES = ('light', 'dark')


def _current_locale():
    return str(get_locale() or current_app.config['BABEL_DEFAULT_LOCALE'])


def _page_arg(name='page'):
    """Lenient page number for HTML screens: anything invalid means page 1."""
    try:
        return min(max(int(request.args.get(name, 1)), 1), MAX_PAGE)
    except (TypeError, ValueError):
        return 1


def _back(default_endpoint, **values):
    return redirect(request.referrer or url_for(default_endpoint, **values))


def _flash_failure(e, fallback):
    db.session.rollback()
    if isinstance(e, DashboardException):
        flash(e.message, 'error')
    else:
        current_app.logger.error(f'{fallback}: {e}', exc_info=True)
        flash(_(fallback), 'error')


@pages_bp.route('/')
@admin_required
def dashboard_home():
    stats = {
        'products': Product.query.count(),
        'active_countries': Country.query.filter(Country.is_active == True).count(),  # noqa: E712
        'log_entries': ActivityLog.query.count(),
    }
    recent, _total = list_activity(1, 5)
    return render_template('dashboard.html', stats=stats, recent=recent)


# Products

@pages_bp.route('/products')
@page_permission_required('products')
def products_page():
    page = _page_arg()
    limit = current_app.config['PRODUCTS_PAGE_SIZE']
    products, total = ProductService.list_products(page, limit)
    return render_template(
        'products.html',
        products=products,
        pagination=build_pagination(page, limit, total, total_key='totalProducts'),
        target_currencies=CountryService.active_currency_codes(),
    )


@pages_bp.route('/products/<int:product_id>/auto-price', methods=['POST'])
@page_permission_required('products')
def auto_price_product(product_id):
    override_manual = request.form.get('override_manual') == '1'
    try:
        product = ProductService.auto_price(product_id, override_manual=override_manual)
    except Exception as e:
        _flash_failure(e, 'Failed to auto-price product')
        return _back('pages.products_page')

    log_activity(
        'update', 'product', product.id,
        f"Auto-priced product {product.name_ar}{' (manual prices overridden)' if override_manual else ''}"
    )
    flash(_('Prices updated for %(name)s', name=product.name_en), 'success')
    return _back('pages.products_page')


# Countries

@pages_bp.route('/countries')
@page_permission_required('countries')
def countries_page():
    locale = _current_locale()
    search = (request.args.get('q') or '').strip()
    status = request.args.get('status', 'all')

    countries = CountryService.list_countries(active_only=False, locale=locale)
    if status == 'active':
        countries = [country for country in countries if country.is_active]
    elif status == 'inactive':
        countries = [country for country in countries if not country.is_active]
    if search:
        needle = search.casefold()
        countries = [
            country for country in countries
            if needle in country.name_ar.casefold()
            or needle in country.name_en.casefold()
            or needle in country.code.casefold()
            or needle in (country.currency_code or '').casefold()
        ]
    return render_template('countries.html', countries=countries, search=search, status=status, locale=locale)


@pages_bp.route('/countries/<int:country_id>/toggle', methods=['POST'])
@page_permission_required('countries')
def toggle_country(country_id):
    try:
        country = CountryService.get_country(country_id)
        country = CountryService.update_country(country_id, {'isActive': not country.is_active})
    except Exception as e:
        _flash_failure(e, 'Failed to update country')
        return _back('pages.countries_page')

    state = 'activated' if country.is_active else 'deactivated'
    log_activity('update', 'country', country.id, f'Country {country.name_en} ({country.code}) {state}')
    return _back('pages.countries_page')


@pages_bp.route('/countries/reorder', methods=['GET', 'POST'])
@page_permission_required('countries')
def countries_reorder_page():
    if request.method == 'POST':
        ordered_ids = request.form.getlist('ordered_ids')
        try:
            CountryService.reorder_countries(ordered_ids)
        except Exception as e:
            _flash_failure(e, 'Failed to reorder countries')
            return redirect(url_for('pages.countries_reorder_page'))

        log_activity('update', 'country', 'bulk', f'Reordered {len(ordered_ids)} countries')
        flash(_('Countries reordered successfully'), 'success')
        return redirect(url_for('pages.countries_page'))

    countries = CountryService.list_countries(active_only=True, locale=_current_locale())
    return render_template('countries_reorder.html', countries=countries)


# Currency rates

@pages_bp.route('/currency-rates', methods=['GET', 'POST'])
@page_permission_required('currencyRates')
def currency_rates_page():
    if request.method == 'POST':
        try:
            rate = currency_service.upsert_rate(
                request.form.get('from_currency'),
                request.form.get('to_currency'),
                request.form.get('rate'),
                notes=request.form.get('notes') or None
            )
        except Exception as e:
            _flash_failure(e, 'Failed to save currency rate')
            return redirect(url_for('pages.currency_rates_page'))

        log_activity('update', 'currencyRate', rate.id, f'Set 1 {rate.from_currency} = {rate.rate} {rate.to_currency}')
        flash(_('Currency rate saved'), 'success')
        return redirect(url_for('pages.currency_rates_page'))

    return render_template(
        'currency_rates.html',
        rates=currency_service.list_rates(),
        active_currencies=CountryService.active_currency_codes(),
    )


@pages_bp.route('/currency-rates/sync', methods=['POST'])
@page_permission_required('currencyRates')
def sync_currency_rates():
    try:
        stored = currency_service.sync_rates(CountryService.active_currency_codes())
    except Exception as e:
        _flash_failure(e, 'Failed to sync currency rates')
        return redirect(url_for('pages.currency_rates_page'))

    log_activity('update', 'currencyRate', 'bulk', f'Synced {len(stored)} USD rates')
    flash(_('%(count)d rates synced', count=len(stored)), 'success')
    return redirect(url_for('pages.currency_rates_page'))


# Appearance

@pages_bp.route('/appearance')
@page_permission_required('appearance')
def appearance_page():
    project = request.args.get('project') or current_app.config['DEFAULT_PROJECT']
    if not is_valid_project(project):
        flash(_('Invalid project name'), 'error')
        project = current_app.config['DEFAULT_PROJECT']
    return render_template(
        'appearance.html',
        project=project,
        projects=PROJECTS,
        works_images=AppearanceService.get_works_images(project),
    )


def _appearance_redirect(project):
    return redirect(url_for('pages.appearance_page', project=project))


def _log_appearance(project, appearance, what):
    log_activity(
        'update', 'appearance', project,
        f'{what} ({len(appearance.row1)} row1 imgs, {len(appearance.row2)} row2 imgs)'
    )


@pages_bp.route('/appearance/<project>/upload', methods=['POST'])
@page_permission_required('appearance')
def appearance_upload(project):
    row = request.form.get('row', 'row1')
    try:
        # Validate before anything reaches the CDN
        AppearanceService.get_works_images(project)
        if row not in ROWS:
            raise ValidationException('Invalid row')
        uploaded = upload_image(request.files.get('file'), folder='appearance')
        appearance = AppearanceService.add_image(project, row, uploaded['url'])
    except Exception as e:
        _flash_failure(e, 'Failed to upload image')
        return _appearance_redirect(project)

    _log_appearance(project, appearance, f'Added image to {project} {row}')
    flash(_('Image uploaded'), 'success')
    return _appearance_redirect(project)


@pages_bp.route('/appearance/<project>/delete', methods=['POST'])
@page_permission_required('appearance')
def appearance_delete(project):
    row = request.form.get('row', '')
    try:
        index = int(request.form.get('index', -1))
        url = AppearanceService.get_works_images(project).get(row, [])[index] if index >= 0 else None
        appearance = AppearanceService.remove_image(project, row, index)
    except Exception as e:
        _flash_failure(e, 'Failed to delete image')
        return _appearance_redirect(project)

    # The row is already saved; a CDN failure only leaves an orphaned asset
    if url and is_cloudinary_url(url):
        public_id = extract_public_id(url)
        if public_id:
            try:
                delete_image(public_id)
            except DashboardException as e:
                current_app.logger.warning(f'Could not delete CDN image {public_id}: {e.message}')

    _log_appearance(project, appearance, f'Removed image from {project} {row}')
    flash(_('Image removed'), 'success')
    return _appearance_redirect(project)


@pages_bp.route('/appearance/<project>/move', methods=['POST'])
@page_permission_required('appearance')
def appearance_move(project):
    row = request.form.get('row', '')
    try:
        appearance = AppearanceService.move_image(project, row, int(request.form.get('index', -1)))
    except Exception as e:
        _flash_failure(e, 'Failed to move image')
        return _appearance_redirect(project)

    _log_appearance(project, appearance, f'Moved image out of {project} {row}')
    return _appearance_redirect(project)


@pages_bp.route('/appearance/<project>/save', methods=['POST'])
@page_permission_required('appearance')
def appearance_save(project):
    """Save both rows from textareas, one URL per line."""
    works_images = {
        row: (request.form.get(row) or '').splitlines()
        for row in ('row1', 'row2')
    }
    try:
        appearance = AppearanceService.save_works_images(project, works_images)
    except Exception as e:
        _flash_failure(e, 'Failed to update appearance settings')
        return _appearance_redirect(project)

    _log_appearance(project, appearance, f'Updated {project} appearance')
    flash(_('Appearance saved'), 'success')
    return _appearance_redirect(project)


# Payment settings

@pages_bp.route('/payment-settings', methods=['GET', 'POST'])
@page_permission_required('paymentSettings')
def payment_settings_page():
    if request.method == 'POST':
        try:
            settings = PaymentSettingsService.update(
                request.form.get('project'),
                request.form.get('payment_method')
            )
        except Exception as e:
            _flash_failure(e, 'Failed to update payment settings')
            return redirect(url_for('pages.payment_settings_page'))

        log_activity(
            'update', 'paymentSettings', settings.id,
            f'Updated {settings.project} payment method to {settings.payment_method}'
        )
        flash(_('Payment settings updated successfully'), 'success')
        return redirect(url_for('pages.payment_settings_page'))

    return render_template(
        'payment_settings.html',
        settings=PaymentSettingsService.get_all(),
        projects={project['key']: project['label'] for project in PROJECTS},
        methods=PAYMENT_METHODS,
    )


# Activity logs

@pages_bp.route('/logs')
@page_permission_required('activityLogs')
def logs_page():
    page = _page_arg()
    limit = current_app.config['LOGS_PAGE_SIZE']
    resource = request.args.get('resource') or None
    action = request.args.get('action') or None
    if resource not in LOG_RESOURCES:
        resource = None
    if action not in LOG_ACTIONS:
        action = None

    entries, total = list_activity(page, limit, resource=resource, action=action)
    return render_template(
        'logs.html',
        entries=entries,
        pagination=build_pagination(page, limit, total, total_key='totalLogs'),
        resource=resource,
        action=action,
        resources=LOG_RESOURCES,
        actions=LOG_ACTIONS,
    )


# UI preferences

@pages_bp.route('/theme/<mode>')
def set_theme(mode):
    response = make_response(redirect(request.referrer or url_for('pages.dashboard_home')))
    if mode in THEMES:
        response.set_cookie('theme', mode, max_age=COOKIE_MAX_AGE, samesite='Lax')
    return response


@pages_bp.route('/locale/<code>')
def set_locale(code):
    response = make_response(redirect(request.referrer or url_for('pages.dashboard_home')))
    if code in current_app.config['LANGUAGES']:
        response.set_cookie('locale', code, max_age=COOKIE_MAX_AGE, samesite='Lax')
    return response
