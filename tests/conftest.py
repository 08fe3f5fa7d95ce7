"""Shared fixtures: an app on in-memory SQLite and signed-in clients."""
from decimal import Decimal
from io import BytesIO

import cloudinary.uploader
import email_validator
import pytest
from PIL import Image

from dashboard import create_app
from dashboard.config import TestingConfig
from dashboard.constants import ROLE_ADMIN, ROLE_SUPER_ADMIN
from dashboard.extensions import db
from dashboard.models import AdminUser, Country, CurrencyRate

# Fixture accounts use the reserved .test domain, which email-validator only
# accepts in its documented test mode
email_validator.TEST_ENVIRONMENT = True

PASSWORD = 'secret123'


@pytest.fixture
def app():
    # Requests must run without an outer app context, otherwise g (and the
    # signed-in user Flask-Login caches there) is shared between clients
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """App context for tests that call services directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email, role=ROLE_ADMIN, allowed_pages=None, name='Test User', active=True):
        user = AdminUser(
            name=name,
            email=email,
            role=role,
            allowed_pages=list(allowed_pages or []),
            active=active
        )
        user.set_password(PASSWORD)
        with app.app_context():
            db.session.add(user)
            db.session.commit()
        return user
    return _make_user


def _signed_in_client(app, email):
    test_client = app.test_client()
    response = test_client.post('/api/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200, response.get_json()
    return test_client


@pytest.fixture
def sign_in(app):
    """Sign a user in on a fresh client."""
    def _sign_in(email):
        return _signed_in_client(app, email)
    return _sign_in


@pytest.fixture
def super_admin(make_user):
    return make_user('owner@ghadaq.test', role=ROLE_SUPER_ADMIN, name='Owner')


@pytest.fixture
def admin_client(app, super_admin):
    """Client signed in as a super admin."""
    return _signed_in_client(app, super_admin.email)


@pytest.fixture
def limited_client(app, make_user):
    """Client signed in as an admin who may only manage products."""
    user = make_user('editor@ghadaq.test', role=ROLE_ADMIN, allowed_pages=['products'], name='Editor')
    return _signed_in_client(app, user.email)


@pytest.fixture
def make_country(app):
    def _make_country(code, currency_code, is_active=False, sort_order=None, name_ar=None, name_en=None):
        country = Country(
            code=code,
            name_ar=name_ar or f'دولة {code}',
            name_en=name_en or f'Country {code}',
            currency_code=currency_code,
            currency_symbol=currency_code,
            flag_emoji='',
            is_active=is_active,
            sort_order=sort_order
        )
        with app.app_context():
            db.session.add(country)
            db.session.commit()
        return country
    return _make_country


@pytest.fixture
def gulf_countries(make_country):
    """Saudi Arabia, Egypt and the UAE active (in that order), Kuwait inactive."""
    return {
        'SA': make_country('SA', 'SAR', True, 0, 'السعودية', 'Saudi Arabia'),
        'EG': make_country('EG', 'EGP', True, 1, 'مصر', 'Egypt'),
        'AE': make_country('AE', 'AED', True, 2, 'الإمارات', 'United Arab Emirates'),
        'KW': make_country('KW', 'KWD', False, None, 'الكويت', 'Kuwait'),
    }


@pytest.fixture
def stored_rates(app):
    """Exact SAR rates so converted amounts are predictable."""
    with app.app_context():
        for to_currency, rate in (('EGP', '13'), ('AED', '0.98')):
            db.session.add(CurrencyRate(
                from_currency='SAR', to_currency=to_currency, rate=Decimal(rate), is_active=True
            ))
        db.session.commit()


@pytest.fixture
def png_bytes():
    buffer = BytesIO()
    Image.new('RGB', (8, 8), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def fake_cloudinary(monkeypatch):
    """Record Cloudinary uploads and deletions instead of calling the CDN."""
    calls = {'upload': [], 'destroy': []}

    def fake_upload(file, **options):
        calls['upload'].append(options)
        public_id = f"{options['folder']}/{options['public_id']}"
        return {
            'public_id': public_id,
            'secure_url': f'https://res.cloudinary.com/test-cloud/image/upload/v1712345678/{public_id}.png',
        }

    def fake_destroy(public_id, **options):
        calls['destroy'].append(public_id)
        return {'result': 'ok' if public_id.startswith('appearance/') else 'not found'}

    monkeypatch.setattr(cloudinary.uploader, 'upload', fake_upload)
    monkeypatch.setattr(cloudinary.uploader, 'destroy', fake_destroy)
    return calls
