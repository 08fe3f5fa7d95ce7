"""Exchange rate lookup, conversion and provider sync."""
from decimal import Decimal

import pytest
import requests

from dashboard.exceptions import CurrencyRateException, ValidationException
from dashboard.extensions import db
from dashboard.models import CurrencyRate
from dashboard.services import currency_service
from dashboard.utils import currency_api
from dashboard.utils.currency_rates import get_fallback_rate


def _store(from_currency, to_currency, rate, is_active=True):
    db.session.add(CurrencyRate(
        from_currency=from_currency,
        to_currency=to_currency,
        rate=Decimal(rate),
        is_active=is_active
    ))
    db.session.commit()


class FakeResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f'{self.status_code} error')

    def json(self):
        return self.payload


class TestGetRate:
    """Lookup order of currency_service.get_rate."""

    def test_same_currency(self, app_ctx):
        assert currency_service.get_rate('sar', 'SAR') == Decimal('1')

    def test_direct_rate_wins(self, app_ctx):
        _store('SAR', 'EGP', '13')

        assert currency_service.get_rate('SAR', 'EGP') == Decimal('13')

    def test_inverse_of_reverse_rate(self, app_ctx):
        _store('EGP', 'SAR', '0.08')

        assert currency_service.get_rate('SAR', 'EGP') == Decimal('12.5')

    def test_inactive_rates_are_ignored(self, app_ctx):
        _store('SAR', 'EGP', '99', is_active=False)

        assert currency_service.get_rate('SAR', 'EGP') == get_fallback_rate('SAR', 'EGP')

    def test_cross_rate_through_usd(self, app_ctx):
        _store('USD', 'SAR', '4')
        _store('USD', 'EGP', '50')

        # SAR -> USD is the inverse of USD -> SAR
        assert currency_service.get_rate('SAR', 'EGP') == Decimal('12.5')

    def test_fallback_table(self, app_ctx):
        assert currency_service.get_rate('USD', 'SAR') == Decimal('3.75')

    def test_unknown_currency(self, app_ctx):
        assert currency_service.get_rate('SAR', 'XYZ') is None
        assert currency_service.get_rate('', 'SAR') is None


class TestConversion:

    def test_convert_amount_rounds_half_up(self, app_ctx):
        _store('SAR', 'EGP', '0.125')

        assert currency_service.convert_amount(1, 'SAR', 'EGP') == Decimal('0.13')
        assert currency_service.convert_amount('2.5', 'SAR', 'EGP') == Decimal('0.31')

    def test_convert_to_multiple_omits_unknown(self, app_ctx):
        _store('SAR', 'EGP', '13')

        converted = currency_service.convert_to_multiple_currencies(10, 'SAR', ['SAR', 'EGP', 'XYZ'])

        assert converted == {'SAR': Decimal('10.00'), 'EGP': Decimal('130.00')}


class TestUpsertRate:

    def test_upsert_updates_existing_pair(self, app_ctx):
        currency_service.upsert_rate('usd', 'egp', '48')
        record = currency_service.upsert_rate('USD', 'EGP', 49.5, notes='bank rate')

        assert CurrencyRate.query.count() == 1
        assert record.rate == Decimal('49.5')
        assert record.notes == 'bank rate'
        assert record.api_provider is None

    @pytest.mark.parametrize('args', [
        ('US', 'EGP', 1),
        ('USD', 'USD', 1),
        ('USD', 'EGP', 0),
        ('USD', 'EGP', 'abc'),
        ('USD', 'EGP', None),
    ])
    def test_invalid_rates(self, app_ctx, args):
        with pytest.raises(ValidationException):
            currency_service.upsert_rate(*args)


class TestSync:
    """Provider fetch and stored USD rates."""

    def test_sync_stores_usd_rates(self, app_ctx, monkeypatch):
        def fake_get(url, timeout):
            assert url == 'https://open.er-api.com/v6/latest/USD'
            return FakeResponse({'result': 'success', 'rates': {'USD': 1, 'SAR': 3.75, 'EGP': 49.1, 'JPY': 150}})

        monkeypatch.setattr(currency_api.requests, 'get', fake_get)

        stored = currency_service.sync_rates(['SAR', 'EGP', 'USD', 'XYZ'])

        assert stored == {'SAR': 3.75, 'EGP': 49.1}
        record = CurrencyRate.query.filter_by(from_currency='USD', to_currency='EGP').one()
        assert record.api_provider == 'open-er-api'
        assert record.last_api_sync is not None

    def test_keyed_provider_first(self, app_ctx, monkeypatch):
        app_ctx.config['EXCHANGERATE_API_KEY'] = 'secret'
        calls = []

        def fake_get(url, timeout):
            calls.append(url)
            return FakeResponse({'result': 'success', 'conversion_rates': {'SAR': 3.75}})

        monkeypatch.setattr(currency_api.requests, 'get', fake_get)

        assert currency_service.sync_rates(['SAR']) == {'SAR': 3.75}
        assert calls == ['https://v6.exchangerate-api.com/v6/secret/latest/USD']

    def test_falls_back_to_open_api(self, monkeypatch):
        def fake_get(url, timeout):
            if 'exchangerate-api' in url:
                raise requests.exceptions.ConnectionError('down')
            return FakeResponse({'result': 'success', 'rates': {'AED': 3.6725}})

        monkeypatch.setattr(currency_api.requests, 'get', fake_get)

        rates, provider, error = currency_api.fetch_usd_rates(['AED'], api_key='secret')

        assert rates == {'AED': Decimal('3.6725')}
        assert provider == 'open-er-api'
        assert error is None

    def test_every_provider_failing_raises(self, app_ctx, monkeypatch):
        monkeypatch.setattr(currency_api.requests, 'get', lambda url, timeout: FakeResponse({}, status_code=500))

        with pytest.raises(CurrencyRateException) as excinfo:
            currency_service.sync_rates(['SAR'])

        assert excinfo.value.status_code == 502

    def test_nothing_to_sync(self, app_ctx, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError('no request expected')

        monkeypatch.setattr(currency_api.requests, 'get', fail)

        assert currency_service.sync_rates(['USD']) == {}


class TestCurrencyRateApi:
    """/api/currency-rates"""

    def test_put_and_list(self, admin_client):
        response = admin_client.put('/api/currency-rates', json={'from': 'USD', 'to': 'EGP', 'rate': 48.5})

        assert response.status_code == 200
        assert response.get_json()['data']['rate'] == 48.5
        rates = admin_client.get('/api/currency-rates').get_json()['data']
        assert [(rate['from'], rate['to']) for rate in rates] == [('USD', 'EGP')]

    def test_put_validates(self, admin_client):
        response = admin_client.put('/api/currency-rates', json={'from': 'USD', 'to': 'EGP', 'rate': -1})

        assert response.status_code == 400

    def test_sync_endpoint_reports_provider_failure(self, admin_client, gulf_countries, monkeypatch):
        monkeypatch.setattr(currency_api.requests, 'get', lambda url, timeout: FakeResponse({}, status_code=503))

        response = admin_client.post('/api/currency-rates/sync')

        assert response.status_code == 502
        assert response.get_json()['success'] is False

    def test_sync_endpoint_uses_active_currencies(self, admin_client, gulf_countries, monkeypatch):
        monkeypatch.setattr(
            currency_api.requests, 'get',
            lambda url, timeout: FakeResponse({'result': 'success', 'rates': {'SAR': 3.75, 'EGP': 49, 'AED': 3.67, 'KWD': 0.3}})
        )

        response = admin_client.post('/api/currency-rates/sync')

        assert response.status_code == 200
        # Kuwait is inactive
        assert response.get_json()['data'] == {'AED': 3.67, 'EGP': 49.0, 'SAR': 3.75}

    def test_requires_permission(self, limited_client):
        assert limited_client.get('/api/currency-rates').status_code == 403

