"""Server-rendered dashboard screens."""
from io import BytesIO

import pytest

import dashboard
from dashboard.models import Appearance, Country, PaymentSettings


@pytest.mark.parametrize('path', [
    '/', '/products', '/countries', '/countries/reorder', '/currency-rates',
    '/appearance', '/appearance?project=manasik', '/payment-settings', '/logs',
])
def test_screens_render(admin_client, gulf_countries, path):
    response = admin_client.get(path)

    assert response.status_code == 200
    assert b'class="sidebar"' in response.data


def test_sidebar_lists_only_allowed_pages(limited_client):
    html = limited_client.get('/').get_data(as_text=True)

    assert 'href="/products"' in html
    assert 'href="/countries"' not in html
    assert 'href="/logs"' not in html


def test_health(client):
    response = client.get('/_health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_unknown_api_route_is_json(client):
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Not found'}


class TestPreferences:
    """Theme and language cookies."""

    def test_arabic_is_right_to_left_by_default(self, client):
        assert b'dir="rtl"' in client.get('/login').data

    def test_locale_cookie(self, client):
        response = client.get('/locale/en')

        assert response.status_code == 302
        assert 'locale=en' in response.headers['Set-Cookie']
        assert b'dir="ltr"' in client.get('/login').data

    def test_unknown_locale_is_ignored(self, client):
        response = client.get('/locale/fr')

        assert 'Set-Cookie' not in response.headers

    def test_theme_cookie(self, client):
        client.get('/theme/dark')

        assert b'theme-dark' in client.get('/login').data


class TestPageActions:
    """Form posts behind the screens."""

    def test_toggle_country(self, app, admin_client, gulf_countries):
        response = admin_client.post(f"/countries/{gulf_countries['EG'].id}/toggle")

        assert response.status_code == 302
        with app.app_context():
            orders = {country.code: country.sort_order for country in Country.query.all()}
        assert orders == {'SA': 0, 'EG': None, 'AE': 1, 'KW': None}

    def test_reorder_form(self, app, admin_client, gulf_countries):
        ids = [gulf_countries[code].id for code in ('EG', 'AE', 'SA')]

        response = admin_client.post('/countries/reorder', data={'ordered_ids': ids})

        assert response.status_code == 302
        with app.app_context():
            active = [country.code for country in Country.query.order_by(Country.sort_order).all()
                      if country.is_active]
        assert active == ['EG', 'AE', 'SA']

    def test_reorder_form_rejects_inactive(self, admin_client, gulf_countries):
        response = admin_client.post('/countries/reorder', data={'ordered_ids': [gulf_countries['KW'].id]},
                                     follow_redirects=True)

        assert b'flash-error' in response.data

    def test_appearance_textareas(self, app, admin_client):
        response = admin_client.post('/appearance/manasik/save', data={
            'row1': 'https://a.test/1.jpg\r\nhttps://a.test/2.jpg\r\n',
            'row2': '',
        })

        assert response.status_code == 302
        with app.app_context():
            appearance = Appearance.query.filter_by(project='manasik').one()
            assert appearance.row1 == ['https://a.test/1.jpg', 'https://a.test/2.jpg']
            assert appearance.row2 == []

    def test_payment_method_form(self, app, admin_client):
        response = admin_client.post('/payment-settings', data={'project': 'ghadaq', 'payment_method': 'easykash'})

        assert response.status_code == 302
        with app.app_context():
            assert PaymentSettings.query.filter_by(project='ghadaq').one().payment_method == 'easykash'

    def test_currency_rate_form(self, admin_client):
        admin_client.post('/currency-rates', data={'from_currency': 'usd', 'to_currency': 'sar', 'rate': '3.75'})

        rates = admin_client.get('/api/currency-rates').get_json()['data']
        assert [(rate['from'], rate['to'], rate['rate']) for rate in rates] == [('USD', 'SAR', 3.75)]

    def test_appearance_upload_to_unknown_row_never_reaches_cdn(self, app, admin_client, fake_cloudinary,
                                                                 png_bytes):
        response = admin_client.post('/appearance/ghadaq/upload', data={
            'row': 'row9',
            'file': (BytesIO(png_bytes), 'photo.png'),
        }, content_type='multipart/form-data', follow_redirects=True)

        assert b'Invalid row' in response.data
        assert fake_cloudinary['upload'] == []
        with app.app_context():
            assert Appearance.query.count() == 0

    def test_appearance_upload(self, app, admin_client, fake_cloudinary, png_bytes):
        admin_client.post('/appearance/ghadaq/upload', data={
            'row': 'row2',
            'file': (BytesIO(png_bytes), 'photo.png'),
        }, content_type='multipart/form-data')

        with app.app_context():
            appearance = Appearance.query.filter_by(project='ghadaq').one()
            assert appearance.row1 == []
            assert appearance.row2[0].startswith('https://res.cloudinary.com/test-cloud/')


def test_sign_in_prompt_is_translated(client, monkeypatch):
    monkeypatch.setattr(dashboard, '_', lambda message, **kwargs: f'[{message}]')

    response = client.get('/logout', follow_redirects=True)

    assert '[Please sign in to continue]' in response.get_data(as_text=True)
