"""Payment method selection per project."""
import pytest

from dashboard.models import ActivityLog, PaymentSettings


class TestPaymentSettings:
    """/api/admin/payment-settings"""

    def test_missing_record_gets_default_method(self, app, admin_client):
        response = admin_client.get('/api/admin/payment-settings?project=manasik')

        assert response.status_code == 200
        assert response.get_json()['data'] == {'project': 'manasik', 'paymentMethod': 'paymob'}
        with app.app_context():
            assert PaymentSettings.query.count() == 1

    def test_lists_every_project(self, admin_client):
        response = admin_client.get('/api/admin/payment-settings')

        assert response.get_json()['data'] == [
            {'project': 'ghadaq', 'paymentMethod': 'paymob'},
            {'project': 'manasik', 'paymentMethod': 'paymob'},
        ]

    def test_update_method(self, app, admin_client):
        response = admin_client.put('/api/admin/payment-settings',
                                    json={'project': 'ghadaq', 'paymentMethod': 'easykash'})

        assert response.status_code == 200
        payload = response.get_json()
        assert payload['data'] == {'project': 'ghadaq', 'paymentMethod': 'easykash'}
        assert payload['message'] == 'Payment settings updated successfully'
        with app.app_context():
            entry = ActivityLog.query.filter_by(resource='paymentSettings').one()
            assert entry.details == 'Updated ghadaq payment method to easykash'

    def test_update_twice_keeps_one_record(self, app, admin_client):
        for method in ('easykash', 'paymob'):
            admin_client.put('/api/admin/payment-settings', json={'project': 'manasik', 'paymentMethod': method})

        with app.app_context():
            assert [(s.project, s.payment_method) for s in PaymentSettings.query.all()] == [('manasik', 'paymob')]

    @pytest.mark.parametrize('body, error', [
        ({'paymentMethod': 'paymob'}, 'Invalid or missing project name'),
        ({'project': 'other', 'paymentMethod': 'paymob'}, 'Invalid or missing project name'),
        ({'project': 'ghadaq', 'paymentMethod': 'cash'}, 'Invalid payment method'),
        ({'project': 'ghadaq'}, 'Invalid payment method'),
    ])
    def test_rejects_invalid_input(self, admin_client, body, error):
        response = admin_client.put('/api/admin/payment-settings', json=body)

        assert response.status_code == 400
        assert response.get_json()['error'] == error

    def test_unknown_project_filter(self, admin_client):
        assert admin_client.get('/api/admin/payment-settings?project=other').status_code == 400

    def test_requires_permission(self, client, limited_client):
        assert client.get('/api/admin/payment-settings').status_code == 401
        assert limited_client.get('/api/admin/payment-settings').status_code == 403
