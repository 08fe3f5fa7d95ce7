"""Activity log recording and listing."""
import pytest

from dashboard.models import ActivityLog, Country
from dashboard.services import activity_service


def _seed_logs(app, count, resource='product', action='update'):
    with app.app_context():
        for i in range(count):
            activity_service.log_activity(action, resource, i, f'entry {i}')


class TestLogsApi:
    """GET /api/logs"""

    def test_newest_first_with_pagination(self, app, admin_client):
        _seed_logs(app, 3)

        first = admin_client.get('/api/logs?limit=2').get_json()['data']
        second = admin_client.get('/api/logs?limit=2&page=2').get_json()['data']

        # Signing the admin in wrote the oldest entry
        assert [log['details'] for log in first['logs']] == ['entry 2', 'entry 1']
        assert [log['action'] for log in second['logs']] == ['update', 'login']
        assert first['pagination'] == {
            'currentPage': 1,
            'totalPages': 2,
            'totalLogs': 4,
            'hasNextPage': True,
            'hasPrevPage': False,
        }

    def test_filters(self, app, admin_client):
        _seed_logs(app, 2, resource='country', action='delete')
        _seed_logs(app, 1, resource='product', action='create')

        by_resource = admin_client.get('/api/logs?resource=country').get_json()['data']
        by_action = admin_client.get('/api/logs?action=create').get_json()['data']

        assert {log['resource'] for log in by_resource['logs']} == {'country'}
        assert by_resource['pagination']['totalLogs'] == 2
        assert [log['resource'] for log in by_action['logs']] == ['product']

    @pytest.mark.parametrize('query, error', [
        ('resource=user', 'Invalid resource filter: user'),
        ('action=drop', 'Invalid action filter: drop'),
    ])
    def test_invalid_filters(self, admin_client, query, error):
        response = admin_client.get(f'/api/logs?{query}')

        assert response.status_code == 400
        assert response.get_json()['error'] == error

    @pytest.mark.parametrize('query', ['page=0', 'page=99999999999999999999', 'limit=99999999999999999999'])
    def test_invalid_paging(self, admin_client, query):
        response = admin_client.get(f'/api/logs?{query}')

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_requires_permission(self, client, limited_client):
        assert client.get('/api/logs').status_code == 401
        assert limited_client.get('/api/logs').status_code == 403


class TestLogActivity:

    def test_entry_records_the_acting_user(self, app, admin_client, gulf_countries):
        admin_client.put(f"/api/countries/{gulf_countries['KW'].id}", json={'isActive': True})

        with app.app_context():
            entry = ActivityLog.query.filter_by(resource='country').one()
            assert entry.action == 'update'
            assert entry.user_email == 'owner@ghadaq.test'
            assert entry.user_name == 'Owner'
            assert entry.resource_id == str(gulf_countries['KW'].id)

    def test_forwarded_ip_is_recorded(self, app, client, super_admin):
        client.post('/api/auth/login', json={'email': 'owner@ghadaq.test', 'password': 'secret123'},
                    headers={'X-Forwarded-For': '203.0.113.7, 10.0.0.1'})

        with app.app_context():
            assert ActivityLog.query.one().ip_address == '203.0.113.7'

    def test_without_a_user(self, app_ctx):
        entry = activity_service.log_activity('update', 'currencyRate', 'USD-EGP', 'scheduled sync')

        assert entry.user_id is None
        assert entry.ip_address is None

    def test_logging_failure_does_not_undo_the_change(self, app, admin_client, gulf_countries, monkeypatch):
        def broken_log(**kwargs):
            raise RuntimeError('log table is gone')

        monkeypatch.setattr(activity_service, 'ActivityLog', broken_log)

        response = admin_client.put(f"/api/countries/{gulf_countries['KW'].id}", json={'isActive': True})

        assert response.status_code == 200
        with app.app_context():
            assert Country.query.filter_by(code='KW').one().is_active is True
