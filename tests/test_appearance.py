"""Per-project appearance image rows."""
import pytest

from dashboard.exceptions import ValidationException
from dashboard.models import ActivityLog, Appearance
from dashboard.services.settings_service import AppearanceService

ROWS = {
    'row1': ['https://res.cloudinary.com/demo/image/upload/v1/appearance/a.jpg'],
    'row2': ['https://res.cloudinary.com/demo/image/upload/v1/appearance/b.jpg',
             'https://res.cloudinary.com/demo/image/upload/v1/appearance/c.jpg'],
}


class TestAppearanceApi:
    """/api/appearance/<project>"""

    def test_nothing_saved_yet(self, client):
        response = client.get('/api/appearance/manasik')

        assert response.status_code == 200
        assert response.get_json()['data'] == {'row1': [], 'row2': []}

    def test_save_and_read_back(self, app, admin_client):
        response = admin_client.put('/api/appearance/manasik', json={'worksImages': ROWS})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['project'] == 'manasik'
        assert data['worksImages'] == ROWS
        assert admin_client.get('/api/appearance/manasik').get_json()['data'] == ROWS
        with app.app_context():
            entry = ActivityLog.query.filter_by(resource='appearance').one()
            assert entry.resource_id == 'manasik'
            assert '1 row1' in entry.details

    def test_saving_twice_keeps_one_record(self, app, admin_client):
        admin_client.put('/api/appearance/ghadaq', json={'worksImages': ROWS})
        admin_client.put('/api/appearance/ghadaq', json={'worksImages': {'row1': [], 'row2': ROWS['row2']}})

        with app.app_context():
            assert Appearance.query.count() == 1
            assert Appearance.query.one().works_images() == {'row1': [], 'row2': ROWS['row2']}

    def test_projects_are_independent(self, admin_client):
        admin_client.put('/api/appearance/ghadaq', json={'worksImages': ROWS})

        assert admin_client.get('/api/appearance/manasik').get_json()['data'] == {'row1': [], 'row2': []}

    @pytest.mark.parametrize('works_images', [
        None,
        ['https://example.com/a.jpg'],
        {'row1': []},
        {'row1': 'https://example.com/a.jpg', 'row2': []},
        {'row1': [1, 2], 'row2': []},
    ])
    def test_malformed_rows(self, admin_client, works_images):
        response = admin_client.put('/api/appearance/ghadaq', json={'worksImages': works_images})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid worksImages format'

    def test_unknown_project(self, client, admin_client):
        assert client.get('/api/appearance/unknown').status_code == 400
        response = admin_client.put('/api/appearance/unknown', json={'worksImages': ROWS})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid project name'

    def test_legacy_route_uses_default_project(self, admin_client):
        response = admin_client.put('/api/appearance', json={'worksImages': ROWS})

        assert response.status_code == 200
        assert response.get_json()['data']['project'] == 'ghadaq'
        assert admin_client.get('/api/appearance').get_json()['data'] == ROWS
        assert admin_client.get('/api/appearance/ghadaq').get_json()['data'] == ROWS

    def test_saving_needs_appearance_permission(self, client, limited_client):
        assert client.put('/api/appearance/ghadaq', json={'worksImages': ROWS}).status_code == 401
        assert limited_client.put('/api/appearance/ghadaq', json={'worksImages': ROWS}).status_code == 403


class TestAppearanceEditing:
    """Row edits used by the appearance page."""

    def test_move_to_other_row(self, app_ctx):
        AppearanceService.save_works_images('ghadaq', ROWS)

        appearance = AppearanceService.move_image('ghadaq', 'row1', 0)

        assert appearance.row1 == []
        assert appearance.row2 == ROWS['row2'] + ROWS['row1']

    def test_remove_and_add(self, app_ctx):
        AppearanceService.save_works_images('ghadaq', ROWS)

        AppearanceService.remove_image('ghadaq', 'row2', 1)
        appearance = AppearanceService.add_image('ghadaq', 'row1', 'https://example.com/new.jpg')

        assert appearance.row1 == ROWS['row1'] + ['https://example.com/new.jpg']
        assert appearance.row2 == ROWS['row2'][:1]

    @pytest.mark.parametrize('row, index', [('row1', 5), ('row3', 0), ('row2', -1)])
    def test_invalid_position(self, app_ctx, row, index):
        AppearanceService.save_works_images('ghadaq', ROWS)

        with pytest.raises(ValidationException):
            AppearanceService.remove_image('ghadaq', row, index)

    def test_blank_urls_are_dropped(self, app_ctx):
        appearance = AppearanceService.save_works_images('ghadaq', {'row1': ['  ', ' https://a.test/x.jpg '], 'row2': []})

        assert appearance.row1 == ['https://a.test/x.jpg']
