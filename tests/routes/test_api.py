"""Tests for API routes."""
import json

import pytest


@pytest.fixture
def job_id(client, sample_payload):
    """Id of a finished job created through the API."""
    response = client.post('/api/toolpaths', json=sample_payload)
    return json.loads(response.data)['data']['id']


class TestValidateAPI:
    """Tests for POST /api/toolpaths/validate."""

    def test_valid(self, client, sample_payload):
        response = client.post('/api/toolpaths/validate', json=sample_payload)
        assert response.status_code == 200
        assert json.loads(response.data) == {'valid': True, 'errors': []}

    def test_invalid(self, client, sample_payload):
        sample_payload['cutting']['toolRadius'] = 0
        data = json.loads(client.post('/api/toolpaths/validate', json=sample_payload).data)
        assert data['valid'] is False
        assert "Tool radius must be positive" in data['errors']

    def test_no_data(self, client):
        response = client.post('/api/toolpaths/validate', json={})
        assert response.status_code == 400


class TestCreateToolpathAPI:
    """Tests for POST /api/toolpaths."""

    def test_create_sync(self, client, sample_payload):
        response = client.post('/api/toolpaths', json=sample_payload)
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'ok'
        assert data['data']['status'] == 'complete'
        assert data['data']['level_count'] == 2
        assert 'toolpath' not in data['data']

    def test_invalid_params(self, client, sample_payload):
        sample_payload['cutting']['stepdown'] = 0
        sample_payload['feeds']['z'] = 0
        response = client.post('/api/toolpaths', json=sample_payload)
        assert response.status_code == 400
        message = json.loads(response.data)['message']
        assert "Stepdown must be positive; " in message
        assert message.endswith("Vertical feed rate must be positive")

    def test_missing_section(self, client, sample_payload):
        del sample_payload['pattern']
        response = client.post('/api/toolpaths', json=sample_payload)
        assert response.status_code == 400

    def test_no_data(self, client):
        response = client.post('/api/toolpaths')
        assert response.status_code == 400


class TestGetToolpathAPI:
    """Tests for GET /api/toolpaths/<id>."""

    def test_status(self, client, job_id):
        data = json.loads(client.get(f'/api/toolpaths/{job_id}').data)['data']
        assert data['id'] == job_id
        assert data['statistics']['roughing_passes'] == 2
        assert 'toolpath' not in data

    def test_include_toolpath(self, client, job_id):
        data = json.loads(client.get(f'/api/toolpaths/{job_id}?include_toolpath=1').data)['data']
        assert len(data['toolpath']) == 2
        assert data['toolpath'][0][0]['type'] == 'rapid'

    def test_not_found(self, client):
        assert client.get('/api/toolpaths/nonexistent').status_code == 404


class TestCancelAPI:
    """Tests for POST /api/toolpaths/<id>/cancel."""

    def test_finished_job(self, client, job_id):
        response = client.post(f'/api/toolpaths/{job_id}/cancel')
        assert response.status_code == 409
        assert json.loads(response.data)['message'] == 'Job already complete'

    def test_not_found(self, client):
        assert client.post('/api/toolpaths/nonexistent/cancel').status_code == 404


class TestGCodeAPI:
    """Tests for GET /api/toolpaths/<id>/gcode."""

    def test_json(self, client, job_id):
        response = client.get(f'/api/toolpaths/{job_id}/gcode?tool=5&workplace=2')
        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert data['filename'] == f'facing_zigzag_{job_id[:8]}.gcode'
        assert "G55 ; Use WCS 2" in data['gcode']
        assert "T5 ; Confirm tool selection" in data['gcode']
        assert isinstance(data['warnings'], list)

    def test_config_defaults(self, client, job_id):
        gcode = json.loads(client.get(f'/api/toolpaths/{job_id}/gcode').data)['data']['gcode']
        assert "G54 ; Use WCS 1" in gcode
        assert "T0 ; Confirm tool selection" in gcode

    def test_download(self, client, job_id):
        response = client.get(f'/api/toolpaths/{job_id}/gcode?download=1')
        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        assert f'facing_zigzag_{job_id[:8]}.gcode' in response.headers['Content-Disposition']
        assert response.data.decode('utf-8').startswith('; Stock Preparation')

    @pytest.mark.parametrize('query', ['workplace=7', 'workplace=0', 'tool=abc'])
    def test_bad_arguments(self, client, job_id, query):
        assert client.get(f'/api/toolpaths/{job_id}/gcode?{query}').status_code == 400

    def test_not_found(self, client):
        assert client.get('/api/toolpaths/nonexistent/gcode').status_code == 404


class TestPreviewAPI:
    """Tests for GET /api/toolpaths/<id>/preview."""

    def test_default_level(self, client, job_id):
        response = client.get(f'/api/toolpaths/{job_id}/preview')
        assert response.status_code == 200
        assert json.loads(response.data)['data']['svg'].startswith('<svg')

    def test_level_selection(self, client, job_id):
        assert client.get(f'/api/toolpaths/{job_id}/preview?level=0').status_code == 200
        assert client.get(f'/api/toolpaths/{job_id}/preview?level=5').status_code == 404

    def test_not_found(self, client):
        assert client.get('/api/toolpaths/nonexistent/preview').status_code == 404
