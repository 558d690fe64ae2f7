import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import web.app as web_app
from utils.settings import CheckerSettings
from web.app import app

BUTTON_SOURCE = 'export function CustomButton({ label, onClick, disabled, variant }) { return <button onClick={onClick} disabled={disabled}>{label}</button>; }'


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def test_index_page(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Component Reuse Checker' in response.data


def test_analyze_json_source(client):
    response = client.post('/analyze', json={'source': BUTTON_SOURCE, 'file_path': 'CustomButton.jsx'})
    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['status'] == 'matches'
    assert data['components'][0]['name'] == 'CustomButton'
    assert data['matches'][0]['catalog_component']['name'] == 'Button'

    download = client.get('/download/report')
    assert download.status_code == 200


def test_analyze_reports_no_components(client):
    response = client.post('/analyze', json={'source': 'const x = 1;', 'file_path': 'x.js'})
    assert response.status_code == 200
    assert response.get_json()['status'] == 'no_components'


def test_analyze_reports_parse_errors(client):
    response = client.post('/analyze', json={'source': 'function (', 'file_path': 'x.jsx'})
    data = response.get_json()
    assert data['status'] == 'error'
    assert data['success'] is False


@pytest.mark.parametrize('payload', [
    {'file_path': 'Button.jsx'},
    {'source': BUTTON_SOURCE, 'file_path': 'Button.py'},
    {'source': BUTTON_SOURCE, 'file_path': 'Button.jsx', 'threshold': 'abc'},
    {'source': BUTTON_SOURCE, 'file_path': 'Button.jsx', 'threshold': 250},
])
def test_analyze_rejects_bad_requests(client, payload):
    response = client.post('/analyze', json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_report_form_renders_html(client):
    response = client.post('/report', data={'source': BUTTON_SOURCE, 'file_path': 'CustomButton.jsx', 'threshold': '60'})
    assert response.status_code == 200
    assert b'Component reuse report' in response.data
    assert b'CustomButton' in response.data


def test_catalog_listing(client):
    data = client.get('/catalog').get_json()
    assert data['count'] == 15
    assert data['components'][0]['name'] == 'Button'


@pytest.mark.parametrize('route', ['/analyze', '/report'])
def test_disabled_checker_refuses_requests(client, monkeypatch, route):
    monkeypatch.setattr(web_app, 'settings', CheckerSettings(enabled=False))
    response = client.post(route, json={'source': BUTTON_SOURCE, 'file_path': 'CustomButton.jsx'})
    assert response.status_code == 403
    assert response.get_json()['error'] == 'Component reuse check is disabled'
