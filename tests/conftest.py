from pathlib import Path

import pytest
import requests

from ddos_dashboard.app import create_app
from ddos_dashboard import config as settings

DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


class FakeResponse:
    def __init__(self, status_code=200, text=''):
        self.status_code = status_code
        self.content = text.encode('utf-8')


class FakeSession:
    """Serves fixture files by URL suffix; unknown names get a 404"""

    def __init__(self, files=None, fail=()):
        self.files = dict(files or {})
        self.fail = set(fail)
        self.requested = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def get(self, url):
        self.requested.append(url)
        name = url.rsplit('/', 1)[-1]
        if name in self.fail:
            raise requests.ConnectionError(f"Connection refused: {url}")
        if name not in self.files:
            return FakeResponse(404, 'Not Found')
        return FakeResponse(200, self.files[name])


@pytest.fixture
def fixture_files():
    return {path.name: path.read_text(encoding='utf-8') for path in DATA_DIR.glob('*.csv')}


@pytest.fixture
def fake_session(fixture_files):
    return FakeSession(fixture_files)


@pytest.fixture
def config(tmp_path):
    config = settings.TestingConfig()
    config.DATA_DIR = str(DATA_DIR)
    config.LOG_DIR = str(tmp_path / 'logs')
    return config


@pytest.fixture
def app(config, fake_session):
    return create_app(config, session_factory=lambda: fake_session)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def loaded_client(app, client):
    app.config['dataset_loader'].refresh(app.config['dashboard_state'])
    return client
