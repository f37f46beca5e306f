import pytest
from fastapi.testclient import TestClient

from archive_player.main import create_app
from tests.helpers import FakeArchive, FakeDownloads, make_settings


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def fake_archive():
    return FakeArchive()


@pytest.fixture()
def fake_downloads():
    return FakeDownloads()


@pytest.fixture()
def client(settings, fake_archive):
    app = create_app(settings, http_client=fake_archive.client())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def stream_client(settings, fake_downloads):
    app = create_app(settings, http_client=fake_downloads.client())
    with TestClient(app) as test_client:
        yield test_client
