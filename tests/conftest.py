import pytest
from fastapi.testclient import TestClient

from blobcheck.client.config import ClientSettings
from blobcheck.client.harness import UploadHarness
from blobcheck.core.settings import Settings
from blobcheck.main import create_app

# kleine grens zodat de 413-tests geen 100 MiB hoeven te sturen
TEST_MAX_UPLOAD_BYTES = 64 * 1024


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(
        UPLOAD_DIR=str(upload_dir),
        MAX_UPLOAD_BYTES=TEST_MAX_UPLOAD_BYTES,
        SENTRY_DSN=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def harness(client):
    # TestClient is een httpx.Client: de harness praat direct met de app
    return UploadHarness(http=client, settings=ClientSettings(), server_url="http://testserver")
