import os
import pathlib
import sys
import tempfile

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the backend test database out of the working tree
os.environ.setdefault("DATABASE_URL", f"sqlite:///{pathlib.Path(tempfile.gettempdir()) / 'jewel_cost_test.db'}")

import pytest
import requests

from ui.api_client import BackendClient
from ui.data_service import DataService
from ui.local_store import LocalStore

BASE_URL = "http://backend.test"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


class FakeSession:
    """Scripted stand-in for requests.Session.

    ``routes`` maps (METHOD, path) to a FakeResponse or an exception instance;
    unknown routes answer 404. ``fail_all`` makes every call raise.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.fail_all = None

    def request(self, method, url, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({"method": method, "path": path, "json": json, "timeout": timeout})
        if self.fail_all is not None:
            raise self.fail_all
        answer = self.routes.get((method, path), FakeResponse(404, {"message": "Not found"}))
        if isinstance(answer, Exception):
            raise answer
        return answer

    def calls_for(self, method):
        return [c for c in self.calls if c["method"] == method]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "store")


@pytest.fixture
def online_service(fake_session, store):
    backend = BackendClient(BASE_URL, fetch_timeout=2.0, session=fake_session)
    return DataService(backend, store)


@pytest.fixture
def local_service(store):
    return DataService(BackendClient(None), store)


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
