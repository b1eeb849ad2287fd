import os
import sys

import pytest
import requests

# Ensure the source tree is on the import path so the package can be imported
# when tests run from the `tests/` directory.
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from logger_client import diagnostic_context, logger_setup  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for ``requests.Session`` and records every POST."""

    def __init__(self, calls, response=None, error=None):
        self.calls = calls
        self.response = response or FakeResponse()
        self.error = error
        self.closed = False

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append(
            {"url": url, "data": data, "headers": headers, "timeout": timeout}
        )
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_logging(monkeypatch, tmp_path):
    """Keep tests away from a real properties file and let caplog see diagnostics."""
    monkeypatch.setenv("LOGGER_CLIENT_PROPERTIES", str(tmp_path / "missing.properties"))
    monkeypatch.setattr(logger_setup.logger, "propagate", True)
    diagnostic_context.clear()
    yield
    diagnostic_context.clear()


@pytest.fixture
def properties_file(tmp_path):
    def write(content):
        path = tmp_path / "logger-client.properties"
        path.write_text(content)
        return str(path)

    return write


@pytest.fixture
def http(monkeypatch):
    """Patch ``requests.Session`` and expose the recorded calls."""
    state = {"calls": [], "response": FakeResponse(200, "ok"), "error": None, "sessions": []}

    def factory():
        session = FakeSession(state["calls"], state["response"], state["error"])
        state["sessions"].append(session)
        return session

    monkeypatch.setattr(requests, "Session", factory)
    return state
