"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from starlette.requests import HTTPConnection  # noqa: E402

from translated_fields.core.config import Settings, get_settings  # noqa: E402
from translated_fields.translations import MissingTranslationRecorder  # noqa: E402


@pytest.fixture()
def settings() -> Settings:
    """Return the cached settings instance the library reads at runtime."""

    return get_settings()


@pytest.fixture()
def recorder() -> MissingTranslationRecorder:
    """Provide a handler that records missing translation reports."""

    return MissingTranslationRecorder()


def make_connection(path: str = "/", host: str = "example.com") -> HTTPConnection:
    """Build a bare HTTP connection for resolver tests."""

    scope = {
        "type": "http",
        "scheme": "http",
        "method": "GET",
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", host.encode("latin-1"))],
        "server": ("testserver", 80),
    }
    return HTTPConnection(scope)


@pytest.fixture()
def connection_factory():
    """Expose ``make_connection`` to tests."""

    return make_connection
