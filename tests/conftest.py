"""
Pytest configuration and shared fixtures.
"""
from unittest.mock import MagicMock

import httpx
import pytest

from docgen_client import DocumentGenerator

BASE_URI = "http://docgen.test"
ENCRYPTION_KEY = "0123456789abcdef0123456789abcdef"
PDF_PAYLOAD = b"%PDF-1.7\n\x00\xff\xfe binary \r\n%%EOF"


class RecordingService:
    """Fake document generator service for httpx.MockTransport."""

    def __init__(self, status_code: int = 200, content: bytes = PDF_PAYLOAD, error: Exception = None):
        self.status_code = status_code
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def env_setup(monkeypatch, tmp_path):
    """Isolate tests from the developer environment and .env files."""
    for name in (
        "DOCUMENT_GENERATOR_BASE_URI",
        "DOCUMENT_GENERATOR_ENCRYPTION_KEY",
        "DOCUMENT_GENERATOR_ENCRYPT_DATA",
        "DOCUMENT_GENERATOR_TIMEOUT",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def service():
    """Service answering 200 with a PDF payload."""
    return RecordingService()


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def make_generator(mock_logger):
    """Factory building generators on top of a fake service."""
    clients = []

    def factory(service: RecordingService, **kwargs) -> DocumentGenerator:
        client = httpx.Client(transport=httpx.MockTransport(service))
        clients.append(client)
        kwargs.setdefault("encryption_key", ENCRYPTION_KEY)
        kwargs.setdefault("logger", mock_logger)
        return DocumentGenerator(kwargs.pop("base_uri", BASE_URI), client, **kwargs)

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def generator(make_generator, service):
    """Generator with a key configured and encryption off."""
    return make_generator(service)


@pytest.fixture
def make_service():
    """Factory for fake services with a custom answer."""
    return RecordingService


@pytest.fixture
def base_uri():
    return BASE_URI


@pytest.fixture
def encryption_key():
    return ENCRYPTION_KEY


@pytest.fixture
def pdf_payload():
    return PDF_PAYLOAD
