"""Shared fixtures for the JSON Form Builder tests."""

import asyncio
import os
from typing import Dict, List, Optional

import pytest

from json_form_builder.config.models import ServerConfig
from json_form_builder.models.core import ResponseRecord
from json_form_builder.services.clipboard import ClipboardInterface
from json_form_builder.services.session_controller import SessionController
from json_form_builder.services.templates import TemplateCatalog
from json_form_builder.services.transport import TransportInterface


class FakeTransport(TransportInterface):
    """Records requests and answers with a canned response or error."""

    def __init__(self, status_code: int = 200, payload=None, error: Optional[Exception] = None):
        self.status_code = status_code
        self.payload = {"ok": True} if payload is None else payload
        self.error = error
        self.requests: List[Dict] = []
        self.gate: Optional[asyncio.Event] = None
        self.started = asyncio.Event()

    async def send(self, method, url, headers, body=None) -> ResponseRecord:
        self.requests.append({"method": method, "url": url, "headers": headers, "body": body})
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return ResponseRecord(status_code=self.status_code, payload=self.payload)


class FailingClipboard(ClipboardInterface):
    def write(self, text: str) -> bool:
        return False


@pytest.fixture
def catalog():
    return TemplateCatalog.from_config()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def controller(catalog, transport):
    return SessionController(catalog=catalog, transport=transport, session_id="test-session")


@pytest.fixture
def server_config():
    return ServerConfig(max_document_size=2048, session_ttl=60, cleanup_interval=10)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep configuration environment variables out of the tests."""
    for name in (
        "LOG_LEVEL", "SESSION_TTL", "MAX_DOCUMENT_SIZE", "TEMPLATES_FILE",
        "TRANSPORT_TIMEOUT", "TRANSPORT_VERIFY_SSL", "TRANSPORT_FOLLOW_REDIRECTS",
        "TRANSPORT_RETRY_ATTEMPTS", "API_HOST", "API_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("JSON_FORM_"):
            monkeypatch.delenv(name, raising=False)
