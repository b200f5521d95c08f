"""Shared pytest fixtures."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError

from azurestorage.config import Settings
from azurestorage.models import LastOperationResponse
from azurestorage.providers.base import StorageBrokerAdapter

INSTANCE_ID = "abcd1234-ef56-7890-ab12-cd34ef567890"
RESOURCE_GROUP = "cloud-foundry-abcd1234-ef56-7890-ab12-cd34ef567890"
STORAGE_ACCOUNT = "cfabcd1234ef567890ab12cd"
CONTAINER = "cloud-foundry-abcd1234-ef56-7890-ab12-cd34ef567890"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's Azure and adapter settings out of the tests."""
    for var in list(os.environ):
        if var.startswith(("AZURE_", "AZURESTORAGE_")):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    logger = logging.getLogger("azurestorage")
    handlers = list(logger.handlers)
    yield
    for h in logger.handlers:
        if h not in handlers:
            h.close()
    logger.handlers = handlers


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    cat = tmp_path / "catalog.json"
    cat.write_text('{"services": [{"id": "svc-1", "name": "azurestorageservice"}]}\n')
    return cat


@pytest.fixture
def settings(catalog_file: Path, tmp_path: Path) -> Settings:
    return Settings(
        catalog_path=catalog_file,
        credentials_path=tmp_path / "no-credentials.json",
        _env_file=None,
    )


@pytest.fixture
def fake_adapter() -> MagicMock:
    adapter = MagicMock(spec=StorageBrokerAdapter)
    adapter.provider_type = "fake"
    adapter.get_instance_state.return_value = LastOperationResponse(
        state="succeeded", description="Successfully created the service instance, state: Succeeded"
    )
    adapter.get_access_keys.return_value = ("primary-key", "secondary-key")
    return adapter


@pytest.fixture
def credentials_file(tmp_path: Path) -> Path:
    path = tmp_path / "credentials.json"
    path.write_text(
        '{"subscriptionID": "sub-1", "tenantID": "tenant-1",'
        ' "clientID": "client-1", "clientSecret": "secret-1"}'
    )
    return path


class _Response:
    """Just enough of an HTTP response for HttpResponseError."""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        self.headers: dict[str, str] = {}

    def text(self) -> str:
        return ""


def http_error(status_code: int, reason: str = "", cls: type[HttpResponseError] = HttpResponseError):
    return cls(message=f"{status_code} {reason}", response=_Response(status_code, reason))


def account_keys(key1: str = "k1", key2: str = "k2") -> SimpleNamespace:
    return SimpleNamespace(keys=[
        SimpleNamespace(key_name="key1", value=key1),
        SimpleNamespace(key_name="key2", value=key2),
    ])
