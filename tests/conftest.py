"""Shared pytest fixtures."""

import json
import shutil
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from hn_newsletter.utils.config import Settings, reset_settings
from hn_newsletter.utils.logging_config import reset_logging


@pytest.fixture(scope="session", autouse=True)
def backup_env_file():
    """Backup .env file during test session to prevent pollution."""
    env_file = Path(".env")
    backup_file = Path(".env.test_backup")

    if env_file.exists():
        shutil.copy(env_file, backup_file)
        env_file.unlink()

    yield

    if backup_file.exists():
        shutil.move(backup_file, env_file)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Start every test from default settings, ignoring the caller's shell."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
    reset_logging()


class HttpRouter:
    """Canned responses for a patched httpx.AsyncClient, keyed by method and URL.

    Unrouted URLs answer 404. Query parameters are not part of the key;
    inspect ``client.get.call_args`` to check them.
    """

    def __init__(self, client_class, client) -> None:
        self.client_class = client_class
        self.client = client
        self._routes: dict[tuple[str, str], Any] = {}

    def add(
        self,
        method: str,
        url: str,
        payload: Any = None,
        *,
        status: int = 200,
        text: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._routes[(method, url)] = (status, payload, text, error)

    def get(self, url: str, payload: Any = None, **kwargs: Any) -> None:
        self.add("GET", url, payload, **kwargs)

    def post(self, url: str, payload: Any = None, **kwargs: Any) -> None:
        self.add("POST", url, payload, **kwargs)

    def respond(self, method: str, url: str) -> httpx.Response:
        request = httpx.Request(method, url)
        route = self._routes.get((method, url))
        if route is None:
            return httpx.Response(404, text="not found", request=request)

        status, payload, text, error = route
        if error is not None:
            raise error
        if text is not None:
            return httpx.Response(status, text=text, request=request)
        return httpx.Response(
            status,
            content=json.dumps(payload).encode(),
            headers={"Content-Type": "application/json"},
            request=request,
        )


@pytest.fixture
def http_router():
    """Patch httpx.AsyncClient and route its requests to canned responses."""
    with patch("httpx.AsyncClient") as mock_client:
        # A truthy __aexit__ would swallow exceptions raised inside `async with`
        mock_client.return_value.__aexit__.return_value = False
        instance = mock_client.return_value.__aenter__.return_value
        router = HttpRouter(mock_client, instance)

        async def fake_get(url, **kwargs):
            return router.respond("GET", url)

        async def fake_post(url, **kwargs):
            return router.respond("POST", url)

        instance.get = AsyncMock(side_effect=fake_get)
        instance.post = AsyncMock(side_effect=fake_post)
        yield router
