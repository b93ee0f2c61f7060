import json
from typing import Callable, List

import httpx
import pytest

from supastorage.client import StorageClient
from supastorage.config import ClientConfig


BASE_URL = "https://project.supabase.co"
API_KEY = "service-role-key"
STORAGE_URL = f"{BASE_URL}/storage/v1"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, api_key=API_KEY)


@pytest.fixture
def make_client(config):
    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        return StorageClient(config, transport=transport), transport

    return _make
