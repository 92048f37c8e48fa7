"""Shared fixtures and fakes for the vehicle data API tests."""

from __future__ import annotations

import pytest
import requests
from fastapi.testclient import TestClient

from vehicle_api.app import create_app
from vehicle_api.config import Settings
from vehicle_api.store import InMemoryRecordStore

SAMPLE_CROSSING = {
    "crossingIndexCode": "A1",
    "datetime": "2024-01-01T00:00:00Z",
    "plate": "AB-123",
    "plate_province": "BKK",
    "total_axles": 2,
    "total_length": 5,
    "total_width": 2,
    "outcome": "pass",
    "total_weight": 3000,
    "weight_limit": 5000,
    "speed": 60,
    "vehicle_type": "truck",
    "vehicle_class": "2",
    "lane": "1",
    "overview_image": "",
    "plate_image": "",
}


class FakeResponse:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for requests.Session; keeps blobs keyed by URL."""

    def __init__(self) -> None:
        self.blobs: dict[str, str] = {}
        self.calls: list[tuple[str, str, dict]] = []
        self.fail_with: Exception | None = None
        self.status_override: int | None = None

    def put(self, url, data=None, headers=None):
        self.calls.append(("PUT", url, headers or {}))
        if self.fail_with is not None:
            raise self.fail_with
        if self.status_override is not None:
            return FakeResponse(self.status_override)
        self.blobs[url] = data.decode("utf-8")
        return FakeResponse(200, '{"status": "stored"}')

    def get(self, url, headers=None):
        self.calls.append(("GET", url, headers or {}))
        if self.fail_with is not None:
            raise self.fail_with
        if self.status_override is not None:
            return FakeResponse(self.status_override)
        if url not in self.blobs:
            return FakeResponse(404, '{"detail": "Not found"}')
        return FakeResponse(200, self.blobs[url])


class ShardSession:
    """Routes the blob store's requests-style calls into a blob shard TestClient."""

    def __init__(self, client: TestClient) -> None:
        self.client = client

    def put(self, url, data=None, headers=None):
        return self.client.put(url, content=data, headers=headers)

    def get(self, url, headers=None):
        return self.client.get(url, headers=headers)


@pytest.fixture
def crossing() -> dict:
    return dict(SAMPLE_CROSSING)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def client(memory_store) -> TestClient:
    return TestClient(create_app(Settings(), store=memory_store))


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def connection_error() -> Exception:
    return requests.ConnectionError("connection refused")


@pytest.fixture
def shard_session(tmp_path, monkeypatch):
    """A session bound to an in-process blob shard writing under tmp_path."""
    from blob_shard import app as blob_shard

    monkeypatch.setattr(blob_shard, "DATA_DIR", tmp_path)
    monkeypatch.setattr(blob_shard, "TOKEN", None)
    return ShardSession(TestClient(blob_shard.app))
