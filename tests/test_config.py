import json
import logging

import pytest

from vehicle_api.config import Settings, load_settings
from vehicle_api.log import JsonFormatter, log_event

ENV_VARS = [
    "VEHICLE_STORE_BACKEND", "BLOB_STORE_URLS", "BLOB_STORE_NAME", "BLOB_STORE_TOKEN",
    "REQUIRE_FIELDS", "ROUTE_PREFIXES", "MAX_BODY_BYTES", "LOG_LEVEL", "HOST", "PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.store_backend == "memory"
    assert settings.blob_store_name == "vehicle_data_store"
    assert settings.blob_store_token is None
    assert settings.require_fields is True
    assert settings.route_prefixes == ["", "/api"]
    assert settings.max_body_bytes == 50 * 1024 * 1024
    assert settings.port == 3000


def test_environment_overrides(clean_env):
    clean_env.setenv("VEHICLE_STORE_BACKEND", "BLOB")
    clean_env.setenv("BLOB_STORE_URLS", "http://a:1, http://b:2,")
    clean_env.setenv("BLOB_STORE_TOKEN", "tok")
    clean_env.setenv("REQUIRE_FIELDS", "false")
    clean_env.setenv("ROUTE_PREFIXES", "/.netlify/functions/api")
    clean_env.setenv("MAX_BODY_BYTES", "1024")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.store_backend == "blob"
    assert settings.blob_store_urls == ["http://a:1", "http://b:2"]
    assert settings.blob_store_token == "tok"
    assert settings.require_fields is False
    assert settings.route_prefixes == ["/.netlify/functions/api"]
    assert settings.max_body_bytes == 1024
    assert settings.log_level == "DEBUG"


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        Settings(store_backend="redis")


def test_json_formatter_includes_event_fields():
    logger = logging.getLogger("test.json")
    records = []
    handler = logging.Handler()
    handler.emit = records.append
    logger.addHandler(handler)
    try:
        log_event(logger, logging.ERROR, "BLOB_STORE_FAILED", "boom", id="abc", errorName="OSError")
    finally:
        logger.removeHandler(handler)

    entry = json.loads(JsonFormatter().format(records[0]))
    assert entry["level"] == "ERROR"
    assert entry["event"] == "BLOB_STORE_FAILED"
    assert entry["message"] == "boom"
    assert entry["id"] == "abc"
    assert entry["errorName"] == "OSError"
    assert entry["timestamp"].endswith("Z")
