import os
from dataclasses import dataclass, field
from typing import List, Optional

BACKENDS = ("memory", "blob")


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",")]


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    store_backend: str = "memory"
    blob_store_urls: List[str] = field(default_factory=lambda: ["http://localhost:8001"])
    blob_store_name: str = "vehicle_data_store"
    blob_store_token: Optional[str] = None
    require_fields: bool = True
    route_prefixes: List[str] = field(default_factory=lambda: ["", "/api"])
    max_body_bytes: int = 50 * 1024 * 1024
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        if self.store_backend not in BACKENDS:
            raise ValueError(f"Unknown store backend: {self.store_backend!r}")
        self.route_prefixes = [p.rstrip("/") for p in self.route_prefixes]


def load_settings() -> Settings:
    """Read settings from the environment (e.g. BLOB_STORE_URLS="http://blob1:8001,http://blob2:8001")."""
    return Settings(
        store_backend=os.getenv("VEHICLE_STORE_BACKEND", "memory").strip().lower(),
        blob_store_urls=[u for u in _split(os.getenv("BLOB_STORE_URLS", "http://localhost:8001")) if u],
        blob_store_name=os.getenv("BLOB_STORE_NAME", "vehicle_data_store"),
        blob_store_token=os.getenv("BLOB_STORE_TOKEN") or None,
        require_fields=_flag(os.getenv("REQUIRE_FIELDS", "true")),
        route_prefixes=_split(os.getenv("ROUTE_PREFIXES", ",/api")),
        max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )
