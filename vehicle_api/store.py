"""Record stores: an in-process map and a client for external blob nodes."""

import logging
from typing import Dict, Optional, Protocol
from urllib.parse import quote

import requests

from vehicle_api.config import Settings
from vehicle_api.errors import StoreFailure
from vehicle_api.models import VehicleRecord
from vehicle_api.shard_manager import ShardManager

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def put(self, record_id: str, record: VehicleRecord) -> None:
        """Persist the serialized record under ``record_id``."""

    def get(self, record_id: str) -> Optional[VehicleRecord]:
        """Return the record, or None when nothing is stored under ``record_id``."""


def _serialize(record: VehicleRecord) -> str:
    try:
        return record.to_json()
    except (TypeError, ValueError) as exc:
        raise StoreFailure(f"Failed to serialize record {record.id}: {exc}") from exc


def _deserialize(record_id: str, raw: str) -> VehicleRecord:
    try:
        return VehicleRecord.from_json(raw)
    except ValueError as exc:
        raise StoreFailure(f"Stored value for {record_id} is not a valid record: {exc}") from exc


class InMemoryRecordStore:
    """Process-lifetime store. Values are kept as JSON text, like the blob variant."""

    def __init__(self):
        self._records: Dict[str, str] = {}

    def put(self, record_id: str, record: VehicleRecord) -> None:
        self._records[record_id] = _serialize(record)

    def get(self, record_id: str) -> Optional[VehicleRecord]:
        raw = self._records.get(record_id)
        if raw is None:
            return None
        return _deserialize(record_id, raw)

    def __len__(self) -> int:
        return len(self._records)


class BlobRecordStore:
    """Stores each record as one string blob, key = record id, on the node the ring picks."""

    def __init__(
        self,
        shard_urls,
        store_name: str = "vehicle_data_store",
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.shard_manager = ShardManager(list(shard_urls))
        self.store_name = store_name
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "text/plain; charset=utf-8"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _blob_url(self, record_id: str) -> str:
        shard_url = self.shard_manager.get_shard_url(record_id)
        return f"{shard_url}/stores/{quote(self.store_name, safe='')}/blobs/{quote(record_id, safe='')}"

    def put(self, record_id: str, record: VehicleRecord) -> None:
        body = _serialize(record)
        url = self._blob_url(record_id)
        try:
            resp = self.session.put(url, data=body.encode("utf-8"), headers=self.headers)
        except requests.RequestException as exc:
            raise StoreFailure(f"Failed to store data in Blob store: {exc}") from exc
        if resp.status_code not in (200, 201, 204):
            raise StoreFailure(f"Blob store rejected write for {record_id} with status {resp.status_code}")
        logger.debug("Stored %s on %s", record_id, url)

    def get(self, record_id: str) -> Optional[VehicleRecord]:
        url = self._blob_url(record_id)
        try:
            resp = self.session.get(url, headers=self.headers)
        except requests.RequestException as exc:
            raise StoreFailure(f"Failed to retrieve data from Blob store: {exc}") from exc
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise StoreFailure(f"Blob store read for {record_id} failed with status {resp.status_code}")
        if not resp.text:
            return None
        return _deserialize(record_id, resp.text)


def build_store(settings: Settings) -> RecordStore:
    if settings.store_backend == "blob":
        return BlobRecordStore(
            settings.blob_store_urls,
            store_name=settings.blob_store_name,
            token=settings.blob_store_token,
        )
    return InMemoryRecordStore()
