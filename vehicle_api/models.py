import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = (
    "crossingIndexCode",
    "datetime",
    "plate",
    "plate_province",
    "total_axles",
    "total_length",
    "total_width",
    "outcome",
    "total_weight",
    "weight_limit",
    "speed",
    "vehicle_type",
    "vehicle_class",
    "lane",
    "overview_image",
    "plate_image",
)


def new_record_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VehicleRecord(BaseModel):
    """A stored crossing event: server-assigned id and timestamp wrapping the client data."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    received_at: str = Field(..., alias="receivedAt")
    data: Dict[str, Any]

    @classmethod
    def create(cls, data: Dict[str, Any]) -> "VehicleRecord":
        return cls(id=new_record_id(), received_at=utc_timestamp(), data=data)

    def to_json(self) -> str:
        # NaN/Infinity have no JSON form; raise instead of writing null
        return json.dumps(self.model_dump(by_alias=True), allow_nan=False, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "VehicleRecord":
        return cls.model_validate_json(raw)


class RecordCreated(BaseModel):
    message: str
    id: str


class ErrorBody(BaseModel):
    error: str
    message: Optional[str] = None
    details: Optional[str] = None
