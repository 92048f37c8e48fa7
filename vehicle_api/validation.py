import math
from typing import Any, Dict, List

from vehicle_api.errors import InvalidPayloadError, MissingFieldsError
from vehicle_api.models import REQUIRED_FIELDS


def missing_fields(payload: Dict[str, Any]) -> List[str]:
    # presence only: a null value counts as supplied
    return [name for name in REQUIRED_FIELDS if name not in payload]


def validate(payload: Dict[str, Any]) -> None:
    missing = missing_fields(payload)
    if missing:
        raise MissingFieldsError(missing)


def non_finite_paths(value: Any, path: str = "") -> List[str]:
    """Locations of NaN/Infinity values, e.g. ``speed`` or ``sensors[2]``."""
    if isinstance(value, float):
        return [] if math.isfinite(value) else [path or "<root>"]
    if isinstance(value, dict):
        found = []
        for key, item in value.items():
            found += non_finite_paths(item, f"{path}.{key}" if path else str(key))
        return found
    if isinstance(value, list):
        found = []
        for i, item in enumerate(value):
            found += non_finite_paths(item, f"{path}[{i}]")
        return found
    return []


def ensure_finite(payload: Dict[str, Any]) -> None:
    bad = non_finite_paths(payload)
    if bad:
        raise InvalidPayloadError(f"Non-finite numbers are not valid JSON: {', '.join(bad)}")
