from typing import Any, Dict, List, Optional


class VehicleDataError(Exception):
    """Base for errors that end a request with a JSON error envelope."""

    status_code = 500
    error = "Internal Server Error"
    event = "REQUEST_FAILED"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.record_id: Optional[str] = None

    def body(self) -> Dict[str, Any]:
        if self.details is not None:
            return {"error": self.error, "details": self.details}
        return {"error": self.error, "message": self.message}


class MissingFieldsError(VehicleDataError):
    status_code = 400
    error = "Invalid Data"
    event = "VALIDATION_FAILED"

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = list(missing)

    def body(self) -> Dict[str, Any]:
        body = super().body()
        body["missing_fields"] = self.missing
        return body


class InvalidPayloadError(VehicleDataError):
    status_code = 400
    error = "Invalid Data"
    event = "INVALID_PAYLOAD"


class RecordNotFoundError(VehicleDataError):
    status_code = 404
    error = "Not Found"
    event = "RECORD_NOT_FOUND"

    def __init__(self, record_id: str):
        super().__init__(f"Record with ID {record_id} not found.")
        self.record_id = record_id


class PayloadTooLargeError(VehicleDataError):
    status_code = 413
    error = "Payload Too Large"
    event = "PAYLOAD_TOO_LARGE"


class StoreFailure(VehicleDataError):
    """Backend read/write or (de)serialization failure. The cause is chained."""

    event = "BLOB_STORE_FAILED"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, details=details or message)
