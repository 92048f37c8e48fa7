import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vehicle_api.config import Settings, load_settings
from vehicle_api.errors import (
    InvalidPayloadError,
    PayloadTooLargeError,
    RecordNotFoundError,
    StoreFailure,
    VehicleDataError,
)
from vehicle_api.log import configure_logging, log_event
from vehicle_api.models import ErrorBody, RecordCreated, VehicleRecord
from vehicle_api.store import RecordStore, build_store
from vehicle_api.validation import ensure_finite, validate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    "/vehicle-data",
    status_code=201,
    response_model=RecordCreated,
    responses={400: {"model": ErrorBody}, 413: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
def create_vehicle_data(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    ensure_finite(payload)
    if settings.require_fields:
        validate(payload)

    record = VehicleRecord.create(payload)
    try:
        store.put(record.id, record)
    except StoreFailure as exc:
        exc.record_id = record.id
        raise

    log_event(
        logger, logging.INFO, "RECORD_CREATED", "New vehicle record successfully added.",
        id=record.id, crossingIndexCode=payload.get("crossingIndexCode"),
    )
    return RecordCreated(message="Vehicle data successfully recorded", id=record.id)


@router.get("/vehicle-data/{record_id:path}", responses={404: {"model": ErrorBody}, 500: {"model": ErrorBody}})
def read_vehicle_data(record_id: str, store: RecordStore = Depends(get_store)):
    try:
        record = store.get(record_id)
    except StoreFailure as exc:
        exc.record_id = record_id
        raise
    if record is None:
        raise RecordNotFoundError(record_id)

    log_event(logger, logging.DEBUG, "RECORD_FETCHED", "Vehicle record fetched.", id=record_id)
    return JSONResponse(status_code=200, content=record.data)


def _error_response(exc: VehicleDataError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    log_event(
        logger, level, exc.event, exc.message,
        id=exc.record_id,
        errorName=type(exc.__cause__ or exc).__name__,
        errorMessage=str(exc.__cause__ or exc),
    )
    return JSONResponse(status_code=exc.status_code, content=exc.body())


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Vehicle Data API")
    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)
    logger.info("Using %s record store", type(app.state.store).__name__)

    for prefix in settings.route_prefixes:
        app.include_router(router, prefix=prefix)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length is not None and length.isdigit() and int(length) > settings.max_body_bytes:
            return _error_response(
                PayloadTooLargeError(f"Request body exceeds the {settings.max_body_bytes} byte limit.")
            )
        return await call_next(request)

    @app.exception_handler(VehicleDataError)
    async def handle_vehicle_data_error(request: Request, exc: VehicleDataError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError):
        return _error_response(InvalidPayloadError("Request body must be a JSON object."))

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def main():
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
