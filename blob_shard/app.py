import logging
import os
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse

from vehicle_api.log import configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Blob Shard")

# One file per blob: DATA_DIR/<quoted store>/<quoted key>
DATA_DIR = Path(os.getenv("BLOB_DATA_DIR", "blob_data"))

# Optional shared secret; never hard-code it.
TOKEN = os.getenv("BLOB_STORE_TOKEN") or None


def require_token(authorization: Optional[str] = Header(None)):
    if TOKEN and authorization != f"Bearer {TOKEN}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def _segment(name: str) -> str:
    encoded = quote(name, safe="")
    if encoded in ("", ".", ".."):
        raise HTTPException(status_code=400, detail=f"Invalid blob name: {name!r}")
    return encoded


def blob_path(store_name: str, key: str) -> Path:
    return DATA_DIR / _segment(store_name) / _segment(key)


def write_blob(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


@app.put("/stores/{store_name}/blobs/{key:path}", dependencies=[Depends(require_token)])
async def put_blob(store_name: str, key: str, request: Request):
    body = await request.body()
    try:
        body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Blob values must be UTF-8 text")
    path = blob_path(store_name, key)
    write_blob(path, body)
    logger.debug("Stored %d bytes at %s", len(body), path)
    return {"status": "stored"}


@app.get("/stores/{store_name}/blobs/{key:path}", dependencies=[Depends(require_token)])
def get_blob(store_name: str, key: str):
    path = blob_path(store_name, key)
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return PlainTextResponse(path.read_bytes().decode("utf-8"))


@app.get("/health")
def health():
    return {"status": "ok"}


def main():
    configure_logging(os.getenv("LOG_LEVEL", "INFO").upper())
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8001")))


if __name__ == "__main__":
    main()
