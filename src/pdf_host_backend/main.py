from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .blob_store import LocalBlobStore
from .configuration import get_settings
from .errors import INTERNAL_SERVER_ERROR, RecordServiceError
from .metadata_store import MongoConnection, MongoMetadataStore
from .models import CreateResponse, DeleteResponse, ErrorBody, MetadataRecord
from .service import RecordService
from .snapshot import SnapshotCache

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the CME pdf host server"

settings = get_settings()

mongo_connection = MongoConnection(
    uri=settings.mongo.uri,
    database=settings.mongo.database,
    collection=settings.mongo.collection,
    server_selection_timeout_ms=settings.mongo.server_selection_timeout_ms,
)
blob_store = LocalBlobStore(Path(settings.storage.upload_dir), chunk_size=settings.storage.chunk_size)
snapshot = SnapshotCache(Path(settings.snapshot.path))
record_service = RecordService(MongoMetadataStore(mongo_connection), blob_store, snapshot)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    snapshot.load()
    await mongo_connection.connect()
    try:
        yield
    finally:
        await mongo_connection.close()


app = FastAPI(title="PDF Host API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.server.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.3f} ms")
    return response


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorBody(status=status_code, message=message).model_dump())


@app.exception_handler(RecordServiceError)
async def record_error_handler(request: Request, exc: RecordServiceError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and known paths with the wrong method are both unmatched routes
    if exc.status_code in (404, 405):
        return _error_response(404, "Resource Not Found")
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    return _error_response(400, problems or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(500, INTERNAL_SERVER_ERROR)


def get_record_service() -> RecordService:
    return record_service


@app.get("/", response_class=PlainTextResponse)
def welcome() -> str:
    return WELCOME_MESSAGE


@app.get("/healthz")
def healthcheck(service: RecordService = Depends(get_record_service)) -> Dict[str, str]:
    return {"status": "ok", "metadata_store": "ready" if service.store.ready else "not-ready"}


@app.post("/pdf/create", response_model=CreateResponse)
async def create_pdf(
    file: Optional[UploadFile] = File(None),
    metadata: Optional[str] = Form(None),
    service: RecordService = Depends(get_record_service),
) -> CreateResponse:
    record_id = await service.create_record(file, metadata)
    return CreateResponse(success=True, id=record_id)


@app.patch("/pdf/edit/{record_id}")
async def edit_pdf(
    record_id: str,
    changes: Optional[Dict[str, Any]] = Body(None),
    service: RecordService = Depends(get_record_service),
) -> None:
    await service.edit_record(record_id, changes)


@app.delete("/pdf/delete/{record_id}", response_model=DeleteResponse)
async def delete_pdf(record_id: str, service: RecordService = Depends(get_record_service)) -> DeleteResponse:
    await service.delete_record(record_id)
    return DeleteResponse(success=True, message="PDF file deleted successfully")


@app.get("/pdf/fetch", response_model=list[MetadataRecord], response_model_by_alias=False)
async def fetch_all_pdfs(service: RecordService = Depends(get_record_service)) -> list[MetadataRecord]:
    return await service.fetch_all_records()


@app.get("/pdf/fetch/{record_id}", response_model=MetadataRecord, response_model_by_alias=False)
async def fetch_pdf(record_id: str, service: RecordService = Depends(get_record_service)) -> MetadataRecord:
    return await service.fetch_record(record_id)


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info(f"The app is running on port {settings.server.port}")
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)
