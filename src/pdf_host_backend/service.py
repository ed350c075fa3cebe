"""
Record lifecycle for uploaded PDFs.

The RecordService coordinates the two independent stores behind the API:
- LocalBlobStore receives the raw file
- the metadata store receives the ``{_id, content_path, metadata}`` document

The two writes are not atomic. A file written before a failed insert, and the
file behind a deleted record, both stay on disk.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import UploadFile

from .blob_store import LocalBlobStore
from .errors import EditNotSupported, InvalidInput, NotFound, StoreUnavailable
from .models import MetadataRecord
from .snapshot import SnapshotCache
from .utils import new_identifier

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise InvalidInput(f"Invalid metadata JSON: {name} is not a JSON value")


def parse_metadata(raw_metadata: Optional[str]) -> Dict[str, Any]:
    """
    Parse the ``metadata`` form field.

    Raises:
        InvalidInput: If the field is missing, not JSON, or not a JSON object
    """
    if raw_metadata is None or raw_metadata.strip() == "":
        raise InvalidInput("No metadata supplied")
    try:
        metadata = json.loads(raw_metadata, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"Invalid metadata JSON: {exc}") from exc
    if not isinstance(metadata, dict):
        raise InvalidInput("Metadata must be a JSON object")
    return metadata


class RecordService:
    """
    Create, fetch and delete PDF metadata records.

    The service keeps no per-request state; everything durable lives in the
    injected stores.

    Attributes:
        store: Metadata store (``MongoMetadataStore`` in production)
        blob_store: Disk storage for the uploaded files
        snapshot: Optional local snapshot updated after each upload
    """

    def __init__(
        self,
        store: Any,
        blob_store: LocalBlobStore,
        snapshot: Optional[SnapshotCache] = None,
    ) -> None:
        self.store = store
        self.blob_store = blob_store
        self.snapshot = snapshot

    def _require_store(self) -> None:
        if not self.store.ready:
            logger.error("Metadata store connection not established")
            raise StoreUnavailable()

    async def create_record(self, upload: Optional[UploadFile], raw_metadata: Optional[str]) -> str:
        """
        Store an uploaded PDF and insert its metadata record.

        Inputs are validated before anything is written. The file is then
        stored, the record built and inserted.

        Args:
            upload: The uploaded file
            raw_metadata: JSON object text describing the PDF

        Returns:
            The new record id

        Raises:
            InvalidInput: Missing/empty file or missing/unparseable metadata
            StoreUnavailable: Metadata store not connected
            StoreWriteFailure: Insert rejected; the stored file is left in place
        """
        if upload is None or not upload.filename:
            raise InvalidInput("No file uploaded")
        if not await upload.read(1):
            raise InvalidInput("Uploaded file is empty")
        await upload.seek(0)

        metadata = parse_metadata(raw_metadata)
        self._require_store()

        stored_path = await self.blob_store.save(upload)
        record = MetadataRecord(id=new_identifier(), content_path=str(stored_path), metadata=metadata)

        await self.store.insert(record.to_document())
        logger.info(f"Metadata uploaded for record {record.id} ({record.content_path})")

        if self.snapshot is not None:
            self.snapshot.put(record.content_path, metadata)
            self.snapshot.save_quietly()

        return record.id

    async def fetch_record(self, record_id: str) -> MetadataRecord:
        self._require_store()
        document = await self.store.find_by_id(record_id)
        if document is None:
            raise NotFound()
        return MetadataRecord.from_document(document)

    async def fetch_all_records(self) -> List[MetadataRecord]:
        """All records in store order; no sort is applied."""
        self._require_store()
        documents = await self.store.find_all()
        return [MetadataRecord.from_document(document) for document in documents]

    async def delete_record(self, record_id: str) -> bool:
        """
        Remove a record's metadata. The stored file is not deleted.

        Raises:
            NotFound: If no record had this id
        """
        self._require_store()
        if not await self.store.delete_by_id(record_id):
            raise NotFound()
        logger.info(f"Deleted record {record_id}")
        return True

    async def edit_record(self, record_id: str, changes: Any) -> None:
        # Partial updates are not offered; nothing is read or written.
        logger.info(f"Rejected edit for record {record_id}")
        raise EditNotSupported()
