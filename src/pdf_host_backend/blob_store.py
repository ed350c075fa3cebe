"""
Local disk storage for uploaded PDF files.

Each upload is written to ``<upload_root>/<upload_id>/<sanitized filename>``
where ``upload_id`` is a fresh hex UUID, so two uploads with the same original
filename never overwrite each other. Stored files are never deduplicated,
versioned or removed by the service.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import UploadFile

from .utils import ensure_directory, new_identifier, sanitize_filename

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024


class LocalBlobStore:
    def __init__(self, upload_root: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.upload_root = ensure_directory(upload_root)
        self.chunk_size = chunk_size

    async def save(self, upload: UploadFile) -> Path:
        """
        Stream an upload to disk.

        Args:
            upload: The uploaded file; read in ``chunk_size`` chunks and closed

        Returns:
            Path of the stored file
        """
        upload_dir = ensure_directory(self.upload_root / new_identifier())
        destination = upload_dir / sanitize_filename(upload.filename or "")

        size = 0
        with destination.open("wb") as buffer:
            while chunk := await upload.read(self.chunk_size):
                buffer.write(chunk)
                size += len(chunk)
        await upload.close()

        logger.info(f"Stored upload {upload.filename!r} at {destination} ({size} bytes)")
        return destination
