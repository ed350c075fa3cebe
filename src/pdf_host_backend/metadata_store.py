"""
MongoDB persistence for PDF metadata records.

``MongoConnection`` is the process-wide connection handle. It starts out
not-ready and becomes ready once ``connect()`` has reached the server; until
then every store call fails fast with ``StoreUnavailable``. ``MongoMetadataStore``
wraps the configured collection and translates pymongo failures into the
record service's error types.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import ConnectionFailure, PyMongoError

from .errors import StoreUnavailable, StoreWriteFailure

logger = logging.getLogger(__name__)


class MongoConnection:
    """Lazily established handle to the metadata collection."""

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncMongoClient] = None
        self._collection: Optional[AsyncCollection] = None

    @property
    def ready(self) -> bool:
        return self._collection is not None

    async def connect(self) -> bool:
        """
        Connect and ping the server.

        A failed connection is logged and leaves the handle not-ready so the
        API can still start and answer with 500s.

        Returns:
            True if the handle is ready afterwards
        """
        if self.ready:
            return True

        client: AsyncMongoClient = AsyncMongoClient(
            self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            logger.error(f"Error connecting to MongoDB at {self.uri}: {exc}")
            await client.close()
            return False

        self._client = client
        self._collection = client[self.database_name][self.collection_name]
        logger.info(f"Connected to MongoDB ({self.database_name}.{self.collection_name})")
        return True

    @property
    def collection(self) -> AsyncCollection:
        if self._collection is None:
            raise StoreUnavailable()
        return self._collection

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._collection = None


class MongoMetadataStore:
    def __init__(self, connection: MongoConnection) -> None:
        self.connection = connection

    @property
    def ready(self) -> bool:
        return self.connection.ready

    async def insert(self, document: Dict[str, Any]) -> None:
        collection = self.connection.collection
        try:
            await collection.insert_one(document)
        except ConnectionFailure as exc:
            logger.error(f"Error uploading metadata to MongoDB: {exc}")
            raise StoreUnavailable() from exc
        except PyMongoError as exc:
            logger.error(f"Error uploading metadata to MongoDB: {exc}")
            raise StoreWriteFailure() from exc

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        collection = self.connection.collection
        try:
            return await collection.find_one({"_id": record_id})
        except PyMongoError as exc:
            logger.error(f"Error fetching PDF file metadata: {exc}")
            raise StoreUnavailable() from exc

    async def find_all(self) -> List[Dict[str, Any]]:
        collection = self.connection.collection
        try:
            return await collection.find({}).to_list()
        except PyMongoError as exc:
            logger.error(f"Error fetching PDF files metadata: {exc}")
            raise StoreUnavailable() from exc

    async def delete_by_id(self, record_id: str) -> bool:
        """Returns True if a document was removed."""
        collection = self.connection.collection
        try:
            result = await collection.delete_one({"_id": record_id})
        except PyMongoError as exc:
            logger.error(f"Error deleting PDF file: {exc}")
            raise StoreUnavailable() from exc
        return result.deleted_count > 0
