from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer


class MetadataRecord(BaseModel):
    """A tracked PDF upload as stored in the metadata collection."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    content_path: str
    metadata: Dict[str, Any]

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "MetadataRecord":
        return cls.model_validate(document)

    @model_serializer(mode="wrap")
    def serialize_with_mongo_id(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        # API payloads carry both ``id`` and the stored ``_id`` key
        data = handler(self)
        data.setdefault("_id", self.id)
        return data

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CreateResponse(BaseModel):
    success: bool = True
    id: str


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class ErrorBody(BaseModel):
    status: int
    message: str
