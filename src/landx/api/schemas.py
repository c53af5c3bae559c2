"""Pydantic request/response schemas for the LandX API."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class VerificationStatus(StrEnum):
    """Outcome reported to the client for one upload."""

    VERIFIED = "verified"
    REJECTED = "rejected"


class VerificationMetadataSchema(BaseModel):
    """Image facts gathered during verification. Absent fields were not reached."""

    document_type: str
    file_size_kb: float | None = None
    resolution: str | None = Field(default=None, description="WIDTHxHEIGHT in pixels")
    aspect_ratio: float | None = Field(default=None, description="Width divided by height")
    image_classification: str | None = Field(
        default=None,
        description="One of formal_document, id_card, photo, possible_document, unknown",
    )


class VerificationResponse(BaseModel):
    """Response for the document verification endpoint."""

    is_document: bool
    confidence: float = Field(ge=0.0, le=1.0)
    warnings: list[str]
    metadata: VerificationMetadataSchema
    status: VerificationStatus
    document_title: str | None = Field(default=None, description="Catalogue title, null for unknown types")


class DocumentTypeInfo(BaseModel):
    """One entry of the document-type catalogue."""

    id: str
    title: str
    description: str
    mandatory: bool
    section: str
    category: str = Field(description="Category: 'formal', 'id_proof', 'photo', 'land_photo', or 'generic'")
    expected_aspect_ratio: float | None


class DocumentTypesResponse(BaseModel):
    """Response for the document-type listing endpoint."""

    document_types: list[DocumentTypeInfo]


class ChecklistRequest(BaseModel):
    """Document types the client has uploaded so far."""

    uploaded: list[str] = Field(default_factory=list)


class ChecklistResponse(BaseModel):
    """Mandatory document types still missing."""

    complete: bool
    missing: list[str]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    concurrent_requests: int
    queue_depth: int
    document_types: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
