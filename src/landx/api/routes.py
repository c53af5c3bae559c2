"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Request, UploadFile, status

from landx.api.middleware import verify_api_key
from landx.api.schemas import (
    ChecklistRequest,
    ChecklistResponse,
    DocumentTypeInfo,
    DocumentTypesResponse,
    ErrorResponse,
    HealthResponse,
    VerificationMetadataSchema,
    VerificationResponse,
    VerificationStatus,
)
from landx.verification.document_types import (
    DOCUMENT_CATALOGUE,
    expected_aspect_ratio,
    get_document_type,
    missing_mandatory,
)

if TYPE_CHECKING:
    from landx.config import Settings
    from landx.verification.classifier import VerificationResult
    from landx.verification.pool import VerificationPool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])

DEFAULT_DOCUMENT_TYPE = "document"


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_verification_pool(request: Request) -> VerificationPool:
    pool: VerificationPool = request.app.state.verification_pool
    return pool


def _to_response(result: VerificationResult) -> VerificationResponse:
    meta = result.metadata
    spec = get_document_type(meta.document_type)
    return VerificationResponse(
        is_document=result.is_document,
        confidence=result.confidence,
        warnings=result.warnings,
        metadata=VerificationMetadataSchema(
            document_type=meta.document_type,
            file_size_kb=meta.file_size_kb,
            resolution=meta.resolution,
            aspect_ratio=meta.aspect_ratio,
            image_classification=meta.image_classification,
        ),
        status=VerificationStatus.VERIFIED if result.is_document else VerificationStatus.REJECTED,
        document_title=spec.title if spec is not None else None,
    )


@router.post(
    "/verify-document",
    response_model=VerificationResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
    summary="Check that an uploaded image plausibly is the declared document",
)
async def verify_document(
    request: Request,
    file: UploadFile,
    document_type: Annotated[str, Form()] = DEFAULT_DOCUMENT_TYPE,
) -> VerificationResponse:
    """Score an uploaded image against its declared document type."""
    settings = _get_settings(request)
    pool = _get_verification_pool(request)

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is empty")
    if len(content) > settings.max_file_size:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.max_file_size} bytes",
        )

    try:
        result = await pool.verify_upload(content, file.filename, document_type)
    except TimeoutError:
        logger.warning("Verification pool saturated, rejecting %s upload", document_type)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Verification capacity exhausted, retry shortly",
        ) from None

    logger.info(
        "Verified %s upload (%d bytes): confidence=%.2f is_document=%s",
        document_type,
        len(content),
        result.confidence,
        result.is_document,
    )
    return _to_response(result)


@router.get(
    "/document-types",
    response_model=DocumentTypesResponse,
    summary="List document types accepted by the registration workflow",
)
async def list_document_types() -> DocumentTypesResponse:
    """Return the document-type catalogue with the category each type verifies against."""
    return DocumentTypesResponse(
        document_types=[
            DocumentTypeInfo(
                id=spec.id,
                title=spec.title,
                description=spec.description,
                mandatory=spec.mandatory,
                section=spec.section,
                category=spec.category,
                expected_aspect_ratio=expected_aspect_ratio(spec.id),
            )
            for spec in DOCUMENT_CATALOGUE.values()
        ]
    )


@router.post(
    "/checklist",
    response_model=ChecklistResponse,
    summary="Report mandatory document types not yet uploaded",
)
async def checklist(body: ChecklistRequest) -> ChecklistResponse:
    """Compare uploaded document types against the mandatory ones."""
    missing = missing_mandatory(frozenset(body.uploaded))
    return ChecklistResponse(complete=not missing, missing=missing)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    pool = _get_verification_pool(request)
    return HealthResponse(
        status="ok",
        concurrent_requests=pool.active_count,
        queue_depth=pool.queue_depth,
        document_types=len(DOCUMENT_CATALOGUE),
    )
