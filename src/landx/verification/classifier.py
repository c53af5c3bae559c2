"""Heuristic document-plausibility classifier.

Scores an uploaded image against the document type the user claims it is,
using only file size, pixel dimensions and aspect ratio:

    confidence = 0.30 * aspect_ratio_score
               + 0.30 * resolution_score
               + 0.20 * classification_match_score
               + 0.20 * image_quality_score

An image is accepted as a document when the rounded confidence is at least
0.80. ``verify`` never raises; every failure becomes a zero-confidence result
carrying a single warning.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from landx.verification.document_types import EXPECTED_ASPECT_RATIOS, DocumentCategory, resolve_category
from landx.verification.image_probe import (
    ImageDecodeError,
    ImageMetadata,
    ImageNotFoundError,
    read_dimensions,
    read_file_size,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Thresholds and weights
# ---------------------------------------------------------------------------

ASPECT_RATIO_WEIGHT = 0.3
RESOLUTION_WEIGHT = 0.3
CLASSIFICATION_WEIGHT = 0.2
QUALITY_WEIGHT = 0.2

ACCEPTANCE_THRESHOLD = 0.8
SMALL_FILE_WARNING_KB = 50
MIN_PIXEL_COUNT = 1_000_000

LAND_PHOTO_ASPECT_SCORE = 0.8

# (max |actual - expected|, score); first bound that holds wins.
_ASPECT_DIFFERENCE_SCORES: tuple[tuple[float, float], ...] = (
    (0.1, 0.9),
    (0.3, 0.7),
    (0.5, 0.5),
    (1.0, 0.3),
)
_ASPECT_FALLBACK_SCORE = 0.1

WARN_MISSING = "Image file does not exist"
WARN_SMALL_FILE = "Image file size is suspiciously small"
WARN_DIMENSIONS = "Failed to analyze image dimensions"
WARN_LOW_RESOLUTION = "Image resolution is lower than recommended"
WARN_VERY_LOW_RESOLUTION = "Image resolution is too low for reliable document verification"
WARN_MISMATCH = "Image does not appear to match the expected document type"
WARN_INTERNAL = "Failed to verify document due to an error"


def rejection_warning(document_type: str) -> str:
    return (
        f"This may not be a valid {document_type} document. "
        "Please upload a clear, high-quality image of the entire document."
    )


# ---------------------------------------------------------------------------
# Image classification buckets
# ---------------------------------------------------------------------------


class ImageLabel(StrEnum):
    FORMAL_DOCUMENT = "formal_document"
    ID_CARD = "id_card"
    PHOTO = "photo"
    POSSIBLE_DOCUMENT = "possible_document"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class _BucketRule:
    markers: tuple[str, ...]
    label: ImageLabel
    ranges: tuple[tuple[float, float], ...]

    def applies_to(self, document_type: str) -> bool:
        return any(marker in document_type for marker in self.markers)

    def accepts(self, aspect_ratio: float) -> bool:
        return any(low <= aspect_ratio <= high for low, high in self.ranges)


# Evaluated in order against the declared type; ranges are inclusive.
_BUCKET_RULES: tuple[_BucketRule, ...] = (
    _BucketRule(("Deed", "Cert"), ImageLabel.FORMAL_DOCUMENT, ((0.6, 0.8),)),
    _BucketRule(("idProof",), ImageLabel.ID_CARD, ((1.4, 1.7),)),
    _BucketRule(("photo",), ImageLabel.PHOTO, ((1.3, 1.5), (0.9, 1.1))),
)

# Declared-type markers and the labels that count as a match for them.
_MATCHING_LABELS: tuple[tuple[tuple[str, ...], frozenset[ImageLabel]], ...] = (
    (("photo",), frozenset({ImageLabel.PHOTO})),
    (("Deed", "Cert"), frozenset({ImageLabel.FORMAL_DOCUMENT, ImageLabel.POSSIBLE_DOCUMENT})),
    (("idProof",), frozenset({ImageLabel.ID_CARD})),
)


@dataclass(frozen=True)
class ImageClassification:
    """Coarse bucket assigned from pixel dimensions alone."""

    label: ImageLabel
    confidence: float


def classify_image(width: int, height: int, document_type: str) -> ImageClassification:
    """Bucket an image by aspect ratio, trying the declared type's rules first."""
    aspect_ratio = width / height
    for rule in _BUCKET_RULES:
        if rule.applies_to(document_type) and rule.accepts(aspect_ratio):
            return ImageClassification(rule.label, 0.95)
    if 0.5 < aspect_ratio < 2.0:
        return ImageClassification(ImageLabel.POSSIBLE_DOCUMENT, 0.8)
    return ImageClassification(ImageLabel.UNKNOWN, 0.3)


# ---------------------------------------------------------------------------
# Component scores
# ---------------------------------------------------------------------------


def aspect_ratio_difference_score(actual: float, expected: float) -> float:
    difference = abs(actual - expected)
    for bound, score in _ASPECT_DIFFERENCE_SCORES:
        if difference <= bound:
            return score
    return _ASPECT_FALLBACK_SCORE


def aspect_ratio_score(aspect_ratio: float, document_type: str) -> float:
    """Score how well ``aspect_ratio`` fits the declared document type."""
    category = resolve_category(document_type)
    if category is DocumentCategory.LAND_PHOTO:
        return LAND_PHOTO_ASPECT_SCORE
    expected = EXPECTED_ASPECT_RATIOS.get(category)
    if expected is None:
        return 0.7 if 0.5 < aspect_ratio < 2.0 else 0.3
    return aspect_ratio_difference_score(aspect_ratio, expected)


def resolution_score(pixel_count: int) -> tuple[float, str | None]:
    """Return the resolution score and the warning it raises, if any."""
    if pixel_count >= MIN_PIXEL_COUNT:
        return 0.9, None
    if pixel_count >= MIN_PIXEL_COUNT / 2:
        return 0.6, WARN_LOW_RESOLUTION
    return 0.3, WARN_VERY_LOW_RESOLUTION


def classification_match_score(document_type: str, label: str) -> tuple[float, str | None]:
    """Compare the declared type with the image bucket."""
    for markers, labels in _MATCHING_LABELS:
        if any(marker in document_type for marker in markers) and label in labels:
            return 0.9, None
    if label == ImageLabel.POSSIBLE_DOCUMENT:
        return 0.7, None
    return 0.4, WARN_MISMATCH


def quality_score_for_size(size_kb: float) -> float:
    if size_kb < 30:
        return 0.1
    if size_kb < 100:
        return 0.4
    if size_kb > 5000:
        return 0.95
    return 0.85


def image_quality_score(path: str | Path) -> float:
    """Score image quality from a fresh read of the file size.

    A failed read here degrades to a neutral 0.5 instead of aborting, since
    the file was already read successfully earlier in the same verification.
    """
    try:
        size_bytes = read_file_size(path)
    except ImageNotFoundError:
        logger.warning("Could not re-read size of %s, using neutral quality score", path)
        return 0.5
    return quality_score_for_size(size_bytes / 1024)


def round_confidence(value: float) -> float:
    """Round to two decimals, half away from zero on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class VerificationMetadata:
    document_type: str
    file_size_kb: float | None = None
    resolution: str | None = None
    aspect_ratio: float | None = None
    image_classification: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render with camelCase keys, leaving out fields that were never filled."""
        keys = {
            "resolution": "resolution",
            "aspect_ratio": "aspectRatio",
            "file_size_kb": "fileSizeKB",
            "document_type": "documentType",
            "image_classification": "imageClassification",
        }
        values = asdict(self)
        return {camel: values[name] for name, camel in keys.items() if values[name] is not None}


@dataclass
class VerificationResult:
    """Outcome of one verification."""

    is_document: bool
    confidence: float
    metadata: VerificationMetadata
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, warning: str, metadata: VerificationMetadata) -> VerificationResult:
        return cls(is_document=False, confidence=0.0, metadata=metadata, warnings=[warning])

    def to_dict(self) -> dict[str, Any]:
        return {
            "isDocument": self.is_document,
            "confidence": self.confidence,
            "warnings": list(self.warnings),
            "metadata": self.metadata.to_dict(),
        }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def verify(image_location: str | Path, expected_document_type: str) -> VerificationResult:
    """Estimate whether the image at ``image_location`` is a ``expected_document_type``.

    Args:
        image_location: Path to a local image file.
        expected_document_type: Declared document-type identifier, e.g. ``"titleDeed"``.

    Returns:
        A fresh ``VerificationResult``. Never raises.
    """
    try:
        return _verify(image_location, expected_document_type)
    except Exception:
        logger.exception("Document verification of %s failed", image_location)
        return VerificationResult.failed(WARN_INTERNAL, VerificationMetadata(document_type=expected_document_type))


def _verify(image_location: str | Path, document_type: str) -> VerificationResult:
    metadata = VerificationMetadata(document_type=document_type)
    warnings: list[str] = []

    try:
        size_bytes = read_file_size(image_location)
    except ImageNotFoundError:
        logger.warning("Image %s does not exist", image_location)
        return VerificationResult.failed(WARN_MISSING, metadata)

    size_kb = size_bytes / 1024
    metadata.file_size_kb = size_kb
    if size_kb < SMALL_FILE_WARNING_KB:
        warnings.append(WARN_SMALL_FILE)

    try:
        width, height = read_dimensions(image_location)
    except ImageDecodeError as exc:
        logger.warning("%s", exc)
        return VerificationResult.failed(WARN_DIMENSIONS, metadata)

    image = ImageMetadata(size_bytes=size_bytes, width=width, height=height)
    metadata.aspect_ratio = image.aspect_ratio
    metadata.resolution = image.resolution

    aspect = aspect_ratio_score(image.aspect_ratio, document_type)

    resolution, resolution_warning = resolution_score(image.pixel_count)
    if resolution_warning:
        warnings.append(resolution_warning)

    classification = classify_image(width, height, document_type)
    metadata.image_classification = classification.label.value

    quality = image_quality_score(image_location)

    match, match_warning = classification_match_score(document_type, classification.label)
    if match_warning:
        warnings.append(match_warning)

    confidence = round_confidence(
        aspect * ASPECT_RATIO_WEIGHT
        + resolution * RESOLUTION_WEIGHT
        + match * CLASSIFICATION_WEIGHT
        + quality * QUALITY_WEIGHT
    )
    is_document = confidence >= ACCEPTANCE_THRESHOLD
    if not is_document:
        warnings.append(rejection_warning(document_type))

    logger.debug(
        "Verified %s as %s: aspect=%.2f resolution=%.2f match=%.2f (%s @ %.2f) quality=%.2f -> %.2f",
        image_location,
        document_type,
        aspect,
        resolution,
        match,
        classification.label,
        classification.confidence,
        quality,
        confidence,
    )
    return VerificationResult(is_document=is_document, confidence=confidence, metadata=metadata, warnings=warnings)
