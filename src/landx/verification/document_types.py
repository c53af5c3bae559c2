"""Document-type catalogue and category resolution.

Every upload slot in the land registration workflow is identified by a short
string (``titleDeed``, ``idProof``, ...). The classifier only cares about the
coarse category an identifier belongs to, which selects the expected aspect
ratio. Unknown identifiers resolve to ``DocumentCategory.GENERIC``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class DocumentCategory(StrEnum):
    FORMAL = "formal"
    ID_PROOF = "id_proof"
    PHOTO = "photo"
    LAND_PHOTO = "land_photo"
    GENERIC = "generic"


# A4 portrait, ID-1 card, 3:2 photo. LAND_PHOTO and GENERIC have no target.
EXPECTED_ASPECT_RATIOS: dict[DocumentCategory, float] = {
    DocumentCategory.FORMAL: 0.7071,
    DocumentCategory.ID_PROOF: 1.586,
    DocumentCategory.PHOTO: 1.5,
}

_FORMAL_TYPES = frozenset({"titleDeed", "encumbranceCert", "mutationCert", "landUseCert"})
_FORMAL_MARKERS = ("Deed", "Cert")
_ID_PROOF_MARKER = "idProof"
_PHOTO_TYPES = frozenset({"photo", "selfie"})
_LAND_PHOTO_TYPES = frozenset({"landPhoto", "landmarkPhotos"})


def resolve_category(document_type: str) -> DocumentCategory:
    """Map a document-type identifier onto its category."""
    if document_type in _LAND_PHOTO_TYPES:
        return DocumentCategory.LAND_PHOTO
    if document_type in _FORMAL_TYPES or any(marker in document_type for marker in _FORMAL_MARKERS):
        return DocumentCategory.FORMAL
    if _ID_PROOF_MARKER in document_type:
        return DocumentCategory.ID_PROOF
    if document_type in _PHOTO_TYPES:
        return DocumentCategory.PHOTO
    return DocumentCategory.GENERIC


def expected_aspect_ratio(document_type: str) -> float | None:
    """Return the target width/height ratio for an identifier, if it has one."""
    return EXPECTED_ASPECT_RATIOS.get(resolve_category(document_type))


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class DocumentSection(StrEnum):
    LAND_OWNERSHIP = "Land Ownership Documents"
    OWNER_IDENTITY = "Owner Identity Verification Documents"
    SPECIAL_CASES = "Additional Documents (Special Cases)"
    GEO_TAGGED = "Live Geo-Tagged Images"


@dataclass(frozen=True)
class DocumentTypeSpec:
    """Static description of one upload slot."""

    id: str
    title: str
    description: str
    mandatory: bool
    section: DocumentSection

    @property
    def category(self) -> DocumentCategory:
        return resolve_category(self.id)


def _spec(
    doc_id: str,
    title: str,
    description: str,
    *,
    mandatory: bool,
    section: DocumentSection,
) -> tuple[str, DocumentTypeSpec]:
    return doc_id, DocumentTypeSpec(
        id=doc_id,
        title=title,
        description=description,
        mandatory=mandatory,
        section=section,
    )


DOCUMENT_CATALOGUE: dict[str, DocumentTypeSpec] = dict(
    [
        _spec(
            "titleDeed",
            "Title Deed / Sale Deed (Proof of Ownership)",
            "Confirms legal ownership of the land. Should have Registration Number, Stamp Duty, "
            "and Notary Signatures.",
            mandatory=True,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "encumbranceCert",
            "Encumbrance Certificate (EC)",
            "Confirms the land has no pending loans or disputes. Must be issued by the Revenue Department.",
            mandatory=True,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "mutationCert",
            "Mutation Certificate (Ownership Transfer Proof)",
            "Confirms ownership transfer in government records. Needed for new owners after property transfer.",
            mandatory=True,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "taxReceipts",
            "Property Tax Receipts (Land Tax Payment Proof)",
            "Confirms that the landowner has paid all taxes. Latest tax receipts should be uploaded.",
            mandatory=True,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "landMap",
            "Government-Approved Land Map / Survey Sketch",
            "Shows the official layout of the land. Helps in geo-verification and checking encroachments.",
            mandatory=True,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "landUseCert",
            "Land Use Certificate (LUC)",
            "Confirms land classification (Agricultural, Residential, Commercial, Industrial).",
            mandatory=False,
            section=DocumentSection.LAND_OWNERSHIP,
        ),
        _spec(
            "idProof",
            "Aadhaar Card / PAN Card / Voter ID / Passport",
            "Used to verify the owner's details with government records. Should match the name on the Title Deed.",
            mandatory=True,
            section=DocumentSection.OWNER_IDENTITY,
        ),
        _spec(
            "photo",
            "Recent Passport-Size Photograph",
            "Helps in facial recognition verification.",
            mandatory=True,
            section=DocumentSection.OWNER_IDENTITY,
        ),
        _spec(
            "selfie",
            "Selfie Verification",
            "A live selfie can be compared with the ID card photo to prevent fraud.",
            mandatory=False,
            section=DocumentSection.OWNER_IDENTITY,
        ),
        _spec(
            "affidavit",
            "Affidavit of Ownership",
            "Used when the Title Deed is missing but ownership needs to be claimed.",
            mandatory=False,
            section=DocumentSection.SPECIAL_CASES,
        ),
        _spec(
            "poa",
            "Power of Attorney (POA) Document",
            "Required if someone else is registering on behalf of the owner.",
            mandatory=False,
            section=DocumentSection.SPECIAL_CASES,
        ),
        _spec(
            "courtOrder",
            "Court Order",
            "Required if the land was previously under legal disputes but now cleared.",
            mandatory=False,
            section=DocumentSection.SPECIAL_CASES,
        ),
        _spec(
            "partitionDeed",
            "Partition Deed",
            "Used when a single land parcel is divided among multiple owners.",
            mandatory=False,
            section=DocumentSection.SPECIAL_CASES,
        ),
        _spec(
            "noc",
            "No Objection Certificate (NOC)",
            "If the land is acquired from the government, an NOC is required.",
            mandatory=False,
            section=DocumentSection.SPECIAL_CASES,
        ),
        _spec(
            "landPhoto",
            "Real-Time Photo of Land",
            "Ensures that the land physically exists and matches the documents.",
            mandatory=True,
            section=DocumentSection.GEO_TAGGED,
        ),
        _spec(
            "gpsTaggedSelfie",
            "GPS-Tagged Selfie of the Owner Standing on the Land",
            "Confirms that the registered owner is present at the location.",
            mandatory=True,
            section=DocumentSection.GEO_TAGGED,
        ),
        _spec(
            "landmarkPhotos",
            "Nearby Landmarks & Boundaries Photo",
            "Helps in checking encroachments or incorrect mapping.",
            mandatory=True,
            section=DocumentSection.GEO_TAGGED,
        ),
    ]
)


def get_document_type(document_type: str) -> DocumentTypeSpec | None:
    """Look up a catalogue entry; ``None`` for identifiers outside the catalogue."""
    return DOCUMENT_CATALOGUE.get(document_type)


def missing_mandatory(uploaded: set[str] | frozenset[str]) -> list[str]:
    """Return mandatory catalogue identifiers not present in ``uploaded``, in catalogue order."""
    return [doc_id for doc_id, spec in DOCUMENT_CATALOGUE.items() if spec.mandatory and doc_id not in uploaded]
