"""Canonical enum values for the portal schema."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    PREPARER = "preparer"
    CLIENT = "client"


class ReturnPrepStatus(str, enum.Enum):
    """Fixed stages of the legacy return preparation pipeline, in order."""

    NOT_STARTED = "not_started"
    DOCUMENTS_GATHERING = "documents_gathering"
    INFORMATION_REVIEW = "information_review"
    RETURN_PREPARATION = "return_preparation"
    QUALITY_REVIEW = "quality_review"
    CLIENT_REVIEW = "client_review"
    SIGNATURE_REQUIRED = "signature_required"
    FILING = "filing"
    FILED = "filed"


class ReturnType(str, enum.Enum):
    PERSONAL = "personal"
    BUSINESS = "business"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    VERIFIED = "verified"
    REJECTED = "rejected"


class SignatureStatus(str, enum.Enum):
    PENDING = "pending"
    SIGNED = "signed"


class PipelineEntity(str, enum.Enum):
    RETURN = "return"
    CLIENT_PRODUCT = "client_product"
