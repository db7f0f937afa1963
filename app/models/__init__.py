"""Modular SQLAlchemy model package for the tenant-aware portal schema."""

from app.models.activity import Document, Message, SignatureRequest
from app.models.base import Base
from app.models.client_product import ClientProduct
from app.models.enums import (
    DocumentStatus,
    PipelineEntity,
    ReturnPrepStatus,
    ReturnType,
    SignatureStatus,
    UserRole,
)
from app.models.product import DEFAULT_STAGE_COLOR, Product, ProductStage
from app.models.stage_transition import StageTransition
from app.models.tax_return import TaxReturn
from app.models.tenant import Tenant
from app.models.user import User

__all__ = [
    "Base",
    "ClientProduct",
    "DEFAULT_STAGE_COLOR",
    "Document",
    "DocumentStatus",
    "Message",
    "PipelineEntity",
    "Product",
    "ProductStage",
    "ReturnPrepStatus",
    "ReturnType",
    "SignatureRequest",
    "SignatureStatus",
    "StageTransition",
    "TaxReturn",
    "Tenant",
    "User",
    "UserRole",
]
