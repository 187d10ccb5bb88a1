"""Flow metadata: ownership, compliance flags, RBAC and versioning."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from ._base import EMAIL_PATTERN, DslModel, IsoDateTime

DataClassification = Literal["public", "internal", "confidential", "restricted"]
Permission = Literal["read", "write", "execute", "admin"]


class Compliance(DslModel):
    """Regulatory regimes the flow must honour."""

    gdpr: bool = False
    hipaa: bool = False
    soc2: bool = False
    pci: bool = False
    data_retention: Optional[int] = None  # days
    data_classification: DataClassification = "internal"


class RBAC(DslModel):
    roles: List[str] = Field(default_factory=list)
    permissions: List[Permission] = Field(default_factory=lambda: ["read"])
    tenants: Optional[List[str]] = None


class Owner(DslModel):
    name: str
    email: str = Field(pattern=EMAIL_PATTERN)
    team: Optional[str] = None
    role: Optional[str] = None


class Metadata(DslModel):
    """Authoring-time metadata. Validated, never mutated."""

    name: str
    version: str = "1.0.0"
    description: Optional[str] = None
    tenant: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    owners: List[Owner] = Field(default_factory=list)
    compliance: Optional[Compliance] = None
    rbac: Optional[RBAC] = None
    created_at: Optional[IsoDateTime] = None
    updated_at: Optional[IsoDateTime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
