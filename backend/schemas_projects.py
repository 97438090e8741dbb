"""
backend/schemas_projects.py

Pydantic schemas for the /api/projects endpoint.

Request schemas only check shape (types, enum values, lengths). Business rules
(required fields on create, immutable id/createdAt, timestamp stamping) live in
ProjectStore so they hold for every caller, not just HTTP.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

try:
    from backend.models import AssetType, Project, ValuationModel
except ModuleNotFoundError:
    from models import AssetType, Project, ValuationModel


# ========================================================================
# REQUEST SCHEMAS
# ========================================================================

class ProjectDraftRequest(BaseModel):
    """Partial project record as sent by the dashboard forms.

    Every field is optional at this layer; unknown fields are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, max_length=100, description="Client-supplied id (optional)")
    name: Optional[str] = Field(None, max_length=200, description="Property name")
    address: Optional[str] = Field(None, max_length=200, description="Street address")
    city: Optional[str] = Field(None, max_length=100, description="City")
    state: Optional[str] = Field(None, max_length=50, description="State")
    zip: Optional[str] = Field(None, max_length=20, description="Postal/ZIP code")
    asset_type: Optional[AssetType] = Field(None, alias="assetType", description="Asset type")
    model: Optional[ValuationModel] = Field(None, description="Valuation model used")
    created_at: Optional[str] = Field(None, alias="createdAt", description="ISO timestamp")
    updated_at: Optional[str] = Field(None, alias="updatedAt", description="ISO timestamp")

    @field_validator("name", "address", "city", "state", "zip", mode="before")
    @classmethod
    def trim_text(cls, v):
        """Trim whitespace from free-text fields."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_partial(self) -> Dict[str, Any]:
        """Fields the client actually sent, in wire (camelCase) form."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, mode="json")


class ProjectCreateRequest(ProjectDraftRequest):
    """POST body. name/address/city are enforced by the store."""


class ProjectUpdateRequest(ProjectDraftRequest):
    """PUT body. id/createdAt are accepted but ignored by the store."""


# ========================================================================
# RESPONSE SCHEMAS
# ========================================================================

class ProjectResponse(BaseModel):
    """Envelope for a single project."""
    project: Project


class ProjectListResponse(BaseModel):
    """Envelope for the full collection."""
    projects: List[Project] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
