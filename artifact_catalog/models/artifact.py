# artifact_catalog/models/artifact.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# major.minor[.patch]
VERSION_PATTERN = r"^\d+\.\d+(\.\d+)?$"


class DocumentationType(str, Enum):
    API_DOCUMENTATION = "API Documentation"
    USER_GUIDE = "User Guide"
    TECHNICAL_SPECIFICATION = "Technical Specification"
    CODE_DOCUMENTATION = "Code Documentation"
    TUTORIAL = "Tutorial"
    SAMPLE_CODE = "Sample Code"
    REFERENCE_MANUAL = "Reference Manual"


class SortField(str, Enum):
    title = "title"
    created = "created"
    author = "author"


# ─────────────────────────────────────────────────────────────
# Stored shapes
# ─────────────────────────────────────────────────────────────
class ArtifactVersion(BaseModel):
    """One release of an artifact, embedded in (and deleted with) its artifact."""
    id: Optional[int] = None
    version_number: str
    update_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    changes: Optional[str] = None
    download_url: str
    artifact_id: Optional[int] = None


class SoftwareDevArtifact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None, alias="_id")
    title: str
    description: Optional[str] = None
    url: str
    documentation_type: str
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    author: str
    current_version: str

    programming_language: Optional[str] = None
    framework: Optional[str] = None
    license_type: Optional[str] = None

    category_id: Optional[int] = None
    versions: List[ArtifactVersion] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────
# Write payloads (field rules live in the metadata validator)
# ─────────────────────────────────────────────────────────────
class ArtifactCreate(BaseModel):
    title: str
    description: Optional[str] = None
    url: str
    documentation_type: str
    author: str
    current_version: str
    programming_language: Optional[str] = None
    framework: Optional[str] = None
    license_type: Optional[str] = None
    category_id: int


class ArtifactUpdate(BaseModel):
    title: str
    description: Optional[str] = None
    url: str
    programming_language: Optional[str] = None
    framework: Optional[str] = None
    license_type: Optional[str] = None


class ArtifactVersionCreate(BaseModel):
    version_number: str
    changes: Optional[str] = None
    download_url: str


# ─────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────
class ArtifactSearchQuery(BaseModel):
    search_term: Optional[str] = None
    programming_language: Optional[str] = None
    framework: Optional[str] = None
    license_type: Optional[str] = None
    category_ids: List[int] = Field(default_factory=list)
    include_subcategories: bool = False
    sort_field: Optional[str] = None
    sort_descending: bool = False
    limit: int = Field(default=50, ge=1, le=200)
    offset: int = Field(default=0, ge=0)
