# artifact_catalog/services/validation.py
from __future__ import annotations

import re
from typing import List, Optional

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from ..models.artifact import VERSION_PATTERN, ArtifactVersion, DocumentationType, SoftwareDevArtifact

_VERSION_RE = re.compile(VERSION_PATTERN)
_URL = TypeAdapter(AnyUrl)
_DOCUMENTATION_TYPES = {t.value for t in DocumentationType}


class FieldError(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    errors: List[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def as_pairs(self) -> List[tuple]:
        return [(e.field, e.message) for e in self.errors]


def is_absolute_url(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        url = _URL.validate_python(value)
    except ValidationError:
        return False
    return bool(url.scheme and url.host)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class ArtifactMetadataValidator:
    """
    Field-level rules checked before an artifact (or a new version) reaches
    the core. Failures are collected in rule order, one per field at most.
    """

    def validate(self, artifact: SoftwareDevArtifact) -> ValidationResult:
        errors: List[FieldError] = []

        def fail(field: str, message: str) -> None:
            errors.append(FieldError(field=field, message=message))

        if _blank(artifact.title):
            fail("title", "Title is required")
        elif not 3 <= len(artifact.title) <= 200:
            fail("title", "Title must be between 3 and 200 characters")

        if _blank(artifact.description):
            fail("description", "Description is required")
        elif len(artifact.description) > 2000:
            fail("description", "Description cannot exceed 2000 characters")

        if _blank(artifact.url):
            fail("url", "URL is required")
        elif not is_absolute_url(artifact.url):
            fail("url", "Invalid URL format")

        if _blank(artifact.documentation_type):
            fail("documentation_type", "Documentation type is required")
        elif artifact.documentation_type not in _DOCUMENTATION_TYPES:
            fail("documentation_type", "Invalid documentation type")

        if _blank(artifact.author):
            fail("author", "Author is required")
        elif not 2 <= len(artifact.author) <= 100:
            fail("author", "Author name must be between 2 and 100 characters")

        if _blank(artifact.current_version):
            fail("current_version", "Version is required")
        elif not _VERSION_RE.match(artifact.current_version):
            fail("current_version", "Version must be in format: major.minor[.patch]")

        for field in ("programming_language", "framework", "license_type"):
            value = getattr(artifact, field)
            if value is not None and len(value) > 50:
                fail(field, f"{field.replace('_', ' ').capitalize()} cannot exceed 50 characters")

        if not artifact.category_id:
            fail("category_id", "Category must be specified")

        return ValidationResult(errors=errors)

    def validate_version(self, version: ArtifactVersion) -> ValidationResult:
        errors: List[FieldError] = []

        if _blank(version.version_number):
            errors.append(FieldError(field="version_number", message="Version is required"))
        elif not _VERSION_RE.match(version.version_number):
            errors.append(FieldError(
                field="version_number",
                message="Version must be in format: major.minor[.patch]",
            ))

        if version.changes is not None and len(version.changes) > 2000:
            errors.append(FieldError(field="changes", message="Changes cannot exceed 2000 characters"))

        if _blank(version.download_url):
            errors.append(FieldError(field="download_url", message="Download URL is required"))
        elif not is_absolute_url(version.download_url):
            errors.append(FieldError(field="download_url", message="Invalid URL format"))

        return ValidationResult(errors=errors)
