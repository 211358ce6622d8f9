# artifact_catalog/domain/errors.py
from __future__ import annotations

from typing import List, Tuple


class CatalogError(Exception):
    """Base class for failures raised by the catalog core."""


class InvalidArgument(CatalogError, ValueError):
    """A required input was missing, empty or malformed."""


class InvalidOperation(CatalogError):
    """The requested change is structurally not allowed on the tree."""


class OutOfRange(CatalogError):
    """A position fell outside the sibling range."""


class CategoryNotFound(CatalogError, LookupError):
    def __init__(self, category_id: object):
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id


class ArtifactNotFound(CatalogError, LookupError):
    def __init__(self, artifact_id: object):
        super().__init__(f"Artifact {artifact_id} not found")
        self.artifact_id = artifact_id


class MetadataValidationError(CatalogError):
    """Raised with the ordered (field, message) failures of the metadata validator."""

    def __init__(self, errors: List[Tuple[str, str]]):
        super().__init__("; ".join(f"{f}: {m}" for f, m in errors) or "Validation failed")
        self.errors = errors
