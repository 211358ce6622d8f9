from .validation import ArtifactMetadataValidator, FieldError, ValidationResult
from .category_service import CategoryService
from .artifact_service import ArtifactService

__all__ = [
    "ArtifactMetadataValidator",
    "FieldError",
    "ValidationResult",
    "CategoryService",
    "ArtifactService",
]
