from .errors import (
    CatalogError,
    InvalidArgument,
    InvalidOperation,
    OutOfRange,
    CategoryNotFound,
    ArtifactNotFound,
    MetadataValidationError,
)
from .category_tree import CategoryTree
from .versioning import add_version, version_history

__all__ = [
    "CatalogError",
    "InvalidArgument",
    "InvalidOperation",
    "OutOfRange",
    "CategoryNotFound",
    "ArtifactNotFound",
    "MetadataValidationError",
    "CategoryTree",
    "add_version",
    "version_history",
]
