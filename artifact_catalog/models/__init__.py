from .category import (
    PATH_SEPARATOR,
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryRearrange,
    CategoryOut,
)
from .artifact import (
    VERSION_PATTERN,
    DocumentationType,
    SortField,
    ArtifactVersion,
    SoftwareDevArtifact,
    ArtifactCreate,
    ArtifactUpdate,
    ArtifactVersionCreate,
    ArtifactSearchQuery,
)
