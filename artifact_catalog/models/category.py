# artifact_catalog/models/category.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

PATH_SEPARATOR = "/"


class Category(BaseModel):
    """
    Stored category document and the node the tree core operates on.

    `subcategory_ids` and `artifact_ids` are populated in memory by the
    loader (ordered children, weak artifact references) and never persisted.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None, alias="_id")
    name: str
    parent_category_id: Optional[int] = None
    position: int = 0
    path: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    subcategory_ids: List[int] = Field(default_factory=list, exclude=True)
    artifact_ids: List[int] = Field(default_factory=list, exclude=True)

    @property
    def is_root(self) -> bool:
        return self.parent_category_id is None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    parent_category_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryRearrange(BaseModel):
    # Bounds are checked by the tree against the live sibling count.
    new_position: int


class CategoryOut(BaseModel):
    """Nested read view returned by the category endpoints."""
    id: int
    name: str
    parent_category_id: Optional[int] = None
    position: int
    path: Optional[str] = None
    level: int = 0
    artifacts_count: int = 0
    is_empty: bool = True
    subcategories: List["CategoryOut"] = Field(default_factory=list)


CategoryOut.model_rebuild()
