from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..dal import artifact_dal, category_dal
from ..domain import ArtifactNotFound, InvalidArgument, MetadataValidationError, add_version, version_history
from ..events import Service, emit
from ..models import (
    ArtifactCreate,
    ArtifactSearchQuery,
    ArtifactUpdate,
    ArtifactVersion,
    ArtifactVersionCreate,
    SoftwareDevArtifact,
)
from .locks import structure_lock
from .validation import ArtifactMetadataValidator, ValidationResult

logger = logging.getLogger("artifact_catalog.services.artifact")


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.is_valid:
        raise MetadataValidationError(result.as_pairs())


class ArtifactService:
    def __init__(self, db: AsyncIOMotorDatabase, validator: Optional[ArtifactMetadataValidator] = None) -> None:
        self.db = db
        self.validator = validator or ArtifactMetadataValidator()

    async def _require(self, artifact_id: int) -> SoftwareDevArtifact:
        artifact = await artifact_dal.get_artifact(self.db, artifact_id)
        if artifact is None:
            raise ArtifactNotFound(artifact_id)
        return artifact

    # ─────────────────────────────────────────────────────────────
    # Search / reads
    # ─────────────────────────────────────────────────────────────
    async def search(self, query: ArtifactSearchQuery) -> List[SoftwareDevArtifact]:
        category_ids = None
        if query.category_ids and query.include_subcategories:
            # Expand each requested category to its subtree through the materialized path.
            expanded = list(query.category_ids)
            for category_id in query.category_ids:
                category = await category_dal.get_category(self.db, category_id)
                if category is None or not category.path:
                    continue
                expanded += [d.id for d in await category_dal.list_descendants(self.db, category.path)]
            category_ids = list(dict.fromkeys(expanded))
        return await artifact_dal.search_artifacts(self.db, query, category_ids=category_ids)

    async def get(self, artifact_id: int) -> SoftwareDevArtifact:
        return await self._require(artifact_id)

    async def version_history(self, artifact_id: int) -> List[ArtifactVersion]:
        return version_history(await self._require(artifact_id))

    # ─────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────
    async def create(self, payload: ArtifactCreate) -> SoftwareDevArtifact:
        artifact = SoftwareDevArtifact(**payload.model_dump(), created=datetime.now(timezone.utc))
        _raise_if_invalid(self.validator.validate(artifact))

        # Category check and insert share the lock with category deletes.
        async with structure_lock():
            if await category_dal.get_category(self.db, payload.category_id) is None:
                raise InvalidArgument("Category not found")

            artifact.id = await artifact_dal.allocate_id(self.db)
            await artifact_dal.insert_artifact(self.db, artifact)

        logger.info("Artifact %s created in category %s", artifact.id, artifact.category_id)
        await emit(Service.ARTIFACT, "created", artifact.model_dump(mode="json"))
        return artifact

    async def update(self, artifact_id: int, payload: ArtifactUpdate) -> SoftwareDevArtifact:
        artifact = await self._require(artifact_id)
        for field, value in payload.model_dump().items():
            setattr(artifact, field, value)
        _raise_if_invalid(self.validator.validate(artifact))

        updated = await artifact_dal.update_artifact(self.db, artifact)
        if updated is None:
            raise ArtifactNotFound(artifact_id)

        await emit(Service.ARTIFACT, "updated", updated.model_dump(mode="json"))
        return updated

    async def delete(self, artifact_id: int) -> None:
        if not await artifact_dal.delete_artifact(self.db, artifact_id):
            raise ArtifactNotFound(artifact_id)
        logger.info("Artifact %s deleted", artifact_id)
        await emit(Service.ARTIFACT, "deleted", {"id": artifact_id})

    async def add_version(self, artifact_id: int, payload: Optional[ArtifactVersionCreate]) -> ArtifactVersion:
        if payload is None:
            raise InvalidArgument("version is required")
        artifact = await self._require(artifact_id)

        # update_date is stamped here, never taken from the caller.
        version = ArtifactVersion(**payload.model_dump(), update_date=datetime.now(timezone.utc))
        _raise_if_invalid(self.validator.validate_version(version))

        version.id = await artifact_dal.allocate_version_id(self.db)
        add_version(artifact, version)
        if not await artifact_dal.push_version(self.db, artifact_id, version, artifact.current_version):
            raise ArtifactNotFound(artifact_id)

        logger.info("Artifact %s now at version %s", artifact_id, artifact.current_version)
        await emit(
            Service.ARTIFACT,
            "version_added",
            {"id": artifact_id, "version": version.model_dump(mode="json"), "current_version": artifact.current_version},
        )
        return version
