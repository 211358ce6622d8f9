from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status
from fastapi.responses import ORJSONResponse

from ..db.mongo import get_db
from ..models import ArtifactCreate, ArtifactSearchQuery, ArtifactUpdate, ArtifactVersionCreate
from ..services import ArtifactService

router = APIRouter(
    prefix="/api/artifacts",
    tags=["artifacts"],
    default_response_class=ORJSONResponse,
)


# ─────────────────────────────────────────────────────────────
# Search / read
# ─────────────────────────────────────────────────────────────
@router.get("")
async def list_artifacts(
    search_term: Optional[str] = Query(default=None, description="Case-insensitive match on title or description"),
    programming_language: Optional[str] = Query(default=None),
    framework: Optional[str] = Query(default=None),
    license_type: Optional[str] = Query(default=None),
    category_ids: Optional[List[int]] = Query(default=None),
    include_subcategories: bool = Query(default=False, description="Also match artifacts in descendant categories"),
    sort_field: Optional[str] = Query(default=None, description="title | created | author (otherwise id)"),
    sort_descending: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
):
    query = ArtifactSearchQuery(
        search_term=search_term,
        programming_language=programming_language,
        framework=framework,
        license_type=license_type,
        category_ids=category_ids or [],
        include_subcategories=include_subcategories,
        sort_field=sort_field,
        sort_descending=sort_descending,
        limit=limit,
        offset=offset,
    )
    items = await ArtifactService(get_db()).search(query)
    return ORJSONResponse([a.model_dump(mode="json") for a in items])


@router.get("/{artifact_id}")
async def get_artifact(artifact_id: int):
    art = await ArtifactService(get_db()).get(artifact_id)
    return ORJSONResponse(art.model_dump(mode="json"))


# ─────────────────────────────────────────────────────────────
# Create / update / delete
# ─────────────────────────────────────────────────────────────
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_artifact(body: ArtifactCreate):
    art = await ArtifactService(get_db()).create(body)
    return ORJSONResponse(
        art.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"{router.prefix}/{art.id}"},
    )


@router.put("/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_artifact(artifact_id: int, body: ArtifactUpdate):
    await ArtifactService(get_db()).update(artifact_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artifact(artifact_id: int):
    await ArtifactService(get_db()).delete(artifact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─────────────────────────────────────────────────────────────
# Versions
# ─────────────────────────────────────────────────────────────
@router.post("/{artifact_id}/versions", status_code=status.HTTP_201_CREATED)
async def add_version(artifact_id: int, body: ArtifactVersionCreate):
    version = await ArtifactService(get_db()).add_version(artifact_id, body)
    return ORJSONResponse(
        version.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"{router.prefix}/{artifact_id}"},
    )


@router.get("/{artifact_id}/versions")
async def version_history(artifact_id: int):
    versions = await ArtifactService(get_db()).version_history(artifact_id)
    return ORJSONResponse([v.model_dump(mode="json") for v in versions])
