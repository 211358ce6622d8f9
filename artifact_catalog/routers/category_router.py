from __future__ import annotations

from typing import List

from fastapi import APIRouter, Response, status
from fastapi.responses import ORJSONResponse

from ..db.mongo import get_db
from ..models import CategoryCreate, CategoryOut, CategoryRearrange, CategoryUpdate
from ..services import CategoryService

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
    default_response_class=ORJSONResponse,
)


@router.get("", response_model=List[CategoryOut])
async def list_categories():
    """Root categories, each with its nested subcategories."""
    return await CategoryService(get_db()).list_tree()


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(category_id: int):
    return await CategoryService(get_db()).get_subtree(category_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CategoryOut)
async def create_category(body: CategoryCreate, response: Response):
    svc = CategoryService(get_db())
    category = await svc.create(body)
    response.headers["Location"] = f"{router.prefix}/{category.id}"
    return await svc.get_subtree(category.id)


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_category(category_id: int, body: CategoryUpdate):
    await CategoryService(get_db()).rename(category_id, body.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int):
    await CategoryService(get_db()).delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{category_id}/position", status_code=status.HTTP_204_NO_CONTENT)
async def rearrange_category(category_id: int, body: CategoryRearrange):
    await CategoryService(get_db()).rearrange(category_id, body.new_position)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
