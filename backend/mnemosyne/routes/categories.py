"""Mnemosyne Backend — Category Routes (static taxonomy, no auth)"""

from typing import List

from fastapi import APIRouter

from mnemosyne.schemas.category import CategoryResponse
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.services.category_service import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=ApiResponse[List[CategoryResponse]])
async def list_categories() -> ApiResponse[List[CategoryResponse]]:
    return ApiResponse[List[CategoryResponse]](data=category_service.list_categories())


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_category(category_id: str) -> ApiResponse[CategoryResponse]:
    return ApiResponse[CategoryResponse](data=category_service.get_category(category_id))
