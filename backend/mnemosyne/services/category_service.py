"""
Mnemosyne Backend — Category Service
======================================

The category taxonomy is static: four entries with stable slug ids.
Quote.category is free text and is not constrained to this list.
"""

from typing import List

from mnemosyne.exceptions import NotFoundError
from mnemosyne.schemas.category import CategoryResponse

CATEGORIES: List[CategoryResponse] = [
    CategoryResponse(
        id="wisdom",
        name="Wisdom",
        description="Timeless wisdom and life lessons",
        color="#8B5CF6",
    ),
    CategoryResponse(
        id="motivation",
        name="Motivation",
        description="Inspiring quotes to fuel your journey",
        color="#06B6D4",
    ),
    CategoryResponse(
        id="philosophy",
        name="Philosophy",
        description="Deep thoughts and philosophical insights",
        color="#F59E0B",
    ),
    CategoryResponse(
        id="success",
        name="Success",
        description="Keys to achievement and excellence",
        color="#10B981",
    ),
]


class CategoryService:
    def list_categories(self) -> List[CategoryResponse]:
        return list(CATEGORIES)

    def get_category(self, category_id: str) -> CategoryResponse:
        for category in CATEGORIES:
            if category.id == category_id.lower():
                return category
        raise NotFoundError(resource="category", resource_id=category_id)


category_service = CategoryService()
