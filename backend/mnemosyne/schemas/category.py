"""Mnemosyne Backend — Category Schema (static taxonomy)"""

from mnemosyne.schemas.common import CamelModel


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: str
    color: str
