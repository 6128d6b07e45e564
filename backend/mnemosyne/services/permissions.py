"""
Mnemosyne Backend — Like Visibility Predicate
===============================================

What:  The single rule deciding whether a viewer may see a user's likes.
Why:   Like data is exposed by several endpoints (profile stats, liked-quote
       lists, the following feed, activity feeds). Every one of them asks
       this module instead of reading `likes_private` itself.

Rule:
    likes are visible  ⇔  the owner's likes are public
                          OR the viewer is the owner
"""

import uuid
from typing import Optional

from sqlalchemy import ColumnElement, or_

from mnemosyne.models.user import User


def can_view_likes(viewer_id: Optional[uuid.UUID], owner: User) -> bool:
    if not owner.likes_private:
        return True
    return viewer_id is not None and viewer_id == owner.id


def likes_visible_clause(viewer_id: Optional[uuid.UUID]) -> ColumnElement[bool]:
    """
    SQL form of can_view_likes, evaluated against the owning `users` row.

    Callers must join `users` on the owner of the like/activity.
    """
    public = User.likes_private.is_(False)
    if viewer_id is None:
        return public
    return or_(public, User.id == viewer_id)
