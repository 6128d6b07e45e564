"""Mnemosyne Backend — Follow Schemas"""

import uuid
from datetime import datetime

from mnemosyne.schemas.common import CamelModel


class FollowResponse(CamelModel):
    id: uuid.UUID
    follower_id: uuid.UUID
    following_id: uuid.UUID
    created_at: datetime


class FollowStatus(CamelModel):
    is_following: bool
