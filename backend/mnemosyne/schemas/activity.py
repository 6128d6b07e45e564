"""
Mnemosyne Backend — Activity Feed Schemas
===========================================

An enriched activity carries summaries of the quote and/or collection it
references. A summary is omitted (null) when the referenced row has been
deleted since the activity was recorded.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from mnemosyne.schemas.common import CamelModel


class ActivityQuoteSummary(CamelModel):
    id: uuid.UUID
    text: str
    author: str


class ActivityCollectionSummary(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None


class ActivityResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    username: str
    activity_type: str
    created_at: datetime
    quote: Optional[ActivityQuoteSummary] = None
    collection: Optional[ActivityCollectionSummary] = None
    metadata: Optional[Dict[str, Any]] = None
