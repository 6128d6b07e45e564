# Models package init: importing it registers every table with Base.metadata
from mnemosyne.models.activity import Activity, ActivityType
from mnemosyne.models.collection import Collection, CollectionQuote
from mnemosyne.models.quote import Quote, QuoteLike
from mnemosyne.models.user import Follow, User

__all__ = [
    "Activity",
    "ActivityType",
    "Collection",
    "CollectionQuote",
    "Follow",
    "Quote",
    "QuoteLike",
    "User",
]
