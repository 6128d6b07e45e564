"""
Mnemosyne Backend — Sample Data Seeder
========================================

What:  Inserts a starter set of quotes into an empty database.
How:   `python -m mnemosyne.seed` (run from backend/, after `alembic upgrade head`).
       Does nothing when the quotes table already has rows.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import async_session_factory, dispose_engine
from mnemosyne.models.quote import Quote, join_tags

logger = logging.getLogger(__name__)

SAMPLE_QUOTES: List[Dict[str, Any]] = [
    {
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "category": "Success",
        "tags": ["work", "passion", "excellence"],
        "source": "Stanford Commencement Address, 2005",
    },
    {
        "text": "The unexamined life is not worth living.",
        "author": "Socrates",
        "category": "Philosophy",
        "tags": ["self-reflection", "philosophy", "wisdom"],
        "source": "Plato's Apology",
    },
    {
        "text": "In the middle of difficulty lies opportunity.",
        "author": "Albert Einstein",
        "category": "Motivation",
        "tags": ["opportunity", "challenges", "perspective"],
    },
    {
        "text": "The journey of a thousand miles begins with one step.",
        "author": "Laozi",
        "category": "Wisdom",
        "tags": ["beginnings", "progress", "action"],
        "source": "Tao Te Ching",
    },
    {
        "text": "Without music, life would be a mistake.",
        "author": "Friedrich Nietzsche",
        "category": "Philosophy",
        "tags": ["music", "life", "philosophy"],
    },
    {
        "text": "Life isn't about finding yourself. Life is about creating yourself.",
        "author": "George Bernard Shaw",
        "category": "Motivation",
        "tags": ["self-discovery", "personal-growth", "motivation"],
    },
    {
        "text": "There is no friend as loyal as a book.",
        "author": "Ernest Hemingway",
        "category": "Wisdom",
        "tags": ["books", "friendship", "loyalty"],
    },
    {
        "text": "Do what you can, with what you have, where you are.",
        "author": "Theodore Roosevelt",
        "category": "Motivation",
        "tags": ["action", "determination", "motivation"],
    },
    {
        "text": (
            "Darkness cannot drive out darkness: only light can do that. "
            "Hate cannot drive out hate: only love can do that."
        ),
        "author": "Martin Luther King Jr.",
        "category": "Wisdom",
        "tags": ["love", "light", "hate"],
        "source": "Strength to Love, 1963",
    },
    {
        "text": "Be yourself; everyone else is already taken.",
        "author": "Oscar Wilde",
        "category": "Wisdom",
        "tags": ["self-acceptance", "authenticity"],
    },
    {
        "text": (
            "To be yourself in a world that is constantly trying to make you "
            "something else is the greatest accomplishment."
        ),
        "author": "Ralph Waldo Emerson",
        "category": "Philosophy",
        "tags": ["self-reliance", "individuality", "philosophy"],
    },
    {
        "text": (
            "The fear of death follows from the fear of life. "
            "A man who lives fully is prepared to die at any time."
        ),
        "author": "Mark Twain",
        "category": "Philosophy",
        "tags": ["life", "death", "fear"],
    },
    {
        "text": (
            "Music expresses that which cannot be put into words and that "
            "which cannot remain silent."
        ),
        "author": "Victor Hugo",
        "category": "Wisdom",
        "tags": ["music", "expression", "emotion"],
    },
]


async def seed_quotes(db: AsyncSession) -> int:
    """Insert SAMPLE_QUOTES unless quotes already exist. Returns rows inserted."""
    existing = (await db.execute(select(func.count()).select_from(Quote))).scalar_one()
    if existing:
        logger.info("Quotes table already has %d rows; skipping seed", existing)
        return 0

    for sample in SAMPLE_QUOTES:
        db.add(
            Quote(
                text=sample["text"],
                author=sample["author"],
                category=sample.get("category"),
                tags=join_tags(sample.get("tags")),
                source=sample.get("source"),
                is_public=True,
            )
        )
    await db.flush()
    logger.info("Seeded %d quotes", len(SAMPLE_QUOTES))
    return len(SAMPLE_QUOTES)


async def main() -> None:
    async with async_session_factory() as session:
        async with session.begin():
            await seed_quotes(session)
    await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stdout, format="%(levelname)s %(message)s")
    asyncio.run(main())
