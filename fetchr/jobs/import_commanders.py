"""
Import commanders from Scryfall.

Fetches every commander-legal card, upserts them into the database and
writes the JSON export used by the picker. Can be run as a standalone
script or called from a scheduler.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from fetchr.config import settings
from fetchr.db.database import async_session_factory, init_db
from fetchr.db.operations import save_commanders
from fetchr.models.commander import Commander
from fetchr.models.record import CommanderRecord
from fetchr.scrapers.scryfall import fetch_all_commanders

logger = logging.getLogger(__name__)


def write_commanders_json(commanders: Sequence[Commander], output_path: Path) -> Path:
    """
    Write commanders as a pretty-printed JSON array of records.

    Returns:
        Path written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    records = [CommanderRecord.from_commander(c).model_dump() for c in commanders]

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2, ensure_ascii=False)

    return output_path


async def run_import(output_path: Path | None = None) -> int:
    """
    Fetch, store and export all commanders.

    Returns:
        Number of commanders imported
    """
    if output_path is None:
        output_path = Path(settings.commanders_json_path)

    logger.info("Fetching commanders from Scryfall...")

    try:
        commanders = await fetch_all_commanders()
    except Exception as e:
        logger.error("Failed to fetch commanders: %s", e)
        raise

    await init_db()
    async with async_session_factory() as session:
        count = await save_commanders(session, commanders)
        await session.commit()
    logger.info("Saved %d commanders to database", count)

    write_commanders_json(commanders, output_path)
    logger.info("Saved commanders to JSON file at %s", output_path)

    logger.info("Successfully processed %d commanders", len(commanders))
    return len(commanders)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_import())


if __name__ == "__main__":
    main()
