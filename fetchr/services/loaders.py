"""
Commander dataset loaders.

Every source of commander data (the JSON export, the database, a built-in
default list) implements the same one-method interface, so the store never
depends on where records come from.

StoreLoader runs a loader and publishes the result into a RecordStore. When
loads overlap, the most recently started one wins and older results are
dropped.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from fetchr.config import settings
from fetchr.db.operations import commander_to_model, get_all_commanders
from fetchr.models.commander import Commander
from fetchr.models.record import CommanderRecord
from fetchr.services.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_COMMANDERS = (
    "Atraxa, Praetors' Voice",
    "Edgar Markov",
    "The Ur-Dragon",
    "Kaalia of the Vast",
    "Meren of Clan Nel Toth",
    "Rhys the Redeemed",
    "Narset, Enlightened Master",
    "Prossh, Skyraider of Kher",
    "Oloro, Ageless Ascetic",
    "Animar, Soul of Elements",
)


class CommanderDataError(Exception):
    """Raised when a commander source exists but cannot be read."""


class CommanderLoader(Protocol):
    """Anything that can produce the full commander list."""

    async def load(self) -> list[Commander]: ...


def parse_commander_records(payload: Any) -> list[Commander]:
    """
    Convert decoded JSON into commanders.

    Accepts a list of record objects, or a plain list of names. Invalid
    entries are skipped with a warning.

    Raises:
        CommanderDataError: If the payload is not a list
    """
    if not isinstance(payload, list):
        raise CommanderDataError(f"Expected a JSON array, got {type(payload).__name__}")

    commanders: list[Commander] = []
    skipped = 0
    for entry in payload:
        try:
            if isinstance(entry, str):
                commanders.append(Commander(name=entry))
            else:
                commanders.append(CommanderRecord.model_validate(entry).to_commander())
        except (ValidationError, ValueError) as e:
            skipped += 1
            logger.warning("Skipping invalid commander record %r: %s", entry, e)

    if skipped:
        logger.info("Skipped %d invalid commander records", skipped)
    return commanders


class JsonFileLoader:
    """Loads commanders from a JSON export."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path if path is not None else settings.commanders_json_path)

    async def load(self) -> list[Commander]:
        """
        Raises:
            FileNotFoundError: If the file doesn't exist
            CommanderDataError: If the file is not valid JSON
        """
        if not self.path.exists():
            raise FileNotFoundError(
                f"Commander file not found at {self.path}. "
                "Run `python -m fetchr.jobs.import_commanders` first."
            )

        try:
            with open(self.path, encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise CommanderDataError(f"Invalid JSON in {self.path}: {e}") from e

        commanders = parse_commander_records(payload)
        logger.info("Loaded %d commanders from %s", len(commanders), self.path)
        return commanders


class DatabaseLoader:
    """Loads commanders from the commanders table."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self.session_factory = session_factory

    async def load(self) -> list[Commander]:
        async with self.session_factory() as session:
            rows = await get_all_commanders(session)

        commanders: list[Commander] = []
        for row in rows:
            try:
                commanders.append(commander_to_model(row))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping invalid commander row %r: %s", row.name, e)

        logger.info("Loaded %d commanders from database", len(commanders))
        return commanders


class DefaultCommandersLoader:
    """A short built-in list used when no real data is available."""

    async def load(self) -> list[Commander]:
        logger.warning("Using default commander data")
        return [Commander(name=name) for name in DEFAULT_COMMANDERS]


class FallbackLoader:
    """Tries each loader in order until one returns a non-empty list."""

    def __init__(self, *loaders: CommanderLoader) -> None:
        self.loaders = loaders

    async def load(self) -> list[Commander]:
        for loader in self.loaders:
            try:
                commanders = await loader.load()
            except Exception as e:
                logger.warning("%s failed: %s", type(loader).__name__, e)
                continue
            if commanders:
                return commanders
            logger.info("%s returned no commanders", type(loader).__name__)
        return []


class StoreLoader:
    """
    Publishes loader results into a RecordStore.

    Each reload() gets a generation number. A result is only applied if no
    later reload has already been applied.
    """

    def __init__(
        self,
        store: RecordStore,
        loader: CommanderLoader,
        reset_on_failure: bool = False,
    ) -> None:
        self.store = store
        self.loader = loader
        self.reset_on_failure = reset_on_failure
        self._started = 0
        self._applied = 0

    async def reload(self) -> bool:
        """
        Load and publish.

        Returns:
            True if this load's result was applied to the store
        """
        self._started += 1
        generation = self._started

        try:
            commanders = await self.loader.load()
        except Exception as e:
            logger.error("Failed to load commanders: %s", e)
            if self.reset_on_failure and generation > self._applied:
                self._applied = generation
                self.store.clear()
            return False

        if generation < self._applied:
            logger.info("Discarding stale load %d (newer load %d applied)", generation, self._applied)
            return False

        self._applied = generation
        self.store.load(commanders)
        return True
