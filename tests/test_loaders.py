"""Tests for commander dataset loaders."""

import asyncio
import json
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fetchr.db.operations import save_commanders
from fetchr.models.commander import Commander, FixedPartner, NoPartner, OpenPartner
from fetchr.models.db import Base
from fetchr.services.loaders import (
    DEFAULT_COMMANDERS,
    CommanderDataError,
    DatabaseLoader,
    DefaultCommandersLoader,
    FallbackLoader,
    JsonFileLoader,
    StoreLoader,
    parse_commander_records,
)
from fetchr.services.record_store import RecordStore


@pytest.fixture
def sample_records() -> list[dict]:
    """Commander records in the JSON export format."""
    return [
        {
            "card_name": "Edgar Markov",
            "color_identity": "WBR",
            "cmc": "6",
            "has_partner": False,
            "partner_with": None,
        },
        {
            "card_name": "Tymna the Weaver",
            "color_identity": "WB",
            "cmc": 3,
            "has_partner": True,
            "partner_with": "partner",
        },
        {
            "card_name": "Pir, Imaginative Rascal",
            "color_identity": "G",
            "cmc": 3,
            "has_partner": True,
            "partner_with": "Toothy, Imaginary Friend",
        },
        {"card_name": "Karn, Legacy Reforged", "color_identity": "", "cmc": "5"},
    ]


@pytest.fixture
def commanders_file(sample_records: list[dict], tmp_path: Path) -> Path:
    path = tmp_path / "commanders.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path


class _StaticLoader:
    def __init__(self, commanders: list[Commander]) -> None:
        self.commanders = commanders

    async def load(self) -> list[Commander]:
        return self.commanders


class _FailingLoader:
    async def load(self) -> list[Commander]:
        raise RuntimeError("source unavailable")


class _GatedLoader:
    """Returns its commanders once `gate` is set."""

    def __init__(self, commanders: list[Commander]) -> None:
        self.commanders = commanders
        self.gate = asyncio.Event()

    async def load(self) -> list[Commander]:
        await self.gate.wait()
        return self.commanders


class TestParseCommanderRecords:
    def test_parses_records(self, sample_records: list[dict]) -> None:
        commanders = {c.name: c for c in parse_commander_records(sample_records)}

        assert commanders["Edgar Markov"].mana_value == 6
        assert commanders["Edgar Markov"].partner == NoPartner()
        assert commanders["Tymna the Weaver"].partner == OpenPartner()
        assert commanders["Pir, Imaginative Rascal"].partner == FixedPartner(
            "Toothy, Imaginary Friend"
        )
        assert commanders["Karn, Legacy Reforged"].color_identity == ()

    def test_plain_name_list(self) -> None:
        commanders = parse_commander_records(["Edgar Markov", "Zur the Enchanter"])

        assert [c.name for c in commanders] == ["Edgar Markov", "Zur the Enchanter"]
        assert commanders[0].mana_value == 0

    def test_skips_invalid_entries(self) -> None:
        commanders = parse_commander_records(
            [
                {"card_name": "Edgar Markov"},
                {"card_name": ""},
                {"color_identity": "W"},
                {"card_name": "Bad Colors", "color_identity": "XYZ"},
                "   ",
            ]
        )

        assert [c.name for c in commanders] == ["Edgar Markov"]

    def test_rejects_non_list(self) -> None:
        with pytest.raises(CommanderDataError, match="Expected a JSON array"):
            parse_commander_records({"data": []})


class TestJsonFileLoader:
    async def test_loads_file(self, commanders_file: Path) -> None:
        commanders = await JsonFileLoader(commanders_file).load()

        assert len(commanders) == 4

    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="import_commanders"):
            await JsonFileLoader(tmp_path / "missing.json").load()

    async def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CommanderDataError, match="Invalid JSON"):
            await JsonFileLoader(path).load()


class TestDatabaseLoader:
    async def test_loads_rows(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        async with session_factory() as session:
            await save_commanders(
                session,
                [
                    Commander("Tymna the Weaver", ("W", "B"), 3, OpenPartner()),
                    Commander("Edgar Markov", ("W", "B", "R"), 6),
                ],
            )
            await session.commit()

        commanders = await DatabaseLoader(session_factory).load()
        await engine.dispose()

        assert [c.name for c in commanders] == ["Edgar Markov", "Tymna the Weaver"]
        assert commanders[1].partner == OpenPartner()


class TestDefaultCommandersLoader:
    async def test_returns_default_list(self) -> None:
        commanders = await DefaultCommandersLoader().load()

        assert [c.name for c in commanders] == list(DEFAULT_COMMANDERS)
        assert all(not c.has_partner for c in commanders)


class TestFallbackLoader:
    async def test_first_non_empty_wins(self) -> None:
        loader = FallbackLoader(
            _StaticLoader([]),
            _StaticLoader([Commander("Edgar Markov")]),
            _StaticLoader([Commander("Zur the Enchanter")]),
        )

        commanders = await loader.load()

        assert [c.name for c in commanders] == ["Edgar Markov"]

    async def test_skips_failing_loader(self, tmp_path: Path) -> None:
        loader = FallbackLoader(
            JsonFileLoader(tmp_path / "missing.json"),
            _FailingLoader(),
            DefaultCommandersLoader(),
        )

        commanders = await loader.load()

        assert len(commanders) == len(DEFAULT_COMMANDERS)

    async def test_all_empty(self) -> None:
        assert await FallbackLoader(_StaticLoader([])).load() == []


class TestStoreLoader:
    async def test_reload_publishes(self) -> None:
        store = RecordStore()
        store_loader = StoreLoader(store, _StaticLoader([Commander("Edgar Markov")]))

        applied = await store_loader.reload()

        assert applied is True
        assert store.record_by_name("Edgar Markov") is not None

    async def test_failure_keeps_previous_data(self) -> None:
        store = RecordStore([Commander("Edgar Markov")])
        store_loader = StoreLoader(store, _FailingLoader())

        applied = await store_loader.reload()

        assert applied is False
        assert len(store) == 1

    async def test_failure_can_reset(self) -> None:
        store = RecordStore([Commander("Edgar Markov")])
        store_loader = StoreLoader(store, _FailingLoader(), reset_on_failure=True)

        await store_loader.reload()

        assert len(store) == 0

    async def test_last_load_wins(self) -> None:
        """A slow older load finishing late does not overwrite a newer one."""
        store = RecordStore()
        old = _GatedLoader([Commander("Old Commander")])
        new = _GatedLoader([Commander("New Commander")])
        store_loader = StoreLoader(store, old)

        old_task = asyncio.create_task(store_loader.reload())
        await asyncio.sleep(0)
        store_loader.loader = new
        new_task = asyncio.create_task(store_loader.reload())
        await asyncio.sleep(0)

        new.gate.set()
        assert await new_task is True
        old.gate.set()
        assert await old_task is False

        assert store.names() == ("New Commander",)
