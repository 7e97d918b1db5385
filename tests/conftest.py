import pytest
from httpx import ASGITransport, AsyncClient

from fetchr.api.state import PickRegistry, get_engine, get_picks, get_store, get_store_loader
from fetchr.main import app
from fetchr.models.commander import Commander, FixedPartner, NoPartner, OpenPartner
from fetchr.services.loaders import StoreLoader
from fetchr.services.record_store import RecordStore
from fetchr.services.search_engine import SearchEngine


class StaticLoader:
    """Loader returning a fixed commander list."""

    def __init__(self, commanders: list[Commander]) -> None:
        self.commanders = commanders

    async def load(self) -> list[Commander]:
        return self.commanders


@pytest.fixture
def sample_commanders() -> list[Commander]:
    """A small commander set covering every partner kind."""
    return [
        Commander("Atraxa, Praetors' Voice", ("W", "U", "B", "G"), 4),
        Commander("Animar, Soul of Elements", ("U", "R", "G"), 3),
        Commander("Edgar Markov", ("W", "B", "R"), 6),
        Commander("Thrasios, Triton Hero", ("G", "U"), 1, OpenPartner()),
        Commander("Tymna the Weaver", ("W", "B"), 3, OpenPartner()),
        Commander(
            "Pir, Imaginative Rascal", ("G",), 3, FixedPartner("Toothy, Imaginary Friend")
        ),
        Commander(
            "Toothy, Imaginary Friend", ("U",), 4, FixedPartner("Pir, Imaginative Rascal")
        ),
        Commander("Kraum, Ludevic's Opus", ("U", "R"), 5, FixedPartner("partner")),
        Commander("Karn, Legacy Reforged", (), 5, NoPartner()),
    ]


@pytest.fixture
def store(sample_commanders: list[Commander]) -> RecordStore:
    return RecordStore(sample_commanders)


@pytest.fixture
def engine(store: RecordStore) -> SearchEngine:
    return SearchEngine(store)


@pytest.fixture
async def client(store: RecordStore, engine: SearchEngine, sample_commanders: list[Commander]):
    """Async test client wired to the sample store."""
    picks = PickRegistry()
    store_loader = StoreLoader(store, StaticLoader(sample_commanders))

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_picks] = lambda: picks
    app.dependency_overrides[get_store_loader] = lambda: store_loader

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
