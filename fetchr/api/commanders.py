"""
Commander API endpoints.

Read-only queries over the loaded commander set, plus a reload trigger.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from fetchr.api.state import get_engine, get_store, get_store_loader
from fetchr.models.commander import Commander
from fetchr.services.loaders import StoreLoader
from fetchr.services.partner_resolver import partner_options
from fetchr.services.record_store import RecordStore
from fetchr.services.search_engine import SearchEngine

router = APIRouter(prefix="/commanders", tags=["commanders"])


class CommanderResponse(BaseModel):
    """Response model for a single commander."""

    name: str
    color_identity: str
    color_description: str
    mana_value: int
    has_partner: bool
    partner_with: str | None = None

    @classmethod
    def from_commander(cls, commander: Commander) -> "CommanderResponse":
        return cls(
            name=commander.name,
            color_identity=commander.color_identity_string,
            color_description=commander.color_description,
            mana_value=commander.mana_value,
            has_partner=commander.has_partner,
            partner_with=commander.partner_with,
        )


class CommanderListResponse(BaseModel):
    """Response model for search results."""

    query: str
    commanders: list[CommanderResponse]
    count: int


class PartnerOptionsResponse(BaseModel):
    name: str
    partners: list[str]


class StatisticsResponse(BaseModel):
    total_commanders: int
    unique_colors: int
    average_mana_value: str
    colorless_commanders: int
    multicolor_commanders: int
    multicolor_percentage: float
    with_partner: int


class ReloadResponse(BaseModel):
    applied: bool
    total: int


def _list_response(query: str, commanders: tuple[Commander, ...]) -> CommanderListResponse:
    return CommanderListResponse(
        query=query,
        commanders=[CommanderResponse.from_commander(c) for c in commanders],
        count=len(commanders),
    )


@router.get("/letters", response_model=dict[str, list[str]])
async def get_letters(
    store: Annotated[RecordStore, Depends(get_store)],
    partners_only: bool = False,
) -> dict[str, list[str]]:
    """Commander names grouped by first letter."""
    index = store.partner_eligible_index() if partners_only else store.letters_index()
    return {letter: list(names) for letter, names in sorted(index.items())}


@router.get("/search", response_model=CommanderListResponse)
async def search_commanders(
    engine: Annotated[SearchEngine, Depends(get_engine)],
    q: Annotated[str, Query(max_length=200)] = "",
) -> CommanderListResponse:
    """Fuzzy search by name."""
    return _list_response(q, engine.fuzzy_search(q))


@router.get("/prefix", response_model=CommanderListResponse)
async def prefix_commanders(
    engine: Annotated[SearchEngine, Depends(get_engine)],
    q: Annotated[str, Query(max_length=200)] = "",
    partners_only: bool = False,
) -> CommanderListResponse:
    """Names starting with the given letters."""
    return _list_response(q, engine.refilter(q, partner_only=partners_only))


@router.get("/closest", response_model=CommanderResponse)
async def closest_commander(
    engine: Annotated[SearchEngine, Depends(get_engine)],
    q: Annotated[str, Query(min_length=1, max_length=200)],
) -> CommanderResponse:
    """The nearest commander name, if one is close enough."""
    match = engine.closest_match(q)
    if match is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No commander close to '{q}'",
        )
    return CommanderResponse.from_commander(match)


@router.get("/stats", response_model=StatisticsResponse)
async def commander_stats(
    store: Annotated[RecordStore, Depends(get_store)],
) -> StatisticsResponse:
    stats = store.statistics()
    return StatisticsResponse(
        total_commanders=stats.total_commanders,
        unique_colors=stats.unique_colors,
        average_mana_value=stats.formatted_average_mana_value,
        colorless_commanders=stats.colorless_commanders,
        multicolor_commanders=stats.multicolor_commanders,
        multicolor_percentage=stats.multicolor_percentage,
        with_partner=store.total_with_partner(),
    )


@router.post("/reload", response_model=ReloadResponse)
async def reload_commanders(
    store_loader: Annotated[StoreLoader, Depends(get_store_loader)],
) -> ReloadResponse:
    """Reload the commander set from its sources."""
    applied = await store_loader.reload()
    return ReloadResponse(applied=applied, total=len(store_loader.store))


@router.get("/{name}/partners", response_model=PartnerOptionsResponse)
async def get_partners(
    name: str,
    store: Annotated[RecordStore, Depends(get_store)],
) -> PartnerOptionsResponse:
    """Who a commander can partner with."""
    if store.record_by_name(name) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Commander '{name}' not found",
        )
    return PartnerOptionsResponse(name=name, partners=list(partner_options(store, name)))


@router.get("/{name}", response_model=CommanderResponse)
async def get_commander(
    name: str,
    store: Annotated[RecordStore, Depends(get_store)],
) -> CommanderResponse:
    """Exact name lookup."""
    commander = store.record_by_name(name)
    if commander is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Commander '{name}' not found",
        )
    return CommanderResponse.from_commander(commander)
