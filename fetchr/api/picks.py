"""
Pick session API endpoints.

Drives a SelectionSession over HTTP: open a pick, type letters, pick a
name, answer partner prompts, cancel. Finished picks are removed from the
registry after their final state is returned.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from fetchr.api.state import PickRegistry, get_engine, get_picks
from fetchr.services.search_engine import SearchEngine
from fetchr.services.selection_session import SelectionSession, SessionPhase, SessionStateError

router = APIRouter(prefix="/picks", tags=["picks"])


class PickStateResponse(BaseModel):
    """Current state of a pick session."""

    id: str
    phase: SessionPhase
    query: str
    filtered_names: list[str] = Field(default_factory=list)
    commander: str | None = None
    suggested_partner: str | None = None
    partner: str | None = None
    result: str | None = None


class KeysRequest(BaseModel):
    letters: str = Field(..., min_length=1, max_length=100)


class PickRequest(BaseModel):
    name: str | None = None


class AnswerRequest(BaseModel):
    accept: bool


def _state(pick_id: str, session: SelectionSession) -> PickStateResponse:
    return PickStateResponse(
        id=pick_id,
        phase=session.phase,
        query=session.query,
        filtered_names=session.filtered_names,
        commander=session.commander_name,
        suggested_partner=session.suggested_partner,
        partner=session.partner_name,
        result=session.result,
    )


def _get_session(pick_id: str, picks: PickRegistry) -> SelectionSession:
    session = picks.get(pick_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pick '{pick_id}' not found",
        )
    return session


def _finish(pick_id: str, session: SelectionSession, picks: PickRegistry) -> PickStateResponse:
    response = _state(pick_id, session)
    if session.is_finished:
        picks.discard(pick_id)
    return response


def _conflict(error: SessionStateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))


@router.post("", response_model=PickStateResponse, status_code=status.HTTP_201_CREATED)
async def open_pick(
    engine: Annotated[SearchEngine, Depends(get_engine)],
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    pick_id, session = picks.open(engine)
    return _state(pick_id, session)


@router.get("/{pick_id}", response_model=PickStateResponse)
async def get_pick(
    pick_id: str,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    return _state(pick_id, _get_session(pick_id, picks))


@router.post("/{pick_id}/keys", response_model=PickStateResponse)
async def type_letters(
    pick_id: str,
    request: KeysRequest,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    """Append letters to the search, one keystroke at a time."""
    session = _get_session(pick_id, picks)
    try:
        for letter in request.letters:
            session.append_char(letter)
    except SessionStateError as e:
        raise _conflict(e) from e
    return _state(pick_id, session)


@router.delete("/{pick_id}/keys/last", response_model=PickStateResponse)
async def delete_letter(
    pick_id: str,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    session = _get_session(pick_id, picks)
    try:
        session.remove_last_char()
    except SessionStateError as e:
        raise _conflict(e) from e
    return _state(pick_id, session)


@router.post("/{pick_id}/pick", response_model=PickStateResponse)
async def pick_name(
    pick_id: str,
    request: PickRequest,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    """Pick a commander by name, or the single remaining candidate."""
    session = _get_session(pick_id, picks)
    try:
        session.pick(request.name)
    except SessionStateError as e:
        raise _conflict(e) from e
    return _finish(pick_id, session, picks)


@router.post("/{pick_id}/answer", response_model=PickStateResponse)
async def answer_prompt(
    pick_id: str,
    request: AnswerRequest,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    """Answer the partner prompt."""
    session = _get_session(pick_id, picks)
    try:
        session.answer(request.accept)
    except SessionStateError as e:
        raise _conflict(e) from e
    return _finish(pick_id, session, picks)


@router.post("/{pick_id}/cancel", response_model=PickStateResponse)
async def cancel_pick(
    pick_id: str,
    picks: Annotated[PickRegistry, Depends(get_picks)],
) -> PickStateResponse:
    session = _get_session(pick_id, picks)
    try:
        session.cancel()
    except SessionStateError as e:
        raise _conflict(e) from e
    return _finish(pick_id, session, picks)
