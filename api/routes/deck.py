"""Deck API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.schemas import (
    CardResponse,
    ClearResponse,
    DealRequest,
    DealResponse,
    DeckStringResponse,
    PilesResponse,
    ResetRequest,
    ResetResponse,
    StatisticsResponse,
)
from api.session import DeckSession, get_deck_session
from tarot.engine import DeckEngine, ResetOutcome
from tarot.engine.engine import RESET_PROMPT
from tarot.spreads import get_spread

router = APIRouter()

Session = Annotated[DeckSession, Depends(get_deck_session)]


def _piles_response(engine: DeckEngine) -> PilesResponse:
    """Build the piles response from an engine snapshot."""
    snapshot = engine.snapshot()
    return PilesResponse(
        state=engine.state.name,
        total=snapshot.total,
        library=[CardResponse.model_validate(c) for c in snapshot.library],
        spread={pos: CardResponse.model_validate(c) for pos, c in snapshot.spread.items()},
        discard=[CardResponse.model_validate(c) for c in snapshot.discard],
    )


@router.get("", response_model=PilesResponse)
def get_deck(session: Session) -> PilesResponse:
    """Get all three piles."""
    with session.locked() as engine:
        return _piles_response(engine)


@router.post("/init", response_model=PilesResponse)
def init_deck(session: Session) -> PilesResponse:
    """Reload the saved deck, rebuilding it if the record is unusable."""
    with session.locked() as engine:
        engine.init()
        return _piles_response(engine)


@router.post("/shuffle", response_model=PilesResponse)
def shuffle_deck(session: Session) -> PilesResponse:
    """Gather every card into the library and shuffle."""
    with session.locked() as engine:
        engine.shuffle_all()
        return _piles_response(engine)


@router.post("/deal", response_model=DealResponse)
def deal(request: DealRequest, session: Session) -> DealResponse:
    """Shuffle and deal a new spread face down."""
    if request.spread is not None:
        try:
            positions = get_spread(request.spread).position_ids
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown spread: {request.spread}")
    else:
        positions = request.positions or []

    with session.locked() as engine:
        try:
            spread = engine.deal(positions)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return DealResponse(
        positions=list(spread),
        spread={pos: CardResponse.model_validate(c) for pos, c in spread.items()},
    )


@router.post("/reveal/{position_id}", response_model=CardResponse)
def reveal(position_id: str, session: Session) -> CardResponse:
    """Turn a spread card face up."""
    with session.locked() as engine:
        try:
            card = engine.reveal(position_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"No card at position: {position_id}")
    return CardResponse.model_validate(card)


@router.post("/clear", response_model=ClearResponse)
def clear_spread(session: Session) -> ClearResponse:
    """Move the spread to the discard pile."""
    with session.locked() as engine:
        return ClearResponse(cleared=engine.clear_spread())


@router.post("/reset", response_model=ResetResponse)
def reset(request: ResetRequest, session: Session) -> ResetResponse:
    """
    Restore canonical order.

    Without ``confirmed`` nothing changes; the response carries the prompt to
    show the user, and the client calls again with their answer.
    """
    with session.locked() as engine:
        outcome = engine.reset(confirmed=request.confirmed)

    if outcome is ResetOutcome.CONFIRMATION_REQUIRED:
        return ResetResponse(outcome="confirmation_required", prompt=RESET_PROMPT)
    if outcome is ResetOutcome.DECLINED:
        return ResetResponse(outcome="declined")
    return ResetResponse(outcome="reset")


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(session: Session) -> StatisticsResponse:
    """Reversal rate and orientation runs."""
    with session.locked() as engine:
        stats = engine.statistics()
    return StatisticsResponse.model_validate(stats)


@router.get("/string", response_model=DeckStringResponse)
def deck_string(session: Session) -> DeckStringResponse:
    """Every card as text, library first."""
    with session.locked() as engine:
        return DeckStringResponse(deck=engine.deck_string())
