"""Spread layout endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import SpreadPositionResponse, SpreadResponse
from tarot.spreads import SPREADS, SpreadLayout, get_spread

router = APIRouter()


def _spread_response(key: str, layout: SpreadLayout) -> SpreadResponse:
    return SpreadResponse(
        key=key,
        name=layout.name,
        description=layout.description,
        positions=[SpreadPositionResponse.model_validate(p) for p in layout.positions],
    )


@router.get("", response_model=list[SpreadResponse])
def list_spreads() -> list[SpreadResponse]:
    """All built-in spreads."""
    return [_spread_response(key, layout) for key, layout in SPREADS.items()]


@router.get("/{key}", response_model=SpreadResponse)
def get_spread_layout(key: str) -> SpreadResponse:
    """One built-in spread."""
    try:
        layout = get_spread(key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown spread: {key}")
    return _spread_response(key, layout)
