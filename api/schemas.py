"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Responses use camelCase keys, matching the stored deck record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Deck schemas
class CardResponse(_CamelModel):
    """Card representation."""

    name: str
    reversed: bool
    face_up: bool | None = None


class PilesResponse(_CamelModel):
    """All three piles."""

    state: str
    total: int
    library: list[CardResponse]
    spread: dict[str, CardResponse]
    discard: list[CardResponse]


class DealRequest(BaseModel):
    """Deal into a built-in spread or an explicit list of position ids."""

    spread: str | None = Field(default=None, description="Built-in spread key, e.g. 'threeCard'")
    positions: list[str] | None = Field(default=None, min_length=1, max_length=78)

    @model_validator(mode="after")
    def _one_source(self) -> "DealRequest":
        if (self.spread is None) == (self.positions is None):
            raise ValueError("Give exactly one of 'spread' or 'positions'")
        return self


class DealResponse(_CamelModel):
    """Cards laid out by a deal."""

    positions: list[str]
    spread: dict[str, CardResponse]


class ResetRequest(BaseModel):
    """Reset answer; omit ``confirmed`` to ask for confirmation."""

    confirmed: bool | None = None


class ResetResponse(_CamelModel):
    """Reset outcome."""

    outcome: Literal["confirmation_required", "declined", "reset"]
    prompt: str | None = None


class ClearResponse(_CamelModel):
    """Spread cleared into the discard."""

    cleared: int


class StatisticsResponse(_CamelModel):
    """Reversal and run statistics."""

    total: int
    reversed: int
    reversal_rate: str
    run_count: int
    longest_reversed_run: int
    longest_upright_run: int


class DeckStringResponse(BaseModel):
    """Whole deck as text."""

    deck: str


# Spread schemas
class SpreadPositionResponse(_CamelModel):
    """Spread position."""

    id: str
    label: str
    area: str
    description: str


class SpreadResponse(_CamelModel):
    """Spread layout."""

    key: str
    name: str
    description: str
    positions: list[SpreadPositionResponse]
