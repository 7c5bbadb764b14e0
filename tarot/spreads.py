"""Built-in spread layouts: named positions cards are dealt into."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SpreadPosition:
    """A position in a spread. The engine only cares about ``id``."""

    id: str
    label: str = ""
    area: str = ""
    description: str = ""


@dataclass(frozen=True)
class SpreadLayout:
    """A named, ordered set of positions."""

    name: str
    positions: tuple[SpreadPosition, ...]
    description: str = ""

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def position_ids(self) -> list[str]:
        return [p.id for p in self.positions]

    def position(self, position_id: str) -> SpreadPosition:
        """Look up a position by id."""
        for pos in self.positions:
            if pos.id == position_id:
                return pos
        raise KeyError(position_id)


SPREADS: dict[str, SpreadLayout] = {
    "threeCard": SpreadLayout(
        name="Three-Card",
        description="A simple spread for exploring past, present, and future influences",
        positions=(
            SpreadPosition("pos1", "Past", "past", "Past influences and experiences"),
            SpreadPosition("pos2", "Present", "present", "Current situation and energies"),
            SpreadPosition("pos3", "Future", "future", "Potential outcomes and directions"),
        ),
    ),
    "celticCross": SpreadLayout(
        name="Celtic Cross",
        description="A comprehensive spread for deep insight into complex situations",
        positions=(
            SpreadPosition("sig", "Significator", "sig", "The heart of the matter"),
            SpreadPosition("cross", "Cross", "cross", "What crosses you - challenges or support"),
            SpreadPosition("crown", "Crown", "crown", "Conscious aims and ideals"),
            SpreadPosition("root", "Root", "root", "Unconscious foundation"),
            SpreadPosition("past", "Recent Past", "past", "Recent past influences"),
            SpreadPosition("future", "Near Future", "future", "Possible near future"),
            SpreadPosition("self", "Self", "self", "Your approach to the situation"),
            SpreadPosition("env", "Environment", "env", "External influences"),
            SpreadPosition("hopes", "Hopes/Fears", "hopes", "Your hopes and fears"),
            SpreadPosition("outcome", "Outcome", "outcome", "Likely outcome"),
        ),
    ),
    "fiveCard": SpreadLayout(
        name="Five-Card",
        description="Situation, challenge and advice with past and future context",
        positions=(
            SpreadPosition("situation", "Situation", "situation"),
            SpreadPosition("challenge", "Challenge", "challenge"),
            SpreadPosition("past", "Past", "past"),
            SpreadPosition("future", "Future", "future"),
            SpreadPosition("advice", "Advice", "advice"),
        ),
    ),
    "horseshoe": SpreadLayout(
        name="Horseshoe",
        description="Seven cards tracing a situation from past to outcome",
        positions=(
            SpreadPosition("past", "Past", "past"),
            SpreadPosition("present", "Present", "present"),
            SpreadPosition("hidden", "Hidden", "hidden"),
            SpreadPosition("obstacle", "Obstacle", "obstacle"),
            SpreadPosition("external", "External", "external"),
            SpreadPosition("advice", "Advice", "advice"),
            SpreadPosition("outcome", "Outcome", "outcome"),
        ),
    ),
    "singleCard": SpreadLayout(
        name="Single Card",
        description="One card for a quick answer",
        positions=(SpreadPosition("card", "Your Card", "card"),),
    ),
    "relationship": SpreadLayout(
        name="Relationship",
        description="Two people, how each feels, and where it is heading",
        positions=(
            SpreadPosition("you", "You", "you"),
            SpreadPosition("other", "Other", "other"),
            SpreadPosition("youfeel", "You Feel", "youfeel"),
            SpreadPosition("theyfeel", "They Feel", "theyfeel"),
            SpreadPosition("challenge", "Challenge", "challenge"),
            SpreadPosition("outcome", "Outcome", "outcome"),
        ),
    ),
}


def get_spread(key: str) -> SpreadLayout:
    """Return a built-in layout by key, e.g. ``"celticCross"``."""
    try:
        return SPREADS[key]
    except KeyError:
        raise KeyError(f"Unknown spread: {key}") from None
