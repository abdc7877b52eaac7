"""TurnDiff: one floor's deck changes, merged from the five per-floor event sources."""

from dataclasses import dataclass, field

from sts_tracker.deck.card import CardId, parse_cards

PICK_SKIP = "SKIP"
FIRESIDE_UPGRADE = "upgrade"
FIRESIDE_REMOVE = "remove"


@dataclass(frozen=True)
class FiresideAction:
    """Rest-site choice. Only "upgrade" and "remove" touch the deck."""
    kind: str
    card: str | None = None


@dataclass(frozen=True)
class EventOutcome:
    """Card effects of a narrative event node; every list is optional."""
    cards_obtained: list[str] = field(default_factory=list)
    cards_removed: list[str] = field(default_factory=list)
    cards_transformed: list[str] = field(default_factory=list)
    cards_upgraded: list[str] = field(default_factory=list)


@dataclass
class FloorEvents:
    """Everything the run log recorded for one floor."""
    picks: list[str] = field(default_factory=list)
    purchases: list[str] = field(default_factory=list)
    removals: list[str] = field(default_factory=list)
    fireside: FiresideAction | None = None
    event: EventOutcome | None = None


@dataclass(frozen=True)
class TurnDiff:
    floor: int
    obtained: tuple[CardId, ...] = ()
    removed: tuple[CardId, ...] = ()
    transformed: tuple[CardId, ...] = ()
    upgraded: tuple[CardId, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.obtained or self.removed or self.transformed or self.upgraded)

    def to_json(self) -> dict:
        return {
            "floor": self.floor,
            "obtained": [str(c) for c in self.obtained],
            "removed": [str(c) for c in self.removed],
            "transformed": [str(c) for c in self.transformed],
            "upgraded": [str(c) for c in self.upgraded],
        }


def build_turn_diff(floor: int, events: FloorEvents) -> TurnDiff | None:
    """Merge one floor's events into a TurnDiff, or None if the deck is untouched.

    Sources are folded in a fixed order: card picks, shop purchases,
    removals, the fireside action, then the event outcome. Purchased relics
    and potions land in ``obtained`` like cards; reconciliation sorts
    them out later.
    """
    obtained = [p for p in events.picks if p != PICK_SKIP]
    obtained += events.purchases
    removed = list(events.removals)
    transformed = []
    upgraded = []

    fireside = events.fireside
    if fireside is not None:
        if fireside.kind == FIRESIDE_UPGRADE:
            upgraded.append(fireside.card)
        elif fireside.kind == FIRESIDE_REMOVE:
            removed.append(fireside.card)

    event = events.event
    if event is not None:
        obtained += event.cards_obtained
        removed += event.cards_removed
        transformed += event.cards_transformed
        upgraded += event.cards_upgraded

    diff = TurnDiff(
        floor=floor,
        obtained=tuple(parse_cards(obtained)),
        removed=tuple(parse_cards(removed)),
        transformed=tuple(parse_cards(transformed)),
        upgraded=tuple(parse_cards(upgraded)),
    )
    return None if diff.is_empty else diff
