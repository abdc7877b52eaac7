"""Normalize a Slay the Spire ``.run`` file into per-floor event records.

The game writes each source as its own flat list (and purchases/purges as
pairs of parallel arrays). This module checks those shapes once and
groups everything by floor, so the deck code can assume well-formed input.

CLI: python -m sts_tracker.deck.process_log <run_path> <output_path>
"""

import json
import logging
import sys
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from pathlib import Path

from sts_tracker import LOG_LEVEL
from sts_tracker.deck.card import CardId, parse_cards
from sts_tracker.deck.turn_diff import FIRESIDE_REMOVE, FIRESIDE_UPGRADE, EventOutcome, FiresideAction, FloorEvents

logger = logging.getLogger(__name__)

CAMPFIRE_KINDS = {"SMITH": FIRESIDE_UPGRADE, "PURGE": FIRESIDE_REMOVE}
REQUIRED_KEYS = ("master_deck", "floor_reached", "character_chosen")


class RunLogError(ValueError):
    """The run file does not have the shape the tracker relies on."""


@dataclass
class RunLog:
    """A run's scalar fields plus every deck-relevant event, keyed by floor."""
    character_chosen: str
    floor_reached: int
    master_deck: list[CardId]
    ascension_level: int = 0
    picks: dict[int, list[str]] = field(default_factory=dict)
    purchases: dict[int, list[str]] = field(default_factory=dict)
    removals: dict[int, list[str]] = field(default_factory=dict)
    fireside: dict[int, FiresideAction] = field(default_factory=dict)
    events: dict[int, EventOutcome] = field(default_factory=dict)

    def floor_events(self, floor: int) -> FloorEvents:
        return FloorEvents(
            picks=self.picks.get(floor, []),
            purchases=self.purchases.get(floor, []),
            removals=self.removals.get(floor, []),
            fireside=self.fireside.get(floor),
            event=self.events.get(floor),
        )

    def floors(self) -> list[int]:
        """Every floor at least one source mentions, ascending."""
        return sorted(set(self.picks) | set(self.purchases) | set(self.removals)
                      | set(self.fireside) | set(self.events))


def _floor(value, source: str) -> int:
    """Accept an int or a string of digits; anything else is a malformed floor."""
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise RunLogError(f"{source}: floor {value!r} is not an integer")
    if value < 0:
        raise RunLogError(f"{source}: negative floor {value}")
    return value


def _group_parallel(raw: dict, items_key: str, floors_key: str) -> dict[int, list[str]]:
    """Zip an item list with its companion floor list and group by floor."""
    items = raw.get(items_key)
    if items is None:
        return {}
    floors = raw.get(floors_key)
    if floors is None:
        raise RunLogError(f"{items_key} present without {floors_key}")
    if len(floors) != len(items):
        raise RunLogError(f"{items_key} has {len(items)} entries but {floors_key} has {len(floors)}")

    grouped = defaultdict(list)
    for item, floor in zip(items, floors):
        grouped[_floor(floor, floors_key)].append(item)
    return dict(grouped)


def _one_per_floor(records: list, source: str, convert) -> dict:
    """Key single-per-floor records by floor. A later duplicate wins."""
    by_floor = {}
    for record in records:
        floor = _floor(record.get("floor"), source)
        if floor in by_floor:
            logger.warning("%s: more than one record on floor %d, keeping the last", source, floor)
        by_floor[floor] = convert(record)
    return by_floor


def _campfire(record: dict) -> FiresideAction:
    key = record.get("key")
    if not isinstance(key, str):
        raise RunLogError(f"campfire_choices: floor {record.get('floor')} has key {key!r}, expected a string")
    kind = CAMPFIRE_KINDS.get(key, key.lower())
    data = record.get("data")
    if kind in (FIRESIDE_UPGRADE, FIRESIDE_REMOVE) and not data:
        raise RunLogError(f"campfire_choices: {key} on floor {record.get('floor')} has no card")
    return FiresideAction(kind=kind, card=data)


def _event(record: dict) -> EventOutcome:
    return EventOutcome(
        cards_obtained=list(record.get("cards_obtained") or []),
        cards_removed=list(record.get("cards_removed") or []),
        cards_transformed=list(record.get("cards_transformed") or []),
        cards_upgraded=list(record.get("cards_upgraded") or []),
    )


def parse_run_log(raw: dict) -> RunLog:
    """Validate a decoded ``.run`` dict and group its events by floor.

    Raises
    ------
    RunLogError
        A required key is missing, a parallel floor array is absent or has
        the wrong length, a campfire choice has no string key, a smith/purge
        choice names no card, or a floor is not a non-negative integer.
    """
    missing = [k for k in REQUIRED_KEYS if k not in raw]
    if missing:
        raise RunLogError(f"run file is missing {', '.join(missing)}")

    picks = defaultdict(list)
    for choice in raw.get("card_choices") or []:
        if "picked" not in choice:
            raise RunLogError(f"card_choices: entry on floor {choice.get('floor')} has no picked card")
        picks[_floor(choice.get("floor"), "card_choices")].append(choice["picked"])

    return RunLog(
        character_chosen=raw["character_chosen"],
        floor_reached=_floor(raw["floor_reached"], "floor_reached"),
        master_deck=parse_cards(raw["master_deck"]),
        ascension_level=int(raw.get("ascension_level") or 0),
        picks=dict(picks),
        purchases=_group_parallel(raw, "items_purchased", "item_purchase_floors"),
        removals=_group_parallel(raw, "items_purged", "items_purged_floors"),
        fireside=_one_per_floor(raw.get("campfire_choices") or [], "campfire_choices", _campfire),
        events=_one_per_floor(raw.get("event_choices") or [], "event_choices", _event),
    )


def load_run_log(path) -> RunLog:
    """Read and normalize a ``.run`` file."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return parse_run_log(raw)


def normalized_floors(run_log: RunLog) -> list[dict]:
    """Per-floor view of a RunLog, one entry per floor with any events."""
    entries = []
    for floor in run_log.floors():
        events = run_log.floor_events(floor)
        entries.append({
            "floor": floor,
            "picks": events.picks,
            "purchases": events.purchases,
            "removals": events.removals,
            "fireside": asdict(events.fireside) if events.fireside else None,
            "event": asdict(events.event) if events.event else None,
        })
    return entries


def main() -> None:
    if len(sys.argv) != 3:
        print("Usage: python -m sts_tracker.deck.process_log <run_path> <output_path>", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    input_path = Path(sys.argv[1])
    output_path = Path(sys.argv[2])

    run_log = load_run_log(input_path)
    result = {
        "character_chosen": run_log.character_chosen,
        "ascension_level": run_log.ascension_level,
        "floor_reached": run_log.floor_reached,
        "master_deck": [str(c) for c in run_log.master_deck],
        "floors": normalized_floors(run_log),
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(result, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote {len(result['floors'])} floors to {output_path}")


if __name__ == "__main__":
    main()
