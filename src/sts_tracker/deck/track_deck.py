"""
Slay the Spire Deck Tracker

Reads a .run file, replays every floor's deck changes from the starting
deck, and reconciles the result against the game's own final deck.

Usage: python -m sts_tracker.deck.track_deck RUN_ID [FLOOR]

RUN_ID is a path to a .run file, or a run id (file stem) found under
STS_RUNS_DIR. With FLOOR, also prints the deck at the end of that floor.

Input:  <STS_RUNS_DIR>/**/<RUN_ID>.run
Output: <STS_DATA_DIR>/<RUN_ID>/deck_state.json
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from sts_tracker import DATA_DIR, LOG_LEVEL, RUNS_DIR
from sts_tracker.deck.card import starting_deck
from sts_tracker.deck.deck_state import DeckState
from sts_tracker.deck.process_log import RunLog, load_run_log
from sts_tracker.deck.turn_diff import TurnDiff, build_turn_diff


@dataclass
class DeckHistory:
    """Outcome of replaying one run."""
    character: str
    floor_reached: int
    diffs: list[TurnDiff]
    replayed: DeckState          # after the last diff, before reconciliation
    deck: DeckState              # reconciled against master_deck

    def deck_at(self, floor: int) -> DeckState:
        """Deck as replayed up to the end of ``floor``."""
        state = self.replayed.copy()
        state.rewind(self.diffs, floor)
        return state

    def to_json(self) -> dict:
        return {
            "character": self.character,
            "floor_reached": self.floor_reached,
            "diffs": [d.to_json() for d in self.diffs],
            "replayed": [str(c) for c in self.replayed.cards],
            **self.deck.to_json(),
        }


def build_diffs(run_log: RunLog) -> list[TurnDiff]:
    """One TurnDiff per floor that changed the deck, in floor order."""
    diffs = []
    for floor in range(run_log.floor_reached):
        diff = build_turn_diff(floor, run_log.floor_events(floor))
        if diff is not None:
            diffs.append(diff)
    return diffs


def reconstruct_deck(run_log: RunLog) -> DeckHistory:
    diffs = build_diffs(run_log)

    state = DeckState(starting_deck(run_log.character_chosen, run_log.ascension_level))
    for diff in diffs:
        state.apply_forward(diff)
    replayed = state.copy()
    state.reconcile_final(run_log.master_deck)

    return DeckHistory(
        character=run_log.character_chosen,
        floor_reached=run_log.floor_reached,
        diffs=diffs,
        replayed=replayed,
        deck=state,
    )


def find_run(run_id: str) -> Path:
    """Resolve a .run path, or a run id searched for under RUNS_DIR."""
    path = Path(run_id)
    if path.is_file():
        return path
    matches = list(RUNS_DIR.rglob(f"{run_id}.run"))
    if len(matches) != 1:
        raise FileNotFoundError(f"No unique run file for '{run_id}' in {RUNS_DIR}")
    return matches[0]


def format_cards(cards) -> str:
    return "[" + ", ".join(str(c) for c in cards) + "]"


def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: python -m sts_tracker.deck.track_deck RUN_ID [FLOOR]")
        sys.exit(1)

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    floor = None
    if len(sys.argv) == 3:
        if not sys.argv[2].isdigit():
            print(f"ERROR: FLOOR must be a non-negative integer, got {sys.argv[2]!r}")
            sys.exit(1)
        floor = int(sys.argv[2])

    run_path = find_run(sys.argv[1])
    run_id = run_path.stem
    print(f"Run: {run_path}")

    run_log = load_run_log(run_path)
    history = reconstruct_deck(run_log)
    print(f"Character: {history.character}, floor reached: {history.floor_reached}, "
          f"{len(history.diffs)} floors changed the deck")

    out_dir = DATA_DIR / run_id
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "deck_state.json"
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(history.to_json(), f, indent=2)

    print(f"last: {format_cards(history.deck.cards)}")
    print(f"obtained?: {format_cards(history.deck.unknown_obtained)}")
    print(f"removed?: {format_cards(history.deck.unknown_removed)}")
    if floor is not None:
        print(f"floor {floor}: {format_cards(history.deck_at(floor).cards)}")
    print(f"Written: {out_path}")


if __name__ == "__main__":
    main()
