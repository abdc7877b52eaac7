"""Unit tests for merging per-floor events into a TurnDiff."""

from sts_tracker.deck.card import CardId, parse_cards
from sts_tracker.deck.turn_diff import (
    PICK_SKIP, EventOutcome, FiresideAction, FloorEvents, TurnDiff, build_turn_diff,
)


def cards(*names):
    return tuple(parse_cards(names))


class TestEmpty:

    def test_no_events_is_none(self):
        assert build_turn_diff(3, FloorEvents()) is None

    def test_only_skip_is_none(self):
        assert build_turn_diff(3, FloorEvents(picks=[PICK_SKIP])) is None

    def test_rest_is_none(self):
        assert build_turn_diff(3, FloorEvents(fireside=FiresideAction("rest"))) is None

    def test_event_without_cards_is_none(self):
        assert build_turn_diff(3, FloorEvents(event=EventOutcome())) is None


class TestSources:
    """Each source lands in the right field."""

    def test_picks_skip_dropped(self):
        diff = build_turn_diff(1, FloorEvents(picks=["Anger", PICK_SKIP, "Cleave"]))
        assert diff.floor == 1
        assert diff.obtained == cards("Anger", "Cleave")

    def test_purchases_are_obtained(self):
        diff = build_turn_diff(5, FloorEvents(purchases=["Inflame", "Vajra", "Fire Potion"]))
        assert diff.obtained == cards("Inflame", "Vajra", "Fire Potion")

    def test_removals(self):
        diff = build_turn_diff(5, FloorEvents(removals=["Strike_R"]))
        assert diff.removed == cards("Strike_R")
        assert diff.obtained == ()

    def test_fireside_upgrade(self):
        diff = build_turn_diff(7, FloorEvents(fireside=FiresideAction("upgrade", "Defend_R")))
        assert diff.upgraded == cards("Defend_R")
        assert diff.removed == ()

    def test_fireside_remove(self):
        diff = build_turn_diff(7, FloorEvents(fireside=FiresideAction("remove", "Strike_R")))
        assert diff.removed == cards("Strike_R")

    def test_event_lists(self):
        event = EventOutcome(
            cards_obtained=["Apparition", "Apparition"],
            cards_removed=["Strike_R"],
            cards_transformed=["Defend_R"],
            cards_upgraded=["Bash"],
        )
        diff = build_turn_diff(9, FloorEvents(event=event))
        assert diff.obtained == cards("Apparition", "Apparition")
        assert diff.removed == cards("Strike_R")
        assert diff.transformed == cards("Defend_R")
        assert diff.upgraded == cards("Bash")

    def test_upgraded_names_parse_levels(self):
        diff = build_turn_diff(2, FloorEvents(picks=["Searing Blow+1"]))
        assert diff.obtained == (CardId("Searing Blow", 1),)


class TestOrdering:
    """Sources accumulate in a fixed order within one diff."""

    def test_obtained_order_picks_purchases_event(self):
        events = FloorEvents(
            picks=["Anger"],
            purchases=["Shrug It Off"],
            event=EventOutcome(cards_obtained=["J.A.X."]),
        )
        assert build_turn_diff(4, events).obtained == cards("Anger", "Shrug It Off", "J.A.X.")

    def test_removed_order_removals_fireside_event(self):
        events = FloorEvents(
            removals=["Strike_R"],
            fireside=FiresideAction("remove", "Defend_R"),
            event=EventOutcome(cards_removed=["Bash"]),
        )
        assert build_turn_diff(4, events).removed == cards("Strike_R", "Defend_R", "Bash")

    def test_upgraded_order_fireside_then_event(self):
        events = FloorEvents(
            fireside=FiresideAction("upgrade", "Bash"),
            event=EventOutcome(cards_upgraded=["Inflame"]),
        )
        assert build_turn_diff(4, events).upgraded == cards("Bash", "Inflame")


class TestTurnDiff:

    def test_is_empty(self):
        assert TurnDiff(floor=0).is_empty
        assert not TurnDiff(floor=0, transformed=cards("Strike_R")).is_empty

    def test_to_json(self):
        diff = TurnDiff(floor=6, obtained=cards("Anger+1"), upgraded=cards("Bash"))
        assert diff.to_json() == {
            "floor": 6,
            "obtained": ["Anger+1"],
            "removed": [],
            "transformed": [],
            "upgraded": ["Bash"],
        }
