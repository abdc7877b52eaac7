"""DeckState class: deck mutations, diff replay, reconciliation."""

import logging
from collections.abc import Iterable, Sequence

from sts_tracker.deck.card import CardId
from sts_tracker.deck.turn_diff import TurnDiff

logger = logging.getLogger(__name__)


class DeckState:
    """Tracks a player's deck over the course of one run.

    ``cards`` is kept in acquisition order with duplicates; every lookup
    takes the first equal entry. Lookups that miss never raise: the card
    goes to ``unknown_obtained`` (or ``unknown_removed`` during
    reconciliation) so the gap in the log stays visible.
    """

    def __init__(self, cards: Iterable[CardId] = ()) -> None:
        self.cards: list[CardId] = list(cards)
        self.unknown_obtained: list[CardId] = []
        self.unknown_removed: list[CardId] = []

    def copy(self) -> "DeckState":
        other = DeckState(self.cards)
        other.unknown_obtained = list(self.unknown_obtained)
        other.unknown_removed = list(self.unknown_removed)
        return other

    def _index(self, card: CardId) -> int | None:
        return next((i for i, c in enumerate(self.cards) if c == card), None)

    def _record_unknown_obtained(self, card: CardId) -> None:
        logger.debug("%s not in deck, recording as unknown obtained", card)
        self.unknown_obtained.append(card)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def obtain(self, card: CardId) -> None:
        self.cards.append(card)

    def remove(self, card: CardId) -> None:
        """Remove the first copy of ``card``; a miss means it arrived unlogged."""
        index = self._index(card)
        if index is None:
            self._record_unknown_obtained(card)
            return
        del self.cards[index]

    def _replace(self, card: CardId, replacement: CardId) -> None:
        index = self._index(card)
        if index is None:
            self._record_unknown_obtained(card)
            self.obtain(replacement)
            return
        self.cards[index] = replacement

    def upgrade(self, card: CardId) -> None:
        self._replace(card, card.upgraded())

    def downgrade(self, card: CardId) -> None:
        self._replace(card, card.downgraded())

    # ------------------------------------------------------------------
    # Diff replay
    # ------------------------------------------------------------------

    def apply_forward(self, diff: TurnDiff) -> None:
        """Apply a floor's changes: obtain, upgrade, remove, then transforms.

        Upgrades run before removals so a card smithed and then removed on
        the same floor is found under its upgraded name, and obtains run
        first so a card picked and transformed on one floor can be removed.
        """
        for card in diff.obtained:
            self.obtain(card)
        for card in diff.upgraded:
            self.upgrade(card)
        for card in diff.removed:
            self.remove(card)
        for card in diff.transformed:
            self.remove(card)

    def apply_reverse(self, diff: TurnDiff) -> None:
        """Undo ``apply_forward``. Transform results are not tracked, only the originals come back."""
        for card in diff.transformed:
            self.obtain(card)
        for card in diff.removed:
            self.obtain(card)
        for card in diff.upgraded:
            # the deck holds the post-upgrade form, so look that up
            self.downgrade(card.upgraded())
        for card in diff.obtained:
            self.remove(card)

    def rewind(self, diffs: Iterable[TurnDiff], floor: int) -> None:
        """Undo every diff after ``floor``, newest first."""
        for diff in sorted((d for d in diffs if d.floor > floor), key=lambda d: d.floor, reverse=True):
            self.apply_reverse(diff)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile_final(self, authoritative: Sequence[CardId]) -> None:
        """Fold the game's own final deck into the reconstruction.

        Cards the snapshot has but the replay lacks are obtained and logged
        in ``unknown_obtained``; cards the replay has but the snapshot lacks
        are removed and logged in ``unknown_removed``. Matching is by first
        equal entry, one-for-one, so duplicates are counted.
        """
        remaining = list(self.cards)
        for card in authoritative:
            try:
                remaining.remove(card)
            except ValueError:
                self._record_unknown_obtained(card)
                self.obtain(card)

        for card in remaining:
            logger.debug("%s missing from final deck, recording as unknown removed", card)
            self.unknown_removed.append(card)
            self.remove(card)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> dict:
        return {
            "cards": [str(c) for c in self.cards],
            "unknown_obtained": [str(c) for c in self.unknown_obtained],
            "unknown_removed": [str(c) for c in self.unknown_removed],
        }

    def __repr__(self):
        return f"DeckState({len(self.cards)} cards, {len(self.unknown_obtained)} unknown obtained, " \
               f"{len(self.unknown_removed)} unknown removed)"
