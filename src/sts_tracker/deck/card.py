"""CardId value type and per-character starting decks."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ASCENDERS_BANE = "AscendersBane"
ASCENDERS_BANE_LEVEL = 10  # ascension at which the curse joins the starting deck

STARTING_DECKS = {
    "IRONCLAD": ["Strike_R"] * 5 + ["Defend_R"] * 4 + ["Bash"],
    "THE_SILENT": ["Strike_G"] * 5 + ["Defend_G"] * 5 + ["Neutralize", "Survivor"],
    "DEFECT": ["Strike_B"] * 4 + ["Defend_B"] * 4 + ["Zap", "Dualcast"],
    "WATCHER": ["Strike_P"] * 4 + ["Defend_P"] * 4 + ["Eruption", "Vigilance"],
}


@dataclass(frozen=True, slots=True)
class CardId:
    """A card's base name plus its upgrade level (0 = unupgraded).

    Text form is ``Name`` at level 0 and ``Name+N`` above it. Only Searing
    Blow goes past +1 in practice, but nothing here assumes that.
    """

    name: str
    level: int = 0

    @classmethod
    def parse(cls, text: str) -> "CardId":
        """Split on the last ``+``; a non-digit suffix stays part of the name."""
        name, sep, suffix = text.rpartition("+")
        if sep and suffix.isascii() and suffix.isdigit():
            return cls(name, int(suffix))
        return cls(text)

    def upgraded(self) -> "CardId":
        return CardId(self.name, self.level + 1)

    def downgraded(self) -> "CardId":
        return CardId(self.name, self.level - 1 if self.level > 1 else 0)

    def __str__(self):
        if self.level == 0:
            return self.name
        return f"{self.name}+{self.level}"


def parse_cards(texts) -> list[CardId]:
    return [CardId.parse(t) for t in texts]


def starting_deck(character: str, ascension_level: int = 0) -> list[CardId]:
    """Return the fixed starting deck for a character (empty if unknown)."""
    names = STARTING_DECKS.get(character)
    if names is None:
        logger.warning("No starting deck for character %r", character)
        return []

    cards = parse_cards(names)
    if ascension_level >= ASCENDERS_BANE_LEVEL:
        cards.append(CardId(ASCENDERS_BANE))
    return cards
