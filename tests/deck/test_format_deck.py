"""Tests for the HTML summary and the deck image."""

import json

import pytest
from PIL import Image

from sts_tracker.deck import deck_image, format_deck
from sts_tracker.deck.format_deck import format_summary, group_cards, render_card


@pytest.fixture
def state():
    return {
        "character": "IRONCLAD",
        "floor_reached": 10,
        "diffs": [
            {"floor": 1, "obtained": ["Anger"], "removed": [], "transformed": [], "upgraded": []},
            {"floor": 3, "obtained": ["Clothesline"], "removed": [], "transformed": ["Defend_R"], "upgraded": []},
            {"floor": 6, "obtained": [], "removed": [], "transformed": [], "upgraded": ["Bash"]},
        ],
        "replayed": ["Strike_R", "Strike_R", "Bash+1", "Anger", "Clothesline"],
        "cards": ["Strike_R", "Strike_R", "Bash+1", "Anger", "Clothesline", "Parasite"],
        "unknown_obtained": ["Parasite"],
        "unknown_removed": [],
    }


class TestHelpers:

    def test_group_cards_keeps_order(self):
        assert group_cards(["Strike_R", "Bash", "Strike_R"]) == [("Strike_R", 2), ("Bash", 1)]

    def test_render_upgraded(self):
        assert 'class="card up"' in render_card("Bash+1")
        assert 'class="card"' in render_card("Bash")

    def test_render_count(self):
        assert "&times;3" in render_card("Strike_R", 3)
        assert "&times;" not in render_card("Strike_R", 1)

    def test_render_escapes(self):
        assert "<script>" not in render_card("<script>")


class TestFormatSummary:

    def test_sections(self, state):
        html = format_summary(state, "1634000000")
        assert "<title>Deck &mdash; 1634000000</title>" in html
        assert "IRONCLAD" in html
        assert "6 cards" in html
        assert "Log gaps (1)" in html
        assert "History" in html

    def test_history_rows(self, state):
        html = format_summary(state, "1634000000")
        assert '<td class="floor">3</td>' in html
        assert '<span class="transformed">~Defend_R</span>' in html
        assert '<span class="upgraded">^Bash</span>' in html

    def test_empty_anomalies(self, state):
        html = format_summary(state, "x")
        assert '<span class="label">Removed?</span><span class="dim">none</span>' in html

    def test_hidden_history(self, state, monkeypatch):
        monkeypatch.setattr(format_deck, "DEFAULT_HISTORY", "hide")
        html = format_summary(state, "x")
        assert '<div id="history" style="display:none">' in html


class TestDeckImage:

    def test_grid_size(self):
        image = deck_image.render_deck_image(["Strike_R"] * 7)
        rows = 2
        assert image.size == (
            deck_image.PADDING + deck_image.COLUMNS * (deck_image.TILE_W + deck_image.PADDING),
            deck_image.PADDING + rows * (deck_image.TILE_H + deck_image.PADDING),
        )

    def test_empty_deck_still_renders(self):
        image = deck_image.render_deck_image([])
        assert image.size[1] == deck_image.PADDING + deck_image.TILE_H + deck_image.PADDING

    def test_upgraded_tile_colour(self):
        image = deck_image.render_deck_image(["Bash+1", "Bash"])
        x = deck_image.PADDING + deck_image.TILE_W - 4
        y = deck_image.PADDING + deck_image.TILE_H // 2
        assert image.getpixel((x, y)) == deck_image.TILE_UPGRADED[0]
        second_x = x + deck_image.TILE_W + deck_image.PADDING
        assert image.getpixel((second_x, y)) == deck_image.TILE_BASE[0]

    def test_long_names_fit(self):
        deck_image.render_deck_image(["A Very Long Card Name That Will Not Fit In One Tile+1"])


class TestMain:

    def test_writes_summary_and_image(self, state, tmp_path, monkeypatch, capsys):
        run_dir = tmp_path / "1634000000"
        run_dir.mkdir()
        (run_dir / "deck_state.json").write_text(json.dumps(state), encoding="utf-8")
        monkeypatch.setattr(format_deck, "DATA_DIR", tmp_path)
        monkeypatch.setattr("sys.argv", ["format_deck", "1634000000"])

        format_deck.main()

        assert "Parasite" in (run_dir / "summary.html").read_text(encoding="utf-8")
        with Image.open(run_dir / "deck.png") as image:
            assert image.format == "PNG"
        assert "Written:" in capsys.readouterr().out

    def test_missing_state(self, tmp_path, monkeypatch):
        monkeypatch.setattr(format_deck, "DATA_DIR", tmp_path)
        monkeypatch.setattr("sys.argv", ["format_deck", "nope"])
        with pytest.raises(SystemExit):
            format_deck.main()
