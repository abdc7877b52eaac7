"""
Slay the Spire Deck Summary Formatter

Reads deck_state.json and produces summary.html (final deck, log gaps,
per-floor history) and deck.png (final deck as card tiles).

Usage: python -m sts_tracker.deck.format_deck RUN_ID

Input:  <STS_DATA_DIR>/<RUN_ID>/deck_state.json
Output: <STS_DATA_DIR>/<RUN_ID>/summary.html, deck.png
"""

import json
import os
import sys
from html import escape as esc

from sts_tracker import DATA_DIR
from sts_tracker.deck.card import CardId
from sts_tracker.deck.deck_image import save_deck_image

# Default section visibility
DEFAULT_HISTORY = os.environ.get("DEFAULT_HISTORY", "show").lower()
DEFAULT_ANOMALIES = os.environ.get("DEFAULT_ANOMALIES", "show").lower()

# (diff key, marker, css class) in display order
DIFF_COLUMNS = [
    ("obtained", "+", "obtained"),
    ("upgraded", "^", "upgraded"),
    ("removed", "-", "removed"),
    ("transformed", "~", "transformed"),
]


# --- HTML helpers ---

def render_card(text, count=1):
    """Render one card tag; upgraded cards get the ``up`` class."""
    cls = "card up" if CardId.parse(text).level else "card"
    suffix = f' <span class="count">&times;{count}</span>' if count > 1 else ""
    return f'<span class="{cls}">{esc(text)}{suffix}</span>'


def group_cards(cards):
    """Collapse duplicates into (text, count), keeping first-seen order."""
    counts = {}
    for text in cards:
        counts[text] = counts.get(text, 0) + 1
    return list(counts.items())


def _toggle(target_id, default):
    """Build a show/hide toggle and the initial style for the target div."""
    shown = default != "hide"
    parts = []
    for mode, label in (("show", "Show"), ("hide", "Hide")):
        active = " active" if (mode == "show") == shown else ""
        parts.append(f'<span class="tog-opt{active}" data-mode="{mode}">{label}</span>')
    sep = '<span class="tog-sep">|</span>'
    toggle = f'<span class="toggle" data-target="{target_id}">[{sep.join(parts)}]</span>'
    attrs = "" if shown else ' style="display:none"'
    return toggle, attrs


# --- Section formatters ---

def format_deck_section(cards):
    if not cards:
        return '<div class="dim">(empty)</div>'
    tags = [render_card(text, count) for text, count in group_cards(cards)]
    return f'<div class="card-row">{"".join(tags)}</div>'


def format_card_list(cards):
    if not cards:
        return '<span class="dim">none</span>'
    return "".join(render_card(text) for text in cards)


def format_history(diffs):
    """One table row per floor that changed the deck."""
    if not diffs:
        return '<div class="dim">No deck changes recorded.</div>'
    rows = []
    for diff in diffs:
        cells = []
        for key, marker, cls in DIFF_COLUMNS:
            entries = diff.get(key, [])
            cell = "".join(
                f'<span class="{cls}">{marker}{esc(text)}</span>' for text in entries)
            cells.append(f"<td>{cell}</td>")
        rows.append(f'<tr><td class="floor">{diff["floor"]}</td>{"".join(cells)}</tr>')
    header = "".join(f"<th>{key}</th>" for key, _, _ in DIFF_COLUMNS)
    return (
        f'<table class="history">'
        f'<tr><th>floor</th>{header}</tr>'
        + "\n".join(rows)
        + '</table>'
    )


def format_summary(state, run_id):
    """Render the full summary page for a deck_state.json payload."""
    cards = state.get("cards", [])
    unknown_obtained = state.get("unknown_obtained", [])
    unknown_removed = state.get("unknown_removed", [])

    sections = [
        f'<div class="section">'
        f'<div class="section-title">{esc(state.get("character", "?"))} '
        f'&mdash; floor {state.get("floor_reached", "?")} &mdash; {len(cards)} cards</div>'
        f'{format_deck_section(cards)}'
        f'</div>'
    ]

    an_toggle, an_attrs = _toggle("anomalies", DEFAULT_ANOMALIES)
    anomaly_count = len(unknown_obtained) + len(unknown_removed)
    sections.append(
        f'<div class="section">'
        f'<div class="section-title">Log gaps ({anomaly_count}) {an_toggle}</div>'
        f'<div id="anomalies"{an_attrs}>'
        f'<div class="row"><span class="label">Obtained?</span>{format_card_list(unknown_obtained)}</div>'
        f'<div class="row"><span class="label">Removed?</span>{format_card_list(unknown_removed)}</div>'
        f'</div>'
        f'</div>'
    )

    hi_toggle, hi_attrs = _toggle("history", DEFAULT_HISTORY)
    sections.append(
        f'<div class="section">'
        f'<div class="section-title">History {hi_toggle}</div>'
        f'<div id="history"{hi_attrs}>{format_history(state.get("diffs", []))}</div>'
        f'</div>'
    )

    return HTML_TEMPLATE.format(run_id=esc(run_id), content="\n".join(sections))


# --- HTML template ---

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Deck &mdash; {run_id}</title>
<style>
body {{
  background: #1e1e1e;
  color: #d4d4d4;
  font-family: Consolas, 'Courier New', monospace;
  font-size: 14px;
  padding: 20px;
}}
.section {{ margin-bottom: 12px; }}
.section-title {{ font-size: 13px; margin-bottom: 4px; font-weight: bold; color: #eee; }}
.dim {{ color: #666; }}
.label {{ display: inline-block; width: 90px; color: #aaa; }}
.row {{ margin: 2px 0; }}

.card {{
  display: inline-block;
  padding: 2px 6px;
  margin: 1px;
  border-radius: 4px;
  border: 1px solid #555;
  background: #333;
}}
.card.up {{ background: #1a4c1a; border-color: #44bb44; color: #88dd88; }}
.count {{ color: #aaa; }}

.history {{ border-collapse: collapse; }}
.history th, .history td {{ padding: 2px 8px; text-align: left; vertical-align: top; border-bottom: 1px solid #333; }}
.history .floor {{ color: #aaa; text-align: right; }}
.obtained {{ color: #88dd88; margin-right: 6px; }}
.upgraded {{ color: #eedd66; margin-right: 6px; }}
.removed {{ color: #ff8888; margin-right: 6px; }}
.transformed {{ color: #dd99ff; margin-right: 6px; }}

.toggle {{ font-weight: normal; color: #666; cursor: pointer; }}
.tog-opt.active {{ color: #eee; }}
.tog-sep {{ margin: 0 2px; }}
</style>
</head>
<body>
{content}
<script>
document.querySelectorAll('.toggle').forEach(function(t) {{
  t.querySelectorAll('.tog-opt').forEach(function(opt) {{
    opt.addEventListener('click', function() {{
      var target = document.getElementById(t.dataset.target);
      target.style.display = opt.dataset.mode === 'hide' ? 'none' : '';
      t.querySelectorAll('.tog-opt').forEach(function(o) {{ o.classList.toggle('active', o === opt); }});
    }});
  }});
}});
</script>
</body>
</html>"""


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m sts_tracker.deck.format_deck RUN_ID")
        sys.exit(1)

    run_id = sys.argv[1]
    run_dir = DATA_DIR / run_id

    state_json = run_dir / "deck_state.json"
    if not state_json.exists():
        print(f"ERROR: File not found: {state_json}")
        sys.exit(1)

    with open(state_json, encoding="utf-8") as f:
        state = json.load(f)

    summary_path = run_dir / "summary.html"
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write(format_summary(state, run_id))
    print(f"Written: {summary_path}")

    image_path = run_dir / "deck.png"
    save_deck_image(state.get("cards", []), image_path)
    print(f"Written: {image_path}")


if __name__ == "__main__":
    main()
