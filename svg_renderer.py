from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

# Result shape and the empty-cell marker
from puzzle_engine import PuzzleResult, EMPTY


@dataclass
class Appearance:
    """
    Visual settings used by the SVG renderer.
    Defaults reproduce the downloadable image of the web tool.
    """
    # Canvas
    padding: int = 50
    grid_area_size: int = 800
    background_color: str = "white"

    # Title
    title: str = "Word Search Puzzle"
    title_font_family: str = "Arial"
    title_font_size: int = 40
    title_color: str = "black"

    # Letters
    grid_font_family: str = "'Courier New', monospace"
    grid_font_scale: float = 0.7   # font size = cell size * scale
    grid_font_bold: bool = True
    grid_font_color: str = "black"

    # Legend
    list_title: str = "Words to Find:"
    list_title_font_size: int = 28
    list_font_family: str = "Arial"
    list_font_size: int = 22
    list_font_color: str = "black"
    legend_columns: int = 3
    legend_line_height: int = 35
    show_legend: bool = True

    # --- Solution marking ---
    solution_mark_color: str = "#fff176"   # circle behind the letter
    solution_font_color: str = "#d32f2f"
    solution_mark_radius: float = 0.7      # fraction of grid font size


# -----------------------------------------------------------------------------
# Tiny helper to build safe SVG text (no external lib, very basic)
# -----------------------------------------------------------------------------
def _esc(s: str) -> str:
    return (
        str(s).replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def grid_font_size(appearance: Appearance, grid_size: int) -> int:
    """Letter size shrinks with the grid so every size fits the same area."""
    return int(math.floor(appearance.grid_area_size / max(1, grid_size) * appearance.grid_font_scale))


def canvas_size(result: PuzzleResult, appearance: Appearance) -> tuple[int, int]:
    """(width, height) of the exported picture."""
    pad = appearance.padding
    width = appearance.grid_area_size + 2 * pad
    legend_h = 0
    if appearance.show_legend:
        col_count = max(1, int(appearance.legend_columns))
        list_rows = math.ceil(len(result.placed_words) / col_count)
        legend_h = list_rows * appearance.legend_line_height + 100
    height = pad + 60 + appearance.grid_area_size + legend_h
    return width, height


# -----------------------------------------------------------------------------
# Core renderers
# -----------------------------------------------------------------------------
def render_puzzle_svg(
    result: PuzzleResult,
    appearance: Optional[Appearance] = None,
    show_solution: bool = False,
) -> str:
    """
    Title, letter grid and the word list in columns below it.
    With show_solution, cells that belong to placed words get a
    round highlight and coloured letters.
    """
    app = appearance or Appearance()
    letters = result.puzzle_grid
    solution = result.solution_grid
    n = len(letters)

    pad = app.padding
    total_w, total_h = canvas_size(result, app)
    cell = app.grid_area_size / n if n else 0
    fs = grid_font_size(app, n)

    out = []
    out.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{total_w}" height="{total_h}" '
        f'viewBox="0 0 {total_w} {total_h}">'
    )

    # Background
    out.append(f'<rect x="0" y="0" width="{total_w}" height="{total_h}" fill="{_esc(app.background_color)}" />')

    # Title
    out.append(
        f'<text x="{total_w / 2:.2f}" y="{pad + 10}" text-anchor="middle" '
        f'font-family="{_esc(app.title_font_family)}" font-size="{app.title_font_size}" '
        f'font-weight="bold" fill="{_esc(app.title_color)}">{_esc(app.title)}</text>'
    )

    # Highlights go under the letters
    if show_solution:
        radius = fs * app.solution_mark_radius
        out.append(f'<g fill="{_esc(app.solution_mark_color)}" stroke="none">')
        for r in range(n):
            for c in range(n):
                if solution[r][c] == EMPTY:
                    continue
                x = pad + c * cell + cell / 2
                y = pad + 80 + r * cell + cell / 2
                out.append(f'<circle cx="{x:.2f}" cy="{y - fs / 4:.2f}" r="{radius:.2f}" />')
        out.append('</g>')

    # Letters
    font_weight = "bold" if app.grid_font_bold else "normal"
    out.append(
        f'<g font-family="{_esc(app.grid_font_family)}" font-size="{fs}" '
        f'font-weight="{font_weight}" fill="{_esc(app.grid_font_color)}" text-anchor="middle">'
    )
    for r in range(n):
        for c in range(n):
            ch = letters[r][c]
            x = pad + c * cell + cell / 2
            y = pad + 80 + r * cell + cell / 2
            if show_solution and solution[r][c] != EMPTY:
                out.append(f'<text x="{x:.2f}" y="{y:.2f}" fill="{_esc(app.solution_font_color)}">{_esc(ch)}</text>')
            else:
                out.append(f'<text x="{x:.2f}" y="{y:.2f}">{_esc(ch)}</text>')
    out.append('</g>')

    # Legend
    if app.show_legend:
        col_count = max(1, int(app.legend_columns))
        list_y = pad + 80 + app.grid_area_size + 50
        out.append(
            f'<text x="{pad}" y="{list_y}" font-family="{_esc(app.list_font_family)}" '
            f'font-size="{app.list_title_font_size}" font-weight="bold" '
            f'fill="{_esc(app.list_font_color)}">{_esc(app.list_title)}</text>'
        )
        col_w = (total_w - 2 * pad) / col_count
        out.append(
            f'<g font-family="{_esc(app.list_font_family)}" font-size="{app.list_font_size}" '
            f'fill="{_esc(app.list_font_color)}">'
        )
        # Row-major layout
        for i, word in enumerate(result.placed_words):
            col_idx = i % col_count
            row_idx = i // col_count
            tx = pad + col_idx * col_w
            ty = list_y + 40 + row_idx * app.legend_line_height
            out.append(f'<text x="{tx:.2f}" y="{ty}">{_esc(word)}</text>')
        out.append('</g>')

    out.append('</svg>')
    return "\n".join(out)


def render_grid_html(result: PuzzleResult, show_solution: bool = False) -> str:
    """
    Grid as an HTML table for the page preview.
    Cells of placed words get class="solution" when the overlay is on.
    """
    rows = []
    for r, row in enumerate(result.puzzle_grid):
        tds = []
        for c, ch in enumerate(row):
            if show_solution and result.solution_grid[r][c] != EMPTY:
                tds.append(f'<td class="grid-cell solution" data-row="{r}" data-col="{c}">{_esc(ch)}</td>')
            else:
                tds.append(f'<td class="grid-cell" data-row="{r}" data-col="{c}">{_esc(ch)}</td>')
        rows.append("<tr>" + "".join(tds) + "</tr>")
    return '<table class="word-search-grid">' + "".join(rows) + "</table>"


def save_svg(svg_text: str, path: str) -> None:
    """Write an SVG string to disk."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg_text)
