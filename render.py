from typing import Dict, List, Optional, Sequence

from models import Placement

EMPTY = "."
_MARKERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

# Index bits: 1 up, 2 down, 4 left, 8 right
_BOX_CHARS = (
    " ", "?", "?", "│",
    "?", "┘", "┐", "┤",
    "?", "└", "┌", "├",
    "─", "┴", "┬", "┼",
)
_SHADE = "░"

FAMILY_COLORS: Dict[str, str] = {
    "I": "rgb(64,190,210)",
    "O": "rgb(225,200,60)",
    "T": "rgb(160,90,200)",
    "S": "rgb(90,180,90)",
    "Z": "rgb(210,80,80)",
    "L": "rgb(230,140,50)",
    "J": "rgb(70,110,210)",
}


def marker(index: int) -> str:
    return _MARKERS[index % len(_MARKERS)]


def owner_grid(width: int, height: int, placements: Sequence[Placement]) -> List[List[int]]:
    """Position of the covering placement per cell, ``-1`` where nothing lies."""
    grid = [[-1] * width for _ in range(height)]
    for i, p in enumerate(placements):
        for r, c in p.rows_cols(width):
            grid[r][c] = i
    return grid


def marker_grid(width: int, height: int, placements: Sequence[Placement]) -> List[List[str]]:
    return [
        [EMPTY if owner < 0 else marker(owner) for owner in row]
        for row in owner_grid(width, height, placements)
    ]


def render_text(width: int, height: int, placements: Sequence[Placement]) -> str:
    """One row per line, one letter per placement (``A``, ``B``, ...), ``.`` for gaps.

    Letters repeat after the 62nd placement.
    """
    return "".join("".join(row) + "\n" for row in marker_grid(width, height, placements))


def render_pretty(width: int, height: int, placements: Sequence[Placement]) -> str:
    """Draw piece outlines with box-drawing characters.

    Every cell is two characters wide. Each output position looks at the four
    cells around one grid corner and draws a line wherever neighbours belong
    to different placements (or one of them is off the board). Empty cells
    are shaded. Placements are told apart by position, not by their letter,
    so boards with more pieces than letters still get every outline.
    """
    grid = owner_grid(width, height, placements)

    def get(row: int, col: int) -> Optional[int]:
        if row < 0 or row >= height or col < 0 or col >= 2 * width:
            return None
        return grid[row][col // 2]

    lines = []
    for row in range(height + 1):
        out = []
        for col in range(2 * width + 1):
            top_left = get(row - 1, col - 1)
            top_right = get(row - 1, col)
            bottom_left = get(row, col - 1)
            bottom_right = get(row, col)

            idx = (
                (1 if top_left != top_right else 0)
                + (2 if bottom_left != bottom_right else 0)
                + (4 if top_left != bottom_left else 0)
                + (8 if top_right != bottom_right else 0)
            )
            if idx:
                out.append(_BOX_CHARS[idx])
            elif bottom_right == -1:
                out.append(_SHADE)
            else:
                out.append(" ")
        lines.append("".join(out) + "\n")
    return "".join(lines)


def render_result(placements: Sequence[Placement], width: int, height: int):
    """SVG drawing plus an HTML legend for the web view."""
    scale = 40
    svg_w = width * scale + 2
    svg_h = height * scale + 2

    used: Dict[str, str] = {}
    cells = []
    outlines = []
    for i, p in enumerate(placements):
        color = FAMILY_COLORS.get(p.family, "rgb(150,150,150)")
        used.setdefault(p.family, color)
        owned = set(p.cells)
        for r, c in p.rows_cols(width):
            x, y = c * scale + 1, r * scale + 1
            cells.append(
                f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="{color}" stroke="none"/>'
            )
            # Outline only the edges that border another piece or the board edge
            cell = r * width + c
            if r == 0 or cell - width not in owned:
                outlines.append(f'<line x1="{x}" y1="{y}" x2="{x + scale}" y2="{y}"/>')
            if r == height - 1 or cell + width not in owned:
                outlines.append(f'<line x1="{x}" y1="{y + scale}" x2="{x + scale}" y2="{y + scale}"/>')
            if c == 0 or cell - 1 not in owned:
                outlines.append(f'<line x1="{x}" y1="{y}" x2="{x}" y2="{y + scale}"/>')
            if c == width - 1 or cell + 1 not in owned:
                outlines.append(f'<line x1="{x + scale}" y1="{y}" x2="{x + scale}" y2="{y + scale}"/>')
        r0, c0 = divmod(p.anchor, width)
        cells.append(
            f'<text x="{c0 * scale + 6}" y="{r0 * scale + 18}" font-size="14" fill="black">'
            f'{marker(i)}</text>'
        )

    frame = f'<rect x="1" y="1" width="{svg_w - 2}" height="{svg_h - 2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}<g stroke="black" stroke-width="2">{"".join(outlines)}</g>{frame}</svg>'
    )

    legend = "".join(f"<li><span class='swatch' style='background:{c}'></span>{n}</li>" for n, c in used.items())
    return svg, legend
