"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os

from config import CFG
from models import SolveResult
from render import marker, render_text


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def format_placements(result: SolveResult) -> str:
    """One line per placement: marker, family, anchor and absolute cells."""

    lines = []
    for i, p in enumerate(result.placements):
        row, col = divmod(p.anchor, result.width)
        cells = " ".join(f"({r},{c})" for r, c in p.rows_cols(result.width))
        lines.append(f"{marker(i)} {p.family} #{p.orientation_index} @ ({row},{col}) cells {cells}\n")
    return "".join(lines)


def write_coords(result: SolveResult, base_dir: str) -> str:
    """Write the solution grid and placement list to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.COORDS_OUT, "coords.txt")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"# {result.width} x {result.height} {''.join(result.pieces)}\n")
        if not result.ok:
            f.write(f"No solution: {result.reason or result.status}\n")
        else:
            f.write(render_text(result.width, result.height, result.placements))
            f.write("\n")
            f.write(format_placements(result))
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, *, grid_label: str = "") -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Layout View</title>
<style>.swatch{{display:inline-block;width:1em;height:1em;margin-right:.4em}}</style></head>
<body class='container'>
<h1>Layout View {grid_label}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["format_placements", "write_coords", "write_layout_view_html"]
