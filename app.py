# app.py: web driver; solves run in a child process, progress is polled
from __future__ import annotations
import logging
import os
import time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from config import CFG, ENGINES
from demand_parser import parse_pieces
from io_files import write_coords, write_layout_view_html
from models import INVALID_INPUT, SOLVED, STOPPED, SolveResult
from render import render_result, render_text
from solver.isolate import run_isolated
from solver.orchestrator import normalize_pieces, validate_grid

from progress import (
    reset as progress_reset,
    snapshot as progress_json,
    start_timer as progress_start,
    set_status, set_puzzle, set_elapsed, set_done, set_result_url,
)

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


def _blank_result() -> Dict[str, Any]:
    return {
        "ok": False,
        "status": "",
        "message": "",
        "rows": 0,
        "cols": 0,
        "pieces": "",
        "engine": "",
        "mirror": CFG.ALLOW_MIRROR,
        "placed_count": 0,
        "piece_count": 0,
        "nodes": None,
        "elapsed_str": "0s",
        "svg": "",
        "legend": "",
        "text": "",
        "coords_filename": _resolve_output_paths(CFG.COORDS_OUT, "coords.txt")[2],
        "layout_filename": _resolve_output_paths(CFG.LAYOUT_HTML, "layout_view.html")[2],
    }


LAST_RESULT: Dict[str, Any] = _blank_result()

app = Flask(__name__, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return render_template("index.html", engines=ENGINES, engine=CFG.ENGINE, mirror=CFG.ALLOW_MIRROR)


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    """JSON body first, then form fields, then query args (first value wins)."""
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)
    for source in (request.form, request.args):
        for k, v in source.items():
            merged.setdefault(k, v)
    return merged


def _as_int(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value


def _as_flag(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _read_request() -> Tuple[Any, Any, str, str, bool, Optional[str]]:
    like = _merge_like_mapping()
    rows = _as_int(like.get("rows"))
    cols = _as_int(like.get("cols", like.get("columns")))
    pieces = parse_pieces(like.get("pieces"))
    engine = str(like.get("engine") or CFG.ENGINE).strip().lower()
    # Unchecked HTML checkboxes are absent, so a posted form means one-sided
    one_sided = _as_flag(like.get("one_sided"), False)
    mirror = not one_sided if "one_sided" in like else _as_flag(like.get("mirror"), CFG.ALLOW_MIRROR)

    error = validate_grid(cols, rows)
    if error is None:
        _, error = normalize_pieces(pieces)
    if error is None and not pieces:
        error = "Bad pieces: nothing given"
    if error is None and engine not in ENGINES:
        error = f"Bad engine: {engine!r} (choose {', '.join(ENGINES)})"
    return rows, cols, pieces, engine, mirror, error


def _finalize_solver_progress(result: SolveResult) -> None:
    """Write the terminal solver status without clobbering failure states."""

    if result.status == SOLVED:
        set_done(True, message="Solved")
    elif result.status == STOPPED:
        set_done(False, status="Stopped", message=result.reason)
    elif result.status == INVALID_INPUT:
        set_done(False, status="Error", message=result.reason)
    else:
        set_done(False, status="No solution", message=result.reason)


def _write_outputs(result: SolveResult, svg: str, legend: str, grid_label: str) -> Tuple[str, str]:
    coords_name = LAST_RESULT["coords_filename"]
    layout_name = LAST_RESULT["layout_filename"]
    try:
        coords_name = os.path.basename(write_coords(result, BASE_DIR)) or coords_name
        if result.ok:
            layout_path = write_layout_view_html(svg, legend, BASE_DIR, grid_label=grid_label)
            layout_name = os.path.basename(layout_path) or layout_name
    except OSError as e:
        logger.warning("could not write output files: %s", e)
    return coords_name, layout_name


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    set_status("Solving")

    t0 = time.time()
    rows, cols, pieces, engine, mirror, error = _read_request()
    LAST_RESULT.clear()
    LAST_RESULT.update(_blank_result())

    if error:
        result = SolveResult(status=INVALID_INPUT, width=0, height=0, reason=error, engine=engine)
    else:
        set_puzzle(cols, rows, pieces, engine)
        result = run_isolated(
            cols, rows, pieces,
            max_seconds=CFG.WEB_TIME_LIMIT,
            engine=engine,
            mirror=mirror,
            report_progress=True,
        )

    _finalize_solver_progress(result)
    set_elapsed(time.time() - t0)

    svg = legend = text = ""
    grid_label = f"{rows} × {cols}" if not error else ""
    if result.ok:
        svg, legend = render_result(result.placements, result.width, result.height)
        text = render_text(result.width, result.height, result.placements)
    coords_name, layout_name = LAST_RESULT["coords_filename"], LAST_RESULT["layout_filename"]
    if not error:
        coords_name, layout_name = _write_outputs(result, svg, legend, grid_label)

    LAST_RESULT.update({
        "ok": result.ok,
        "status": result.status,
        "message": "Solved" if result.ok else (result.reason or "No solution"),
        "rows": rows if not error else 0,
        "cols": cols if not error else 0,
        "pieces": pieces,
        "engine": engine,
        "mirror": mirror,
        "placed_count": len(result.placements),
        "piece_count": len(pieces),
        "nodes": result.meta.get("nodes"),
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "svg": svg,
        "legend": legend,
        "text": text,
        "coords_filename": coords_name,
        "layout_filename": layout_name,
    })
    set_result_url(url_for("result_latest"))
    status_code = 400 if result.status == INVALID_INPUT else 200
    return render_template("result.html", **LAST_RESULT), status_code


@app.route("/download/coords")
def download_coords():
    _, directory, filename = _resolve_output_paths(CFG.COORDS_OUT, "coords.txt")
    return send_from_directory(directory, filename, as_attachment=True)


@app.route("/download/html")
def download_html():
    _, directory, filename = _resolve_output_paths(CFG.LAYOUT_HTML, "layout_view.html")
    return send_from_directory(directory, filename, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
