# Orchestrator: validate, precheck, dispatch to an engine, wrap the outcome
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from config import CFG, ENGINES
from models import (
    INVALID_INPUT,
    NO_SOLUTION,
    SOLVED,
    STOPPED,
    Placement,
    SolveResult,
)
from progress import log_attempt_detail
from solver.backtracking import BacktrackingSolver, SearchStopped, SolverOptions
from tiles import CELLS_PER_PIECE, is_known_family, normalize, orientations

logger = logging.getLogger(__name__)

PiecesLike = Union[str, Sequence[str]]


# ---------- input checks ----------

def validate_grid(width: Any, height: Any) -> Optional[str]:
    """Return an error message for a bad board, ``None`` when it is usable."""
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            return f"Bad grid: {label} must be an integer, got {value!r}"
        if value <= 0:
            return f"Bad grid: {label} must be positive, got {value}"
    return None


def normalize_pieces(pieces: PiecesLike) -> Tuple[Tuple[str, ...], Optional[str]]:
    """Upper-case family letters in input order, or ``((), reason)`` on error."""
    if pieces is None:
        return (), "Bad pieces: nothing given"
    letters = list(pieces)
    out: List[str] = []
    for pos, letter in enumerate(letters):
        if not isinstance(letter, str) or len(letter) != 1 or not is_known_family(letter):
            return (), f"Bad pieces: unrecognized tetromino {letter!r} at position {pos + 1}"
        out.append(letter.upper())
    return tuple(out), None


def verify_tiling(
    width: int,
    height: int,
    placements: Iterable[Placement],
    mirror: Optional[bool] = None,
) -> Tuple[bool, Optional[str]]:
    """Check the exact-cover property of a finished tiling."""
    size = width * height
    seen = [False] * size
    for p in placements:
        if len(p.cells) != CELLS_PER_PIECE:
            return False, f"placement {p.piece.index} covers {len(p.cells)} cells"
        for cell in p.cells:
            if not 0 <= cell < size:
                return False, f"cell {cell} is off the board"
            if seen[cell]:
                return False, f"cell {cell} covered twice"
            seen[cell] = True
        shape = normalize(p.rows_cols(width))
        if shape not in orientations(p.family, mirror=mirror):
            return False, f"placement {p.piece.index} is not a {p.family} tetromino"
    missing = [i for i, hit in enumerate(seen) if not hit]
    if missing:
        return False, f"{len(missing)} cells left uncovered (first {missing[0]})"
    return True, None


# ---------- engines ----------

def _run_backtracking(width: int, height: int, families: Tuple[str, ...], opts: SolverOptions):
    solver = BacktrackingSolver(width, height, families, opts)
    try:
        placed = solver.solve()
    except SearchStopped as stop:
        return None, [], stop.reason, solver.stats.as_dict()
    if placed is None:
        return False, [], "No tiling exists", solver.stats.as_dict()
    return True, placed, "Solved", solver.stats.as_dict()


def _run_cp_sat(width: int, height: int, families: Tuple[str, ...], opts: SolverOptions):
    from solver.cp_sat import try_pack_exact_cover

    ok, placed, reason, meta = try_pack_exact_cover(
        width, height, families, mirror=opts.mirror, max_seconds=opts.max_seconds
    )
    if ok is False:
        reason = "No tiling exists (proven infeasible)"
    return ok, placed, reason, meta


_ENGINE_RUNNERS: Dict[str, Callable[..., Tuple[Optional[bool], List[Placement], str, Dict[str, Any]]]] = {
    "backtracking": _run_backtracking,
    "cp_sat": _run_cp_sat,
}


# ---------- public entrypoint ----------

def solve(
    width: int,
    height: int,
    pieces: PiecesLike,
    *,
    engine: Optional[str] = None,
    mirror: Optional[bool] = None,
    area_precheck: Optional[bool] = None,
    max_seconds: Optional[float] = None,
    node_limit: Optional[int] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    progress_callback=None,
) -> SolveResult:
    """Tile a ``width`` x ``height`` board with the given tetrominoes.

    Bad dimensions or unknown letters give ``invalid_input`` before any
    search. Otherwise the chosen engine runs and the result carries either
    the placements in search order or a ``no_solution`` / ``stopped``
    status. Unset options fall back to :class:`config.CFG`.
    """
    engine_name = (engine or CFG.ENGINE or "backtracking").strip().lower()
    t0 = time.time()

    grid_error = validate_grid(width, height)
    families, pieces_error = normalize_pieces(pieces)
    label = "".join(families) if families else (pieces if isinstance(pieces, str) else "")

    def _result(status: str, placed: List[Placement], reason: Optional[str], meta: Dict[str, Any]) -> SolveResult:
        meta = dict(meta)
        meta.setdefault("elapsed", round(time.time() - t0, 6))
        log_attempt_detail(
            "Solve finished",
            board=f"{width}x{height}",
            pieces=label,
            engine=engine_name,
            status=status,
            nodes=meta.get("nodes"),
            elapsed=meta.get("elapsed"),
        )
        return SolveResult(
            status=status,
            width=width if isinstance(width, int) else 0,
            height=height if isinstance(height, int) else 0,
            pieces=families,
            placements=placed,
            reason=reason,
            engine=engine_name,
            meta=meta,
        )

    if grid_error or pieces_error:
        reason = grid_error or pieces_error
        logger.info("rejecting puzzle: %s", reason)
        return _result(INVALID_INPUT, [], reason, {})

    if engine_name not in ENGINES:
        return _result(INVALID_INPUT, [], f"Bad engine: {engine_name!r} (choose {', '.join(ENGINES)})", {})

    precheck = CFG.AREA_PRECHECK if area_precheck is None else bool(area_precheck)
    if precheck and CELLS_PER_PIECE * len(families) != width * height:
        reason = (
            f"No tiling exists: pieces cover {CELLS_PER_PIECE * len(families)} cells, "
            f"board has {width * height}"
        )
        return _result(NO_SOLUTION, [], reason, {"area_precheck": True})

    opts = SolverOptions(
        mirror=CFG.ALLOW_MIRROR if mirror is None else bool(mirror),
        max_seconds=(max_seconds if max_seconds is not None else CFG.TIME_LIMIT) or None,
        node_limit=(node_limit if node_limit is not None else CFG.NODE_LIMIT) or None,
        should_stop=should_stop,
        progress_every=max(1, int(CFG.PROGRESS_EVERY or 1)),
        progress_callback=progress_callback,
    )
    logger.debug("solving %dx%d %s with %s (mirror=%s)", width, height, label, engine_name, opts.mirror)

    ok, placed, reason, meta = _ENGINE_RUNNERS[engine_name](width, height, families, opts)

    if ok:
        return _result(SOLVED, list(placed), None, meta)
    if ok is False:
        return _result(NO_SOLUTION, [], reason, meta)
    return _result(STOPPED, [], reason, meta)


__all__ = ["normalize_pieces", "solve", "validate_grid", "verify_tiling"]
