import logging
import time
from collections import defaultdict
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model as _cp

from models import PieceInstance, Placement
from config import CFG
from solver.placements import all_placements

logger = logging.getLogger(__name__)

# ---------------- helpers ----------------

@lru_cache(maxsize=128)
def build_options(width: int, height: int, family: str, with_mirror: bool) -> Tuple[Placement, ...]:
    """Every placement of ``family`` on the empty board, cached per geometry."""
    return tuple(all_placements(width, height, family, with_mirror))


def _rebind(placement: Placement, piece: PieceInstance) -> Placement:
    return Placement(
        piece=piece,
        orientation_index=placement.orientation_index,
        orientation=placement.orientation,
        anchor=placement.anchor,
        cells=placement.cells,
    )


# ---------------- main solve ----------------

def try_pack_exact_cover(
    width: int,
    height: int,
    families: Sequence[str],
    *,
    mirror: Optional[bool] = None,
    max_seconds: Optional[float] = None,
) -> Tuple[Optional[bool], List[Placement], str, Dict[str, object]]:
    """Exact-cover CP-SAT model over all placements of every piece instance.

    Returns ``(ok, placements, reason, meta)`` where ``ok`` is ``True`` when a
    tiling was found, ``False`` when the model is proven infeasible and
    ``None`` when the solver stopped before reaching a verdict.
    """
    with_mirror = CFG.ALLOW_MIRROR if mirror is None else bool(mirror)
    pieces = [PieceInstance(f.upper(), i) for i, f in enumerate(families)]
    size = width * height
    t0 = time.time()

    m = _cp.CpModel()
    covers: Dict[int, List[_cp.IntVar]] = defaultdict(list)
    choices: List[List[Tuple[_cp.IntVar, Placement]]] = []
    option_count = 0

    for piece in pieces:
        opts = build_options(width, height, piece.family, with_mirror)
        row: List[Tuple[_cp.IntVar, Placement]] = []
        for k, placement in enumerate(opts):
            var = m.NewBoolVar(f"p_{piece.index}_{k}")
            row.append((var, placement))
            for cell in placement.cells:
                covers[cell].append(var)
        option_count += len(row)
        choices.append(row)

    meta: Dict[str, object] = {
        "option_count": option_count,
        "pieces": len(pieces),
        "cells": size,
    }

    # A piece with no placement or a cell nobody can cover settles it early.
    if any(not row for row in choices) or any(not covers.get(cell) for cell in range(size)):
        meta["elapsed"] = round(time.time() - t0, 6)
        meta["status"] = "INFEASIBLE"
        return False, [], "Proven infeasible", meta

    for row in choices:
        m.AddExactlyOne([var for var, _ in row])
    for cell in range(size):
        m.AddExactlyOne(covers[cell])

    solver = _cp.CpSolver()
    if max_seconds:
        solver.parameters.max_time_in_seconds = float(max_seconds)
    solver.parameters.max_memory_in_mb = int(getattr(CFG, "MAX_MEMORY_MB", 2048))
    solver.parameters.num_search_workers = max(1, int(getattr(CFG, "WORKERS", 1)))
    solver.parameters.random_seed = int(getattr(CFG, "RANDOM_SEED", 0))
    solver.parameters.log_search_progress = False

    res = solver.Solve(m)
    meta["elapsed"] = round(time.time() - t0, 6)
    meta["status"] = solver.StatusName(res)
    logger.debug("CP-SAT %dx%d %s -> %s", width, height, "".join(families), meta["status"])

    if res in (_cp.OPTIMAL, _cp.FEASIBLE):
        placed: List[Placement] = []
        for piece, row in zip(pieces, choices):
            for var, placement in row:
                if solver.BooleanValue(var):
                    placed.append(_rebind(placement, piece))
                    break
        placed.sort(key=lambda p: (p.anchor, p.piece.index))
        return True, placed, "Solved", meta
    if res == _cp.INFEASIBLE:
        return False, [], "Proven infeasible", meta
    if res == _cp.MODEL_INVALID:
        return None, [], "CP-SAT model invalid", meta
    return None, [], "Stopped before solution (timebox)", meta
