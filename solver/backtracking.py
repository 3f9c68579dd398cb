# solver/backtracking.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from bitboard import BitBoard
from models import PieceInstance, Placement
from solver.placements import candidate_masks, to_placement

logger = logging.getLogger(__name__)

ProgressCallback = Callable[["BacktrackingSolver"], None]


class SearchStopped(Exception):
    """Raised inside the search loop when a budget or stop hook fires."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass
class SolverStats:
    nodes: int = 0
    backtracks: int = 0
    max_depth: int = 0
    elapsed: float = 0.0

    def as_dict(self):
        return {
            "nodes": self.nodes,
            "backtracks": self.backtracks,
            "max_depth": self.max_depth,
            "elapsed": round(self.elapsed, 6),
        }


@dataclass
class _Frame:
    cell: int
    moves: Iterator[Tuple[int, Placement, int]]
    placed: Optional[Tuple[int, Placement, int]] = None


@dataclass
class SolverOptions:
    mirror: Optional[bool] = None
    max_seconds: Optional[float] = None
    node_limit: Optional[int] = None
    should_stop: Optional[Callable[[], bool]] = None
    progress_every: int = 5000
    progress_callback: Optional[ProgressCallback] = field(default=None, repr=False)


class BacktrackingSolver:
    """Lowest-open-cell exact-cover search over a bitboard.

    Each frame of the explicit stack holds the cell being filled and a lazy
    iterator over (piece instance, orientation) moves for that cell. Pieces
    are tried in input order, orientations in catalog order, and every
    failed move is undone before the next one is generated.
    """

    def __init__(self, width: int, height: int, families: Sequence[str], options: Optional[SolverOptions] = None) -> None:
        self.board = BitBoard(width, height)
        self.pieces: List[PieceInstance] = [PieceInstance(f.upper(), i) for i, f in enumerate(families)]
        self.options = options or SolverOptions()
        self.used = [False] * len(self.pieces)
        self.remaining = len(self.pieces)
        self.stack: List[Placement] = []
        self.stats = SolverStats()
        self._start = 0.0

    # ---- public ----

    def solve(self) -> Optional[List[Placement]]:
        """Return the first complete tiling found, or ``None``.

        Raises :class:`SearchStopped` when a configured budget runs out.
        """
        self._start = time.time()
        try:
            found = self._search()
        finally:
            self.stats.elapsed = time.time() - self._start
        if not found:
            logger.debug("search exhausted after %d nodes", self.stats.nodes)
            return None
        return list(self.stack)

    # ---- search ----

    def _moves(self, cell: int) -> Iterator[Tuple[int, Placement, int]]:
        tried_families = set()
        for idx, piece in enumerate(self.pieces):
            if self.used[idx] or piece.family in tried_families:
                continue
            # Later instances of the same family would replay this subtree.
            tried_families.add(piece.family)
            for fit, mask in candidate_masks(self.board, piece.family, cell, self.options.mirror):
                yield idx, to_placement(piece, fit, cell), mask

    def _apply(self, move: Tuple[int, Placement, int]) -> None:
        idx, placement, mask = move
        self.board.occupy_mask(mask)
        self.used[idx] = True
        self.remaining -= 1
        self.stack.append(placement)

    def _undo(self, move: Tuple[int, Placement, int]) -> None:
        idx, _placement, mask = move
        self.stack.pop()
        self.remaining += 1
        self.used[idx] = False
        self.board.release_mask(mask)

    def _checkpoint(self) -> None:
        opts = self.options
        nodes = self.stats.nodes
        if opts.node_limit and nodes > opts.node_limit:
            raise SearchStopped(f"Stopped before solution (node limit {opts.node_limit})")
        if opts.should_stop is not None and opts.should_stop():
            raise SearchStopped("Stopped before solution (cancelled)")
        every = max(1, int(opts.progress_every or 1))
        if nodes % every == 0:
            self.stats.elapsed = time.time() - self._start
            if opts.max_seconds and self.stats.elapsed > opts.max_seconds:
                raise SearchStopped(f"Stopped before solution (timebox {opts.max_seconds:g}s)")
            if opts.progress_callback is not None:
                opts.progress_callback(self)

    def _search(self) -> bool:
        frames: List[_Frame] = []
        descend = True
        while True:
            if descend:
                self.stats.nodes += 1
                self._checkpoint()
                cell = self.board.lowest_open_cell()
                if cell is None:
                    if self.remaining == 0:
                        return True
                    # Board full but pieces left over: this branch fails.
                else:
                    frames.append(_Frame(cell, self._moves(cell)))
                    if len(frames) > self.stats.max_depth:
                        self.stats.max_depth = len(frames)

            if not frames:
                return False
            top = frames[-1]
            if top.placed is not None:
                self._undo(top.placed)
                top.placed = None
            move = next(top.moves, None)
            if move is None:
                frames.pop()
                self.stats.backtracks += 1
                descend = False
                continue
            self._apply(move)
            top.placed = move
            descend = True

