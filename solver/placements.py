# solver/placements.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional, Tuple

from bitboard import BitBoard
from config import CFG
from models import Orientation, PieceInstance, Placement
from tiles import orientations


@dataclass(frozen=True)
class _Fit:
    """One orientation pre-shifted so its first cell sits at offset 0."""

    index: int
    orientation: Orientation
    rel_cells: Tuple[int, ...]  # cell deltas relative to the target cell
    rel_mask: int               # footprint mask; shift left by target cell
    col_lo: int                 # most negative column delta
    col_hi: int                 # largest column delta
    row_span: int               # largest row delta


@lru_cache(maxsize=None)
def _fits_for(width: int, family: str, with_mirror: bool) -> Tuple[_Fit, ...]:
    fits = []
    for idx, orient in enumerate(orientations(family, mirror=with_mirror)):
        r0, c0 = orient[0]  # sorted row-major, so this is the top-left-most cell
        deltas = [(r - r0, c - c0) for r, c in orient]
        rel_cells = tuple(dr * width + dc for dr, dc in deltas)
        mask = 0
        for rc in rel_cells:
            mask |= 1 << rc
        fits.append(
            _Fit(
                index=idx,
                orientation=orient,
                rel_cells=rel_cells,
                rel_mask=mask,
                col_lo=min(dc for _, dc in deltas),
                col_hi=max(dc for _, dc in deltas),
                row_span=max(dr for dr, _ in deltas),
            )
        )
    return tuple(fits)


def candidate_masks(
    board: BitBoard,
    family: str,
    target_cell: int,
    mirror: Optional[bool] = None,
) -> Iterator[Tuple[_Fit, int]]:
    """Yield ``(fit, mask)`` for every orientation that fits at ``target_cell``."""
    with_mirror = CFG.ALLOW_MIRROR if mirror is None else bool(mirror)
    row, col = divmod(target_cell, board.width)
    for fit in _fits_for(board.width, family.upper(), with_mirror):
        if col + fit.col_lo < 0 or col + fit.col_hi >= board.width:
            continue
        if row + fit.row_span >= board.height:
            continue
        mask = fit.rel_mask << target_cell
        if board.fits(mask):
            yield fit, mask


def candidates(
    board: BitBoard,
    family: str,
    target_cell: int,
    mirror: Optional[bool] = None,
    *,
    piece: Optional[PieceInstance] = None,
) -> Iterator[Placement]:
    """Lazily yield valid placements of ``family`` anchored at ``target_cell``.

    The anchor is the orientation's top-left-most cell. Order follows the
    shape catalog; the board is never mutated.
    """
    piece = piece or PieceInstance(family.upper(), -1)
    for fit, _mask in candidate_masks(board, family, target_cell, mirror):
        yield to_placement(piece, fit, target_cell)


def to_placement(piece: PieceInstance, fit: _Fit, target_cell: int) -> Placement:
    return Placement(
        piece=piece,
        orientation_index=fit.index,
        orientation=fit.orientation,
        anchor=target_cell,
        cells=tuple(sorted(target_cell + rc for rc in fit.rel_cells)),
    )


def all_placements(width: int, height: int, family: str, mirror: Optional[bool] = None):
    """Every in-bounds placement of ``family`` on an empty ``width x height`` board."""
    board = BitBoard(width, height)
    for cell in range(board.size):
        yield from candidates(board, family, cell, mirror)
