# tiles.py: tetromino shape catalog
from __future__ import annotations
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import CFG
from models import Offset, Orientation

# Canonical shapes as (row, col) cells. Catalog order of every family starts
# with these, so the horizontal I comes before the vertical one.
BASE_SHAPES: Dict[str, Tuple[Offset, ...]] = {
    "I": ((0, 0), (0, 1), (0, 2), (0, 3)),
    "O": ((0, 0), (0, 1), (1, 0), (1, 1)),
    "T": ((0, 0), (0, 1), (0, 2), (1, 1)),
    "S": ((0, 1), (0, 2), (1, 0), (1, 1)),
    "Z": ((0, 0), (0, 1), (1, 1), (1, 2)),
    "L": ((0, 0), (1, 0), (2, 0), (2, 1)),
    "J": ((0, 1), (1, 1), (2, 0), (2, 1)),
}

FAMILIES: Tuple[str, ...] = tuple(BASE_SHAPES.keys())
CELLS_PER_PIECE = 4


def normalize(cells: Iterable[Offset]) -> Orientation:
    """Shift cells so min row and min col are zero; sort row-major."""
    pts = list(cells)
    r0 = min(r for r, _ in pts)
    c0 = min(c for _, c in pts)
    return tuple(sorted((r - r0, c - c0) for r, c in pts))


def rotate(cells: Iterable[Offset]) -> Orientation:
    # 90° clockwise: (r, c) -> (c, -r)
    return normalize((c, -r) for r, c in cells)


def mirror(cells: Iterable[Offset]) -> Orientation:
    return normalize((r, -c) for r, c in cells)


def _generate(shape: Sequence[Offset], with_mirror: bool) -> Tuple[Orientation, ...]:
    seeds = [normalize(shape)]
    if with_mirror:
        seeds.append(mirror(shape))

    out: List[Orientation] = []
    for seed in seeds:
        current = seed
        for _ in range(4):
            if current not in out:
                out.append(current)
            current = rotate(current)
    return tuple(out)


@lru_cache(maxsize=None)
def _catalog(with_mirror: bool) -> Dict[str, Tuple[Orientation, ...]]:
    return {name: _generate(shape, with_mirror) for name, shape in BASE_SHAPES.items()}


def is_known_family(family: str) -> bool:
    return isinstance(family, str) and family.upper() in BASE_SHAPES


def orientations(family: str, mirror: Optional[bool] = None) -> Tuple[Orientation, ...]:
    """All distinct orientations of ``family`` in catalog order.

    Rotations of the canonical shape come first, then rotations of its
    mirror image when reflections are allowed (``CFG.ALLOW_MIRROR`` unless
    ``mirror`` is given). Raises ``KeyError`` for an unknown family.
    """
    with_mirror = CFG.ALLOW_MIRROR if mirror is None else bool(mirror)
    return _catalog(with_mirror)[family.upper()]


__all__ = [
    "BASE_SHAPES",
    "CELLS_PER_PIECE",
    "FAMILIES",
    "is_known_family",
    "mirror",
    "normalize",
    "orientations",
    "rotate",
]
