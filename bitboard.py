"""Bitboard occupancy for a W x H board.

Cells are indexed row-major (``index = row * width + col``) and bit ``i`` of
``bits`` is set when cell ``i`` is occupied. Python integers have arbitrary
width, so the same representation covers boards larger than one machine
word.
"""

from __future__ import annotations

from typing import Iterable, Optional


class OccupancyError(RuntimeError):
    """Raised when a placement would overlap or a release would free empty cells."""


class BitBoard:
    __slots__ = ("width", "height", "size", "full", "bits")

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"board must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.size = width * height
        self.full = (1 << self.size) - 1
        self.bits = 0

    # ---- cell helpers ----

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < self.size

    def mask_of(self, cells: Iterable[int]) -> int:
        mask = 0
        for cell in cells:
            mask |= 1 << cell
        return mask

    # ---- set-level contract ----

    def is_free(self, cells: Iterable[int]) -> bool:
        cells = tuple(cells)
        if not all(self.in_bounds(c) for c in cells):
            return False
        return self.fits(self.mask_of(cells))

    def occupy(self, cells: Iterable[int]) -> None:
        cells = tuple(cells)
        if not all(self.in_bounds(c) for c in cells):
            raise OccupancyError(f"cells out of bounds: {cells}")
        self.occupy_mask(self.mask_of(cells))

    def release(self, cells: Iterable[int]) -> None:
        self.release_mask(self.mask_of(cells))

    def lowest_open_cell(self) -> Optional[int]:
        """Smallest unoccupied index, or ``None`` once the board is full."""
        if self.bits == self.full:
            return None
        lowest_zero = ~self.bits & (self.bits + 1)
        return lowest_zero.bit_length() - 1

    def is_complete(self) -> bool:
        return self.bits == self.full

    # ---- mask-level operations (hot path) ----

    def fits(self, mask: int) -> bool:
        return not (self.bits & mask) and not (mask & ~self.full)

    def occupy_mask(self, mask: int) -> None:
        if self.bits & mask:
            raise OccupancyError("placement overlaps occupied cells")
        self.bits |= mask

    def release_mask(self, mask: int) -> None:
        if self.bits & mask != mask:
            raise OccupancyError("release of cells that are not occupied")
        self.bits &= ~mask

    def occupied_count(self) -> int:
        return bin(self.bits).count("1")

    def __repr__(self) -> str:
        return f"BitBoard({self.width}x{self.height}, occupied={self.occupied_count()})"


__all__ = ["BitBoard", "OccupancyError"]
