from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

Offset = Tuple[int, int]
Orientation = Tuple[Offset, ...]

SOLVED = "solved"
NO_SOLUTION = "no_solution"
INVALID_INPUT = "invalid_input"
STOPPED = "stopped"


@dataclass(frozen=True)
class PieceInstance:
    family: str
    index: int


@dataclass(frozen=True)
class Placement:
    piece: PieceInstance
    orientation_index: int
    orientation: Orientation
    anchor: int
    cells: Tuple[int, ...]

    @property
    def family(self) -> str:
        return self.piece.family

    def rows_cols(self, width: int) -> List[Tuple[int, int]]:
        return [divmod(c, width) for c in self.cells]


@dataclass
class SolveResult:
    status: str
    width: int
    height: int
    pieces: Tuple[str, ...] = ()
    placements: List[Placement] = field(default_factory=list)
    reason: Optional[str] = None
    engine: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == SOLVED
