# demand_parser.py
import os
import re
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

_SEPARATORS_RE = re.compile(r"[\s,;+\-_/|]+")

# 4 4 LLZZ
_PLAIN_RE = re.compile(
    r"^\s*(?P<rows>\d+)\s*[x×,\s]\s*(?P<cols>\d+)\s*[,\s]\s*(?P<pieces>[A-Za-z][A-Za-z ,+]*?)\s*$",
)

# "Red", 3, 4, 4, "LLZZ"
_READER_RE = re.compile(
    r'^\s*"(?P<color>[^"]*)"\s*,\s*(?P<level>\d+)\s*,\s*(?P<rows>\d+)\s*,'
    r'\s*(?P<cols>\d+)\s*,\s*"(?P<pieces>[^"]*)"\s*,?\s*$',
)


class PuzzleLine(NamedTuple):
    rows: int
    cols: int
    pieces: str
    label: str = ""


def parse_pieces(text: Optional[str]) -> str:
    """Upper-cased piece letters with separators removed.

    ``"l, l z-z"`` becomes ``"LLZZ"``. Letters are not checked here; the
    orchestrator rejects unknown ones.
    """
    if not text:
        return ""
    return _SEPARATORS_RE.sub("", str(text)).upper()


def parse_puzzle_line(line: str) -> Optional[PuzzleLine]:
    """
    Parse one puzzle description.

    Accepts ``ROWS COLS PIECES`` (also ``ROWSxCOLS PIECES``) and the
    screenshot-reader form ``"color", level, ROWS, COLS, "PIECES"``.
    Blank lines and ``#`` comments give ``None``; anything else that does
    not match raises ``ValueError``.
    """
    s = (line or "").strip()
    if not s or s.startswith("#"):
        return None

    m = _READER_RE.match(s)
    if m:
        label = f"{m.group('color')} {m.group('level')}".strip()
        return PuzzleLine(int(m.group("rows")), int(m.group("cols")), parse_pieces(m.group("pieces")), label)

    m = _PLAIN_RE.match(s)
    if m:
        return PuzzleLine(int(m.group("rows")), int(m.group("cols")), parse_pieces(m.group("pieces")))

    raise ValueError(f"Bad puzzle line: {s!r}")


def _expand_paths(paths: Iterable[str]) -> List[str]:
    files: List[str] = []
    for raw in paths:
        if os.path.isdir(raw):
            for name in sorted(os.listdir(raw)):
                full = os.path.join(raw, name)
                if os.path.isfile(full):
                    files.append(full)
        else:
            files.append(raw)
    return files


def iter_puzzle_files(paths: Iterable[str]) -> Iterator[Tuple[str, int, PuzzleLine]]:
    """Yield ``(path, line_number, puzzle)`` for every puzzle in the files.

    Directories are expanded one level, in name order.
    """
    for path in _expand_paths(paths):
        with open(path, "r", encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                try:
                    puzzle = parse_puzzle_line(line)
                except ValueError as e:
                    raise ValueError(f"{path}:{lineno}: {e}") from e
                if puzzle is not None:
                    yield path, lineno, puzzle


__all__ = ["PuzzleLine", "iter_puzzle_files", "parse_pieces", "parse_puzzle_line"]
