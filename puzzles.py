# puzzles.py: built-in benchmark set (Sigils of Elohim levels, one-sided pieces)
from typing import List, NamedTuple


class Puzzle(NamedTuple):
    section: str
    color: str
    number: int
    rows: int
    cols: int
    pieces: str

    @property
    def label(self) -> str:
        return f"{self.section} {self.color} {self.number}"


PUZZLES: List[Puzzle] = [
    Puzzle("A", "cyan", 1, 4, 4, "LLZZ"),
    Puzzle("A", "cyan", 2, 4, 4, "IJLZ"),
    Puzzle("A", "cyan", 3, 5, 4, "ITTLZ"),
    Puzzle("A", "cyan", 4, 5, 4, "JLSZZ"),
    Puzzle("A", "cyan", 5, 4, 4, "ITTL"),
    Puzzle("A", "cyan", 6, 4, 5, "TTLSZ"),
    Puzzle("A", "cyan", 7, 5, 4, "TTJSZ"),
    Puzzle("A", "cyan", 8, 6, 4, "IOTTJZ"),
    Puzzle("A", "green", 1, 6, 4, "IOTTLZ"),
    Puzzle("A", "green", 2, 4, 7, "ITTJJLZ"),
    Puzzle("A", "green", 3, 6, 4, "IOSZJL"),
    Puzzle("A", "green", 4, 6, 6, "TIOTTOLTJ"),
    Puzzle("A", "green", 5, 6, 6, "OTTTTLLLL"),
    Puzzle("A", "green", 6, 8, 5, "IIIIJJLLSZ"),
    Puzzle("A", "green", 7, 8, 5, "IITTTTJLSZ"),
    Puzzle("A", "green", 8, 8, 6, "OOTTTTSSZZJL"),
    Puzzle("A", "yellow", 1, 6, 6, "IOOJLSSZZ"),
    Puzzle("A", "yellow", 2, 8, 6, "TTILLJJJOOZZ"),
    Puzzle("A", "yellow", 3, 4, 7, "LJZZTTI"),
    Puzzle("A", "yellow", 4, 5, 4, "LLJTT"),
    Puzzle("A", "yellow", 5, 5, 4, "LZSTT"),
    Puzzle("A", "yellow", 6, 6, 6, "IOOZZLLJJ"),
    Puzzle("A", "yellow", 7, 10, 4, "STTTTOOILL"),
    Puzzle("A", "yellow", 8, 8, 5, "ZZSTTIILLO"),
    Puzzle("A", "red", 1, 6, 6, "OOTTLLJIS"),
    Puzzle("A", "red", 2, 6, 6, "ZZZLLJJTT"),
    Puzzle("A", "red", 3, 5, 4, "IOOJJ"),
    Puzzle("A", "red", 4, 6, 8, "TTOOILLJJJSS"),
    Puzzle("A", "red", 5, 5, 4, "TTZLI"),
    Puzzle("A", "red", 6, 10, 4, "TTTTZZSIIJ"),
    Puzzle("A", "red", 7, 4, 7, "IITTZSL"),
    Puzzle("A", "red", 8, 6, 8, "ITTOOSZZZJJJ"),
    Puzzle("B", "cyan", 1, 4, 4, "OOLL"),
    Puzzle("B", "cyan", 2, 4, 5, "LLZZI"),
    Puzzle("B", "cyan", 3, 4, 5, "JJLLI"),
    Puzzle("B", "cyan", 4, 4, 6, "JLSTTI"),
    Puzzle("B", "cyan", 5, 4, 4, "IOLJ"),
    Puzzle("B", "cyan", 6, 5, 4, "TTZZL"),
    Puzzle("B", "cyan", 7, 6, 4, "JLSOII"),
    Puzzle("B", "cyan", 8, 4, 4, "ILJZ"),
    Puzzle("C", "cyan", 1, 4, 4, "SSJJ"),
    Puzzle("C", "cyan", 2, 4, 4, "TTLZ"),
    Puzzle("C", "cyan", 3, 5, 4, "JJLLO"),
    Puzzle("C", "cyan", 4, 8, 5, "TTZSSIIOLJ"),
    Puzzle("C", "cyan", 5, 7, 4, "IIITTJO"),
    Puzzle("C", "cyan", 6, 6, 6, "LLJJOOOOI"),
    Puzzle("C", "cyan", 7, 6, 6, "LLLLLLLLI"),
    Puzzle("C", "cyan", 8, 8, 5, "TSSTTISZTS"),
]

__all__ = ["PUZZLES", "Puzzle"]
