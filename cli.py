# cli.py: command line driver
import logging
import sys
import time

import click

from config import ENGINES
from demand_parser import iter_puzzle_files, parse_pieces
from models import INVALID_INPUT
from puzzles import PUZZLES
from render import render_pretty, render_text
from solver.orchestrator import solve, verify_tiling


class PositiveIntParamType(click.ParamType):
    name = "positive integer"

    def convert(self, value, param, ctx):
        if isinstance(value, int) and not isinstance(value, bool):
            number = value
        else:
            try:
                number = int(str(value).strip())
            except ValueError:
                self.fail(f"{value!r} is not a positive integer", param, ctx)
        if number <= 0:
            self.fail(f"{value!r} is not a positive integer", param, ctx)
        return number


POSITIVE_INT = PositiveIntParamType()


def _display(result, pretty: bool) -> str:
    if not result.ok:
        return "No solution\n"
    if pretty:
        return render_pretty(result.width, result.height, result.placements)
    return render_text(result.width, result.height, result.placements)


def _solve_options(engine, one_sided, timeout):
    return {
        "engine": engine,
        "mirror": False if one_sided else None,
        "max_seconds": timeout,
    }


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log solver details to stderr")
def main(verbose):
    """Tile rectangular boards with tetrominoes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
    )


@main.command("solve")
@click.argument("rows", type=POSITIVE_INT)
@click.argument("columns", type=POSITIVE_INT)
@click.argument("pieces")
@click.option("--pretty", is_flag=True, help="Print the solution with box drawing characters")
@click.option("--engine", type=click.Choice(ENGINES), default=None, help="Search engine (default from TT_ENGINE)")
@click.option("--one-sided", is_flag=True, help="Rotations only, no mirrored pieces")
@click.option("--timeout", type=float, default=None, help="Give up after this many seconds")
def solve_command(rows, columns, pieces, pretty, engine, one_sided, timeout):
    """Solve one puzzle, e.g. ``tiler solve 4 4 LLZZ``."""
    result = solve(columns, rows, parse_pieces(pieces), **_solve_options(engine, one_sided, timeout))
    if result.status == INVALID_INPUT:
        click.echo(f"error: {result.reason}", err=True)
        sys.exit(1)
    click.echo(_display(result, pretty), nl=False)
    if not result.ok and result.reason:
        logging.getLogger(__name__).info("%s", result.reason)


@main.command("batch")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--pretty", is_flag=True, help="Print solutions with box drawing characters")
@click.option("--engine", type=click.Choice(ENGINES), default=None)
@click.option("--one-sided", is_flag=True, help="Rotations only, no mirrored pieces")
@click.option("--timeout", type=float, default=None, help="Per-puzzle time limit in seconds")
def batch_command(paths, pretty, engine, one_sided, timeout):
    """Solve every puzzle line in the given files or directories."""
    failures = 0
    try:
        for path, lineno, puzzle in iter_puzzle_files(paths):
            result = solve(puzzle.cols, puzzle.rows, puzzle.pieces, **_solve_options(engine, one_sided, timeout))
            title = puzzle.label or f"{path}:{lineno}"
            click.echo(f"{title} ({puzzle.rows} x {puzzle.cols} {puzzle.pieces})")
            if result.status == INVALID_INPUT:
                click.echo(f"error: {result.reason}")
                failures += 1
            else:
                click.echo(_display(result, pretty))
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)
    if failures:
        sys.exit(1)


@main.command("benchmark")
@click.option("-q", "--quiet", is_flag=True, help="No output printed to stdout")
@click.option("--pretty", is_flag=True, help="Print solutions with box drawing characters")
@click.option("--engine", type=click.Choice(ENGINES), default=None)
def benchmark_command(quiet, pretty, engine):
    """Solve the built-in level set one-sided and check every tiling."""
    t0 = time.time()
    for puzzle in PUZZLES:
        result = solve(puzzle.cols, puzzle.rows, puzzle.pieces, engine=engine, mirror=False)
        ok, why = verify_tiling(result.width, result.height, result.placements, mirror=False)
        if not quiet:
            click.echo(puzzle.label)
            click.echo(_display(result, pretty))
        if not result.ok or not ok:
            click.echo(f"{puzzle.label}: incorrect solution ({why or result.reason})", err=True)
            sys.exit(1)
    if not quiet:
        click.echo(f"{len(PUZZLES)} puzzles in {time.time() - t0:.2f}s")


if __name__ == "__main__":
    main()
