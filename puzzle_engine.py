from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Sequence

# 8 compass directions for placement (row delta, col delta)
DIR_VECTORS = {
    "E":  (0, 1),
    "W":  (0, -1),
    "N":  (-1, 0),
    "S":  (1, 0),
    "NE": (-1, 1),
    "SE": (1, 1),
    "SW": (1, -1),
    "NW": (-1, -1),
}

EMPTY = ""
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MAX_ATTEMPTS_PER_WORD = 150

_WORD_RE = re.compile(r"^[A-Z]+$")


# -----------------------------------------------------------------------------
# Simple logger hook
# -----------------------------------------------------------------------------
# app.py can call set_logger(my_ui_logger). If you do nothing, we print().
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    """Log to UI if available; otherwise print. Keep messages simple."""
    if _LOGGER:
        _LOGGER(msg)
        return
    print(msg)


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class PuzzleError(Exception):
    """Base class for everything the generator raises on purpose."""


class InvalidConfiguration(PuzzleError, ValueError):
    """Grid size is not a positive integer, or a word is not A-Z only."""


class EmptyWordList(PuzzleError, ValueError):
    """The input collector found no words to place."""


# -----------------------------------------------------------------------------
# Data shapes used across the app
# -----------------------------------------------------------------------------
Grid = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class PlacedWord:
    """One placed word with its path in the grid."""
    text: str
    start: Tuple[int, int]  # (row, col)
    direction: str
    cells: Tuple[Tuple[int, int], ...]  # all grid coordinates used


@dataclass(frozen=True)
class PuzzleResult:
    """
    The outcome of the generator. This is what the renderer needs.
    Both grids are independent values; nothing here is mutated after generate().
    """
    placed_words: List[str]          # A->Z, what the solver is asked to find
    puzzle_grid: Grid                # solution letters + random filler
    solution_grid: Grid              # placed letters only, EMPTY elsewhere
    placements: Tuple[PlacedWord, ...] = field(default_factory=tuple)

    @property
    def grid_size(self) -> int:
        return len(self.solution_grid)

    def solution_mask(self) -> List[List[bool]]:
        """True where a placed word letter sits."""
        return [[cell != EMPTY for cell in row] for row in self.solution_grid]


# -----------------------------------------------------------------------------
# Input collection (UI calls these)
# -----------------------------------------------------------------------------
def parse_word_list(text: str) -> List[str]:
    """
    One word per line. Trim, uppercase, drop blank lines.
    Duplicates are kept: the user asked for them.
    """
    if not text:
        return []
    words = []
    for line in text.splitlines():
        w = line.strip().upper()
        if w:
            words.append(w)
    return words


def _coerce_grid_size(grid_size) -> int:
    if isinstance(grid_size, bool):
        raise InvalidConfiguration(f"grid size must be a positive integer, got {grid_size!r}")
    if isinstance(grid_size, str):
        s = grid_size.strip()
        if not (s.isascii() and s.isdigit()):
            raise InvalidConfiguration(f"grid size must be a positive integer, got {grid_size!r}")
        grid_size = int(s)
    if not isinstance(grid_size, int) or grid_size <= 0:
        raise InvalidConfiguration(f"grid size must be a positive integer, got {grid_size!r}")
    return grid_size


def collect_request(text: str, grid_size) -> Tuple[List[str], int]:
    """
    Turn raw form input into (words, grid_size) for generate().
    Rejects an empty word list here; generate() itself accepts one.
    """
    size = _coerce_grid_size(grid_size)
    words = parse_word_list(text)
    if not words:
        raise EmptyWordList("Please enter at least one word.")
    return words, size


# -----------------------------------------------------------------------------
# Grid building
# -----------------------------------------------------------------------------
def _empty_grid(n: int) -> List[List[str]]:
    return [[EMPTY for _ in range(n)] for _ in range(n)]


def _can_place_word(grid, r, c, dr, dc, word):
    """Check bounds and compatibility (allow crossing on identical letters)."""
    n = len(grid)
    end_r = r + dr * (len(word) - 1)
    end_c = c + dc * (len(word) - 1)
    if end_r < 0 or end_r >= n or end_c < 0 or end_c >= n:
        return False

    rr, cc = r, c
    for ch in word:
        cell = grid[rr][cc]
        if cell != EMPTY and cell != ch:
            return False
        rr += dr
        cc += dc
    return True


def _place_one_word(grid, r, c, dr, dc, word) -> Tuple[Tuple[int, int], ...]:
    """Write the word on the grid; return the cells used."""
    cells = []
    rr, cc = r, c
    for ch in word:
        grid[rr][cc] = ch
        cells.append((rr, cc))
        rr += dr
        cc += dc
    return tuple(cells)


def _try_place(grid, word: str, rng, max_attempts: int) -> Optional[PlacedWord]:
    """
    Rejection sampling: random direction, random start, keep the first legal one.
    Returns None once the attempt budget is spent.
    """
    n = len(grid)
    dir_names = list(DIR_VECTORS)
    for _ in range(max_attempts):
        d = rng.choice(dir_names)
        dr, dc = DIR_VECTORS[d]
        r = rng.randrange(n)
        c = rng.randrange(n)
        if not _can_place_word(grid, r, c, dr, dc, word):
            continue
        cells = _place_one_word(grid, r, c, dr, dc, word)
        return PlacedWord(text=word, start=(r, c), direction=d, cells=cells)
    return None


def _rand_letter(rng) -> str:
    # Uppercase A–Z
    return ALPHABET[rng.randrange(len(ALPHABET))]


def fill_grid(solution: Grid, rng) -> Grid:
    """
    Build the display grid: copy of the solution with EMPTY cells
    replaced by random letters (row-major, one rng draw per empty cell).
    """
    out = []
    for row in solution:
        out.append(tuple(cell if cell != EMPTY else _rand_letter(rng) for cell in row))
    return tuple(out)


def _validate(words: Sequence[str], grid_size) -> None:
    if isinstance(grid_size, bool) or not isinstance(grid_size, int) or grid_size <= 0:
        raise InvalidConfiguration(f"grid size must be a positive integer, got {grid_size!r}")
    for w in words:
        if not isinstance(w, str) or not _WORD_RE.match(w):
            raise InvalidConfiguration(f"words must be uppercase letters A-Z only, got {w!r}")


# ---------------------------------------------------------------------------
# High-level API
# ---------------------------------------------------------------------------
def generate(
    words: Sequence[str],
    grid_size: int,
    rng: Optional[random.Random] = None,
    *,
    max_attempts_per_word: int = MAX_ATTEMPTS_PER_WORD,
) -> PuzzleResult:
    """
    Orchestrator:
      - validate inputs (fail fast, nothing partial is returned)
      - place longest words first (stable: equal lengths keep input order)
      - fill empty cells of a separate display grid with random letters
      - report placed words A->Z; anything missing simply did not fit

    Pass a seeded random.Random as rng for repeatable output.
    """
    _validate(words, grid_size)
    _rng = rng if rng is not None else random.Random()

    grid = _empty_grid(grid_size)
    placements: List[PlacedWord] = []

    for word in sorted(words, key=len, reverse=True):
        pw = _try_place(grid, word, _rng, max_attempts_per_word)
        if pw is None:
            _log(f"place: could not place '{word}' in {grid_size}x{grid_size} "
                 f"after {max_attempts_per_word} attempts, skipping it")
            continue
        placements.append(pw)

    solution = tuple(tuple(row) for row in grid)
    letters = fill_grid(solution, _rng)

    _log(f"generate: placed {len(placements)} of {len(words)} words in {grid_size}x{grid_size}")
    return PuzzleResult(
        placed_words=sorted(pw.text for pw in placements),
        puzzle_grid=letters,
        solution_grid=solution,
        placements=tuple(placements),
    )


def unplaced_words(words: Sequence[str], result: PuzzleResult) -> List[str]:
    """Requested words that are missing from the result, in request order."""
    placed = set(result.placed_words)
    return [w for w in words if w not in placed]


def placement_note(words: Sequence[str], result: PuzzleResult) -> str:
    """One-line message the UI shows under the puzzle."""
    missing = unplaced_words(words, result)
    if missing:
        return f"Note: Could not place the following words: {', '.join(missing)}"
    return "All words placed successfully!"


def render_preview_ascii(result: PuzzleResult, solution: bool = False) -> str:
    """
    Simple ASCII for quick debugging.
    """
    grid = result.solution_grid if solution else result.puzzle_grid
    lines = []
    for row in grid:
        lines.append(" ".join(ch if ch else "." for ch in row))
    return "\n".join(lines)
