import dataclasses
import random
from unittest import TestCase

import puzzle_engine as eng
from puzzle_engine import (
    DIR_VECTORS, EMPTY, ALPHABET,
    InvalidConfiguration, EmptyWordList,
    generate, collect_request, parse_word_list,
    unplaced_words, placement_note, render_preview_ascii,
)


class ScriptedRandom(random.Random):
    """Hands out scripted directions/coordinates first, then behaves like a seeded Random."""

    def __init__(self, directions=(), coords=()):
        super().__init__(0)
        self._directions = list(directions)
        self._coords = list(coords)

    def choice(self, seq):
        if self._directions:
            d = self._directions.pop(0)
            assert d in seq
            return d
        return super().choice(seq)

    def randrange(self, start, stop=None, step=1):
        if self._coords:
            return self._coords.pop(0)
        return super().randrange(start, stop, step)


class _QuietLog(TestCase):

    def setUp(self):
        self.log_lines = []
        eng.set_logger(self.log_lines.append)

    def tearDown(self):
        eng.set_logger(None)


def _row(grid, r):
    return "".join(ch if ch else "_" for ch in grid[r])


def _walk(grid, pw):
    dr, dc = DIR_VECTORS[pw.direction]
    r, c = pw.start
    return "".join(grid[r + i * dr][c + i * dc] for i in range(len(pw.text)))


class GenerateScenarioTest(_QuietLog):

    def test_scripted_cat_dog(self):
        rng = ScriptedRandom(directions=["E", "E"], coords=[0, 0, 1, 0])
        result = generate(["CAT", "DOG"], 4, rng)
        self.assertEqual("CAT_", _row(result.solution_grid, 0))
        self.assertEqual("DOG_", _row(result.solution_grid, 1))
        self.assertEqual("____", _row(result.solution_grid, 2))
        self.assertEqual(["CAT", "DOG"], result.placed_words)
        self.assertEqual("CAT", "".join(result.puzzle_grid[0][:3]))
        self.assertEqual("DOG", "".join(result.puzzle_grid[1][:3]))

    def test_word_longer_than_grid(self):
        result = generate(["SUPERCALIFRAGILISTIC"], 5, random.Random(1))
        self.assertEqual([], result.placed_words)
        self.assertEqual((), result.placements)
        for row in result.solution_grid:
            self.assertTrue(all(cell == EMPTY for cell in row))
        for row in result.puzzle_grid:
            self.assertTrue(all(cell in ALPHABET for cell in row))
        self.assertTrue(any("SUPERCALIFRAGILISTIC" in line for line in self.log_lines))

    def test_empty_word_list(self):
        result = generate([], 10, random.Random(2))
        self.assertEqual([], result.placed_words)
        self.assertEqual(10, len(result.puzzle_grid))
        for row in result.puzzle_grid:
            self.assertEqual(10, len(row))
            self.assertTrue(all(len(cell) == 1 and cell in ALPHABET for cell in row))

    def test_out_of_bounds_trial_is_skipped(self):
        # first trial runs off the east edge, second one fits
        rng = ScriptedRandom(directions=["E", "S"], coords=[0, 2, 0, 0])
        result = generate(["CAT"], 3, rng)
        self.assertEqual(["CAT"], result.placed_words)
        pw = result.placements[0]
        self.assertEqual("S", pw.direction)
        self.assertEqual((0, 0), pw.start)
        self.assertEqual(((0, 0), (1, 0), (2, 0)), pw.cells)

    def test_longest_word_goes_first(self):
        rng = ScriptedRandom(directions=["E", "E"], coords=[0, 0, 1, 0])
        result = generate(["AB", "XYZ"], 3, rng)
        self.assertEqual("XYZ", _row(result.solution_grid, 0))
        self.assertEqual("AB_", _row(result.solution_grid, 1))
        self.assertEqual(["AB", "XYZ"], result.placed_words)

    def test_equal_lengths_keep_input_order(self):
        rng = ScriptedRandom(directions=["E", "E"], coords=[0, 0, 1, 0])
        result = generate(["DOG", "CAT"], 3, rng)
        self.assertEqual("DOG", _row(result.solution_grid, 0))
        self.assertEqual("CAT", _row(result.solution_grid, 1))
        self.assertEqual(["CAT", "DOG"], result.placed_words)

    def test_crossing_on_same_letter(self):
        rng = ScriptedRandom(directions=["E", "S"], coords=[0, 0, 0, 0])
        result = generate(["CAT", "COW"], 3, rng)
        self.assertEqual(["CAT", "COW"], result.placed_words)
        self.assertEqual("CAT", _row(result.solution_grid, 0))
        self.assertEqual("O__", _row(result.solution_grid, 1))
        self.assertEqual("W__", _row(result.solution_grid, 2))

    def test_conflicting_letter_rejected(self):
        result = generate(["A", "B"], 1, random.Random(3))
        self.assertEqual(["A"], result.placed_words)
        self.assertEqual((("A",),), result.solution_grid)
        self.assertEqual(["B"], unplaced_words(["A", "B"], result))

    def test_duplicates_are_kept(self):
        result = generate(["A", "A"], 1, random.Random(4))
        self.assertEqual(["A", "A"], result.placed_words)

    def test_attempt_budget(self):
        calls = []

        class CountingRandom(random.Random):
            def choice(self, seq):
                calls.append(1)
                return super().choice(seq)

        generate(["TOOLONG"], 3, CountingRandom(5))
        self.assertEqual(eng.MAX_ATTEMPTS_PER_WORD, len(calls))


class GenerateInvariantTest(_QuietLog):

    WORDS = ["PYTHON", "SNAKE", "GRID", "WORD", "SEARCH", "LETTER", "RANDOM", "CELL", "ROW", "COLUMN"]

    def test_same_seed_same_puzzle(self):
        a = generate(self.WORDS, 12, random.Random(42))
        b = generate(self.WORDS, 12, random.Random(42))
        self.assertEqual(a.puzzle_grid, b.puzzle_grid)
        self.assertEqual(a.solution_grid, b.solution_grid)
        self.assertEqual(a.placed_words, b.placed_words)
        self.assertEqual(a.placements, b.placements)

    def test_invariants_over_many_seeds(self):
        for seed in range(25):
            size = 5 + seed % 8
            result = generate(self.WORDS, size, random.Random(seed))
            self.assertEqual(size, result.grid_size)
            self.assertEqual(size, len(result.puzzle_grid))
            for r in range(size):
                self.assertEqual(size, len(result.solution_grid[r]))
                self.assertEqual(size, len(result.puzzle_grid[r]))
                for c in range(size):
                    sol = result.solution_grid[r][c]
                    shown = result.puzzle_grid[r][c]
                    self.assertTrue(sol == EMPTY or (len(sol) == 1 and sol in ALPHABET))
                    self.assertTrue(len(shown) == 1 and shown in ALPHABET)
                    if sol != EMPTY:
                        self.assertEqual(sol, shown)
            for pw in result.placements:
                self.assertEqual(pw.text, _walk(result.solution_grid, pw))
            self.assertEqual(sorted(result.placed_words), result.placed_words)
            self.assertTrue(set(result.placed_words) <= set(self.WORDS))
            self.assertEqual(len(set(result.placed_words)), len(result.placed_words))
            too_long = [w for w in self.WORDS if len(w) > size]
            for w in too_long:
                self.assertNotIn(w, result.placed_words)

    def test_solution_mask_matches_grid(self):
        result = generate(["CAT", "DOG"], 6, random.Random(7))
        mask = result.solution_mask()
        cells = {cell for pw in result.placements for cell in pw.cells}
        for r in range(6):
            for c in range(6):
                self.assertEqual((r, c) in cells, mask[r][c])

    def test_result_is_frozen(self):
        result = generate(["CAT"], 4, random.Random(8))
        self.assertIsInstance(result.solution_grid, tuple)
        self.assertIsInstance(result.puzzle_grid[0], tuple)
        self.assertIsNot(result.solution_grid, result.puzzle_grid)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.placed_words = []

    def test_fresh_rng_when_none_given(self):
        result = generate(["CAT"], 5)
        self.assertEqual(5, result.grid_size)


class ValidationTest(_QuietLog):

    def test_bad_grid_size(self):
        for size in (0, -3, True, 2.5, "5", None):
            with self.subTest(size=size):
                with self.assertRaises(InvalidConfiguration):
                    generate(["CAT"], size)

    def test_bad_words(self):
        for word in ("cat", "ICE CREAM", "", "R2D2", None):
            with self.subTest(word=word):
                with self.assertRaises(InvalidConfiguration):
                    generate([word], 5)

    def test_invalid_configuration_is_value_error(self):
        self.assertTrue(issubclass(InvalidConfiguration, ValueError))
        self.assertTrue(issubclass(EmptyWordList, eng.PuzzleError))


class InputCollectorTest(TestCase):

    def test_parse_word_list(self):
        self.assertListEqual(["CAT", "DOG", "CAT"], parse_word_list("  cat\n\n Dog \r\ncat\n   \n"))
        self.assertListEqual([], parse_word_list(""))

    def test_collect_request(self):
        words, size = collect_request("cat\ndog", "12")
        self.assertListEqual(["CAT", "DOG"], words)
        self.assertEqual(12, size)
        self.assertEqual(("CAT",), tuple(collect_request("cat", 7)[0]))

    def test_collect_request_rejects_empty(self):
        with self.assertRaises(EmptyWordList):
            collect_request("\n  \n", 10)

    def test_collect_request_rejects_bad_size(self):
        for size in ("abc", "0", 0, -1, False, "", "²", "١٢"):
            with self.subTest(size=size):
                with self.assertRaises(InvalidConfiguration):
                    collect_request("cat", size)


class ReportingTest(_QuietLog):

    def test_placement_note(self):
        rng = ScriptedRandom(directions=["E", "E"], coords=[0, 0, 1, 0])
        result = generate(["CAT", "DOG"], 4, rng)
        self.assertEqual("All words placed successfully!", placement_note(["CAT", "DOG"], result))

        result = generate(["CAT", "HIPPOPOTAMUS", "ELEPHANTINE"], 4, random.Random(9))
        self.assertEqual(["HIPPOPOTAMUS", "ELEPHANTINE"],
                         unplaced_words(["CAT", "HIPPOPOTAMUS", "ELEPHANTINE"], result))
        self.assertEqual("Note: Could not place the following words: HIPPOPOTAMUS, ELEPHANTINE",
                         placement_note(["CAT", "HIPPOPOTAMUS", "ELEPHANTINE"], result))

    def test_render_preview_ascii(self):
        rng = ScriptedRandom(directions=["E"], coords=[0, 0])
        result = generate(["HI"], 2, rng)
        lines = render_preview_ascii(result, solution=True).splitlines()
        self.assertListEqual(["H I", ". ."], lines)
        shown = render_preview_ascii(result).splitlines()
        self.assertEqual("H I", shown[0])
        self.assertEqual(3, len(shown[1]))

    def test_logger_hook(self):
        generate([], 2, random.Random(10))
        self.assertTrue(any(line.startswith("generate:") for line in self.log_lines))
