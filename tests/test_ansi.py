"""Regression tests for ANSI-aware width math.

Table cells and modal borders depend on escape sequences costing zero
columns and wide characters costing two.
"""

import unittest

from kmipexplorer import ansi as ansi_mod


class DisplayWidthTests(unittest.TestCase):
    def test_escape_sequences_cost_nothing(self) -> None:
        self.assertEqual(ansi_mod.display_width("\033[1;31mabc\033[0m"), 3)

    def test_wide_and_combining_characters(self) -> None:
        self.assertEqual(ansi_mod.display_width("鍵"), 2)
        self.assertEqual(ansi_mod.display_width("é"), 1)

    def test_tab_expands_to_next_stop(self) -> None:
        self.assertEqual(ansi_mod.display_width("ab\tc"), 9)


class LineFittingTests(unittest.TestCase):
    def test_fit_pads_short_lines(self) -> None:
        self.assertEqual(ansi_mod.fit_ansi_line("ab", 4), "ab  ")

    def test_fit_clips_but_keeps_styles(self) -> None:
        fitted = ansi_mod.fit_ansi_line("\033[32mabcdef\033[0m", 3)

        self.assertEqual(ansi_mod.strip_ansi(fitted), "abc")
        self.assertTrue(fitted.startswith("\033[32m"))

    def test_wide_character_is_not_split(self) -> None:
        self.assertEqual(ansi_mod.fit_ansi_line("a鍵", 2), "a ")


class FitCellTests(unittest.TestCase):
    def test_truncation_marks_with_ellipsis(self) -> None:
        self.assertEqual(ansi_mod.fit_cell("payments-key", 6), "payme…")

    def test_exact_and_degenerate_widths(self) -> None:
        self.assertEqual(ansi_mod.fit_cell("abc", 3), "abc")
        self.assertEqual(ansi_mod.fit_cell("abc", 1), "…")
        self.assertEqual(ansi_mod.fit_cell("abc", 0), "")


if __name__ == "__main__":
    unittest.main()
