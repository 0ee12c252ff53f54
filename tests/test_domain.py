from __future__ import annotations

import unittest

from vgsales_plot.aggregate import Series
from vgsales_plot.config import TABLEAU_10
from vgsales_plot.domain import ColorAssignment, compute_domains


class DomainTests(unittest.TestCase):
    def test_domains_span_all_series(self) -> None:
        series = [
            Series("Action", ((2001, 3.5), (2004, 1.0))),
            Series("Racing", ((2000, 0.5), (2009, 7.25))),
        ]
        domains = compute_domains(series)
        self.assertEqual(domains.years, (2000, 2009))
        self.assertEqual(domains.values, (0.0, 7.25))

    def test_empty_series_floor_value_axis(self) -> None:
        domains = compute_domains([])
        self.assertIsNone(domains.years)
        self.assertEqual(domains.values, (0.0, 1.0))

    def test_all_zero_values_floor_value_axis(self) -> None:
        domains = compute_domains([Series("Sports", ((2004, 0.0), (2005, 0.0)))])
        self.assertEqual(domains.years, (2004, 2005))
        self.assertEqual(domains.values, (0.0, 1.0))

    def test_small_positive_max_is_kept(self) -> None:
        domains = compute_domains([Series("Puzzle", ((2003, 0.25),))])
        self.assertEqual(domains.values, (0.0, 0.25))


class ColorAssignmentTests(unittest.TestCase):
    def test_assigns_palette_in_first_seen_order(self) -> None:
        colors = ColorAssignment()
        out = colors.assign(["Action", "Sports", "Racing"])
        self.assertEqual(out, {"Action": TABLEAU_10[0], "Sports": TABLEAU_10[1], "Racing": TABLEAU_10[2]})

    def test_rerun_with_same_genres_keeps_colors(self) -> None:
        colors = ColorAssignment()
        first = colors.assign(["Action", "Sports"])
        second = colors.assign(["Action", "Sports"])
        self.assertEqual(first, second)

    def test_vanished_genre_keeps_color_and_new_genre_gets_next(self) -> None:
        colors = ColorAssignment()
        colors.assign(["Action", "Sports"])
        out = colors.assign(["Sports", "Puzzle"])
        self.assertEqual(out["Action"], TABLEAU_10[0])
        self.assertEqual(out["Sports"], TABLEAU_10[1])
        self.assertEqual(out["Puzzle"], TABLEAU_10[2])

    def test_palette_wraps_when_exhausted(self) -> None:
        colors = ColorAssignment(palette=("#000000", "#ffffff"))
        out = colors.assign(["a", "b", "c"])
        self.assertEqual(out["c"], "#000000")
        self.assertEqual(len(colors), 3)

    def test_reset_starts_over(self) -> None:
        colors = ColorAssignment()
        colors.assign(["Action", "Sports"])
        colors.reset()
        self.assertIsNone(colors.color_of("Action"))
        self.assertEqual(colors.assign(["Sports"]), {"Sports": TABLEAU_10[0]})

    def test_empty_palette_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ColorAssignment(palette=())


if __name__ == "__main__":
    unittest.main()
