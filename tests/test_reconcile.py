from __future__ import annotations

import unittest

from vgsales_plot.aggregate import Series
from vgsales_plot.reconcile import (
    LegendItemEntity,
    LineEntity,
    PointEntity,
    Reconciler,
    build_target,
    diff_entities,
)
from vgsales_plot.visibility import VisibilityState


SERIES = (
    Series("Action", ((2001, 3.5), (2002, 1.0))),
    Series("Sports", ((2001, 0.5),)),
)
COLORS = {"Action": "#4e79a7", "Sports": "#f28e2c"}


def _visible(*hidden: str) -> VisibilityState:
    state = VisibilityState()
    state.initialize(s.genre for s in SERIES)
    for genre in hidden:
        state.toggle(genre)
    return state


class BuildTargetTests(unittest.TestCase):
    def test_visible_series_get_lines_points_and_legend(self) -> None:
        target = build_target(SERIES, _visible(), COLORS)
        self.assertEqual(
            set(target),
            {
                ("line", "Action"),
                ("point", "Action", 2001),
                ("point", "Action", 2002),
                ("legend", "Action"),
                ("line", "Sports"),
                ("point", "Sports", 2001),
                ("legend", "Sports"),
            },
        )
        self.assertEqual(target[("point", "Action", 2001)], PointEntity("Action", 2001, 3.5, "#4e79a7"))
        self.assertEqual(target[("line", "Sports")], LineEntity("Sports", "#f28e2c", ((2001, 0.5),)))

    def test_line_arrays_split_years_and_values(self) -> None:
        xs, ys = build_target(SERIES, _visible(), COLORS)[("line", "Action")].arrays()  # type: ignore[union-attr]
        self.assertEqual(xs.tolist(), [2001.0, 2002.0])
        self.assertEqual(ys.tolist(), [3.5, 1.0])
        empty_xs, empty_ys = LineEntity("Puzzle", "#888888", ()).arrays()
        self.assertEqual((empty_xs.size, empty_ys.size), (0, 0))

    def test_hidden_series_keeps_dimmed_legend_only(self) -> None:
        target = build_target(SERIES, _visible("Action"), COLORS, dimmed_opacity=0.3)
        self.assertNotIn(("line", "Action"), target)
        self.assertNotIn(("point", "Action", 2001), target)
        self.assertEqual(target[("legend", "Action")], LegendItemEntity("Action", "#4e79a7", 0.3, 0))
        self.assertEqual(target[("legend", "Sports")].opacity, 1.0)  # type: ignore[union-attr]

    def test_legend_slots_follow_series_order(self) -> None:
        target = build_target(SERIES, _visible(), COLORS)
        self.assertEqual(target[("legend", "Action")].slot, 0)  # type: ignore[union-attr]
        self.assertEqual(target[("legend", "Sports")].slot, 1)  # type: ignore[union-attr]


class DiffTests(unittest.TestCase):
    def test_first_pass_is_all_enter(self) -> None:
        target = build_target(SERIES, _visible(), COLORS)
        batch = diff_entities({}, target)
        self.assertEqual(batch.keys("enter"), set(target))
        self.assertEqual(batch.update, ())
        self.assertEqual(batch.exit, ())

    def test_sets_are_disjoint_and_cover_both_sides(self) -> None:
        previous = build_target(SERIES, _visible(), COLORS)
        changed = (Series("Action", ((2002, 2.0), (2003, 4.0))), Series("Puzzle", ((2003, 1.0),)))
        target = build_target(changed, _visible(), {**COLORS, "Puzzle": "#e15759"})
        batch = diff_entities(previous, target)
        enter, update, exit_ = batch.keys("enter"), batch.keys("update"), batch.keys("exit")
        self.assertFalse(enter & update or enter & exit_ or update & exit_)
        self.assertEqual(enter | update, set(target))
        self.assertEqual(update | exit_, set(previous))
        self.assertIn(("point", "Action", 2003), enter)
        self.assertIn(("point", "Action", 2001), exit_)
        self.assertIn(("line", "Sports"), exit_)
        self.assertIn(("legend", "Puzzle"), enter)

    def test_update_carries_new_attribute_values(self) -> None:
        previous = build_target(SERIES, _visible(), COLORS)
        target = build_target((Series("Action", ((2001, 9.0), (2002, 1.0))),) + SERIES[1:], _visible(), COLORS)
        batch = diff_entities(previous, target)
        updated = {e.key: e for e in batch.update}
        self.assertEqual(updated[("point", "Action", 2001)].value, 9.0)  # type: ignore[union-attr]


class ReconcilerTests(unittest.TestCase):
    def test_unchanged_target_only_updates(self) -> None:
        reconciler = Reconciler()
        target = build_target(SERIES, _visible(), COLORS)
        reconciler.reconcile(target)
        batch = reconciler.reconcile(target)
        self.assertEqual(batch.enter, ())
        self.assertEqual(batch.exit, ())
        self.assertEqual(batch.keys("update"), set(target))

    def test_hide_then_show_restores_same_keys(self) -> None:
        reconciler = Reconciler()
        state = _visible()
        reconciler.reconcile(build_target(SERIES, state, COLORS))
        original = set(reconciler.rendered)

        state.toggle("Action")
        hidden = reconciler.reconcile(build_target(SERIES, state, COLORS))
        self.assertEqual(hidden.keys("exit"), {("line", "Action"), ("point", "Action", 2001), ("point", "Action", 2002)})
        self.assertIn(("legend", "Action"), hidden.keys("update"))

        state.toggle("Action")
        shown = reconciler.reconcile(build_target(SERIES, state, COLORS))
        self.assertEqual(shown.keys("enter"), hidden.keys("exit"))
        self.assertEqual(set(reconciler.rendered), original)


if __name__ == "__main__":
    unittest.main()
