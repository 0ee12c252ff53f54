from __future__ import annotations

from pathlib import Path
import tempfile
import threading
import unittest

import pandas as pd

from vgsales_plot.adapters import BackgroundLoader, CsvDataSource, RecordsDataSource
from vgsales_plot.controller import InteractionController
from vgsales_plot.errors import LoadError


CSV_TEXT = (
    "Rank,Name,Platform,Year,Genre,Publisher,NA_Sales,EU_Sales,JP_Sales,Other_Sales,Global_Sales\n"
    "1,Wii Sports,Wii,2006,Sports,Nintendo,41.49,29.02,3.77,8.46,82.74\n"
    "2,Some Game,PS2,N/A,Action,Acme,1.0,1.0,1.0,1.0,4.0\n"
    "3,Other Game,PC,2010,,Acme,NA,0.5,0,0.1,0.6\n"
)


class _GatedSource:
    def __init__(self, rows: list[dict[str, str]], gate: threading.Event | None = None, error: Exception | None = None) -> None:
        self._rows = rows
        self._gate = gate
        self._error = error

    def fetch(self) -> list[dict[str, str]]:
        if self._gate is not None:
            self._gate.wait(timeout=5.0)
        if self._error is not None:
            raise self._error
        return list(self._rows)


class CsvDataSourceTests(unittest.TestCase):
    def test_reads_cells_as_raw_strings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vgsales.csv"
            path.write_text(CSV_TEXT, encoding="utf-8")
            rows = CsvDataSource(path).fetch()
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0]["Year"], "2006")
        self.assertEqual(rows[1]["Year"], "N/A")
        self.assertEqual(rows[2]["Genre"], "")
        self.assertEqual(rows[2]["NA_Sales"], "NA")

    def test_csv_rows_feed_the_pipeline(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "vgsales.csv"
            path.write_text(CSV_TEXT, encoding="utf-8")
            controller = InteractionController()
            controller.load(CsvDataSource(path))
        by_genre = {s.genre: s.points for s in controller.series}
        self.assertEqual(by_genre, {"Sports": ((2006, 82.74),), "Unknown": ((2010, 0.6),)})

    def test_missing_file_is_load_error(self) -> None:
        with self.assertRaises(LoadError):
            CsvDataSource(Path(tempfile.gettempdir()) / "does-not-exist-vgsales.csv").fetch()

    def test_missing_required_columns_is_load_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.csv"
            path.write_text("Name,Year\nA,2001\n", encoding="utf-8")
            with self.assertRaises(LoadError):
                CsvDataSource(path).fetch()

    def test_empty_file_is_load_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.csv"
            path.write_text("", encoding="utf-8")
            with self.assertRaises(LoadError):
                CsvDataSource(path).fetch()


class RecordsDataSourceTests(unittest.TestCase):
    def test_accepts_dataframe(self) -> None:
        frame = pd.DataFrame({"Year": ["2001"], "Genre": ["Action"], "Platform": ["PS2"], "Global_Sales": ["1.5"]})
        rows = RecordsDataSource(frame).fetch()
        self.assertEqual(rows, [{"Year": "2001", "Genre": "Action", "Platform": "PS2", "Global_Sales": "1.5"}])

    def test_fetch_returns_copies(self) -> None:
        source = RecordsDataSource([{"Year": "2001"}])
        source.fetch().clear()
        self.assertEqual(len(source.fetch()), 1)


class BackgroundLoaderTests(unittest.TestCase):
    def test_slow_earlier_load_does_not_overwrite_newer(self) -> None:
        controller = InteractionController()
        loader = BackgroundLoader()
        gate = threading.Event()
        slow_rows = [{"Year": "2001", "Genre": "Old", "Platform": "PC", "Global_Sales": "1"}]
        new_rows = [{"Year": "2002", "Genre": "New", "Platform": "PC", "Global_Sales": "1"}]

        slow_id = loader.submit(controller, _GatedSource(slow_rows, gate=gate))
        new_id = loader.submit(controller, _GatedSource(new_rows))
        self.assertGreater(new_id, slow_id)
        gate.set()
        loader.join(timeout=5.0)

        self.assertEqual(loader.pending_count(), 2)
        self.assertEqual(loader.pump(controller), 2)
        self.assertEqual([s.genre for s in controller.series], ["New"])

    def test_failure_is_recorded_and_chart_kept(self) -> None:
        controller = InteractionController()
        controller.replace_data([{"Year": "2005", "Genre": "Action", "Platform": "PC", "Global_Sales": "1"}])
        loader = BackgroundLoader()
        loader.submit(controller, _GatedSource([], error=LoadError("disk gone")))
        loader.join(timeout=5.0)
        loader.pump(controller)
        self.assertIsInstance(controller.last_error, LoadError)
        self.assertEqual([s.genre for s in controller.series], ["Action"])

    def test_unexpected_worker_error_becomes_load_error(self) -> None:
        controller = InteractionController()
        loader = BackgroundLoader()
        loader.submit(controller, _GatedSource([], error=RuntimeError("bad parser")))
        loader.join(timeout=5.0)
        completions = loader.poll_completions()
        self.assertEqual(len(completions), 1)
        self.assertIsInstance(completions[0].error, LoadError)

    def test_poll_completions_validates_limit(self) -> None:
        with self.assertRaises(ValueError):
            BackgroundLoader().poll_completions(0)


if __name__ == "__main__":
    unittest.main()
