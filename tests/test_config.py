from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from vgsales_plot.config import DEFAULT_CONFIG, DEFAULT_REGIONS, ChartConfig, load_chart_config, validate_chart_config
from vgsales_plot.errors import ConfigError


class ChartConfigTests(unittest.TestCase):
    def test_defaults_match_chart_geometry(self) -> None:
        self.assertEqual(DEFAULT_CONFIG.regions, DEFAULT_REGIONS)
        self.assertEqual(DEFAULT_CONFIG.default_region, "Global_Sales")
        self.assertEqual(DEFAULT_CONFIG.plot_rect, (60, 28, 850, 488))
        self.assertEqual(len(DEFAULT_CONFIG.palette), 10)

    def test_no_overrides_returns_defaults(self) -> None:
        self.assertEqual(validate_chart_config(), ChartConfig())

    def test_overrides_are_merged(self) -> None:
        config = validate_chart_config({"dimmed_opacity": 0.4, "palette": ["#000000", "#ffffff"], "min_year": 1995})
        self.assertEqual(config.dimmed_opacity, 0.4)
        self.assertEqual(config.palette, ("#000000", "#ffffff"))
        self.assertEqual(config.min_year, 1995)

    def test_invalid_values_rejected(self) -> None:
        bad = [
            {"unknown_key": 1},
            {"regions": []},
            {"regions": "Global_Sales"},
            {"default_region": "Mars_Sales"},
            {"palette": ["red"]},
            {"dimmed_opacity": 1.5},
            {"width": 0},
            {"margin_left": -1},
            {"width": 200, "margin_left": 150, "margin_right": 60},
            {"year_column": ""},
        ]
        for overrides in bad:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ConfigError):
                    validate_chart_config(overrides)

    def test_config_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            validate_chart_config({"dimmed_opacity": -0.1})

    def test_load_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                '[chart]\nregions = ["NA_Sales", "EU_Sales"]\ndefault_region = "EU_Sales"\nwidth = 900\n',
                encoding="utf-8",
            )
            config = load_chart_config(path)
        self.assertEqual(config.regions, ("NA_Sales", "EU_Sales"))
        self.assertEqual(config.default_region, "EU_Sales")
        self.assertEqual(config.width, 900)

    def test_missing_toml_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config(Path(tempfile.gettempdir()) / "no-such-chart.toml")


if __name__ == "__main__":
    unittest.main()
