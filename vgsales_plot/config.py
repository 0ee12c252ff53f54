from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from vgsales_plot.errors import ConfigError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

DEFAULT_REGIONS = ("NA_Sales", "EU_Sales", "JP_Sales", "Other_Sales", "Global_Sales")

# d3.schemeTableau10
TABLEAU_10 = (
    "#4e79a7",
    "#f28e2c",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc949",
    "#af7aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ab",
)


@dataclass(frozen=True)
class ChartConfig:
    """Columns, palette and geometry of the genre sales chart."""

    regions: tuple[str, ...] = DEFAULT_REGIONS
    default_region: str = "Global_Sales"
    year_column: str = "Year"
    genre_column: str = "Genre"
    platform_column: str = "Platform"
    min_year: int = 2000
    palette: tuple[str, ...] = TABLEAU_10
    dimmed_opacity: float = 0.25
    width: int = 1100
    height: int = 560
    margin_top: int = 28
    margin_right: int = 190
    margin_bottom: int = 44
    margin_left: int = 60
    line_width: int = 2
    marker_radius: int = 3
    legend_row_px: int = 18
    x_label: str = "Year"
    y_label: str = "Sales (millions)"
    background: str = "#ffffff"
    foreground: str = "#333333"

    @property
    def plot_rect(self) -> tuple[int, int, int, int]:
        return (
            self.margin_left,
            self.margin_top,
            self.width - self.margin_left - self.margin_right,
            self.height - self.margin_top - self.margin_bottom,
        )


DEFAULT_CONFIG = ChartConfig()


def validate_chart_config(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Merge overrides over the defaults and validate the result."""

    raw: dict[str, Any] = asdict(DEFAULT_CONFIG)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ConfigError(f"Unknown chart setting: {key}")
            raw[key] = value

    regions = _coerce_string_tuple(raw["regions"], "regions")
    if not regions:
        raise ConfigError("`regions` must list at least one column")
    default_region = str(raw["default_region"])
    if default_region not in regions:
        raise ConfigError(f"`default_region` must be one of {list(regions)}")

    for key in ("year_column", "genre_column", "platform_column", "x_label", "y_label"):
        if not isinstance(raw[key], str) or not raw[key].strip():
            raise ConfigError(f"`{key}` must be a non-empty string")

    palette = _coerce_string_tuple(raw["palette"], "palette")
    if not palette:
        raise ConfigError("`palette` must contain at least one color")
    for key, value in [("palette", c) for c in palette] + [("background", raw["background"]), ("foreground", raw["foreground"])]:
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            raise ConfigError(f"`{key}` colors must be hex (#RRGGBB or #RRGGBBAA), got {value!r}")

    opacity = raw["dimmed_opacity"]
    if not isinstance(opacity, (int, float)) or not 0.0 <= float(opacity) <= 1.0:
        raise ConfigError("`dimmed_opacity` must be within [0, 1]")

    for key in ("min_year", "width", "height", "line_width", "marker_radius", "legend_row_px"):
        if not isinstance(raw[key], int) or isinstance(raw[key], bool):
            raise ConfigError(f"`{key}` must be an integer")
    for key in ("width", "height", "line_width", "legend_row_px"):
        if raw[key] <= 0:
            raise ConfigError(f"`{key}` must be > 0")
    for key in ("margin_top", "margin_right", "margin_bottom", "margin_left", "marker_radius"):
        if not isinstance(raw[key], int) or raw[key] < 0:
            raise ConfigError(f"`{key}` must be a non-negative integer")

    config = ChartConfig(
        regions=regions,
        default_region=default_region,
        year_column=str(raw["year_column"]),
        genre_column=str(raw["genre_column"]),
        platform_column=str(raw["platform_column"]),
        min_year=int(raw["min_year"]),
        palette=palette,
        dimmed_opacity=float(opacity),
        width=int(raw["width"]),
        height=int(raw["height"]),
        margin_top=int(raw["margin_top"]),
        margin_right=int(raw["margin_right"]),
        margin_bottom=int(raw["margin_bottom"]),
        margin_left=int(raw["margin_left"]),
        line_width=int(raw["line_width"]),
        marker_radius=int(raw["marker_radius"]),
        legend_row_px=int(raw["legend_row_px"]),
        x_label=str(raw["x_label"]),
        y_label=str(raw["y_label"]),
        background=str(raw["background"]),
        foreground=str(raw["foreground"]),
    )
    _, _, plot_w, plot_h = config.plot_rect
    if plot_w <= 1 or plot_h <= 1:
        raise ConfigError("margins leave no room for the plot area")
    return config


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", {})
    if not isinstance(table, dict):
        raise ConfigError("`chart` must be a TOML table")
    return validate_chart_config(table)


def _coerce_string_tuple(value: object, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"`{field_name}` must be a list of strings")
    out: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"`{field_name}` entries must be non-empty strings")
        out.append(item)
    return tuple(out)
