from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from vgsales_plot.adapters import CsvDataSource
from vgsales_plot.classify import FAMILY_FILTERS
from vgsales_plot.config import DEFAULT_CONFIG, load_chart_config
from vgsales_plot.controller import InteractionController
from vgsales_plot.errors import ConfigError, LoadError
from vgsales_plot.raster import RasterSurface


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vgsales-plot", description="Render video game sales by genre over years.")
    parser.add_argument("csv", type=Path, help="Sales CSV with Year, Genre, Platform and regional sales columns.")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table.")
    parser.add_argument("--region", default=None, help="Sales column to plot. Default: the config's default region.")
    parser.add_argument("--family", choices=list(FAMILY_FILTERS), default="All")
    parser.add_argument("--hide", action="append", default=[], metavar="GENRE", help="Hide a genre (repeatable).")
    parser.add_argument("--out", type=Path, default=Path("vgsales.png"))
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_chart_config(args.config) if args.config is not None else DEFAULT_CONFIG
    except (ConfigError, FileNotFoundError) as exc:
        LOGGER.error("invalid chart config: %s", exc)
        return 2

    surface = RasterSurface(config)
    controller = InteractionController(config, surface=surface)
    required = (config.year_column, config.genre_column, config.platform_column)
    try:
        controller.load(CsvDataSource(args.csv, required_columns=required))
    except LoadError as exc:
        LOGGER.error("%s", exc)
        return 1

    try:
        if args.region is not None:
            controller.set_region(args.region)
        if args.family != "All":
            controller.set_family(args.family)
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return 2
    known = {s.genre for s in controller.series}
    for genre in args.hide:
        if genre not in known:
            LOGGER.warning("no series for genre %r; ignoring --hide", genre)
            continue
        if controller.visibility.is_visible(genre):
            controller.toggle(genre)

    out = surface.save_png(args.out)
    for s in controller.series:
        total = sum(value for _, value in s.points)
        state = "shown" if controller.visibility.is_visible(s.genre) else "hidden"
        print(f"{s.genre}: {len(s.points)} years, total {total:.2f}M ({state})")
    LOGGER.info("wrote %s", out)
    return 0
