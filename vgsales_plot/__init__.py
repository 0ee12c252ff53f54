from vgsales_plot.aggregate import ParsedRow, Series, aggregate, parse_row
from vgsales_plot.classify import FAMILY_FILTERS, PLATFORM_FAMILIES, FamilyFilter, PlatformFamily, classify
from vgsales_plot.config import ChartConfig, load_chart_config, validate_chart_config
from vgsales_plot.controller import InteractionController
from vgsales_plot.domain import ColorAssignment, Domains, compute_domains
from vgsales_plot.errors import ConfigError, LoadError, VgSalesPlotError
from vgsales_plot.events import DataReplaced, FilterChanged, PointerEvent, VisibilityToggled
from vgsales_plot.reconcile import (
    LegendItemEntity,
    LineEntity,
    PointEntity,
    Reconciler,
    RenderBatch,
    build_target,
    diff_entities,
)
from vgsales_plot.surface import HoverInfo, RecordingSurface, RenderFrame, RenderSurface
from vgsales_plot.visibility import VisibilityState

__all__ = [
    "FAMILY_FILTERS",
    "PLATFORM_FAMILIES",
    "ChartConfig",
    "ColorAssignment",
    "ConfigError",
    "DataReplaced",
    "Domains",
    "FamilyFilter",
    "FilterChanged",
    "HoverInfo",
    "InteractionController",
    "LegendItemEntity",
    "LineEntity",
    "LoadError",
    "ParsedRow",
    "PlatformFamily",
    "PointEntity",
    "PointerEvent",
    "Reconciler",
    "RecordingSurface",
    "RenderBatch",
    "RenderFrame",
    "RenderSurface",
    "Series",
    "VgSalesPlotError",
    "VisibilityState",
    "VisibilityToggled",
    "aggregate",
    "build_target",
    "classify",
    "compute_domains",
    "diff_entities",
    "load_chart_config",
    "parse_row",
    "validate_chart_config",
]
