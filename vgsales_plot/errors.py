from __future__ import annotations


class VgSalesPlotError(Exception):
    """Base class for errors raised by vgsales_plot."""


class LoadError(VgSalesPlotError):
    """A data source could not produce records (I/O failure or malformed source)."""


class ConfigError(VgSalesPlotError, ValueError):
    """Chart configuration contains an unknown key or an invalid value."""
