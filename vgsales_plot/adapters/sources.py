from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path
from typing import Protocol

import pandas as pd

from vgsales_plot.errors import LoadError


LOGGER = logging.getLogger(__name__)

DEFAULT_REQUIRED_COLUMNS = ("Year", "Genre", "Platform")


class DataSource(Protocol):
    def fetch(self) -> list[Mapping[str, object]]:
        ...


class CsvDataSource:
    """Reads a sales CSV with every cell kept as the raw string (no NA conversion)."""

    def __init__(self, path: str | Path, *, required_columns: Sequence[str] = DEFAULT_REQUIRED_COLUMNS) -> None:
        self._path = Path(path)
        self._required_columns = tuple(required_columns)

    @property
    def path(self) -> Path:
        return self._path

    def fetch(self) -> list[Mapping[str, object]]:
        if not self._path.exists():
            raise LoadError(f"data file not found: {self._path}")
        try:
            frame = pd.read_csv(self._path, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as exc:
            raise LoadError(f"could not read {self._path}: {exc}") from exc
        missing = [c for c in self._required_columns if c not in frame.columns]
        if missing:
            raise LoadError(f"{self._path} is missing required columns: {missing}")
        rows = frame.to_dict(orient="records")
        LOGGER.info("read %d rows from %s", len(rows), self._path)
        return rows


class RecordsDataSource:
    """In-memory rows, either a list of mappings or a pandas DataFrame."""

    def __init__(self, rows: Sequence[Mapping[str, object]] | pd.DataFrame) -> None:
        if isinstance(rows, pd.DataFrame):
            self._rows: list[Mapping[str, object]] = rows.to_dict(orient="records")
        else:
            self._rows = [dict(row) for row in rows]

    def fetch(self) -> list[Mapping[str, object]]:
        return list(self._rows)
