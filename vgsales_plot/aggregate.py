from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import math
import re

from vgsales_plot.classify import FamilyFilter, classify, is_family_filter


UNKNOWN_GENRE = "Unknown"
DEFAULT_MIN_YEAR = 2000

RawRecord = Mapping[str, object]

# Plain decimal or exponent notation; no digit grouping, no inf/nan words.
_NUMERIC_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class ColumnNames:
    year: str = "Year"
    genre: str = "Genre"
    platform: str = "Platform"


DEFAULT_COLUMNS = ColumnNames()


@dataclass(frozen=True)
class ParsedRow:
    year: int
    genre: str
    platform_label: str
    value: float


@dataclass(frozen=True)
class Series:
    """Summed values of one genre, one point per year in ascending order."""

    genre: str
    points: tuple[tuple[int, float], ...]


def _finite_float(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        if isinstance(raw, (int, float)):
            value = float(raw)
        else:
            text = str(raw).strip()
            if _NUMERIC_TEXT.fullmatch(text) is None:
                return None
            value = float(text)
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def coerce_number(raw: object) -> float:
    """Coerce a cell to a float; anything non-numeric or non-finite becomes 0.0."""

    value = _finite_float(raw)
    return 0.0 if value is None else value


def coerce_year(raw: object) -> int | None:
    value = _finite_float(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def parse_row(
    record: RawRecord,
    region_key: str,
    *,
    columns: ColumnNames = DEFAULT_COLUMNS,
    min_year: int = DEFAULT_MIN_YEAR,
) -> ParsedRow | None:
    """Parse one raw record, or return None when its year is unusable."""

    year = coerce_year(record.get(columns.year))
    if year is None or year < min_year:
        return None
    genre = record.get(columns.genre)
    platform = record.get(columns.platform)
    return ParsedRow(
        year=year,
        genre=UNKNOWN_GENRE if _is_missing(genre) else str(genre),
        platform_label="" if _is_missing(platform) else str(platform),
        value=coerce_number(record.get(region_key)),
    )


def aggregate(
    rows: Iterable[RawRecord],
    region_key: str,
    family_filter: FamilyFilter = "All",
    *,
    columns: ColumnNames = DEFAULT_COLUMNS,
    min_year: int = DEFAULT_MIN_YEAR,
) -> list[Series]:
    """Filter, group and sum raw records into one series per genre.

    Genres come out in the order their first surviving row was seen. Callers
    should not depend on that order for anything but color assignment.
    """

    if not is_family_filter(family_filter):
        raise ValueError(f"unknown platform family filter: {family_filter!r}")

    by_genre: dict[str, dict[int, float]] = {}
    for record in rows:
        parsed = parse_row(record, region_key, columns=columns, min_year=min_year)
        if parsed is None:
            continue
        if family_filter != "All" and classify(parsed.platform_label) != family_filter:
            continue
        by_year = by_genre.setdefault(parsed.genre, {})
        by_year[parsed.year] = by_year.get(parsed.year, 0.0) + parsed.value

    return [
        Series(genre=genre, points=tuple(sorted(by_year.items())))
        for genre, by_year in by_genre.items()
    ]


def _is_missing(raw: object) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float):
        return math.isnan(raw)
    return raw == ""
