from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from vgsales_plot.aggregate import Series
from vgsales_plot.config import TABLEAU_10


MIN_VALUE_CEILING = 1.0


@dataclass(frozen=True)
class Domains:
    """Axis ranges of one pipeline pass. `years` is None when nothing survived filtering."""

    years: tuple[int, int] | None
    values: tuple[float, float]


def compute_domains(series: Sequence[Series]) -> Domains:
    years = [year for s in series for year, _ in s.points]
    values = [value for s in series for _, value in s.points]
    year_domain = (min(years), max(years)) if years else None
    vmax = max(values) if values else 0.0
    # A zero (or all-negative) maximum would collapse the value axis.
    if vmax <= 0.0:
        vmax = MIN_VALUE_CEILING
    return Domains(years=year_domain, values=(0.0, vmax))


class ColorAssignment:
    """Genre -> palette color, assigned in first-seen order and never reassigned until reset."""

    def __init__(self, palette: Sequence[str] = TABLEAU_10) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._palette = tuple(palette)
        self._colors: dict[str, str] = {}

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def assign(self, genres: Iterable[str]) -> dict[str, str]:
        for genre in genres:
            if genre not in self._colors:
                # Wraps around once every slot is taken, like an ordinal scale.
                self._colors[genre] = self._palette[len(self._colors) % len(self._palette)]
        return dict(self._colors)

    def color_of(self, genre: str) -> str | None:
        return self._colors.get(genre)

    def snapshot(self) -> dict[str, str]:
        return dict(self._colors)

    def reset(self) -> None:
        self._colors.clear()

    def __len__(self) -> int:
        return len(self._colors)
