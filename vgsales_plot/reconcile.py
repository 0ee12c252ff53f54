from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np

from vgsales_plot.aggregate import Series
from vgsales_plot.visibility import VisibilityState


DEFAULT_DIMMED_OPACITY = 0.25
UNASSIGNED_COLOR = "#888888"

EntityKey: TypeAlias = tuple[str, str] | tuple[str, str, int]


@dataclass(frozen=True)
class LineEntity:
    genre: str
    color: str
    points: tuple[tuple[int, float], ...]

    @property
    def key(self) -> EntityKey:
        return ("line", self.genre)

    def arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Years and values as float64 arrays, ready for `map_to_pixels`."""

        data = np.asarray(self.points, dtype=np.float64).reshape(-1, 2)
        return data[:, 0], data[:, 1]


@dataclass(frozen=True)
class PointEntity:
    genre: str
    year: int
    value: float
    color: str

    @property
    def key(self) -> EntityKey:
        return ("point", self.genre, self.year)


@dataclass(frozen=True)
class LegendItemEntity:
    genre: str
    color: str
    opacity: float
    slot: int

    @property
    def key(self) -> EntityKey:
        return ("legend", self.genre)


RenderEntity: TypeAlias = LineEntity | PointEntity | LegendItemEntity


@dataclass(frozen=True)
class RenderBatch:
    """Key-disjoint enter/update/exit sets; surfaces apply `enter` first."""

    enter: tuple[RenderEntity, ...]
    update: tuple[RenderEntity, ...]
    exit: tuple[RenderEntity, ...]

    def is_empty(self) -> bool:
        return not (self.enter or self.update or self.exit)

    def keys(self, which: str) -> set[EntityKey]:
        return {entity.key for entity in getattr(self, which)}


def build_target(
    series: Sequence[Series],
    visibility: VisibilityState,
    colors: Mapping[str, str],
    *,
    dimmed_opacity: float = DEFAULT_DIMMED_OPACITY,
) -> dict[EntityKey, RenderEntity]:
    """Entities the surface should show: lines and points of visible series, a legend item for every series."""

    target: dict[EntityKey, RenderEntity] = {}
    for slot, s in enumerate(series):
        color = colors.get(s.genre, UNASSIGNED_COLOR)
        visible = visibility.is_visible(s.genre)
        if visible:
            line = LineEntity(genre=s.genre, color=color, points=s.points)
            target[line.key] = line
            for year, value in s.points:
                point = PointEntity(genre=s.genre, year=year, value=value, color=color)
                target[point.key] = point
        legend = LegendItemEntity(
            genre=s.genre,
            color=color,
            opacity=1.0 if visible else dimmed_opacity,
            slot=slot,
        )
        target[legend.key] = legend
    return target


def diff_entities(
    previous: Mapping[EntityKey, RenderEntity],
    target: Mapping[EntityKey, RenderEntity],
) -> RenderBatch:
    enter = tuple(entity for key, entity in target.items() if key not in previous)
    update = tuple(entity for key, entity in target.items() if key in previous)
    exit_ = tuple(entity for key, entity in previous.items() if key not in target)
    return RenderBatch(enter=enter, update=update, exit=exit_)


class Reconciler:
    """Remembers the last rendered entity set and diffs each new target against it."""

    def __init__(self) -> None:
        self._rendered: dict[EntityKey, RenderEntity] = {}

    @property
    def rendered(self) -> dict[EntityKey, RenderEntity]:
        return dict(self._rendered)

    def reconcile(self, target: Mapping[EntityKey, RenderEntity]) -> RenderBatch:
        batch = diff_entities(self._rendered, target)
        self._rendered = dict(target)
        return batch
