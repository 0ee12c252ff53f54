from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from vgsales_plot.aggregate import Series
from vgsales_plot.classify import FamilyFilter
from vgsales_plot.domain import Domains
from vgsales_plot.reconcile import EntityKey, RenderBatch, RenderEntity


@dataclass(frozen=True)
class HoverInfo:
    genre: str
    year: int
    value: float
    region: str

    @property
    def key(self) -> EntityKey:
        return ("point", self.genre, self.year)

    def text_lines(self) -> tuple[str, str, str]:
        return (
            f"Year: {self.year}",
            f"Genre: {self.genre}",
            f"{self.region}: {self.value:.2f}M",
        )


@dataclass(frozen=True)
class RenderFrame:
    """Everything a surface needs to bring its drawing up to date after one pipeline pass."""

    batch: RenderBatch
    domains: Domains
    colors: dict[str, str]
    region: str
    family: FamilyFilter
    series: tuple[Series, ...]


class RenderSurface(Protocol):
    def apply(self, frame: RenderFrame) -> None:
        ...

    def set_hover(self, hover: HoverInfo | None) -> None:
        ...


def apply_batch(live: dict[EntityKey, RenderEntity], batch: RenderBatch) -> None:
    """Bring a live entity map in line with a batch: enter, then update, then exit."""

    for entity in batch.enter:
        live[entity.key] = entity
    for entity in batch.update:
        live[entity.key] = entity
    for entity in batch.exit:
        live.pop(entity.key, None)


@dataclass
class RecordingSurface:
    """Headless surface keeping the live entity set and every frame it was given."""

    live: dict[EntityKey, RenderEntity] = field(default_factory=dict)
    frames: list[RenderFrame] = field(default_factory=list)
    hover: HoverInfo | None = None

    def apply(self, frame: RenderFrame) -> None:
        apply_batch(self.live, frame.batch)
        self.frames.append(frame)

    def set_hover(self, hover: HoverInfo | None) -> None:
        self.hover = hover

    @property
    def last_frame(self) -> RenderFrame | None:
        return self.frames[-1] if self.frames else None

    def keys_of(self, kind: str) -> set[EntityKey]:
        return {key for key in self.live if key[0] == kind}


class GestureHandler(Protocol):
    """Receiver of gestures reported by a surface; the interaction controller implements it."""

    def on_hover(self, entity_key: EntityKey) -> object:
        ...

    def on_hover_end(self) -> None:
        ...

    def on_legend_click(self, genre: str) -> object:
        ...
