from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, Optional, TypeAlias


FilterKind = Literal["region", "family"]

PointerEventType = Literal[
    "pointer_move",
    "pointer_down",
    "pointer_up",
    "pointer_leave",
]


@dataclass(frozen=True)
class DataReplaced:
    rows: Sequence[Mapping[str, object]]


@dataclass(frozen=True)
class FilterChanged:
    kind: FilterKind
    value: str


@dataclass(frozen=True)
class VisibilityToggled:
    genre: str


Trigger: TypeAlias = DataReplaced | FilterChanged | VisibilityToggled


@dataclass(frozen=True)
class PointerEvent:
    event_type: PointerEventType
    timestamp: float
    x: Optional[float] = None
    y: Optional[float] = None
    button: Optional[int] = None
