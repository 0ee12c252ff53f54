from __future__ import annotations

from collections.abc import Iterable


class VisibilityState:
    """Per-genre shown/hidden flags that outlive filter changes.

    Genres that were never initialized read as visible.
    """

    def __init__(self) -> None:
        self._visible: dict[str, bool] = {}

    def initialize(self, genres: Iterable[str]) -> None:
        for genre in genres:
            self._visible.setdefault(genre, True)

    def toggle(self, genre: str) -> bool:
        visible = not self.is_visible(genre)
        self._visible[genre] = visible
        return visible

    def is_visible(self, genre: str) -> bool:
        return self._visible.get(genre, True)

    def reset(self) -> None:
        self._visible.clear()

    def genres(self) -> tuple[str, ...]:
        return tuple(self._visible)

    def hidden(self) -> tuple[str, ...]:
        return tuple(genre for genre, visible in self._visible.items() if not visible)

    def __contains__(self, genre: object) -> bool:
        return genre in self._visible

    def __len__(self) -> int:
        return len(self._visible)
