from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging

from vgsales_plot.adapters.sources import DataSource
from vgsales_plot.aggregate import ColumnNames, Series, aggregate
from vgsales_plot.classify import FamilyFilter, is_family_filter
from vgsales_plot.config import DEFAULT_CONFIG, ChartConfig
from vgsales_plot.domain import ColorAssignment, Domains, compute_domains
from vgsales_plot.errors import LoadError
from vgsales_plot.events import DataReplaced, FilterChanged, Trigger, VisibilityToggled
from vgsales_plot.reconcile import EntityKey, PointEntity, Reconciler, build_target, diff_entities
from vgsales_plot.surface import HoverInfo, RenderFrame, RenderSurface
from vgsales_plot.visibility import VisibilityState


LOGGER = logging.getLogger(__name__)


class InteractionController:
    """Owns filter selection, visibility and colors; turns triggers into render frames.

    `DataReplaced` and `FilterChanged` rerun aggregation, domains and
    reconciliation. `VisibilityToggled` reruns reconciliation only, on the
    cached series and domains of the last full pass.
    """

    def __init__(self, config: ChartConfig = DEFAULT_CONFIG, surface: RenderSurface | None = None) -> None:
        self._config = config
        self._columns = ColumnNames(
            year=config.year_column,
            genre=config.genre_column,
            platform=config.platform_column,
        )
        self._surface = surface
        self._region = config.default_region
        self._family: FamilyFilter = "All"
        self._rows: tuple[Mapping[str, object], ...] = ()
        self._visibility = VisibilityState()
        self._colors = ColorAssignment(config.palette)
        self._reconciler = Reconciler()
        self._series: tuple[Series, ...] = ()
        self._domains: Domains = compute_domains(())
        self._hover: HoverInfo | None = None
        self._last_frame: RenderFrame | None = None
        self._latest_request_id = 0
        self._last_error: Exception | None = None

    @property
    def region(self) -> str:
        return self._region

    @property
    def family(self) -> FamilyFilter:
        return self._family

    @property
    def series(self) -> tuple[Series, ...]:
        return self._series

    @property
    def domains(self) -> Domains:
        return self._domains

    @property
    def visibility(self) -> VisibilityState:
        return self._visibility

    @property
    def colors(self) -> dict[str, str]:
        return self._colors.snapshot()

    @property
    def hover(self) -> HoverInfo | None:
        return self._hover

    @property
    def last_frame(self) -> RenderFrame | None:
        return self._last_frame

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def attach_surface(self, surface: RenderSurface | None) -> None:
        self._surface = surface
        if surface is not None and self._last_frame is not None:
            # A late surface has nothing drawn yet: replay the whole rendered set as enter.
            frame = RenderFrame(
                batch=diff_entities({}, self._reconciler.rendered),
                domains=self._last_frame.domains,
                colors=self._last_frame.colors,
                region=self._last_frame.region,
                family=self._last_frame.family,
                series=self._last_frame.series,
            )
            surface.apply(frame)
            surface.set_hover(self._hover)

    def handle(self, trigger: Trigger) -> RenderFrame:
        if isinstance(trigger, DataReplaced):
            self._rows = tuple(trigger.rows)
            self._visibility.reset()
            self._colors.reset()
            LOGGER.debug("dataset replaced: %d rows", len(self._rows))
            return self._run_pipeline()
        if isinstance(trigger, FilterChanged):
            self._set_filter(trigger.kind, trigger.value)
            return self._run_pipeline()
        if isinstance(trigger, VisibilityToggled):
            visible = self._visibility.toggle(trigger.genre)
            LOGGER.debug("genre %r visible=%s", trigger.genre, visible)
            return self._reconcile()
        raise TypeError(f"unsupported trigger: {type(trigger)!r}")

    def set_region(self, region: str) -> RenderFrame:
        return self.handle(FilterChanged(kind="region", value=region))

    def set_family(self, family: str) -> RenderFrame:
        return self.handle(FilterChanged(kind="family", value=family))

    def toggle(self, genre: str) -> RenderFrame:
        return self.handle(VisibilityToggled(genre=genre))

    def replace_data(self, rows: Sequence[Mapping[str, object]]) -> RenderFrame:
        return self.handle(DataReplaced(rows=rows))

    def begin_load(self) -> int:
        """Issue a new load request id; results of older requests are discarded from now on."""

        self._latest_request_id += 1
        return self._latest_request_id

    def finish_load(self, request_id: int, rows: Sequence[Mapping[str, object]]) -> RenderFrame | None:
        if request_id != self._latest_request_id:
            LOGGER.debug("discarding stale load %d (latest is %d)", request_id, self._latest_request_id)
            return None
        self._last_error = None
        LOGGER.info("Loaded: %d rows", len(rows))
        return self.handle(DataReplaced(rows=rows))

    def fail_load(self, request_id: int, error: Exception) -> None:
        if request_id != self._latest_request_id:
            LOGGER.debug("ignoring failure of stale load %d: %s", request_id, error)
            return
        self._last_error = error
        LOGGER.warning("load %d failed, keeping current chart: %s", request_id, error)

    def load(self, source: DataSource) -> RenderFrame | None:
        """Fetch synchronously from `source` and replace the dataset; `LoadError` propagates."""

        request_id = self.begin_load()
        try:
            rows = source.fetch()
        except LoadError as exc:
            self.fail_load(request_id, exc)
            raise
        return self.finish_load(request_id, rows)

    def on_hover(self, entity_key: EntityKey) -> HoverInfo | None:
        entity = self._reconciler.rendered.get(entity_key)
        if not isinstance(entity, PointEntity):
            return self._hover
        self._hover = HoverInfo(genre=entity.genre, year=entity.year, value=entity.value, region=self._region)
        if self._surface is not None:
            self._surface.set_hover(self._hover)
        return self._hover

    def on_hover_end(self) -> None:
        self._hover = None
        if self._surface is not None:
            self._surface.set_hover(None)

    def on_legend_click(self, genre: str) -> RenderFrame:
        return self.handle(VisibilityToggled(genre=genre))

    def _set_filter(self, kind: str, value: str) -> None:
        if kind == "region":
            if value not in self._config.regions:
                raise ValueError(f"unknown region column: {value!r} (expected one of {list(self._config.regions)})")
            self._region = value
        elif kind == "family":
            if not is_family_filter(value):
                raise ValueError(f"unknown platform family: {value!r}")
            self._family = value  # type: ignore[assignment]
        else:
            raise ValueError(f"unknown filter kind: {kind!r}")
        LOGGER.debug("filter %s=%r", kind, value)

    def _run_pipeline(self) -> RenderFrame:
        series = aggregate(
            self._rows,
            self._region,
            self._family,
            columns=self._columns,
            min_year=self._config.min_year,
        )
        genres = [s.genre for s in series]
        self._visibility.initialize(genres)
        self._colors.assign(genres)
        self._series = tuple(series)
        self._domains = compute_domains(series)
        return self._reconcile()

    def _reconcile(self) -> RenderFrame:
        target = build_target(
            self._series,
            self._visibility,
            self._colors.snapshot(),
            dimmed_opacity=self._config.dimmed_opacity,
        )
        batch = self._reconciler.reconcile(target)
        frame = RenderFrame(
            batch=batch,
            domains=self._domains,
            colors=self._colors.snapshot(),
            region=self._region,
            family=self._family,
            series=self._series,
        )
        self._last_frame = frame
        hover_changed = self._refresh_hover()
        if self._surface is not None:
            self._surface.apply(frame)
            if hover_changed:
                self._surface.set_hover(self._hover)
        return frame

    def _refresh_hover(self) -> bool:
        if self._hover is None:
            return False
        entity = self._reconciler.rendered.get(self._hover.key)
        if not isinstance(entity, PointEntity):
            self._hover = None
            return True
        refreshed = HoverInfo(genre=entity.genre, year=entity.year, value=entity.value, region=self._region)
        changed = refreshed != self._hover
        self._hover = refreshed
        return changed
