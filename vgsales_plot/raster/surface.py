from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from vgsales_plot.config import DEFAULT_CONFIG, ChartConfig
from vgsales_plot.domain import Domains, compute_domains
from vgsales_plot.events import PointerEvent
from vgsales_plot.raster.canvas import (
    draw_filled_rect,
    draw_hline,
    draw_vline,
    hex_to_rgba,
    new_canvas,
    with_opacity,
)
from vgsales_plot.raster.draw_lines import draw_polyline
from vgsales_plot.raster.draw_markers import draw_disc
from vgsales_plot.raster.draw_text import draw_text, text_size
from vgsales_plot.reconcile import EntityKey, LegendItemEntity, LineEntity, PointEntity, RenderEntity
from vgsales_plot.scales import (
    ChartLimits,
    PlotTransform,
    build_transform,
    format_value_ticks,
    format_year_ticks,
    limits_from_domains,
    map_to_pixels,
    value_ticks,
    year_ticks,
)
from vgsales_plot.surface import GestureHandler, HoverInfo, RenderFrame, apply_batch


LOGGER = logging.getLogger(__name__)

TICK_LEN = 6
TICK_FONT_PX = 11.0
LABEL_FONT_PX = 13.0
LEGEND_FONT_PX = 12.0
LEGEND_OFFSET = (16, 6)
SWATCH_SIZE = 12
TOOLTIP_OFFSET = 12
TOOLTIP_PAD = 6
HIT_SLOP_PX = 2


@dataclass
class DirtyState:
    dirty: bool = True
    applied_batches: int = 0
    counts: dict[str, int] = field(default_factory=dict)


class RasterSurface:
    """Draws the live entity set onto an RGBA numpy canvas.

    Batches are applied to `live` (enter, update, exit) as they arrive; the
    canvas itself is rebuilt lazily by `to_rgba` from the live entities, the
    last domains and the hovered point.
    """

    def __init__(self, config: ChartConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._live: dict[EntityKey, RenderEntity] = {}
        self._domains: Domains = compute_domains(())
        self._region = config.default_region
        self._hover: HoverInfo | None = None
        self._hover_key: EntityKey | None = None
        self._state = DirtyState()
        self._canvas: np.ndarray | None = None

    @property
    def live(self) -> dict[EntityKey, RenderEntity]:
        return dict(self._live)

    @property
    def hover(self) -> HoverInfo | None:
        return self._hover

    @property
    def state(self) -> DirtyState:
        return self._state

    def apply(self, frame: RenderFrame) -> None:
        apply_batch(self._live, frame.batch)
        self._domains = frame.domains
        self._region = frame.region
        self._state.dirty = True
        self._state.applied_batches += 1
        self._state.counts = {
            "enter": len(frame.batch.enter),
            "update": len(frame.batch.update),
            "exit": len(frame.batch.exit),
        }
        LOGGER.debug("applied batch %s", self._state.counts)

    def set_hover(self, hover: HoverInfo | None) -> None:
        if hover is None:
            self._hover_key = None
        if hover != self._hover:
            self._hover = hover
            self._state.dirty = True

    def to_rgba(self) -> np.ndarray:
        if self._canvas is not None and not self._state.dirty:
            return self._canvas
        cfg = self._config
        canvas = new_canvas(cfg.width, cfg.height, color=hex_to_rgba(cfg.background))
        limits = limits_from_domains(self._domains)
        self._draw_axes(canvas, limits)
        self._draw_series(canvas, limits)
        self._draw_legend(canvas)
        self._draw_tooltip(canvas, limits)
        self._canvas = canvas
        self._state.dirty = False
        return canvas

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        Image.fromarray(self.to_rgba()).save(out)
        return out

    def point_position(self, key: EntityKey) -> tuple[int, int] | None:
        entity = self._live.get(key)
        if not isinstance(entity, PointEntity):
            return None
        return self._to_canvas(limits_from_domains(self._domains), float(entity.year), entity.value)

    def entity_at(self, x: float, y: float) -> EntityKey | None:
        """Nearest point marker under (x, y), else the legend row under it, else None."""

        limits = limits_from_domains(self._domains)
        reach = self._config.marker_radius + HIT_SLOP_PX
        best: tuple[float, EntityKey] | None = None
        for key, entity in self._live.items():
            if not isinstance(entity, PointEntity):
                continue
            px, py = self._to_canvas(limits, float(entity.year), entity.value)
            d2 = (px - x) ** 2 + (py - y) ** 2
            if d2 <= reach * reach and (best is None or d2 < best[0]):
                best = (d2, key)
        if best is not None:
            return best[1]
        for key, entity in self._live.items():
            if not isinstance(entity, LegendItemEntity):
                continue
            x0, y0, w, h = self._legend_row_rect(entity.slot)
            if x0 <= x < x0 + w and y0 <= y < y0 + h:
                return key
        return None

    def dispatch_pointer(self, event: PointerEvent, handler: GestureHandler) -> EntityKey | None:
        """Translate a pointer event into hover / legend-click gestures on `handler`."""

        if event.event_type == "pointer_leave" or event.x is None or event.y is None:
            self._end_hover(handler)
            return None
        key = self.entity_at(event.x, event.y)
        if event.event_type == "pointer_move":
            if key is not None and key[0] == "point":
                if key != self._hover_key:
                    self._hover_key = key
                    handler.on_hover(key)
            else:
                self._end_hover(handler)
        elif event.event_type == "pointer_down" and key is not None and key[0] == "legend":
            handler.on_legend_click(str(key[1]))
        return key

    def _end_hover(self, handler: GestureHandler) -> None:
        if self._hover_key is not None:
            self._hover_key = None
            handler.on_hover_end()

    def _plot_transform(self, limits: ChartLimits) -> PlotTransform:
        _, _, plot_w, plot_h = self._config.plot_rect
        return build_transform(limits, plot_w, plot_h)

    def _to_canvas(self, limits: ChartLimits, year: float, value: float) -> tuple[int, int]:
        plot_x0, plot_y0, plot_w, plot_h = self._config.plot_rect
        px, py = map_to_pixels(
            np.asarray([year], dtype=np.float64),
            np.asarray([value], dtype=np.float64),
            self._plot_transform(limits),
            plot_w,
            plot_h,
        )
        return (plot_x0 + int(px[0]), plot_y0 + int(py[0]))

    def _draw_axes(self, canvas: np.ndarray, limits: ChartLimits) -> None:
        cfg = self._config
        fg = hex_to_rgba(cfg.foreground)
        plot_x0, plot_y0, plot_w, plot_h = cfg.plot_rect
        x_axis_y = plot_y0 + plot_h - 1
        draw_hline(canvas, plot_x0, plot_x0 + plot_w - 1, x_axis_y, fg)
        draw_vline(canvas, plot_x0, plot_y0, x_axis_y, fg)

        if self._domains.years is not None:
            ticks = year_ticks(limits, max(2, plot_w // 80))
            for tick, label in zip(ticks.tolist(), format_year_ticks(ticks), strict=False):
                tx, _ = self._to_canvas(limits, tick, limits.ymin)
                draw_vline(canvas, tx, x_axis_y, x_axis_y + TICK_LEN, fg)
                w, _ = text_size(label, font_size_px=TICK_FONT_PX)
                draw_text(canvas, tx - w // 2, x_axis_y + TICK_LEN + 3, label, fg, font_size_px=TICK_FONT_PX)

        ticks = value_ticks(limits, max(2, plot_h // 50))
        for tick, label in zip(ticks.tolist(), format_value_ticks(ticks), strict=False):
            _, ty = self._to_canvas(limits, limits.xmin, tick)
            draw_hline(canvas, plot_x0 - TICK_LEN, plot_x0, ty, fg)
            w, h = text_size(label, font_size_px=TICK_FONT_PX)
            draw_text(canvas, plot_x0 - TICK_LEN - 3 - w, ty - h // 2, label, fg, font_size_px=TICK_FONT_PX)

        w, _ = text_size(cfg.x_label, font_size_px=LABEL_FONT_PX)
        draw_text(canvas, plot_x0 + (plot_w - w) // 2, plot_y0 + plot_h + 26, cfg.x_label, fg, font_size_px=LABEL_FONT_PX)
        w, h = text_size(cfg.y_label, font_size_px=LABEL_FONT_PX, rotate_deg=90)
        draw_text(
            canvas,
            max(0, plot_x0 - 44 - w // 2),
            plot_y0 + (plot_h - h) // 2,
            cfg.y_label,
            fg,
            font_size_px=LABEL_FONT_PX,
            rotate_deg=90,
        )

    def _draw_series(self, canvas: np.ndarray, limits: ChartLimits) -> None:
        cfg = self._config
        plot_x0, plot_y0, plot_w, plot_h = cfg.plot_rect
        transform = self._plot_transform(limits)
        slots = {e.genre: e.slot for e in self._live.values() if isinstance(e, LegendItemEntity)}
        lines = sorted(
            (e for e in self._live.values() if isinstance(e, LineEntity)),
            key=lambda e: (slots.get(e.genre, len(slots)), e.genre),
        )
        for line in lines:
            xs, ys = line.arrays()
            px, py = map_to_pixels(xs, ys, transform, plot_w, plot_h)
            draw_polyline(canvas, px + plot_x0, py + plot_y0, color=hex_to_rgba(line.color), width=cfg.line_width)
        for entity in self._live.values():
            if isinstance(entity, PointEntity):
                x, y = self._to_canvas(limits, float(entity.year), entity.value)
                draw_disc(canvas, x, y, color=hex_to_rgba(entity.color), radius=cfg.marker_radius)

    def _legend_origin(self) -> tuple[int, int]:
        plot_x0, plot_y0, plot_w, _ = self._config.plot_rect
        return (plot_x0 + plot_w + LEGEND_OFFSET[0], plot_y0 + LEGEND_OFFSET[1])

    def _legend_row_rect(self, slot: int) -> tuple[int, int, int, int]:
        lx, ly = self._legend_origin()
        row_px = self._config.legend_row_px
        row_y = ly + slot * row_px
        width = max(SWATCH_SIZE, self._config.margin_right - LEGEND_OFFSET[0] - 4)
        return (lx, row_y - row_px // 2, width, row_px)

    def _draw_legend(self, canvas: np.ndarray) -> None:
        fg = hex_to_rgba(self._config.foreground)
        items = sorted(
            (e for e in self._live.values() if isinstance(e, LegendItemEntity)),
            key=lambda e: e.slot,
        )
        lx, ly = self._legend_origin()
        for item in items:
            row_y = ly + item.slot * self._config.legend_row_px
            color = with_opacity(hex_to_rgba(item.color), item.opacity)
            draw_filled_rect(canvas, lx, row_y - 9, lx + SWATCH_SIZE - 1, row_y - 9 + SWATCH_SIZE - 1, color)
            _, h = text_size(item.genre, font_size_px=LEGEND_FONT_PX)
            draw_text(canvas, lx + 18, row_y - 3 - h // 2, item.genre, fg, font_size_px=LEGEND_FONT_PX)

    def _draw_tooltip(self, canvas: np.ndarray, limits: ChartLimits) -> None:
        hover = self._hover
        if hover is None or hover.key not in self._live:
            return
        fg = hex_to_rgba(self._config.foreground)
        lines = hover.text_lines()
        sizes = [text_size(line, font_size_px=TICK_FONT_PX) for line in lines]
        line_h = max(h for _, h in sizes) + 4
        box_w = max(w for w, _ in sizes) + 2 * TOOLTIP_PAD
        box_h = line_h * len(lines) + 2 * TOOLTIP_PAD
        px, py = self._to_canvas(limits, float(hover.year), hover.value)
        x0 = min(px + TOOLTIP_OFFSET, canvas.shape[1] - box_w - 1)
        y0 = min(py + TOOLTIP_OFFSET, canvas.shape[0] - box_h - 1)
        draw_filled_rect(canvas, x0, y0, x0 + box_w, y0 + box_h, (255, 255, 255, 235))
        draw_hline(canvas, x0, x0 + box_w, y0, fg)
        draw_hline(canvas, x0, x0 + box_w, y0 + box_h, fg)
        draw_vline(canvas, x0, y0, y0 + box_h, fg)
        draw_vline(canvas, x0 + box_w, y0, y0 + box_h, fg)
        for i, line in enumerate(lines):
            draw_text(canvas, x0 + TOOLTIP_PAD, y0 + TOOLTIP_PAD + i * line_h, line, fg, font_size_px=TICK_FONT_PX)
