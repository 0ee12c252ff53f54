from __future__ import annotations

import numpy as np

from vgsales_plot.raster.canvas import RGBA, draw_pixel


def draw_markers(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, radius: int = 3) -> None:
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        draw_disc(dst, int(x), int(y), color=color, radius=radius)


def draw_disc(dst: np.ndarray, x: int, y: int, color: RGBA, radius: int) -> None:
    r2 = radius * radius
    for yy in range(-radius, radius + 1):
        for xx in range(-radius, radius + 1):
            if xx * xx + yy * yy <= r2:
                draw_pixel(dst, x + xx, y + yy, color)
