from __future__ import annotations

import numpy as np

from vgsales_plot.raster.canvas import RGBA, draw_pixel


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    if xs.size < 2:
        return
    # Each pixel is painted once so translucent strokes do not darken at joints.
    covered: set[tuple[int, int]] = set()
    for i in range(xs.size - 1):
        covered.update(_segment_pixels(int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), width=width))
    for x, y in covered:
        draw_pixel(dst, x, y, color)


def _segment_pixels(x0: int, y0: int, x1: int, y1: int, width: int) -> set[tuple[int, int]]:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    radius = max(0, width // 2)
    out: set[tuple[int, int]] = set()

    while True:
        for yy in range(y0 - radius, y0 + radius + 1):
            for xx in range(x0 - radius, x0 + radius + 1):
                out.add((xx, yy))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return out
