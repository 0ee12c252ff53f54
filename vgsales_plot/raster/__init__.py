from .canvas import RGBA, draw_filled_rect, draw_hline, draw_vline, hex_to_rgba, new_canvas, with_opacity
from .draw_lines import draw_polyline
from .draw_markers import draw_markers
from .draw_text import draw_text, text_size
from .surface import RasterSurface

__all__ = [
    "RGBA",
    "RasterSurface",
    "draw_filled_rect",
    "draw_hline",
    "draw_markers",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "hex_to_rgba",
    "new_canvas",
    "text_size",
    "with_opacity",
]
