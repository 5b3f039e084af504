from .canvas import RGBA, draw_hline, draw_vline, fill_rect, new_canvas

__all__ = [
    "RGBA",
    "draw_hline",
    "draw_vline",
    "fill_rect",
    "new_canvas",
]
