# src/mikrob_dataflow/presentation/__init__.py
from .renderers import (
    RenderResult,
    render_card_html,
    render_frame_html,
    render_kv_table_html,
    render_resolution,
    render_value,
)

__all__ = [
    "RenderResult",
    "render_card_html",
    "render_frame_html",
    "render_kv_table_html",
    "render_resolution",
    "render_value",
]
