# src/mikrob_dataflow/presentation/renderers.py
"""
Presentation Adapter (v1)

Objetivo:
- Renderizar resoluções (Resolved / Pending / Failed) para HTML + texto.
- NÃO altera valores.
- NÃO escreve no InputStore nem resolve nós.

Saídas:
- HTML (string) quando possível
- fallback textual sempre preenchido
"""

from __future__ import annotations

import html
import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pandas as pd

from mikrob_dataflow.core.graph.types import Failed, Pending, Resolution, Resolved
from mikrob_dataflow.export.tables import to_frame


@dataclass(frozen=True)
class RenderResult:
    """Resultado de renderização (apenas apresentação)."""
    html: Optional[str]  # HTML string (quando aplicável)
    text: str            # fallback textual (sempre preenchido)


def _escape(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def _as_pretty_json(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
    except TypeError:
        return repr(payload)


def render_kv_table_html(payload: Mapping[str, Any], title: Optional[str] = None) -> str:
    """Renderiza dict como tabela key/value (HTML puro)."""
    rows = []
    for k in payload.keys():
        rows.append(
            f"<tr><td><code>{_escape(k)}</code></td><td>{_escape(payload[k])}</td></tr>"
        )

    heading = f"<h4>{_escape(title)}</h4>" if title else ""
    return (
        f"{heading}"
        "<table>"
        "<thead><tr><th>key</th><th>value</th></tr></thead>"
        "<tbody>"
        + "".join(rows) +
        "</tbody></table>"
    )


def render_frame_html(frame: pd.DataFrame, title: Optional[str] = None, max_rows: int = 50) -> str:
    """Renderiza um DataFrame como tabela HTML (no máximo `max_rows` linhas)."""
    heading = f"<h4>{_escape(title)}</h4>" if title else ""
    if frame.empty:
        return f"{heading}<div><em>(empty)</em></div>"
    body = frame.head(max_rows).to_html(border=0, escape=True)
    more = ""
    if len(frame) > max_rows:
        more = f"<div><em>{len(frame) - max_rows} more rows</em></div>"
    return f"{heading}{body}{more}"


def render_card_html(payload: Mapping[str, Any], title: str, subtitle: Optional[str] = None) -> str:
    """Renderiza um card simples em HTML (apresentação pura)."""
    st = f"<div style='opacity:0.75'>{_escape(subtitle)}</div>" if subtitle else ""
    body = render_kv_table_html(payload)
    return (
        "<div style='border:1px solid #ddd; border-radius:12px; padding:12px; margin:8px 0;'>"
        f"<h3 style='margin:0 0 6px 0;'>{_escape(title)}</h3>"
        f"{st}"
        f"{body}"
        "</div>"
    )


def _value_frame(value: Any) -> Optional[pd.DataFrame]:
    if isinstance(value, (Mapping, str, bool)):
        return None
    try:
        return to_frame(value)
    except TypeError:
        return None


def render_value(name: str, value: Any) -> RenderResult:
    frame = _value_frame(value)
    if frame is not None:
        return RenderResult(html=render_frame_html(frame, title=name), text=frame.to_string(max_rows=50))
    if isinstance(value, Mapping):
        return RenderResult(html=render_kv_table_html(value, title=name), text=_as_pretty_json(value))
    return RenderResult(html=render_kv_table_html({name: value}), text=f"{name}: {value}")


def render_resolution(resolution: Resolution) -> RenderResult:
    """
    Renderiza uma resolução:
    - Resolved -> tabela (DataFrame e tipos conhecidos) ou key/value
    - Pending  -> "waiting for input ..."
    - Failed   -> card de erro com a mensagem verbatim
    """
    if isinstance(resolution, Resolved):
        return render_value(resolution.name, resolution.value)

    if isinstance(resolution, Pending):
        message = resolution.message
        return RenderResult(
            html=f"<div class='pending'><em>{_escape(message)}</em></div>",
            text=message,
        )

    if isinstance(resolution, Failed):
        error = resolution.error
        payload = {"type": error.type, "message": error.message, "origin": resolution.origin}
        if error.hint:
            payload["hint"] = error.hint
        return RenderResult(
            html=render_card_html(payload, title=f"{resolution.name} failed", subtitle=error.type),
            text=f"{resolution.name} failed: {error.message}",
        )

    raise TypeError(f"Unsupported resolution type: {type(resolution).__name__}")
