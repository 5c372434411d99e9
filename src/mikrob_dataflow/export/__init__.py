# src/mikrob_dataflow/export/__init__.py
"""
Exportação explícita de artefatos da sessão.

Toda exportação é uma ação do usuário: resolve o artefato via Session,
grava o arquivo e registra `artifact_saved` no Manifest. Artefatos que
não estão resolvidos (pending/failed) não são exportados.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from mikrob_dataflow.core.graph.types import Resolved
from mikrob_dataflow.core.session import Session
from mikrob_dataflow.core.traceability.manifest import artifact_saved
from mikrob_dataflow.nodes import catalog

from .plots import plot_abundance, plot_alpha, plot_ordination, plot_rarefaction, save_figure
from .session_store import SessionStore, SnapshotMeta
from .tables import export_table, to_frame


def _resolved_value(session: Session, name: str) -> Any:
    res = session.resolve(name)
    if not isinstance(res, Resolved):
        raise ValueError(f"Artifact '{name}' is not available: {res.message}")
    return res.value


def _record(session: Session, *, name: str, path: Path, fmt: str) -> None:
    session.log(node=name, level="info", message="artifact exported", path=str(path), format=fmt)
    artifact_saved(session.manifest, name=name, path=str(path), fmt=fmt, ts=datetime.now(timezone.utc))


def export_artifact(session: Session, name: str, path: Union[str, Path], *, sep: Optional[str] = None) -> Path:
    """Exporta um artefato tabular resolvido para texto delimitado."""
    written = export_table(_resolved_value(session, name), path, sep=sep)
    _record(session, name=name, path=written, fmt=written.suffix.lstrip(".") or "txt")
    return written


def export_figure(
    session: Session,
    name: str,
    path: Union[str, Path],
    *,
    width: Optional[float] = None,
    height: Optional[float] = None,
    dpi: Optional[int] = None,
) -> Path:
    """Desenha e grava a figura de um artefato (rarefação, alfa, ordenação, abundância)."""
    plot_cfg: Dict[str, Any] = ((session.config.get("export", {}) or {}).get("plot", {}) or {})
    value = _resolved_value(session, name)

    if name == catalog.RAREFACTION_CURVE:
        fig = plot_rarefaction(value)
    elif name == catalog.ALPHA_DIVERSITY:
        rarefied = _resolved_value(session, catalog.RAREFIED_DATASET)
        group_var = _resolved_value(session, "group_var")
        metric = session.store.get("alpha_metric") if session.store.has("alpha_metric") else "Shannon"
        fig = plot_alpha(value, rarefied.metadata, group_var, metric)
    elif name == catalog.ORDINATION:
        group_var = session.store.get("group_var") if session.store.has("group_var") else None
        metadata = _resolved_value(session, catalog.RAREFIED_DATASET).metadata if group_var else None
        fig = plot_ordination(value, metadata, group_var)
    elif name == catalog.ABUNDANCE_SUMMARY:
        fig = plot_abundance(value)
    else:
        raise ValueError(f"No figure available for artifact '{name}'")

    written = save_figure(
        fig,
        path,
        width=float(width if width is not None else plot_cfg.get("width", 8.0)),
        height=float(height if height is not None else plot_cfg.get("height", 6.0)),
        dpi=int(dpi if dpi is not None else plot_cfg.get("dpi", 300)),
    )
    _record(session, name=name, path=written, fmt=written.suffix.lstrip("."))
    return written


def save_snapshot(session: Session, export_dir: Union[str, Path]) -> Dict[str, Any]:
    """Salva o Dataset da sessão e os parâmetros correntes em joblib."""
    dataset = _resolved_value(session, catalog.DATASET)
    parameters = {
        key: session.store.get(key)
        for key in session.store.keys()
        if not key.endswith("_table")
    }
    store = SessionStore(export_dir=export_dir)
    meta = store.save(dataset=dataset, parameters=parameters, manifest=session.manifest)
    session.log(node=catalog.DATASET, level="info", message="artifact exported", path=meta["path"], format=meta["format"])
    return meta


__all__ = [
    "export_artifact",
    "export_figure",
    "save_snapshot",
    "export_table",
    "to_frame",
    "save_figure",
    "plot_abundance",
    "plot_alpha",
    "plot_ordination",
    "plot_rarefaction",
    "SessionStore",
    "SnapshotMeta",
]
