"""Persistência do snapshot da sessão (v1).

O Dataset completo (features, taxonomy, metadata) é exportado como um
único objeto binário, junto dos parâmetros correntes, para ser reaberto
em outra sessão ou em outra ferramenta Python.

Decisões (v1):
- Formato: joblib
- Caminho determinístico (relativo ao diretório de exportação): artifacts/dataset.joblib
- Metadata registrada no Manifest via Event Log (evento `artifact_saved`)

Limites explícitos:
- Não recalcula artefatos no load
- Não restaura cache nem versões do InputStore
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import joblib

from mikrob_dataflow.analysis.dataset import Dataset
from mikrob_dataflow.core.traceability.manifest import MikrobManifest, artifact_saved

SNAPSHOT_VERSION = "v1"


@dataclass(frozen=True)
class SnapshotMeta:
    type: str = "dataset"
    format: str = "joblib"
    path: str = "artifacts/dataset.joblib"
    version: str = SNAPSHOT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "format": self.format, "path": self.path, "version": self.version}


class SessionStore:
    """Store canônica (v1) para salvar e recarregar o Dataset da sessão."""

    def __init__(self, *, export_dir: Union[str, Path]):
        self.export_dir = Path(export_dir)

    def artifact_path(self) -> Path:
        return self.export_dir / "artifacts" / "dataset.joblib"

    def artifact_rel_path(self) -> str:
        return "artifacts/dataset.joblib"

    def save(
        self,
        *,
        dataset: Dataset,
        parameters: Optional[Mapping[str, Any]] = None,
        manifest: Optional[MikrobManifest] = None,
    ) -> Dict[str, Any]:
        """Salva o snapshot e (opcionalmente) registra no Manifest.

        Returns:
            Dict[str, Any]: metadata do artefato (serializável).
        """
        if not isinstance(dataset, Dataset):
            raise TypeError(f"dataset must be a Dataset, got {type(dataset).__name__}")

        path = self.artifact_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        snapshot = {
            "version": SNAPSHOT_VERSION,
            "dataset": dataset,
            "parameters": dict(parameters or {}),
        }
        joblib.dump(snapshot, path)

        meta = SnapshotMeta(path=self.artifact_rel_path()).to_dict()
        meta["sha256"] = hashlib.sha256(path.read_bytes()).hexdigest()

        if manifest is not None:
            artifact_saved(
                manifest,
                name="dataset",
                path=meta["path"],
                fmt=meta["format"],
                sha256=meta["sha256"],
                ts=datetime.now(timezone.utc),
            )
        return meta

    def load(self) -> Dict[str, Any]:
        """Carrega o snapshot persistido (joblib) sem recalcular."""
        path = self.artifact_path()
        if not path.exists():
            raise FileNotFoundError(str(path))
        return joblib.load(path)


__all__ = ["SessionStore", "SnapshotMeta"]
