# src/mikrob_dataflow/core/traceability/manifest.py
"""
Manifest v1 — rastreabilidade de uma sessão do mikrob-dataflow.

O Manifest consolida, de forma determinística e auditável:
    - metadados da sessão (session_id, started_at, versão)
    - hash da configuração efetiva
    - versões correntes dos inputs escritos
    - estado incremental de cada nó resolvido
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de escritas e resoluções
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico
    - Valores de inputs e artefatos nunca entram no Manifest (apenas versões,
      revisões e metadados leves)

Limites explícitos:
    - Não resolve nós
    - Não decide políticas de cache ou invalidação
    - Não realiza migração de versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC (naive é assumido como UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class MikrobManifest:
    """
    Registro forense de uma sessão.

    Campos principais:
        - session: metadados da sessão (session_id, started_at, version)
        - inputs: hash da configuração e versões dos inputs escritos
        - nodes: estado incremental de cada nó (status, revision, duration_ms, error)
        - events: Event Log ordenado

    Invariantes:
        - `nodes` é sempre um dicionário indexado pelo nome do nó
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável
    """

    session: Dict[str, Any]
    inputs: Dict[str, Any]
    nodes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável e independente do estado interno."""
        inputs = dict(self.inputs)
        inputs["versions"] = dict(self.inputs.get("versions", {}) or {})
        return {
            "session": dict(self.session),
            "inputs": inputs,
            "nodes": {k: dict(v) for k, v in self.nodes.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MikrobManifest":
        """Reconstrução permissiva: campos ausentes viram estruturas vazias."""
        inputs = dict(data.get("inputs", {}) or {})
        inputs["versions"] = dict(inputs.get("versions", {}) or {})
        return cls(
            session=dict(data.get("session", {})),
            inputs=inputs,
            nodes={k: dict(v) for k, v in (data.get("nodes", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    session_id: str,
    started_at: datetime,
    version: str,
    config_hash: str,
) -> MikrobManifest:
    """
    Cria o Manifest inicial de uma sessão.

    ⚠️ Importante: esta função **não emite eventos implicitamente**.
    O Event Log inicia vazio.
    """
    started_at = _ensure_tzaware_utc(started_at)
    return MikrobManifest(
        session={
            "session_id": session_id,
            "started_at": _iso(started_at),
            "version": version,
        },
        inputs={
            "config_hash": config_hash,
            "versions": {},
        },
        nodes={},
        events=[],
    )


def add_event(
    manifest: MikrobManifest,
    *,
    event_type: str,
    ts: datetime,
    node: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento explícito ao Event Log.

    Invariantes:
        - Cada chamada adiciona exatamente um evento
        - Eventos não são reordenados ou deduplicados
    """
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if node is not None:
        ev["node"] = node
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def input_written(
    manifest: MikrobManifest,
    *,
    key: str,
    version: int,
    invalidated: Sequence[str],
    ts: datetime,
) -> None:
    """Registra a escrita de um input e os nós marcados como stale por ela."""
    manifest.inputs.setdefault("versions", {})[key] = int(version)
    add_event(
        manifest,
        event_type="input_written",
        ts=ts,
        payload={"key": key, "version": int(version), "invalidated": list(invalidated)},
    )


def node_computed(
    manifest: MikrobManifest,
    *,
    node: str,
    revision: int,
    duration_ms: int,
    ts: datetime,
) -> None:
    """Registra um valor recém-calculado e armazenado no cache."""
    s = manifest.nodes.setdefault(node, {"node": node})
    s.pop("error", None)
    s.update(
        {
            "status": "resolved",
            "revision": int(revision),
            "computed_at": _iso(ts),
            "duration_ms": max(0, int(duration_ms)),
        }
    )
    add_event(
        manifest,
        event_type="node_computed",
        ts=ts,
        node=node,
        payload={"revision": int(revision), "duration_ms": s["duration_ms"]},
    )


def node_failed(
    manifest: MikrobManifest,
    *,
    node: str,
    error: Dict[str, Any],
    ts: datetime,
) -> None:
    """Registra a falha da transformação de um nó (payload de erro serializável)."""
    s = manifest.nodes.setdefault(node, {"node": node})
    s.update(
        {
            "status": "failed",
            "failed_at": _iso(ts),
            "error": dict(error),
        }
    )
    add_event(manifest, event_type="node_failed", ts=ts, node=node, payload={"type": error.get("type")})


def artifact_saved(
    manifest: MikrobManifest,
    *,
    name: str,
    path: str,
    fmt: str,
    ts: datetime,
    sha256: Optional[str] = None,
) -> None:
    """Registra uma exportação explícita (tabela, figura ou snapshot)."""
    payload: Dict[str, Any] = {"path": path, "format": fmt}
    if sha256 is not None:
        payload["sha256"] = sha256
    add_event(manifest, event_type="artifact_saved", ts=ts, node=name, payload=payload)


def save_manifest(manifest: MikrobManifest, path: Path) -> None:
    """
    Persiste o Manifest em JSON determinístico (chaves ordenadas, indentado).

    Diretórios intermediários são criados automaticamente.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> MikrobManifest:
    """Restaura um Manifest persistido por `save_manifest`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return MikrobManifest.from_dict(data)
