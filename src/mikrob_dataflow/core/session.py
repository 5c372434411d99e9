# src/mikrob_dataflow/core/session.py
"""
Session — contexto canônico de uma sessão interativa do mikrob-dataflow.

A Session é dona de todo o estado de um usuário: configuração efetiva,
InputStore, grafo de artefatos, cache, Evaluator, InvalidationTracker,
log estruturado de eventos, warnings por nó e Manifest.

A Session é o **único meio permitido** de:
- escrever inputs (uploads e parâmetros)
- resolver artefatos
- registrar logs estruturados e warnings não fatais

Princípios fundamentais:
- Isolamento por sessão (nenhum singleton de processo)
- Toda escrita passa pela validação de parâmetros e pelo InvalidationTracker
- Toda leitura passa pelo Evaluator
"""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from mikrob_dataflow.core.config import compute_config_hash, deep_merge, load_config
from mikrob_dataflow.core.engine.evaluator import Evaluator
from mikrob_dataflow.core.engine.invalidation import InvalidationTracker
from mikrob_dataflow.core.graph.cache import ArtifactCache
from mikrob_dataflow.core.graph.graph import DependencyGraph
from mikrob_dataflow.core.graph.parameters import validate_input
from mikrob_dataflow.core.graph.store import InputStore
from mikrob_dataflow.core.graph.types import Resolution
from mikrob_dataflow.core.traceability.manifest import MikrobManifest, create_manifest
from mikrob_dataflow.ingest import fingerprint, read_table
from mikrob_dataflow.nodes.catalog import build_pipeline_graph

DEFAULT_MAX_EVENTS = 10_000


@dataclass
class Session:
    """
    Sessão de análise.

    Campos canônicos:
    - session_id: identificador único da sessão
    - created_at: timestamp UTC de criação
    - config: configuração efetiva (defaults + overrides deep-merge)
    - graph: grafo de artefatos (topologia fixa)
    - store / cache: estado raiz e valores derivados
    - evaluator / tracker: leitura e escrita
    - warnings: warnings por nó
    - events: log estruturado de eventos (os `session.max_events` mais recentes)
    - manifest: registro forense (Event Log serializável)
    - uploads: fingerprint (sha256, bytes) dos arquivos enviados, por chave
    """

    session_id: str
    created_at: str
    config: Dict[str, Any]
    graph: DependencyGraph
    store: InputStore = field(default_factory=InputStore)
    cache: ArtifactCache = field(default_factory=ArtifactCache)
    manifest: Optional[MikrobManifest] = None

    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: Deque[Dict[str, Any]] = field(default_factory=deque)
    uploads: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    evaluator: Evaluator = field(init=False, repr=False)
    tracker: InvalidationTracker = field(init=False, repr=False)

    def __post_init__(self) -> None:
        session_cfg = self.config.get("session", {}) or {}
        # log limitado: sessões longas re-resolvem artefatos a cada refresh
        self.events = deque(self.events, maxlen=int(session_cfg.get("max_events", DEFAULT_MAX_EVENTS)))
        if self.manifest is None:
            self.manifest = create_manifest(
                session_id=self.session_id,
                started_at=datetime.fromisoformat(self.created_at),
                version=str(session_cfg.get("version", "")),
                config_hash=compute_config_hash(self.config),
            )
        self.evaluator = Evaluator(
            graph=self.graph,
            store=self.store,
            cache=self.cache,
            log=self.log,
            warn=self.add_warning,
            manifest=self.manifest,
        )
        self.tracker = InvalidationTracker(
            graph=self.graph,
            store=self.store,
            cache=self.cache,
            log=self.log,
            manifest=self.manifest,
        )

    # -----------------------------
    # Construção
    # -----------------------------
    @classmethod
    def create(
        cls,
        config: Optional[Dict[str, Any]] = None,
        graph: Optional[DependencyGraph] = None,
        *,
        session_id: Optional[str] = None,
    ) -> "Session":
        """
        Cria uma sessão com os defaults empacotados deep-merged com `config`.

        Sem `graph`, o grafo do pipeline de microbioma é construído a partir
        da configuração efetiva. Os parâmetros de `config.parameters` são
        escritos no InputStore (versão 1) na criação.
        """
        effective = load_config()
        if config:
            effective = deep_merge(effective, config)
        if graph is None:
            graph = build_pipeline_graph(effective)

        session = cls(
            session_id=session_id or uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc).isoformat(),
            config=effective,
            graph=graph,
        )
        for key, value in sorted((effective.get("parameters", {}) or {}).items()):
            if graph.is_input(key):
                session.set_input(key, value)
        return session

    # -----------------------------
    # Escrita
    # -----------------------------
    def set_input(self, key: str, value: Any) -> List[str]:
        """Valida, escreve e invalida; retorna os nós marcados como stale."""
        normalized = validate_input(key, value)
        return self.tracker.on_write(key, normalized)

    def upload(self, key: str, path: Any) -> List[str]:
        """Lê um arquivo enviado e escreve a tabela resultante em `key`."""
        table = read_table(key, path)
        fp = fingerprint(path)
        self.uploads[key] = {"path": fp.path, "sha256": fp.sha256, "size_bytes": fp.size_bytes}
        self.log(node=key, level="info", message="file uploaded", **self.uploads[key])
        return self.set_input(key, table)

    # -----------------------------
    # Leitura
    # -----------------------------
    def resolve(self, name: str) -> Resolution:
        return self.evaluator.resolve(name)

    def status(self) -> Dict[str, str]:
        return self.evaluator.status()

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, node: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "session_id": self.session_id,
            "node": node,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, node: str, message: str) -> None:
        if node not in self.warnings:
            self.warnings[node] = []
        self.warnings[node].append(message)
