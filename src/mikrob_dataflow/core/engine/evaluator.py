# src/mikrob_dataflow/core/engine/evaluator.py
"""
Evaluator — resolução sob demanda de artefatos.

Dado o nome de um identificador (nó ou input), o Evaluator retorna
`Resolved`, `Pending` ou `Failed`, recalculando apenas o que está
desatualizado e reaproveitando o cache para o resto.

Algoritmo (por nó):
    1. Entrada de cache não stale → valor em cache (mesmo objeto), sem recalcular
    2. Resolver upstreams (DFS, memoizado dentro de uma passada)
         - qualquer upstream `Failed` → `Failed` com o mesmo payload e origem
         - upstream obrigatório `Pending` → `Pending` com a união dos inputs ausentes
         - upstream não obrigatório `Pending` → argumento None
    3. Entrada stale cujo version-vector ainda confere → revalidada sem recalcular
    4. Invocar a transformação
         - exceção → `Failed` (payload serializável, nada é cacheado)
         - sucesso → rechecar o version-vector; se algum input mudou durante
           o cálculo, o resultado é descartado (`Pending(superseded=True)`)

Decisões arquiteturais:
    - O version-vector de um nó combina versões do InputStore (inputs)
      e revisões do cache (nós); nós stale ou sem entrada contam como None
    - Exceções de transformação nunca escapam de `resolve`
    - Eventos estruturados são emitidos via callback `log` (Session.log)
    - Valores com atributo `warnings` têm seus avisos repassados a `warn`
      (Session.add_warning) quando calculados

Invariantes:
    - Um valor em cache nunca é entregue se algum upstream mudou desde seu cálculo
    - Resolver um nó nunca escreve no InputStore
    - Sem escritas entre duas chamadas, a segunda retorna o mesmo objeto

Limites explícitos:
    - Não invalida entradas (ver InvalidationTracker)
    - Não executa em paralelo
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from mikrob_dataflow.core.errors import exception_to_error
from mikrob_dataflow.core.graph.cache import ArtifactCache, VersionVector
from mikrob_dataflow.core.graph.graph import DependencyGraph
from mikrob_dataflow.core.graph.node import ArtifactNode
from mikrob_dataflow.core.graph.store import InputStore
from mikrob_dataflow.core.graph.types import Failed, Pending, Resolution, Resolved
from mikrob_dataflow.core.traceability.manifest import MikrobManifest, node_computed, node_failed

LogFn = Callable[..., None]

# Estados de diagnóstico (status)
CACHED = "cached"
STALE = "stale"
EMPTY = "empty"


class Evaluator:
    """Resolve identificadores do grafo contra InputStore e cache."""

    def __init__(
        self,
        *,
        graph: DependencyGraph,
        store: InputStore,
        cache: ArtifactCache,
        log: Optional[LogFn] = None,
        warn: Optional[LogFn] = None,
        manifest: Optional[MikrobManifest] = None,
    ) -> None:
        self.graph = graph
        self.store = store
        self.cache = cache
        self._log = log
        self._warn = warn
        self._manifest = manifest
        self.computations: Dict[str, int] = {}

    def _emit(self, *, node: str, level: str, message: str, **extra: Any) -> None:
        if self._log is not None:
            self._log(node=node, level=level, message=message, **extra)

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def resolve(self, name: str) -> Resolution:
        """
        Resolve um nó ou input.

        Raises:
            KeyError: Se `name` não existe no grafo.
        """
        if not self.graph.contains(name):
            raise KeyError(name)
        return self._resolve(name, {})

    def status(self) -> Dict[str, str]:
        """Estado de cache de cada nó em ordem topológica, sem forçar cálculo."""
        out: Dict[str, str] = {}
        for name in self.graph.topological_order():
            if not self.graph.is_node(name):
                continue
            entry = self.cache.get(name)
            if entry is None:
                out[name] = EMPTY
            elif entry.stale:
                out[name] = STALE
            else:
                out[name] = CACHED
        return out

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------
    def _current_vector(self, node: ArtifactNode) -> VersionVector:
        vector: List[Optional[int]] = []
        for up in node.upstreams:
            if self.graph.is_input(up):
                vector.append(self.store.version(up))
            else:
                vector.append(self.cache.revision(up))
        return tuple(vector)

    def _resolve(self, name: str, memo: Dict[str, Resolution]) -> Resolution:
        if name in memo:
            return memo[name]
        if self.graph.is_input(name):
            result = self._resolve_input(name)
        else:
            result = self._resolve_node(self.graph.get(name), memo)
        memo[name] = result
        return result

    def _resolve_input(self, key: str) -> Resolution:
        if not self.store.has(key):
            return Pending(name=key, missing=(key,))
        return Resolved(name=key, value=self.store.get(key), revision=self.store.version(key))

    def _resolve_node(self, node: ArtifactNode, memo: Dict[str, Resolution]) -> Resolution:
        name = node.name
        entry = self.cache.get(name)
        if entry is not None and not entry.stale:
            self._emit(node=name, level="debug", message="cache hit", revision=entry.revision)
            return Resolved(name=name, value=entry.value, revision=entry.revision)

        values: Dict[str, Any] = {}
        missing: List[str] = []
        for up in node.upstreams:
            res = self._resolve(up, memo)
            if isinstance(res, Failed):
                self._emit(node=name, level="warning", message="upstream failed", origin=res.origin)
                return Failed(name=name, error=res.error, origin=res.origin, exception=res.exception)
            if isinstance(res, Pending):
                if res.superseded:
                    return Pending(name=name, superseded=True)
                if node.is_required(up):
                    missing.extend(res.missing)
                values[up] = None
            else:
                values[up] = res.value

        if missing:
            ordered: Tuple[str, ...] = tuple(sorted(set(missing)))
            self._emit(node=name, level="info", message="pending", missing=list(ordered))
            return Pending(name=name, missing=ordered)

        vector = self._current_vector(node)
        if entry is not None and entry.is_valid(vector):
            revalidated = self.cache.revalidate(name)
            self._emit(node=name, level="debug", message="revalidated", revision=revalidated.revision)
            return Resolved(name=name, value=revalidated.value, revision=revalidated.revision)

        return self._compute(node, values, vector)

    def _compute(self, node: ArtifactNode, values: Dict[str, Any], vector: VersionVector) -> Resolution:
        name = node.name
        started = time.perf_counter()
        try:
            value = node.compute(values)
        except Exception as exc:
            error = exception_to_error(exc, node=name)
            self._emit(node=name, level="error", message="failed", error_type=error.type, error=error.message)
            if self._manifest is not None:
                node_failed(self._manifest, node=name, error=error.to_dict(), ts=datetime.now(timezone.utc))
            return Failed(name=name, error=error, origin=name, exception=exc)
        duration_ms = int((time.perf_counter() - started) * 1000)
        self.computations[name] = self.computations.get(name, 0) + 1

        if self._current_vector(node) != vector:
            self._emit(node=name, level="warning", message="superseded", duration_ms=duration_ms)
            return Pending(name=name, superseded=True)

        entry = self.cache.store(name, value, vector)
        self._emit(node=name, level="info", message="computed", revision=entry.revision, duration_ms=duration_ms)
        messages = getattr(value, "warnings", ())
        if self._warn is not None and isinstance(messages, (list, tuple)):
            for message in messages:
                self._warn(node=name, message=message)
        if self._manifest is not None:
            node_computed(
                self._manifest,
                node=name,
                revision=entry.revision,
                duration_ms=duration_ms,
                ts=datetime.now(timezone.utc),
            )
        return Resolved(name=name, value=value, revision=entry.revision)
