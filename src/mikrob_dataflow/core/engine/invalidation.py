# src/mikrob_dataflow/core/engine/invalidation.py
"""
InvalidationTracker — propagação de escritas do InputStore.

Ao receber uma escrita, o tracker grava o valor no InputStore
(incrementando a versão) e marca como stale todos os nós que dependem,
direta ou transitivamente, da chave escrita. Nada é recalculado aqui:
o recálculo acontece sob demanda, no próximo `resolve`.

Decisões arquiteturais:
    - Entradas stale são mantidas (não removidas) para permitir revalidação
      quando o version-vector ainda confere
    - A lista de invalidados segue a ordem topológica do grafo

Invariantes:
    - Toda escrita passa por `on_write`
    - Após `on_write(k, v)`, nenhum dependente de `k` é entregue sem recálculo
      ou revalidação

Limites explícitos:
    - Não valida o domínio do valor (ver `core.graph.parameters`)
    - Não resolve nós
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from mikrob_dataflow.core.graph.cache import ArtifactCache
from mikrob_dataflow.core.graph.graph import DependencyGraph
from mikrob_dataflow.core.graph.store import InputStore
from mikrob_dataflow.core.traceability.manifest import MikrobManifest, input_written


class InvalidationTracker:
    """Escreve no InputStore e invalida os dependentes da chave."""

    def __init__(
        self,
        *,
        graph: DependencyGraph,
        store: InputStore,
        cache: ArtifactCache,
        log: Optional[Callable[..., None]] = None,
        manifest: Optional[MikrobManifest] = None,
    ) -> None:
        self.graph = graph
        self.store = store
        self.cache = cache
        self._log = log
        self._manifest = manifest
        self.writes = 0

    def on_write(self, key: str, value: Any) -> List[str]:
        """
        Registra a escrita de `key` e retorna os nós marcados como stale.

        Raises:
            KeyError: Se `key` não foi declarado como input do grafo.
        """
        if not self.graph.is_input(key):
            raise KeyError(f"Unknown input key: {key}")

        version = self.store.write(key, value)
        self.writes += 1

        dependents = self.graph.dependents_of(key)
        invalidated = [name for name in dependents if self.cache.mark_stale(name)]

        if self._log is not None:
            self._log(
                node=key,
                level="info",
                message="input written",
                version=version,
                invalidated=invalidated,
            )
        if self._manifest is not None:
            input_written(
                self._manifest,
                key=key,
                version=version,
                invalidated=invalidated,
                ts=datetime.now(timezone.utc),
            )
        return invalidated
