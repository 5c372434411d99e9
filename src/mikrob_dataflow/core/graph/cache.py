# src/mikrob_dataflow/core/graph/cache.py
"""
Cache de artefatos por nó.

Cada entrada guarda o último valor calculado, o version-vector dos
upstreams usados para produzi-lo, uma revisão monotônica e a flag de
staleness.

Regra de validade:
    uma entrada é válida se e somente se o version-vector armazenado é
    igual ao version-vector atual de todos os upstreams declarados.
    A flag `stale` é a marcação barata feita pelo InvalidationTracker;
    o version-vector é a verdade.

Decisões arquiteturais:
    - `CacheEntry` é imutável; mudanças criam uma nova instância
      (dataclasses.replace)
    - `revision` cresce a cada valor armazenado e funciona como "versão"
      do nó dentro do vector dos nós a jusante
    - Apenas Evaluator (`store`) e InvalidationTracker (`mark_stale`) mutam o cache

Limites explícitos:
    - Não calcula valores
    - Não conhece o InputStore
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

VersionVector = Tuple[Optional[int], ...]


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    vector: VersionVector
    revision: int
    stale: bool = False

    def is_valid(self, current: VersionVector) -> bool:
        return self.vector == current


class ArtifactCache:
    """Entradas de cache indexadas pelo nome do nó (criadas sob demanda)."""

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, name: str) -> Optional[CacheEntry]:
        return self._entries.get(name)

    def revision(self, name: str) -> Optional[int]:
        """Revisão atual do nó, ou None se ausente ou stale."""
        entry = self._entries.get(name)
        if entry is None or entry.stale:
            return None
        return entry.revision

    def store(self, name: str, value: Any, vector: VersionVector) -> CacheEntry:
        previous = self._entries.get(name)
        revision = (previous.revision if previous is not None else 0) + 1
        entry = CacheEntry(value=value, vector=tuple(vector), revision=revision, stale=False)
        self._entries[name] = entry
        return entry

    def revalidate(self, name: str) -> CacheEntry:
        entry = replace(self._entries[name], stale=False)
        self._entries[name] = entry
        return entry

    def mark_stale(self, name: str) -> bool:
        """Marca a entrada como stale; retorna False se não havia entrada válida."""
        entry = self._entries.get(name)
        if entry is None or entry.stale:
            return False
        self._entries[name] = replace(entry, stale=True)
        return True

    def names(self) -> List[str]:
        return sorted(self._entries)
