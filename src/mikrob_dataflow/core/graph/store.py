# src/mikrob_dataflow/core/graph/store.py
"""
InputStore — estado raiz mutável da sessão.

O InputStore guarda as tabelas enviadas (`asv_table`, `taxonomy_table`,
`metadata_table`) e os parâmetros escolhidos pelo usuário. É o único
estado mutável na raiz do grafo; todo o resto é derivado.

Decisões arquiteturais:
    - Cada chave possui uma versão monotônica, incrementada a cada escrita
      (inclusive escritas de valor igual ou de None)
    - Chaves nunca escritas têm versão 0
    - A única via de mutação é `write`, chamada exclusivamente pelo
      InvalidationTracker

Invariantes:
    - Versões nunca diminuem
    - `has(key)` é falso para valores ausentes ou vazios

Limites explícitos:
    - Não valida domínio de parâmetros (ver `parameters`)
    - Não invalida cache (ver `InvalidationTracker`)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping


@dataclass(frozen=True)
class InputEntry:
    key: str
    value: Any
    version: int


def is_present(value: Any) -> bool:
    """Presença "não vazia": None, tabelas vazias e coleções vazias contam como ausentes."""
    if value is None:
        return False
    empty = getattr(value, "empty", None)
    if isinstance(empty, bool):
        return not empty
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return True


class InputStore:
    """Entradas versionadas da sessão."""

    def __init__(self) -> None:
        self._entries: Dict[str, InputEntry] = {}

    def write(self, key: str, value: Any) -> int:
        """Grava `value` em `key` e retorna a nova versão."""
        previous = self._entries.get(key)
        version = (previous.version if previous is not None else 0) + 1
        self._entries[key] = InputEntry(key=key, value=value, version=version)
        return version

    def version(self, key: str) -> int:
        entry = self._entries.get(key)
        return entry.version if entry is not None else 0

    def has(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and is_present(entry.value)

    def get(self, key: str) -> Any:
        if key not in self._entries:
            raise KeyError(key)
        return self._entries[key].value

    def entry(self, key: str) -> InputEntry:
        if key not in self._entries:
            raise KeyError(key)
        return self._entries[key]

    def keys(self) -> List[str]:
        return sorted(self._entries)

    def versions(self) -> Mapping[str, int]:
        return {k: e.version for k, e in sorted(self._entries.items())}
