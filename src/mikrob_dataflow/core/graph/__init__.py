# src/mikrob_dataflow/core/graph/__init__.py
"""
# Graph Core — mikrob-dataflow

Este pacote define as estruturas do grafo de artefatos: o estado raiz
mutável (InputStore), os nós derivados (ArtifactNode), o DAG que os liga
(DependencyGraph) e o cache por nó.

## Componentes

- **types**: `NodeKind`, `ResolutionStatus`, `Resolved`, `Pending`, `Failed`
- **node**: `ArtifactNode`, `artifact_node`
- **graph**: `DependencyGraph`, `build_graph` e erros estruturais
- **store**: `InputStore` (entradas versionadas)
- **cache**: `ArtifactCache`, `CacheEntry`
- **parameters**: domínio e normalização dos parâmetros nomeados

## Limites Explícitos

- Não resolve nós (ver `core.engine`)
- Não contém lógica analítica
"""

from .types import NodeKind, ResolutionStatus, Resolved, Pending, Failed, Resolution
from .node import ArtifactNode, artifact_node
from .graph import (
    CycleError,
    DependencyGraph,
    DuplicateNameError,
    UnknownDependencyError,
    build_graph,
)
from .store import InputStore, InputEntry, is_present
from .cache import ArtifactCache, CacheEntry
from .parameters import INPUT_KEYS, PARAMETER_KEYS, TABLE_KEYS, validate_input

__all__ = [
    "NodeKind",
    "ResolutionStatus",
    "Resolved",
    "Pending",
    "Failed",
    "Resolution",
    "ArtifactNode",
    "artifact_node",
    "DependencyGraph",
    "build_graph",
    "CycleError",
    "DuplicateNameError",
    "UnknownDependencyError",
    "InputStore",
    "InputEntry",
    "is_present",
    "ArtifactCache",
    "CacheEntry",
    "INPUT_KEYS",
    "PARAMETER_KEYS",
    "TABLE_KEYS",
    "validate_input",
]
