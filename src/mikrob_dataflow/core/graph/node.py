# src/mikrob_dataflow/core/graph/node.py
"""
Contrato canônico de ArtifactNode.

Um ArtifactNode é um valor derivado nomeado: declara seus identificadores
a montante (chaves do InputStore e/ou outros nós), uma transformação pura
e o subconjunto desses identificadores que precisa estar presente para
que a transformação rode (required-set).

Princípios fundamentais:
    - Nós não conhecem o Evaluator nem o cache
    - Dependências são explícitas e estáticas (fixadas na construção do grafo)
    - A transformação é pura: mesmos inputs produzem a mesma saída;
      qualquer aleatoriedade recebe seed como identificador a montante

Invariantes:
    - `name` é não vazio e único no grafo
    - `upstreams` não contém duplicatas
    - `required` ⊆ `upstreams`
    - Upstreams não obrigatórios ausentes chegam à transformação como None

Limites explícitos:
    - Não valida o domínio dos valores recebidos (responsabilidade da transformação)
    - Não registra eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Mapping, Optional, Sequence, Tuple

from .types import NodeKind


@dataclass(frozen=True)
class ArtifactNode:
    """
    Nó derivado do grafo de artefatos.

    Atributos:
        - name: identificador único e estável
        - upstreams: identificadores a montante, na ordem dos argumentos de `transform`
        - transform: função pura `f(*valores_upstream) -> valor`
        - required: identificadores cuja ausência leva a `Pending`
        - kind: classificação semântica (informativa)
        - description: texto curto para diagnósticos
    """
    name: str
    upstreams: Tuple[str, ...]
    transform: Callable[..., Any] = field(compare=False)
    required: Optional[FrozenSet[str]] = None
    kind: NodeKind = NodeKind.DATASET
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("node.name must be a non-empty string")
        ups = tuple(self.upstreams)
        if len(set(ups)) != len(ups):
            raise ValueError(f"Node '{self.name}' declares duplicate upstreams: {list(ups)}")
        required = frozenset(ups) if self.required is None else frozenset(self.required)
        extra = sorted(required - set(ups))
        if extra:
            raise ValueError(f"Node '{self.name}' requires undeclared upstreams: {extra}")
        if not callable(self.transform):
            raise ValueError(f"Node '{self.name}' transform must be callable")
        object.__setattr__(self, "upstreams", ups)
        object.__setattr__(self, "required", required)

    def is_required(self, upstream: str) -> bool:
        return upstream in self.required  # type: ignore[operator]

    def compute(self, values: Mapping[str, Any]) -> Any:
        """Invoca a transformação com os valores na ordem de `upstreams`."""
        return self.transform(*[values.get(u) for u in self.upstreams])


def artifact_node(
    name: str,
    upstreams: Sequence[str],
    transform: Callable[..., Any],
    *,
    required: Optional[Sequence[str]] = None,
    kind: NodeKind = NodeKind.DATASET,
    description: str = "",
) -> ArtifactNode:
    """Atalho de construção aceitando listas simples."""
    return ArtifactNode(
        name=name,
        upstreams=tuple(upstreams),
        transform=transform,
        required=None if required is None else frozenset(required),
        kind=kind,
        description=description,
    )
