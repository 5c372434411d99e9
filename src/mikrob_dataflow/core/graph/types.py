# src/mikrob_dataflow/core/graph/types.py
"""
Tipos canônicos do grafo de artefatos do mikrob-dataflow.

Este módulo define as estruturas que padronizam a comunicação entre
Evaluator, Session e camada de apresentação.

Componentes principais:
    - NodeKind         → classificação semântica de ArtifactNodes
    - ResolutionStatus → enum de estados terminais (RESOLVED, PENDING, FAILED)
    - Resolved         → valor resolvido e sua revisão
    - Pending          → espera por inputs obrigatórios (não é erro)
    - Failed           → falha local ao nó, contagiosa apenas a jusante

Princípios fundamentais:
    - Resoluções são imutáveis
    - "Esperando input" é um valor explícito, não exceção nem bloqueio
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não resolve nós
    - Não decide políticas de cache
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from mikrob_dataflow.core.errors import MikrobErrorPayload


class NodeKind(str, Enum):
    """
    Tipos semânticos de ArtifactNodes.

    O tipo é puramente informativo: o Evaluator não o utiliza para decidir
    resolução, cache ou invalidação. Serve para diagnósticos, manifest e
    para a camada de apresentação escolher um renderizador.

    Tipos definidos:
        - DATASET: contêiner (features, taxonomy, metadata) ou derivado dele
        - PARAMETER: valor escalar derivado (ex.: profundidade efetiva)
        - DIVERSITY: índices alfa / curvas de rarefação
        - ORDINATION: distâncias beta e embeddings
        - ABUNDANCE: agregações taxonômicas
        - STATISTIC: testes de grupo (PERMANOVA / ANOVA)
        - SUMMARY: resumos descritivos
    """
    DATASET = "dataset"
    PARAMETER = "parameter"
    DIVERSITY = "diversity"
    ORDINATION = "ordination"
    ABUNDANCE = "abundance"
    STATISTIC = "statistic"
    SUMMARY = "summary"


class ResolutionStatus(str, Enum):
    """
    Estados terminais de uma resolução.

    Valores textuais estáveis, usados diretamente em eventos e manifest.
    """
    RESOLVED = "resolved"
    PENDING = "pending"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolved:
    """Valor resolvido de um identificador (input ou nó).

    `revision` é a versão do valor: versão do InputStore para inputs,
    revisão da entrada de cache para nós. Compõe os version-vectors
    dos nós a jusante.
    """
    name: str
    value: Any
    revision: int

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.RESOLVED


@dataclass(frozen=True)
class Pending:
    """Resolução adiada até que inputs obrigatórios existam.

    `missing` lista os inputs raiz ausentes (transitivamente).
    `superseded` indica que um resultado foi descartado porque algum
    input mudou durante o cálculo; o chamador deve requisitar de novo.
    """
    name: str
    missing: Tuple[str, ...] = ()
    superseded: bool = False

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.PENDING

    @property
    def message(self) -> str:
        if self.superseded:
            return f"{self.name}: inputs changed during computation, request again"
        return f"waiting for input {', '.join(self.missing)}"


@dataclass(frozen=True)
class Failed:
    """Falha de resolução.

    `origin` é o nó cuja transformação levantou o erro; nós a jusante
    repassam o mesmo payload com o mesmo `origin`.
    """
    name: str
    error: MikrobErrorPayload
    origin: str
    exception: Optional[BaseException] = field(default=None, repr=False, compare=False)

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.FAILED

    @property
    def message(self) -> str:
        return self.error.message


Resolution = Union[Resolved, Pending, Failed]
