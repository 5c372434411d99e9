"""
mikrob-dataflow — Canonical Exceptions (v1)

Este módulo define as exceções tipadas levantadas pelas transformações
do grafo de artefatos e pelas rotinas analíticas encapsuladas.

Objetivo:
- Permitir que nós e rotinas levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para MikrobErrorPayload
- Separar erro de validação, falta de recurso e falha de rotina externa

Taxonomia:
- ValidationError            → upload malformado, divergência de schema, parâmetro inválido
- InsufficientResourceError  → recurso insuficiente (ex.: profundidade de biblioteca)
- ExternalRoutineError       → falha da rotina estatística delegada (mensagem verbatim)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Nenhuma exceção representa o estado "pending": ausência de input não é erro.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class MikrobException(Exception):
    """Base class para exceções internas do mikrob-dataflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Validação (uploads, schema, parâmetros)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationError(MikrobException):
    """Entrada malformada; o nó e seus dependentes param de computar."""


@dataclass(frozen=True)
class SchemaMismatchError(ValidationError):
    """Conjuntos de taxon/sample ids divergem entre as tabelas do Dataset."""


@dataclass(frozen=True)
class UploadFormatError(ValidationError):
    """Arquivo enviado não pôde ser interpretado como tabela válida."""


@dataclass(frozen=True)
class ParameterValidationError(ValidationError):
    """Valor fora do domínio reconhecido para um parâmetro nomeado."""


# ---------------------------------------------------------------------------
# Recursos insuficientes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsufficientResourceError(MikrobException):
    """Recurso insuficiente para prosseguir (fatal apenas quando nada resta)."""


@dataclass(frozen=True)
class InsufficientDepthError(InsufficientResourceError):
    """Nenhuma amostra atinge a profundidade de rarefação solicitada."""


# ---------------------------------------------------------------------------
# Rotinas externas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExternalRoutineError(MikrobException):
    """Rotina analítica delegada falhou; mensagem original preservada."""
