"""
mikrob-dataflow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros reportados ao usuário.
Erros são artefatos da sessão: um nó que falha produz um payload
serializável, exibido apenas para aquele artefato e seus dependentes.

Requisitos do payload:

- explícito (código estável, não texto livre)
- serializável
- acionável (hint indica onde corrigir)

Nenhum stack trace cru chega ao usuário.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
    ExternalRoutineError,
    InsufficientDepthError,
    InsufficientResourceError,
    MikrobException,
    ParameterValidationError,
    SchemaMismatchError,
    UploadFormatError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MikrobErrorPayload:
    """
    Payload canônico de erro do mikrob-dataflow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva (verbatim para rotinas externas)
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao usuário (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Validação
VALIDATION_ERROR = "VALIDATION_ERROR"
SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
UPLOAD_FORMAT_ERROR = "UPLOAD_FORMAT_ERROR"
PARAMETER_INVALID = "PARAMETER_INVALID"

# Recursos
INSUFFICIENT_RESOURCE = "INSUFFICIENT_RESOURCE"
INSUFFICIENT_DEPTH = "INSUFFICIENT_DEPTH"

# Rotinas externas
EXTERNAL_ROUTINE_ERROR = "EXTERNAL_ROUTINE_ERROR"

# Engine
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"


# Ordem importa: subclasses antes das bases.
_EXCEPTION_CODES = (
    (SchemaMismatchError, SCHEMA_MISMATCH),
    (UploadFormatError, UPLOAD_FORMAT_ERROR),
    (ParameterValidationError, PARAMETER_INVALID),
    (ValidationError, VALIDATION_ERROR),
    (InsufficientDepthError, INSUFFICIENT_DEPTH),
    (InsufficientResourceError, INSUFFICIENT_RESOURCE),
    (ExternalRoutineError, EXTERNAL_ROUTINE_ERROR),
)


def error_code_for(exc: BaseException) -> str:
    for cls, code in _EXCEPTION_CODES:
        if isinstance(exc, cls):
            return code
    return ENGINE_EXECUTION_ERROR


def exception_to_error(exc: BaseException, *, node: Optional[str] = None) -> MikrobErrorPayload:
    """Converte exceções em MikrobErrorPayload (serializável, acionável).

    Regras:
    - MikrobException: já vem com message/details/hint.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, MikrobException):
        details = dict(exc.details or {})
        if node is not None:
            details.setdefault("node", node)
        return MikrobErrorPayload(
            type=error_code_for(exc),
            message=str(exc.message) or "Erro de execução",
            details=details,
            hint=exc.hint,
        )
    return engine_execution_error(
        node=node,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
    )


def engine_execution_error(
    *,
    node: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique os parâmetros e os dados enviados; nenhum fallback é aplicado automaticamente.",
) -> MikrobErrorPayload:
    return MikrobErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=exc_message or "Falha inesperada durante a resolução do artefato",
        details={
            "node": node,
            "exc_type": exc_type,
        },
        hint=hint,
    )
