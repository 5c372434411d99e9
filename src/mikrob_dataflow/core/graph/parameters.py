# src/mikrob_dataflow/core/graph/parameters.py
"""
Modelo de parâmetros nomeados da sessão.

Cada parâmetro escolhido pelo usuário é uma chave do InputStore. Antes
da escrita, o valor passa por `validate_input`, que normaliza e rejeita
valores fora do domínio reconhecido.

Decisões arquiteturais:
    - `None` é sempre aceito e significa "não definido" (limpa o parâmetro)
    - Inteiros são aceitos também como floats integrais (ex.: 100.0)
    - `covariates` é normalizado para tupla ordenada e sem duplicatas
    - Chaves de tabela aceitam apenas `pandas.DataFrame`
    - Chaves desconhecidas passam sem validação (grafos customizados)

Limites explícitos:
    - Não escreve no InputStore
    - Não conhece o conteúdo das tabelas (ex.: se `group_var` existe no metadata)
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Dict, Iterable, Tuple

import pandas as pd

from mikrob_dataflow.core.exceptions import ParameterValidationError


# Chaves de tabela (uploads)
ASV_TABLE = "asv_table"
TAXONOMY_TABLE = "taxonomy_table"
METADATA_TABLE = "metadata_table"

TABLE_KEYS: Tuple[str, ...] = (ASV_TABLE, TAXONOMY_TABLE, METADATA_TABLE)

TAX_LEVELS: Tuple[str, ...] = ("Phylum", "Class", "Order", "Family", "Genus", "Species")
DISTANCE_METHODS: Tuple[str, ...] = ("bray", "jaccard", "euclidean")
ORDINATION_METHODS: Tuple[str, ...] = ("PCoA", "NMDS")
ALPHA_METRICS: Tuple[str, ...] = ("Observed", "Chao1", "Shannon", "Simpson", "InvSimpson")

DEFAULT_SEED = 711


def _fail(key: str, value: Any, expected: str) -> ParameterValidationError:
    return ParameterValidationError(
        message=f"Invalid value for '{key}': {value!r} (expected {expected})",
        details={"parameter": key, "value": repr(value), "expected": expected},
        hint=f"Escolha um valor válido para '{key}'.",
    )


def _as_int(key: str, value: Any, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise _fail(key, value, f"integer >= {minimum}")
    if float(value) != int(value):
        raise _fail(key, value, f"integer >= {minimum}")
    out = int(value)
    if out < minimum:
        raise _fail(key, value, f"integer >= {minimum}")
    return out


def _positive_int(key: str, value: Any) -> int:
    return _as_int(key, value, minimum=1)


def _non_negative_int(key: str, value: Any) -> int:
    return _as_int(key, value, minimum=0)


def _percent(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise _fail(key, value, "number in 0..100")
    out = float(value)
    if not 0.0 <= out <= 100.0:
        raise _fail(key, value, "number in 0..100")
    return out


def _choice(options: Tuple[str, ...]) -> Callable[[str, Any], str]:
    def check(key: str, value: Any) -> str:
        if not isinstance(value, str) or value not in options:
            raise _fail(key, value, "one of " + ", ".join(options))
        return value
    return check


def _column_name(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail(key, value, "non-empty column name")
    return value


def _column_set(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        items: Iterable[Any] = [value]
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        raise _fail(key, value, "collection of column names")
    out = []
    for item in (sorted(items, key=str) if isinstance(value, (set, frozenset)) else items):
        name = _column_name(key, item)
        if name not in out:
            out.append(name)
    return tuple(out)


def _table(key: str, value: Any) -> pd.DataFrame:
    if not isinstance(value, pd.DataFrame):
        raise _fail(key, type(value).__name__, "pandas.DataFrame")
    return value


VALIDATORS: Dict[str, Callable[[str, Any], Any]] = {
    ASV_TABLE: _table,
    TAXONOMY_TABLE: _table,
    METADATA_TABLE: _table,
    "rarefy_depth": _positive_int,
    "depth_step": _positive_int,
    "seed": _non_negative_int,
    "min_count": _non_negative_int,
    "min_samples": _non_negative_int,
    "confidence_threshold": _percent,
    "tax_level": _choice(TAX_LEVELS),
    "top_n": _positive_int,
    "distance_method": _choice(DISTANCE_METHODS),
    "ordination_method": _choice(ORDINATION_METHODS),
    "group_var": _column_name,
    "alpha_metric": _choice(ALPHA_METRICS),
    "covariates": _column_set,
    "permutations": _positive_int,
}

PARAMETER_KEYS: Tuple[str, ...] = tuple(k for k in VALIDATORS if k not in TABLE_KEYS)
INPUT_KEYS: Tuple[str, ...] = tuple(VALIDATORS)


def validate_input(key: str, value: Any) -> Any:
    """
    Valida e normaliza o valor de uma chave do InputStore.

    Returns:
        Any: Valor normalizado (ex.: `covariates` como tupla).

    Raises:
        ParameterValidationError: Se o valor estiver fora do domínio.
    """
    if value is None:
        return None
    validator = VALIDATORS.get(key)
    if validator is None:
        return value
    return validator(key, value)
