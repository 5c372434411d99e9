# src/mikrob_dataflow/analysis/diversity.py
"""
Índices de diversidade alfa por amostra (scikit-bio).

Índices suportados:
    - Observed   → número de taxa com contagem > 0
    - Chao1      → skbio.diversity.alpha.chao1
    - Shannon    → skbio.diversity.alpha.shannon (log natural)
    - Simpson    → skbio.diversity.alpha.simpson (1 − Σp²)
    - InvSimpson → 1 / Σp²

Falhas da biblioteca são reportadas como ExternalRoutineError com a
mensagem original.
"""

from __future__ import annotations

from typing import Callable, Dict, Sequence

import numpy as np
import pandas as pd
from skbio.diversity.alpha import chao1, shannon, simpson

from mikrob_dataflow.core.exceptions import ExternalRoutineError, ValidationError

DEFAULT_INDICES = ("Observed", "Chao1", "Shannon", "Simpson", "InvSimpson")


def _observed(counts: np.ndarray) -> float:
    return float((counts > 0).sum())


def _inv_simpson(counts: np.ndarray) -> float:
    dominance = 1.0 - float(simpson(counts))
    return float("inf") if dominance == 0 else 1.0 / dominance


INDEX_FUNCTIONS: Dict[str, Callable[[np.ndarray], float]] = {
    "Observed": _observed,
    "Chao1": lambda c: float(chao1(c)),
    "Shannon": lambda c: float(shannon(c, base=np.e)),
    "Simpson": lambda c: float(simpson(c)),
    "InvSimpson": _inv_simpson,
}


def compute_diversity(features: pd.DataFrame, indices: Sequence[str] = DEFAULT_INDICES) -> pd.DataFrame:
    """
    Calcula os índices pedidos para cada amostra (coluna de `features`).

    Returns:
        pd.DataFrame: uma linha por amostra, uma coluna por índice.
    """
    unknown = [i for i in indices if i not in INDEX_FUNCTIONS]
    if unknown:
        raise ValidationError(
            message=f"Unknown alpha diversity index: {', '.join(unknown)}",
            details={"unknown": list(unknown), "supported": list(INDEX_FUNCTIONS)},
        )

    rows = {}
    for sample in features.columns:
        counts = features[sample].to_numpy(dtype=np.int64)
        try:
            rows[sample] = {name: INDEX_FUNCTIONS[name](counts) for name in indices}
        except ValueError as exc:
            raise ExternalRoutineError(
                message=str(exc),
                details={"routine": "skbio.diversity.alpha", "sample": str(sample)},
            ) from exc

    out = pd.DataFrame.from_dict(rows, orient="index", columns=list(indices))
    out.index.name = "sample"
    return out
