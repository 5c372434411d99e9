# src/mikrob_dataflow/analysis/rarefaction.py
"""
Rarefação: subamostragem sem reposição até uma profundidade comum.

Decisões arquiteturais:
    - Sorteio hipergeométrico multivariado por amostra
      (`numpy.random.Generator.multivariate_hypergeometric`), com Generator
      semeado explicitamente; mesma seed, mesmo resultado
    - Amostras abaixo da profundidade são descartadas (reportadas em `dropped`)
    - Taxa que ficam zerados em todas as amostras são removidos

Invariantes:
    - Toda amostra mantida soma exatamente `depth`
    - O resultado preserva as invariantes do Dataset
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from mikrob_dataflow.core.exceptions import InsufficientDepthError, ValidationError

from .dataset import Dataset


@dataclass(frozen=True, eq=False)
class RarefiedDataset:
    """Dataset rarefeito mais os parâmetros que o produziram."""
    dataset: Dataset
    depth: int
    seed: int
    dropped: Tuple[str, ...] = ()

    @property
    def features(self) -> pd.DataFrame:
        return self.dataset.features

    @property
    def metadata(self) -> pd.DataFrame:
        return self.dataset.metadata

    @property
    def warnings(self) -> Tuple[str, ...]:
        if not self.dropped:
            return ()
        return (f"{len(self.dropped)} sample(s) below depth {self.depth} dropped: {', '.join(self.dropped)}",)


def _check_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value or int(value) <= 0:
        raise ValidationError(message=f"{name} must be a positive integer, got {value!r}", details={name: repr(value)})
    return int(value)


def rarefy_samples(features: pd.DataFrame, depth: int, seed: int) -> Tuple[pd.DataFrame, List[str]]:
    """
    Subamostra cada amostra para exatamente `depth` leituras.

    Returns:
        Tuple[pd.DataFrame, List[str]]: tabela rarefeita e amostras descartadas.

    Raises:
        InsufficientDepthError: Se nenhuma amostra atinge `depth`.
    """
    depth = _check_positive("depth", depth)
    totals = features.sum(axis=0)
    keep = [s for s in features.columns if totals[s] >= depth]
    dropped = [s for s in features.columns if totals[s] < depth]
    if not keep:
        raise InsufficientDepthError(
            message=f"No sample reaches rarefaction depth {depth}",
            details={"depth": depth, "max_sample_total": int(totals.max()) if len(totals) else 0},
            hint="Escolha uma profundidade menor ou igual ao maior total por amostra.",
        )

    rng = np.random.default_rng(seed)
    columns = {}
    for sample in keep:
        counts = features[sample].to_numpy(dtype=np.int64)
        columns[sample] = rng.multivariate_hypergeometric(counts, depth)

    table = pd.DataFrame(columns, index=features.index, columns=keep).astype(np.int64)
    table = table.loc[table.sum(axis=1) > 0]
    return table, dropped


def rarefy(dataset: Dataset, depth: int, seed: int) -> RarefiedDataset:
    table, dropped = rarefy_samples(dataset.features, depth, seed)
    return RarefiedDataset(
        dataset=dataset.subset(table),
        depth=int(depth),
        seed=int(seed),
        dropped=tuple(dropped),
    )


def curve_depths(total: int, step: int, min_depth: int = 1) -> List[int]:
    """Profundidades avaliadas para uma amostra: min_depth, step, 2·step, ..., total."""
    depths = {d for d in range(step, total + 1, step)}
    if min_depth <= total:
        depths.add(min_depth)
    if total > 0:
        depths.add(total)
    return sorted(depths)


def rarefaction_curve(features: pd.DataFrame, step: int, seed: int, min_depth: int = 1) -> pd.DataFrame:
    """
    Riqueza observada por amostra em profundidades crescentes.

    Cada amostra é avaliada até (e incluindo) seu próprio total de leituras.

    Returns:
        pd.DataFrame: formato longo com colunas `sample`, `depth`, `observed`.
    """
    step = _check_positive("step", step)
    rng = np.random.default_rng(seed)
    rows = []
    for sample in features.columns:
        counts = features[sample].to_numpy(dtype=np.int64)
        total = int(counts.sum())
        for depth in curve_depths(total, step, min_depth):
            drawn = rng.multivariate_hypergeometric(counts, depth)
            rows.append({"sample": sample, "depth": depth, "observed": int((drawn > 0).sum())})
    return pd.DataFrame(rows, columns=["sample", "depth", "observed"])
