"""Nós de teste de grupo: PERMANOVA (beta) e ANOVA (alfa) contra covariáveis."""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
from skbio import DistanceMatrix

from mikrob_dataflow.analysis.rarefaction import RarefiedDataset
from mikrob_dataflow.analysis.stats import anova, permanova
from mikrob_dataflow.core.exceptions import ValidationError


def beta_group_test(
    distance: DistanceMatrix,
    rarefied: RarefiedDataset,
    covariates: Sequence[str],
    permutations: Optional[int],
    seed: Optional[int],
    *,
    default_permutations: int,
    default_seed: int,
) -> pd.DataFrame:
    return permanova(
        distance,
        rarefied.metadata,
        list(covariates),
        permutations=default_permutations if permutations is None else permutations,
        seed=default_seed if seed is None else seed,
    )


def alpha_group_test(
    alpha: pd.DataFrame,
    rarefied: RarefiedDataset,
    covariates: Sequence[str],
    alpha_metric: Optional[str],
    *,
    default_metric: str,
) -> pd.DataFrame:
    metric = default_metric if alpha_metric is None else alpha_metric
    if metric not in alpha.columns:
        raise ValidationError(
            message=f"Alpha metric not computed: {metric}",
            details={"metric": metric, "available": list(alpha.columns)},
        )
    return anova(alpha[metric], rarefied.metadata, list(covariates))
