"""Nós de diversidade alfa: curva de rarefação, índices por amostra e resumo por grupo."""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from mikrob_dataflow.analysis.dataset import Dataset
from mikrob_dataflow.analysis.diversity import compute_diversity
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset, rarefaction_curve
from mikrob_dataflow.analysis.taxonomy import summarize_alpha


def curve(
    dataset: Dataset,
    depth_step: Optional[int],
    seed: Optional[int],
    *,
    default_step: int,
    default_seed: int,
    min_depth: int = 1,
) -> pd.DataFrame:
    step = default_step if depth_step is None else depth_step
    return rarefaction_curve(dataset.features, step, default_seed if seed is None else seed, min_depth)


def alpha_diversity(rarefied: RarefiedDataset, *, indices: Sequence[str]) -> pd.DataFrame:
    return compute_diversity(rarefied.features, indices)


def alpha_summary(
    alpha: pd.DataFrame,
    rarefied: RarefiedDataset,
    group_var: str,
    alpha_metric: Optional[str],
    *,
    default_metric: str,
) -> pd.DataFrame:
    metric = default_metric if alpha_metric is None else alpha_metric
    return summarize_alpha(alpha, rarefied.metadata, group_var, metric)
