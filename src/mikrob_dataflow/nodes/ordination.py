"""Nós de diversidade beta: matriz de distâncias e ordenação."""

from __future__ import annotations

from typing import Optional

from skbio import DistanceMatrix

from mikrob_dataflow.analysis.beta import Ordination, compute_distance, ordinate
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset


def beta_distance(rarefied: RarefiedDataset, distance_method: Optional[str], *, default_method: str) -> DistanceMatrix:
    return compute_distance(rarefied.features, default_method if distance_method is None else distance_method)


def ordination(
    distance: DistanceMatrix,
    ordination_method: Optional[str],
    seed: Optional[int],
    *,
    default_method: str,
    default_seed: int,
    n_axes: int = 2,
) -> Ordination:
    return ordinate(
        distance,
        default_method if ordination_method is None else ordination_method,
        default_seed if seed is None else seed,
        n_axes,
    )
