# src/mikrob_dataflow/analysis/beta.py
"""
Diversidade beta: matrizes de distância e ordenação.

Distâncias (scipy `pdist`, amostras como linhas):
    - bray      → Bray–Curtis sobre contagens
    - jaccard   → Jaccard sobre presença/ausência
    - euclidean → Euclidiana sobre contagens

O resultado é um `skbio.DistanceMatrix` indexado pelos sample ids.

Ordenação:
    - PCoA → `skbio.stats.ordination.pcoa` (com proporção explicada)
    - NMDS → `sklearn.manifold.MDS` não métrico sobre a matriz pré-computada (com stress)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform
from skbio import DistanceMatrix
from skbio.stats.ordination import pcoa
from sklearn.manifold import MDS

from mikrob_dataflow.core.exceptions import ExternalRoutineError, ValidationError

_PDIST_METRICS = {
    "bray": "braycurtis",
    "jaccard": "jaccard",
    "euclidean": "euclidean",
}


@dataclass(frozen=True, eq=False)
class Ordination:
    method: str
    coordinates: pd.DataFrame
    proportion_explained: Optional[pd.Series] = None
    stress: Optional[float] = None

    def axis_labels(self):
        labels = []
        for axis in self.coordinates.columns:
            if self.proportion_explained is not None and axis in self.proportion_explained.index:
                labels.append(f"{axis} ({self.proportion_explained[axis]:.1%})")
            else:
                labels.append(str(axis))
        return labels


def compute_distance(features: pd.DataFrame, method: str = "bray") -> DistanceMatrix:
    """Distâncias par a par entre amostras (colunas de `features`)."""
    if method not in _PDIST_METRICS:
        raise ValidationError(
            message=f"Unknown distance method: {method}",
            details={"method": method, "supported": sorted(_PDIST_METRICS)},
        )
    matrix = features.T.to_numpy(dtype=float)
    if method == "jaccard":
        matrix = matrix > 0
    try:
        condensed = pdist(matrix, metric=_PDIST_METRICS[method])
        if np.isnan(condensed).any():
            raise ValueError(f"{method} distance is undefined for samples without counts")
        return DistanceMatrix(squareform(condensed), ids=[str(s) for s in features.columns])
    except ValueError as exc:
        raise ExternalRoutineError(
            message=str(exc),
            details={"routine": "scipy.spatial.distance.pdist", "method": method},
        ) from exc


def _pad_axes(coords: pd.DataFrame, n_axes: int, prefix: str) -> pd.DataFrame:
    out = coords.iloc[:, :n_axes].copy()
    for i in range(out.shape[1], n_axes):
        out[f"{prefix}{i + 1}"] = 0.0
    out.columns = [f"{prefix}{i + 1}" for i in range(n_axes)]
    return out


def _pcoa(distance: DistanceMatrix, n_axes: int) -> Ordination:
    try:
        result = pcoa(distance)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ExternalRoutineError(message=str(exc), details={"routine": "skbio.pcoa"}) from exc
    coords = result.samples.copy()
    coords.index = list(distance.ids)
    coords = _pad_axes(coords, n_axes, "PC")
    explained = pd.Series(np.asarray(result.proportion_explained, dtype=float)[:n_axes])
    explained = explained.reindex(range(n_axes), fill_value=0.0)
    explained.index = list(coords.columns)
    return Ordination(method="PCoA", coordinates=coords, proportion_explained=explained)


def _nmds_estimator(n_axes: int, seed: int) -> MDS:
    return MDS(
        n_components=n_axes,
        metric_mds=False,
        metric="precomputed",
        init="random",
        n_init=4,
        max_iter=300,
        random_state=seed,
    )


def _nmds(distance: DistanceMatrix, n_axes: int, seed: int) -> Ordination:
    estimator = _nmds_estimator(n_axes, seed)
    try:
        embedding = estimator.fit_transform(distance.data)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ExternalRoutineError(message=str(exc), details={"routine": "sklearn.manifold.MDS"}) from exc
    coords = pd.DataFrame(
        embedding,
        index=list(distance.ids),
        columns=[f"NMDS{i + 1}" for i in range(embedding.shape[1])],
    )
    return Ordination(method="NMDS", coordinates=coords, stress=float(estimator.stress_))


def ordinate(distance: DistanceMatrix, method: str = "PCoA", seed: int = 711, n_axes: int = 2) -> Ordination:
    """Embedding de baixa dimensão das amostras."""
    if method == "PCoA":
        return _pcoa(distance, n_axes)
    if method == "NMDS":
        return _nmds(distance, n_axes, seed)
    raise ValidationError(
        message=f"Unknown ordination method: {method}",
        details={"method": method, "supported": ["PCoA", "NMDS"]},
    )
