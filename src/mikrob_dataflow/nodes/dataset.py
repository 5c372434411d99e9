"""Nós canônicos: dataset, effective_depth e rarefied_dataset.

`dataset` só existe quando as três tabelas foram enviadas; enquanto
faltar qualquer uma, ele e todo o grafo a jusante ficam "pending".

`effective_depth` resolve o default dependente dos dados: a profundidade
escolhida pelo usuário, ou o menor total positivo por amostra.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from mikrob_dataflow.analysis.dataset import Dataset, build_dataset
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset, rarefy
from mikrob_dataflow.core.exceptions import InsufficientDepthError


def make_dataset(asv_table: pd.DataFrame, taxonomy_table: pd.DataFrame, metadata_table: pd.DataFrame) -> Dataset:
    return build_dataset(asv_table, taxonomy_table, metadata_table)


def effective_depth(dataset: Dataset, rarefy_depth: Optional[int]) -> int:
    if rarefy_depth is not None:
        return int(rarefy_depth)
    totals = dataset.sample_totals()
    positive = totals[totals > 0]
    if positive.empty:
        raise InsufficientDepthError(
            message="Every sample total is 0; no default rarefaction depth",
            details={"n_samples": int(len(totals))},
            hint="Defina `rarefy_depth` explicitamente.",
        )
    # amostras vazias ficam abaixo da profundidade e são descartadas na rarefação
    return int(positive.min())


def rarefied_dataset(dataset: Dataset, depth: int, seed: Optional[int], *, default_seed: int) -> RarefiedDataset:
    return rarefy(dataset, depth, default_seed if seed is None else seed)
