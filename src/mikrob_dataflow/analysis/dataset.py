# src/mikrob_dataflow/analysis/dataset.py
"""
Dataset — contêiner imutável (features, taxonomy, metadata).

Estrutura:
    - features: contagens inteiras, taxa × amostras
    - taxonomy: taxa × ranks (Phylum, Class, ..., e opcionalmente Confidence)
    - metadata: amostras × covariáveis

Invariantes:
    - ids de taxa de `features` == ids de `taxonomy`
    - ids de amostras de `features` == ids de `metadata`
    - linhas de taxonomy/metadata seguem a ordem de `features`
    - contagens são inteiras e não negativas

Todo artefato derivado (rarefeito, filtrado) é construído via
`Dataset.subset`, que preserva as invariantes.

Limites explícitos:
    - Não lê arquivos (ver `mikrob_dataflow.ingest`)
    - Não muta os DataFrames recebidos
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from mikrob_dataflow.core.exceptions import SchemaMismatchError, ValidationError


@dataclass(frozen=True, eq=False)
class Dataset:
    features: pd.DataFrame
    taxonomy: pd.DataFrame
    metadata: pd.DataFrame

    @property
    def taxa(self) -> List[str]:
        return list(self.features.index)

    @property
    def samples(self) -> List[str]:
        return list(self.features.columns)

    def sample_totals(self) -> pd.Series:
        return self.features.sum(axis=0)

    def subset(self, features: pd.DataFrame, taxonomy: Optional[pd.DataFrame] = None) -> "Dataset":
        """Novo Dataset com `features` e taxonomy/metadata realinhados."""
        tax = self.taxonomy if taxonomy is None else taxonomy
        return Dataset(
            features=features,
            taxonomy=tax.loc[features.index].copy(),
            metadata=self.metadata.loc[features.columns].copy(),
        )

    def summary(self) -> Dict[str, Any]:
        totals = self.sample_totals()
        return {
            "n_taxa": int(self.features.shape[0]),
            "n_samples": int(self.features.shape[1]),
            "min_depth": int(totals.min()) if len(totals) else 0,
            "max_depth": int(totals.max()) if len(totals) else 0,
            "ranks": [c for c in self.taxonomy.columns],
            "covariates": [c for c in self.metadata.columns],
        }


def _string_index(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.index = out.index.map(str)
    return out


def _check_unique(ids: pd.Index, what: str) -> None:
    dup = ids[ids.duplicated()].unique().tolist()
    if dup:
        raise ValidationError(
            message=f"Duplicate {what} ids: {', '.join(map(str, dup[:10]))}",
            details={"kind": what, "duplicates": [str(d) for d in dup]},
            hint=f"Cada {what} id deve aparecer uma única vez.",
        )


def _mismatch(left_name: str, left: pd.Index, right_name: str, right: pd.Index, what: str) -> None:
    only_left = sorted(set(left) - set(right))
    only_right = sorted(set(right) - set(left))
    if only_left or only_right:
        raise SchemaMismatchError(
            message=(
                f"{what} ids differ between {left_name} and {right_name}: "
                f"{len(only_left)} only in {left_name}, {len(only_right)} only in {right_name}"
            ),
            details={
                "kind": what,
                f"only_in_{left_name}": only_left,
                f"only_in_{right_name}": only_right,
            },
            hint="Envie tabelas com o mesmo conjunto de ids.",
        )


def coerce_counts(features: pd.DataFrame) -> pd.DataFrame:
    """Converte a tabela de contagens para int64, rejeitando valores inválidos."""
    numeric = features.apply(pd.to_numeric, errors="coerce")
    if numeric.isna().to_numpy().any():
        raise ValidationError(
            message="Feature table contains non-numeric or missing counts",
            details={"columns": [str(c) for c in numeric.columns[numeric.isna().any()]]},
            hint="A tabela de ASVs deve conter apenas contagens inteiras.",
        )
    values = numeric.to_numpy(dtype=float)
    if (values < 0).any():
        raise ValidationError(
            message="Feature table contains negative counts",
            details={"columns": [str(c) for c in numeric.columns[(numeric < 0).any()]]},
        )
    if not np.all(np.equal(np.floor(values), values)):
        raise ValidationError(
            message="Feature table contains non-integer counts",
            details={},
            hint="Contagens fracionárias não são aceitas; envie contagens brutas.",
        )
    return numeric.astype(np.int64)


def build_dataset(features: pd.DataFrame, taxonomy: pd.DataFrame, metadata: pd.DataFrame) -> Dataset:
    """
    Valida e alinha as três tabelas em um Dataset.

    Raises:
        ValidationError: ids duplicados, contagens não numéricas ou negativas.
        SchemaMismatchError: conjuntos de ids divergentes.
    """
    features = _string_index(features)
    features.columns = features.columns.map(str)
    taxonomy = _string_index(taxonomy)
    metadata = _string_index(metadata)

    _check_unique(features.index, "taxon")
    _check_unique(features.columns, "sample")
    _check_unique(taxonomy.index, "taxon")
    _check_unique(metadata.index, "sample")

    counts = coerce_counts(features)

    _mismatch("features", counts.index, "taxonomy", taxonomy.index, "taxon")
    _mismatch("features", counts.columns, "metadata", metadata.index, "sample")

    return Dataset(
        features=counts,
        taxonomy=taxonomy.loc[counts.index].copy(),
        metadata=metadata.loc[counts.columns].copy(),
    )
