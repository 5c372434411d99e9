# src/mikrob_dataflow/analysis/taxonomy.py
"""
Filtragem e agregação taxonômica.

Regras de filtragem:
    - mantém taxa com contagem >= min_count em pelo menos min_samples amostras
    - taxa cuja confiança de classificação (coluna `Confidence`, fração ou
      percentual) fica abaixo do limiar são rotulados como "unresolved" no
      rank escolhido

A agregação soma contagens por rótulo do rank; rótulos ausentes contam
como "unresolved".
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from mikrob_dataflow.core.exceptions import InsufficientResourceError, ValidationError

from .dataset import Dataset

RANKS = ("Phylum", "Class", "Order", "Family", "Genus", "Species")
CONFIDENCE_COLUMN = "Confidence"
UNRESOLVED = "unresolved"
OTHER = "Other"


def _check_rank(dataset: Dataset, tax_level: str) -> None:
    if tax_level not in RANKS or tax_level not in dataset.taxonomy.columns:
        raise ValidationError(
            message=f"Unknown taxonomic rank: {tax_level}",
            details={"rank": tax_level, "available": [c for c in dataset.taxonomy.columns if c in RANKS]},
            hint="Escolha um rank presente na tabela de taxonomia.",
        )


def confidence_percent(taxonomy: pd.DataFrame) -> Optional[pd.Series]:
    """Confiança em 0..100, ou None se a taxonomia não traz a coluna."""
    if CONFIDENCE_COLUMN not in taxonomy.columns:
        return None
    conf = pd.to_numeric(taxonomy[CONFIDENCE_COLUMN], errors="coerce")
    if conf.max(skipna=True) <= 1.0:
        conf = conf * 100.0
    return conf


def filter_taxa(
    dataset: Dataset,
    min_count: int = 1,
    min_samples: int = 1,
    confidence_threshold: Optional[float] = None,
    tax_level: str = "Genus",
    unresolved_label: str = UNRESOLVED,
) -> Dataset:
    """
    Aplica os filtros de abundância e de confiança.

    Raises:
        ValidationError: Se `tax_level` não é um rank conhecido.
        InsufficientResourceError: Se nenhum taxon sobrevive ao filtro.
    """
    _check_rank(dataset, tax_level)
    features = dataset.features
    prevalence = (features >= min_count).sum(axis=1)
    kept = features.loc[prevalence >= min_samples]
    if kept.empty:
        raise InsufficientResourceError(
            message=f"No taxa pass the filter (min_count={min_count}, min_samples={min_samples})",
            details={"min_count": int(min_count), "min_samples": int(min_samples), "n_taxa": int(features.shape[0])},
            hint="Relaxe os limiares de contagem ou prevalência.",
        )

    taxonomy = dataset.taxonomy.loc[kept.index].copy()
    conf = confidence_percent(taxonomy)
    if confidence_threshold is not None and conf is not None:
        low = conf < float(confidence_threshold)
        taxonomy[tax_level] = taxonomy[tax_level].astype(object)
        taxonomy.loc[low.fillna(False).to_numpy(), tax_level] = unresolved_label
    return dataset.subset(kept, taxonomy)


def aggregate_taxa(dataset: Dataset, tax_level: str = "Genus", unresolved_label: str = UNRESOLVED) -> pd.DataFrame:
    """Contagens somadas por rótulo do rank (rótulos × amostras)."""
    _check_rank(dataset, tax_level)
    labels = dataset.taxonomy[tax_level].astype(object)
    labels = labels.where(labels.notna() & (labels.astype(str).str.strip() != ""), unresolved_label)
    out = dataset.features.groupby(labels.to_numpy()).sum()
    out.index.name = tax_level
    return out.sort_index()


def relative_abundance(aggregate: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    """
    Percentual por amostra, mantendo os `top_n` rótulos de maior abundância
    média; o restante é somado em "Other".
    """
    totals = aggregate.sum(axis=0).replace(0, float("nan"))
    percent = (aggregate / totals * 100.0).fillna(0.0)
    ranking = percent.mean(axis=1).sort_values(ascending=False, kind="mergesort")
    top = list(ranking.index[:top_n])
    out = percent.loc[top]
    rest = [label for label in percent.index if label not in top]
    if rest:
        other = percent.loc[rest].sum(axis=0).rename(OTHER)
        out = pd.concat([out, other.to_frame().T])
    out.index.name = aggregate.index.name
    return out


def summarize_alpha(alpha: pd.DataFrame, metadata: pd.DataFrame, group_var: str, metric: str = "Shannon") -> pd.DataFrame:
    """n, média, desvio padrão e mediana do índice por grupo de `group_var`."""
    if group_var not in metadata.columns:
        raise ValidationError(
            message=f"Unknown metadata column: {group_var}",
            details={"missing": [group_var], "available": [str(c) for c in metadata.columns]},
        )
    if metric not in alpha.columns:
        raise ValidationError(
            message=f"Alpha metric not computed: {metric}",
            details={"metric": metric, "available": list(alpha.columns)},
        )
    frame = pd.DataFrame({"value": alpha[metric], "group": metadata.loc[alpha.index, group_var]})
    frame = frame.dropna(subset=["group"])
    grouped = frame.groupby(frame["group"].astype(str))["value"]
    out = pd.DataFrame(
        {
            "n": grouped.count(),
            "mean": grouped.mean(),
            "sd": grouped.std(),
            "median": grouped.median(),
        }
    )
    out.index.name = group_var
    return out
