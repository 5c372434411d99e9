"""Nós taxonômicos: filtro, agregação por rank e resumo de abundância relativa."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pandas as pd

from mikrob_dataflow.analysis.dataset import Dataset
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset
from mikrob_dataflow.analysis.taxonomy import aggregate_taxa, filter_taxa, relative_abundance


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def taxonomic_filter(
    rarefied: RarefiedDataset,
    min_count: Optional[int],
    min_samples: Optional[int],
    confidence_threshold: Optional[float],
    tax_level: Optional[str],
    *,
    defaults: Dict[str, Any],
    unresolved_label: str,
) -> Dataset:
    return filter_taxa(
        rarefied.dataset,
        min_count=_pick(min_count, defaults.get("min_count", 1)),
        min_samples=_pick(min_samples, defaults.get("min_samples", 1)),
        confidence_threshold=_pick(confidence_threshold, defaults.get("confidence_threshold")),
        tax_level=_pick(tax_level, defaults.get("tax_level", "Genus")),
        unresolved_label=unresolved_label,
    )


def taxonomic_aggregate(filtered: Dataset, tax_level: Optional[str], *, default_level: str, unresolved_label: str) -> pd.DataFrame:
    return aggregate_taxa(filtered, _pick(tax_level, default_level), unresolved_label)


def abundance_summary(aggregate: pd.DataFrame, top_n: Optional[int], *, default_top_n: int) -> pd.DataFrame:
    return relative_abundance(aggregate, _pick(top_n, default_top_n))
