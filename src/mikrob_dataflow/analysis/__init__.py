# src/mikrob_dataflow/analysis/__init__.py
"""
Rotinas analíticas encapsuladas.

Wrappers finos sobre numpy/pandas, scipy, scikit-bio, scikit-learn e
statsmodels. As rotinas são funções puras: recebem tabelas e parâmetros,
retornam novas tabelas e nunca conhecem o grafo de artefatos.
"""

from .dataset import Dataset, build_dataset
from .rarefaction import RarefiedDataset, rarefy, rarefy_samples, rarefaction_curve
from .diversity import compute_diversity
from .beta import Ordination, compute_distance, ordinate
from .stats import anova, permanova
from .taxonomy import aggregate_taxa, filter_taxa, relative_abundance, summarize_alpha

__all__ = [
    "Dataset",
    "build_dataset",
    "RarefiedDataset",
    "rarefy",
    "rarefy_samples",
    "rarefaction_curve",
    "compute_diversity",
    "Ordination",
    "compute_distance",
    "ordinate",
    "anova",
    "permanova",
    "aggregate_taxa",
    "filter_taxa",
    "relative_abundance",
    "summarize_alpha",
]
