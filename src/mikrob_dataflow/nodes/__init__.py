# src/mikrob_dataflow/nodes/__init__.py
"""
Nós de domínio da análise de microbioma.

As transformações deste pacote são funções puras que delegam para
`mikrob_dataflow.analysis`; o catálogo as liga aos inputs do InputStore.
"""

from .catalog import (
    ABUNDANCE_SUMMARY,
    ALPHA_DIVERSITY,
    ALPHA_GROUP_TEST,
    ALPHA_SUMMARY,
    BETA_DISTANCE,
    BETA_GROUP_TEST,
    DATASET,
    EFFECTIVE_DEPTH,
    ORDINATION,
    RAREFACTION_CURVE,
    RAREFIED_DATASET,
    TAXONOMIC_AGGREGATE,
    TAXONOMIC_FILTER,
    build_pipeline_graph,
    pipeline_nodes,
)

__all__ = [
    "ABUNDANCE_SUMMARY",
    "ALPHA_DIVERSITY",
    "ALPHA_GROUP_TEST",
    "ALPHA_SUMMARY",
    "BETA_DISTANCE",
    "BETA_GROUP_TEST",
    "DATASET",
    "EFFECTIVE_DEPTH",
    "ORDINATION",
    "RAREFACTION_CURVE",
    "RAREFIED_DATASET",
    "TAXONOMIC_AGGREGATE",
    "TAXONOMIC_FILTER",
    "build_pipeline_graph",
    "pipeline_nodes",
]
