# src/mikrob_dataflow/nodes/catalog.py
"""
Catálogo canônico de artefatos da análise de microbioma.

Este módulo declara, em um único lugar, todos os inputs do InputStore e
todos os ArtifactNodes do pipeline, com seus upstreams e required-sets.

Decisões arquiteturais:
    - Defaults de parâmetros opcionais vêm de `config.parameters` e são
      fixados nas transformações via `functools.partial`
    - `rarefied_dataset` depende de `effective_depth`, de modo que o
      default "menor total por amostra" também é um artefato cacheado
    - Distância beta e ordenação são nós separados: trocar o método de
      ordenação não recalcula a matriz de distâncias

Invariantes:
    - A mesma configuração produz sempre o mesmo grafo
    - O grafo é validado (sem ciclos, sem identificadores desconhecidos)
"""

from __future__ import annotations

from functools import partial
from typing import Any, Dict, List, Optional

from mikrob_dataflow.analysis.diversity import DEFAULT_INDICES
from mikrob_dataflow.core.config import load_config
from mikrob_dataflow.core.graph.graph import DependencyGraph, build_graph
from mikrob_dataflow.core.graph.node import ArtifactNode, artifact_node
from mikrob_dataflow.core.graph.parameters import DEFAULT_SEED, INPUT_KEYS
from mikrob_dataflow.core.graph.types import NodeKind

from . import dataset as _dataset
from . import diversity as _diversity
from . import group_test as _group_test
from . import ordination as _ordination
from . import taxonomy as _taxonomy

# Nomes canônicos dos nós
DATASET = "dataset"
RAREFACTION_CURVE = "rarefaction_curve"
EFFECTIVE_DEPTH = "effective_depth"
RAREFIED_DATASET = "rarefied_dataset"
ALPHA_DIVERSITY = "alpha_diversity"
ALPHA_SUMMARY = "alpha_summary"
TAXONOMIC_FILTER = "taxonomic_filter"
TAXONOMIC_AGGREGATE = "taxonomic_aggregate"
ABUNDANCE_SUMMARY = "abundance_summary"
BETA_DISTANCE = "beta_distance"
ORDINATION = "ordination"
BETA_GROUP_TEST = "beta_group_test"
ALPHA_GROUP_TEST = "alpha_group_test"


def pipeline_nodes(config: Optional[Dict[str, Any]] = None) -> List[ArtifactNode]:
    """Nós do pipeline com defaults lidos de `config` (defaults empacotados se None)."""
    cfg = load_config() if config is None else config
    params = dict(cfg.get("parameters", {}) or {})
    analysis = dict(cfg.get("analysis", {}) or {})

    seed = params.get("seed")
    seed = DEFAULT_SEED if seed is None else seed
    unresolved = analysis.get("unresolved_label", "unresolved")
    alpha_metric = params.get("alpha_metric") or "Shannon"

    return [
        artifact_node(
            DATASET,
            ["asv_table", "taxonomy_table", "metadata_table"],
            _dataset.make_dataset,
            kind=NodeKind.DATASET,
            description="Validated (features, taxonomy, metadata) triple",
        ),
        artifact_node(
            RAREFACTION_CURVE,
            [DATASET, "depth_step", "seed"],
            partial(
                _diversity.curve,
                default_step=params.get("depth_step") or 100,
                default_seed=seed,
                min_depth=int(analysis.get("rarefaction_min_depth", 1)),
            ),
            required=[DATASET],
            kind=NodeKind.DIVERSITY,
            description="Observed richness at increasing subsampling depth",
        ),
        artifact_node(
            EFFECTIVE_DEPTH,
            [DATASET, "rarefy_depth"],
            _dataset.effective_depth,
            required=[DATASET],
            kind=NodeKind.PARAMETER,
            description="Rarefaction depth (chosen, or minimum sample total)",
        ),
        artifact_node(
            RAREFIED_DATASET,
            [DATASET, EFFECTIVE_DEPTH, "seed"],
            partial(_dataset.rarefied_dataset, default_seed=seed),
            required=[DATASET, EFFECTIVE_DEPTH],
            kind=NodeKind.DATASET,
            description="Dataset subsampled to a common depth",
        ),
        artifact_node(
            ALPHA_DIVERSITY,
            [RAREFIED_DATASET],
            partial(_diversity.alpha_diversity, indices=tuple(analysis.get("alpha_indices") or DEFAULT_INDICES)),
            kind=NodeKind.DIVERSITY,
            description="Alpha diversity indices per sample",
        ),
        artifact_node(
            ALPHA_SUMMARY,
            [ALPHA_DIVERSITY, RAREFIED_DATASET, "group_var", "alpha_metric"],
            partial(_diversity.alpha_summary, default_metric=alpha_metric),
            required=[ALPHA_DIVERSITY, RAREFIED_DATASET, "group_var"],
            kind=NodeKind.SUMMARY,
            description="Alpha diversity per metadata group",
        ),
        artifact_node(
            TAXONOMIC_FILTER,
            [RAREFIED_DATASET, "min_count", "min_samples", "confidence_threshold", "tax_level"],
            partial(_taxonomy.taxonomic_filter, defaults=params, unresolved_label=unresolved),
            required=[RAREFIED_DATASET],
            kind=NodeKind.DATASET,
            description="Taxa kept by count, prevalence and confidence filters",
        ),
        artifact_node(
            TAXONOMIC_AGGREGATE,
            [TAXONOMIC_FILTER, "tax_level"],
            partial(
                _taxonomy.taxonomic_aggregate,
                default_level=params.get("tax_level") or "Genus",
                unresolved_label=unresolved,
            ),
            required=[TAXONOMIC_FILTER],
            kind=NodeKind.ABUNDANCE,
            description="Counts summed per taxonomic label",
        ),
        artifact_node(
            ABUNDANCE_SUMMARY,
            [TAXONOMIC_AGGREGATE, "top_n"],
            partial(_taxonomy.abundance_summary, default_top_n=params.get("top_n") or 10),
            required=[TAXONOMIC_AGGREGATE],
            kind=NodeKind.ABUNDANCE,
            description="Relative abundance of the top labels",
        ),
        artifact_node(
            BETA_DISTANCE,
            [RAREFIED_DATASET, "distance_method"],
            partial(_ordination.beta_distance, default_method=params.get("distance_method") or "bray"),
            required=[RAREFIED_DATASET],
            kind=NodeKind.ORDINATION,
            description="Pairwise sample distances",
        ),
        artifact_node(
            ORDINATION,
            [BETA_DISTANCE, "ordination_method", "seed"],
            partial(
                _ordination.ordination,
                default_method=params.get("ordination_method") or "PCoA",
                default_seed=seed,
                n_axes=int(analysis.get("ordination_axes", 2)),
            ),
            required=[BETA_DISTANCE],
            kind=NodeKind.ORDINATION,
            description="Low-dimensional embedding of samples",
        ),
        artifact_node(
            BETA_GROUP_TEST,
            [BETA_DISTANCE, RAREFIED_DATASET, "covariates", "permutations", "seed"],
            partial(
                _group_test.beta_group_test,
                default_permutations=params.get("permutations") or 999,
                default_seed=seed,
            ),
            required=[BETA_DISTANCE, RAREFIED_DATASET, "covariates"],
            kind=NodeKind.STATISTIC,
            description="PERMANOVA of beta distances per covariate",
        ),
        artifact_node(
            ALPHA_GROUP_TEST,
            [ALPHA_DIVERSITY, RAREFIED_DATASET, "covariates", "alpha_metric"],
            partial(_group_test.alpha_group_test, default_metric=alpha_metric),
            required=[ALPHA_DIVERSITY, RAREFIED_DATASET, "covariates"],
            kind=NodeKind.STATISTIC,
            description="Type-II ANOVA of an alpha index per covariate",
        ),
    ]


def build_pipeline_graph(config: Optional[Dict[str, Any]] = None) -> DependencyGraph:
    """Declara todos os inputs e registra todos os nós do pipeline."""
    return build_graph(INPUT_KEYS, pipeline_nodes(config))
