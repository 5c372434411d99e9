# tests/conftest.py
"""
Fixtures compartilhados para testes do mikrob-dataflow.

Este módulo define fixtures reutilizáveis que fornecem:
- tabelas sintéticas pequenas (features, taxonomy, metadata)
- o Dataset validado correspondente
- grafos de brinquedo com transformações contadas, para testes do engine
- arquivos de upload em `tmp_path`

Decisões arquiteturais:
    - Dados são determinísticos e pequenos (6 taxa × 6 amostras)
    - Totais por amostra diferentes entre si (110..130) para exercitar
      a profundidade efetiva de rarefação
    - Grafos de brinquedo usam inputs `a` e `b` e nós `x`, `y`, `z`

Invariantes:
    - Nenhuma fixture resolve nós do pipeline real
    - Nenhuma fixture depende de estado global

Limites explícitos:
    - Não substitui testes de integração (ver tests/e2e)
"""

from __future__ import annotations

from collections import Counter

import pandas as pd
import pytest

from mikrob_dataflow.analysis.dataset import build_dataset
from mikrob_dataflow.core.graph.cache import ArtifactCache
from mikrob_dataflow.core.graph.graph import build_graph
from mikrob_dataflow.core.graph.node import artifact_node
from mikrob_dataflow.core.graph.store import InputStore

SAMPLES = ["S1", "S2", "S3", "S4", "S5", "S6"]
TAXA = ["T1", "T2", "T3", "T4", "T5", "T6"]

COUNTS = {
    "T1": [50, 40, 60, 10, 5, 20],
    "T2": [30, 35, 20, 60, 70, 50],
    "T3": [10, 15, 5, 20, 25, 30],
    "T4": [5, 0, 10, 30, 20, 15],
    "T5": [0, 5, 0, 0, 10, 5],
    "T6": [15, 20, 25, 5, 0, 10],
}

TAXONOMY_ROWS = {
    "T1": ["Firmicutes", "Bacilli", "Lactobacillales", "Lactobacillaceae", "Lactobacillus", "acidophilus", 0.99],
    "T2": ["Bacteroidota", "Bacteroidia", "Bacteroidales", "Bacteroidaceae", "Bacteroides", "fragilis", 0.95],
    "T3": ["Firmicutes", "Clostridia", "Lachnospirales", "Lachnospiraceae", "Blautia", None, 0.90],
    "T4": ["Proteobacteria", "Gammaproteobacteria", "Enterobacterales", "Enterobacteriaceae", "Escherichia", "coli", 0.60],
    "T5": ["Firmicutes", "Bacilli", "Lactobacillales", "Lactobacillaceae", None, None, 0.80],
    "T6": ["Actinobacteriota", "Actinobacteria", "Bifidobacteriales", "Bifidobacteriaceae", "Bifidobacterium", None, 0.97],
}
RANK_COLUMNS = ["Phylum", "Class", "Order", "Family", "Genus", "Species", "Confidence"]


@pytest.fixture
def features_table() -> pd.DataFrame:
    """Contagens taxa × amostras (totais: 110, 115, 120, 125, 130, 130)."""
    return pd.DataFrame.from_dict(COUNTS, orient="index", columns=SAMPLES)


@pytest.fixture
def taxonomy_table() -> pd.DataFrame:
    return pd.DataFrame.from_dict(TAXONOMY_ROWS, orient="index", columns=RANK_COLUMNS)


@pytest.fixture
def metadata_table() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "group": ["A", "A", "A", "B", "B", "B"],
            "ph": [6.1, 6.3, 6.0, 7.2, 7.0, 7.4],
            "sex": ["F", "M", "F", "M", "F", "M"],
        },
        index=SAMPLES,
    )


@pytest.fixture
def dataset(features_table, taxonomy_table, metadata_table):
    return build_dataset(features_table, taxonomy_table, metadata_table)


@pytest.fixture
def calls() -> Counter:
    """Contador de invocações de transformações por nome de nó."""
    return Counter()


@pytest.fixture
def toy_nodes(calls):
    """
    Nós de brinquedo:
        x = a + 1        (depende de a)
        y = b * 2        (depende de b)
        z = [x, y]       (depende de x e y)
    Cada transformação incrementa `calls[nome]`.
    """

    def counted(name, fn):
        def wrapper(*args):
            calls[name] += 1
            return fn(*args)

        return wrapper

    return [
        artifact_node("x", ["a"], counted("x", lambda a: a + 1)),
        artifact_node("y", ["b"], counted("y", lambda b: b * 2)),
        artifact_node("z", ["x", "y"], counted("z", lambda x, y: [x, y])),
    ]


@pytest.fixture
def toy_graph(toy_nodes):
    return build_graph(["a", "b"], toy_nodes)


@pytest.fixture
def store() -> InputStore:
    return InputStore()


@pytest.fixture
def cache() -> ArtifactCache:
    return ArtifactCache()


def _write_tsv(path, header, rows):
    lines = ["\t".join(header)] + ["\t".join(str(v) for v in row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def upload_files(tmp_path, features_table, taxonomy_table, metadata_table):
    """Arquivos de upload equivalentes às tabelas sintéticas (TSV)."""
    asv = _write_tsv(
        tmp_path / "asv.tsv",
        ["#OTU ID"] + SAMPLES,
        [[taxon] + list(features_table.loc[taxon]) for taxon in TAXA],
    )
    taxonomy = _write_tsv(
        tmp_path / "taxonomy.tsv",
        ["Feature ID"] + RANK_COLUMNS,
        [[taxon] + ["" if v is None else v for v in TAXONOMY_ROWS[taxon]] for taxon in TAXA],
    )
    metadata = _write_tsv(
        tmp_path / "metadata.tsv",
        ["sample-id", "group", "ph", "sex"],
        [[s] + list(metadata_table.loc[s]) for s in SAMPLES],
    )
    return {"asv_table": asv, "taxonomy_table": taxonomy, "metadata_table": metadata}
