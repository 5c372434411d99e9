# tests/e2e/test_session_e2e.py
"""
Cenários ponta a ponta de uma sessão de análise de microbioma.

Fluxo:
    - upload das três tabelas (arquivos TSV)
    - resolução de todos os artefatos do catálogo
    - mudança de parâmetros e verificação de recálculo mínimo
    - exportação de tabelas, figuras e snapshot

Princípios:
    - usar APENAS APIs públicas (Session, export, presentation)
    - parâmetros de custo reduzido (permutations=99)
"""

from __future__ import annotations

import pandas as pd
import pytest

from mikrob_dataflow import Session, render_resolution
from mikrob_dataflow.analysis.beta import Ordination
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset
from mikrob_dataflow.core.graph.types import Failed, Pending, Resolved
from mikrob_dataflow.export import export_artifact, export_figure, save_snapshot
from mikrob_dataflow.nodes import catalog


@pytest.fixture
def session(upload_files):
    s = Session.create({"parameters": {"permutations": 99}}, session_id="e2e")
    for key, path in upload_files.items():
        s.upload(key, path)
    return s


def _resolved(session, name):
    res = session.resolve(name)
    assert isinstance(res, Resolved), getattr(res, "message", res)
    return res.value


def test_uploads_are_fingerprinted_and_logged(session):
    assert set(session.uploads) == {"asv_table", "taxonomy_table", "metadata_table"}
    assert all(len(u["sha256"]) == 64 for u in session.uploads.values())
    assert [e["node"] for e in session.events if e["message"] == "file uploaded"] == [
        "asv_table",
        "taxonomy_table",
        "metadata_table",
    ]


def test_all_artifacts_resolve(session):
    session.set_input("group_var", "group")
    session.set_input("covariates", ["group", "sex"])

    dataset = _resolved(session, catalog.DATASET)
    assert dataset.samples == ["S1", "S2", "S3", "S4", "S5", "S6"]

    assert _resolved(session, catalog.EFFECTIVE_DEPTH) == 110
    rarefied = _resolved(session, catalog.RAREFIED_DATASET)
    assert isinstance(rarefied, RarefiedDataset)
    assert (rarefied.features.sum(axis=0) == 110).all()

    curve = _resolved(session, catalog.RAREFACTION_CURVE)
    assert set(curve.columns) == {"sample", "depth", "observed"}

    alpha = _resolved(session, catalog.ALPHA_DIVERSITY)
    assert list(alpha.columns) == ["Observed", "Chao1", "Shannon", "Simpson", "InvSimpson"]

    summary = _resolved(session, catalog.ALPHA_SUMMARY)
    assert list(summary.index) == ["A", "B"]

    abundance = _resolved(session, catalog.ABUNDANCE_SUMMARY)
    assert abundance.index.name == "Genus"

    ordination = _resolved(session, catalog.ORDINATION)
    assert isinstance(ordination, Ordination) and ordination.method == "PCoA"

    beta_test = _resolved(session, catalog.BETA_GROUP_TEST)
    assert beta_test["covariate"].tolist() == ["group", "sex"]
    assert beta_test["permutations"].tolist() == [99, 99]

    alpha_test = _resolved(session, catalog.ALPHA_GROUP_TEST)
    assert alpha_test["covariate"].tolist() == ["group", "sex"]

    assert set(session.status().values()) == {"cached"}


def test_group_artifacts_wait_for_their_parameters(session):
    res = session.resolve(catalog.ALPHA_SUMMARY)
    assert isinstance(res, Pending) and res.missing == ("group_var",)
    res = session.resolve(catalog.BETA_GROUP_TEST)
    assert isinstance(res, Pending) and res.missing == ("covariates",)
    assert render_resolution(res).text == "waiting for input covariates"


def test_two_tax_level_writes_recompute_aggregate_once(session):
    _resolved(session, catalog.ABUNDANCE_SUMMARY)
    computations = session.evaluator.computations
    assert computations[catalog.TAXONOMIC_AGGREGATE] == 1

    session.set_input("tax_level", "Genus")
    session.set_input("tax_level", "Family")

    abundance = _resolved(session, catalog.ABUNDANCE_SUMMARY)
    assert computations[catalog.TAXONOMIC_AGGREGATE] == 2
    assert abundance.index.name == "Family"
    # nada a montante foi recalculado
    assert computations[catalog.RAREFIED_DATASET] == 1
    assert computations[catalog.DATASET] == 1


def test_parameter_change_spares_unrelated_branches(session):
    _resolved(session, catalog.ORDINATION)
    _resolved(session, catalog.ABUNDANCE_SUMMARY)
    ordination_before = session.evaluator.computations[catalog.ORDINATION]

    invalidated = session.set_input("top_n", 2)
    assert invalidated == [catalog.ABUNDANCE_SUMMARY]
    _resolved(session, catalog.ABUNDANCE_SUMMARY)
    _resolved(session, catalog.ORDINATION)
    assert session.evaluator.computations[catalog.ORDINATION] == ordination_before


def test_rarefaction_warning_for_dropped_samples(session):
    session.set_input("rarefy_depth", 115)
    rarefied = _resolved(session, catalog.RAREFIED_DATASET)
    assert rarefied.dropped == ("S1",)
    assert session.warnings[catalog.RAREFIED_DATASET] == ["1 sample(s) below depth 115 dropped: S1"]


def test_schema_mismatch_fails_only_downstream(session, metadata_table):
    session.set_input("metadata_table", metadata_table.rename(index={"S6": "S9"}))
    res = session.resolve(catalog.ORDINATION)
    assert isinstance(res, Failed)
    assert res.origin == catalog.DATASET
    assert res.error.type == "SCHEMA_MISMATCH"
    card = render_resolution(res)
    assert "SCHEMA_MISMATCH" in card.html


def test_excessive_depth_fails_with_insufficient_depth(session):
    session.set_input("rarefy_depth", 10_000)
    res = session.resolve(catalog.ALPHA_DIVERSITY)
    assert isinstance(res, Failed)
    assert res.origin == catalog.RAREFIED_DATASET
    assert res.error.type == "INSUFFICIENT_DEPTH"
    # a curva de rarefação não depende da profundidade
    assert isinstance(session.resolve(catalog.RAREFACTION_CURVE), Resolved)


def test_exports(session, tmp_path):
    session.set_input("group_var", "group")

    table = export_artifact(session, catalog.ALPHA_DIVERSITY, tmp_path / "alpha.tsv")
    back = pd.read_csv(table, sep="\t", index_col=0)
    assert list(back.index) == ["S1", "S2", "S3", "S4", "S5", "S6"]

    figure = export_figure(session, catalog.ORDINATION, tmp_path / "ordination.png", dpi=72)
    assert figure.exists()
    export_figure(session, catalog.ALPHA_DIVERSITY, tmp_path / "alpha.svg")

    meta = save_snapshot(session, tmp_path / "snapshot")
    assert (tmp_path / "snapshot" / meta["path"]).exists()

    saved = [e for e in session.manifest.events if e["event_type"] == "artifact_saved"]
    assert [e["node"] for e in saved] == [
        catalog.ALPHA_DIVERSITY,
        catalog.ORDINATION,
        catalog.ALPHA_DIVERSITY,
        catalog.DATASET,
    ]


def test_export_of_pending_artifact_is_refused(tmp_path):
    session = Session.create()
    with pytest.raises(ValueError, match="is not available"):
        export_artifact(session, catalog.ALPHA_DIVERSITY, tmp_path / "alpha.tsv")


def test_blank_sample_is_dropped_with_default_depth(features_table, taxonomy_table, metadata_table):
    blank = features_table.copy()
    blank["S3"] = 0
    session = Session.create({"parameters": {"permutations": 99}})
    session.set_input("asv_table", blank)
    session.set_input("taxonomy_table", taxonomy_table)
    session.set_input("metadata_table", metadata_table)

    assert _resolved(session, catalog.EFFECTIVE_DEPTH) == 110
    alpha = _resolved(session, catalog.ALPHA_DIVERSITY)
    assert list(alpha.index) == ["S1", "S2", "S4", "S5", "S6"]
    assert session.warnings[catalog.RAREFIED_DATASET] == ["1 sample(s) below depth 110 dropped: S3"]
    assert isinstance(session.resolve(catalog.ORDINATION), Resolved)
