# tests/export/test_session_store.py
"""
Testes do snapshot da sessão (joblib).

Invariantes:
    - Caminho determinístico: artifacts/dataset.joblib
    - save → load devolve o mesmo Dataset e os parâmetros
    - Salvar com Manifest registra `artifact_saved` com sha256
"""

from datetime import datetime, timezone

import pandas as pd
import pytest

from mikrob_dataflow.core.traceability.manifest import create_manifest
from mikrob_dataflow.export.session_store import SessionStore


def test_round_trip(tmp_path, dataset):
    store = SessionStore(export_dir=tmp_path)
    meta = store.save(dataset=dataset, parameters={"seed": 711, "covariates": ("group",)})
    assert meta["path"] == "artifacts/dataset.joblib"
    assert meta["format"] == "joblib"
    assert (tmp_path / "artifacts" / "dataset.joblib").exists()

    snapshot = store.load()
    assert snapshot["version"] == "v1"
    assert snapshot["parameters"] == {"seed": 711, "covariates": ("group",)}
    pd.testing.assert_frame_equal(snapshot["dataset"].features, dataset.features)
    pd.testing.assert_frame_equal(snapshot["dataset"].metadata, dataset.metadata)


def test_save_records_manifest_event(tmp_path, dataset):
    manifest = create_manifest(
        session_id="s",
        started_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        version="0.1.0",
        config_hash="0" * 64,
    )
    meta = SessionStore(export_dir=tmp_path).save(dataset=dataset, manifest=manifest)
    event = manifest.events[-1]
    assert event["event_type"] == "artifact_saved"
    assert event["node"] == "dataset"
    assert event["payload"]["sha256"] == meta["sha256"]


def test_rejects_non_dataset(tmp_path):
    with pytest.raises(TypeError):
        SessionStore(export_dir=tmp_path).save(dataset={"not": "a dataset"})


def test_load_missing_snapshot(tmp_path):
    with pytest.raises(FileNotFoundError):
        SessionStore(export_dir=tmp_path).load()
