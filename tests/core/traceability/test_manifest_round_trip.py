# tests/core/traceability/test_manifest_round_trip.py
"""
Testes do Manifest da sessão: criação, Event Log e round-trip em disco.

Invariantes:
    - O Event Log inicia vazio e preserva a ordem de chamada
    - Timestamps são normalizados para UTC
    - save/load preserva a estrutura completa
"""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from mikrob_dataflow.core.traceability import (
    add_event,
    artifact_saved,
    create_manifest,
    input_written,
    load_manifest,
    node_computed,
    node_failed,
    save_manifest,
)


def _manifest():
    return create_manifest(
        session_id="session-001",
        started_at=datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc),
        version="0.1.0",
        config_hash="c" * 64,
    )


def test_create_manifest_has_minimum_fields():
    m = _manifest()
    d = m.to_dict()
    assert d["session"]["session_id"] == "session-001"
    assert d["session"]["started_at"] == "2026-01-16T12:00:00+00:00"
    assert d["inputs"] == {"config_hash": "c" * 64, "versions": {}}
    assert d["nodes"] == {}
    assert d["events"] == []


def test_naive_and_offset_timestamps_are_normalized_to_utc():
    m = create_manifest(
        session_id="s",
        started_at=datetime(2026, 1, 16, 9, 0, 0, tzinfo=timezone(timedelta(hours=-3))),
        version="0.1.0",
        config_hash="c" * 64,
    )
    assert m.session["started_at"] == "2026-01-16T12:00:00+00:00"
    add_event(m, event_type="note", ts=datetime(2026, 1, 16, 12, 0, 0))
    assert m.events[0]["timestamp"] == "2026-01-16T12:00:00+00:00"


def test_event_log_appends_ordered_events():
    m = _manifest()
    ts = datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)
    input_written(m, key="asv_table", version=1, invalidated=[], ts=ts)
    node_computed(m, node="dataset", revision=1, duration_ms=12, ts=ts)
    node_failed(m, node="ordination", error={"type": "EXTERNAL_ROUTINE_ERROR", "message": "x"}, ts=ts)
    node_computed(m, node="ordination", revision=1, duration_ms=-5, ts=ts)
    artifact_saved(m, name="ordination", path="out/ord.png", fmt="png", ts=ts)

    assert [e["event_type"] for e in m.events] == [
        "input_written",
        "node_computed",
        "node_failed",
        "node_computed",
        "artifact_saved",
    ]
    assert m.inputs["versions"] == {"asv_table": 1}
    assert m.events[2]["payload"] == {"type": "EXTERNAL_ROUTINE_ERROR"}
    # sucesso posterior limpa o erro e a duração nunca é negativa
    assert "error" not in m.nodes["ordination"]
    assert m.nodes["ordination"]["duration_ms"] == 0
    assert m.events[4]["payload"] == {"path": "out/ord.png", "format": "png"}


def test_round_trip_save_load(tmp_path: Path):
    m = _manifest()
    ts = datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)
    input_written(m, key="seed", version=1, invalidated=["rarefied_dataset"], ts=ts)
    node_computed(m, node="dataset", revision=3, duration_ms=4, ts=ts)

    out = tmp_path / "nested" / "manifest.json"
    save_manifest(m, out)
    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8"))["session"]["session_id"] == "session-001"

    loaded = load_manifest(out)
    assert loaded.to_dict() == m.to_dict()


def test_to_dict_is_independent_copy():
    m = _manifest()
    d = m.to_dict()
    d["inputs"]["versions"]["seed"] = 99
    d["session"]["session_id"] = "other"
    assert m.inputs["versions"] == {}
    assert m.session["session_id"] == "session-001"
