# src/mikrob_dataflow/core/traceability/__init__.py
"""
Rastreabilidade da sessão: Manifest e Event Log.
"""

from .manifest import (
    MikrobManifest,
    create_manifest,
    add_event,
    input_written,
    node_computed,
    node_failed,
    artifact_saved,
    save_manifest,
    load_manifest,
)

__all__ = [
    "MikrobManifest",
    "create_manifest",
    "add_event",
    "input_written",
    "node_computed",
    "node_failed",
    "artifact_saved",
    "save_manifest",
    "load_manifest",
]
