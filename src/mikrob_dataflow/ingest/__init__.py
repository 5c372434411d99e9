# src/mikrob_dataflow/ingest/__init__.py
"""
Leitores de upload por chave do InputStore.
"""

from typing import Any, Callable, Dict

import pandas as pd

from mikrob_dataflow.core.exceptions import UploadFormatError
from mikrob_dataflow.core.graph.parameters import ASV_TABLE, METADATA_TABLE, TAXONOMY_TABLE

from .tables import (
    Fingerprint,
    fingerprint,
    read_feature_table,
    read_metadata_table,
    read_taxonomy_table,
    split_taxon_string,
)

READERS: Dict[str, Callable[[Any], pd.DataFrame]] = {
    ASV_TABLE: read_feature_table,
    TAXONOMY_TABLE: read_taxonomy_table,
    METADATA_TABLE: read_metadata_table,
}


def read_table(key: str, path: Any) -> pd.DataFrame:
    """Lê o arquivo com o leitor associado à chave de upload."""
    reader = READERS.get(key)
    if reader is None:
        raise UploadFormatError(
            message=f"No reader for input key: {key}",
            details={"key": key, "supported": sorted(READERS)},
        )
    return reader(path)


__all__ = [
    "READERS",
    "read_table",
    "Fingerprint",
    "fingerprint",
    "read_feature_table",
    "read_metadata_table",
    "read_taxonomy_table",
    "split_taxon_string",
]
