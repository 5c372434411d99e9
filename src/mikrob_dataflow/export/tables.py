"""Exportação de artefatos tabulares para texto delimitado.

Separador por extensão (`.csv` → vírgula, `.tsv`/`.txt` → tab), ou explícito.
Tipos conhecidos são convertidos para DataFrame antes da escrita.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
from skbio import DistanceMatrix

from mikrob_dataflow.analysis.beta import Ordination
from mikrob_dataflow.analysis.dataset import Dataset
from mikrob_dataflow.analysis.rarefaction import RarefiedDataset


def to_frame(value: Any) -> pd.DataFrame:
    """Converte um valor de artefato em DataFrame exportável."""
    if isinstance(value, pd.DataFrame):
        return value
    if isinstance(value, pd.Series):
        return value.to_frame()
    if isinstance(value, DistanceMatrix):
        return value.to_data_frame()
    if isinstance(value, Ordination):
        frame = value.coordinates.copy()
        frame.index.name = "sample"
        return frame
    if isinstance(value, RarefiedDataset):
        return value.features
    if isinstance(value, Dataset):
        return value.features
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return pd.DataFrame({"value": [value]})
    raise TypeError(f"Cannot export value of type {type(value).__name__} as a table")


def separator_for(path: Path, sep: Optional[str] = None) -> str:
    if sep is not None:
        return sep
    return "," if path.suffix.lower() == ".csv" else "\t"


def export_table(value: Any, path: Union[str, Path], *, sep: Optional[str] = None) -> Path:
    """Escreve o artefato em `path` e retorna o caminho escrito."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_frame(value).to_csv(path, sep=separator_for(path, sep))
    return path
