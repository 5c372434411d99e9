"""Leitura de uploads: tabela de ASVs, taxonomia e metadata.

Responsabilidades:
- ler arquivos delimitados de forma determinística (pandas)
- tolerar os formatos exportados pelo QIIME 2 / biom
- registrar fingerprint (sha256 + bytes) do arquivo lido

Limites explícitos:
- NÃO valida a consistência entre tabelas (ver `analysis.build_dataset`)
- NÃO escreve no InputStore (ver `Session.upload`)
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Tuple

import pandas as pd

from mikrob_dataflow.core.exceptions import UploadFormatError

BIOM_PREAMBLE = "# Constructed from biom file"
QIIME_TAXON_COLUMN = "Taxon"
QIIME_DIRECTIVE = "#q2:"
RANK_COLUMNS = ("Domain", "Phylum", "Class", "Order", "Family", "Genus", "Species")


@dataclass(frozen=True)
class Fingerprint:
    path: str
    sha256: str
    size_bytes: int


def _resolve_path(path_value: Any) -> Path:
    p = Path(path_value).expanduser()
    if not p.exists():
        raise UploadFormatError(message=f"File not found: {p}", details={"path": str(p)})
    if not p.is_file():
        raise UploadFormatError(message=f"Path is not a file: {p}", details={"path": str(p)})
    return p


def _sha256_and_bytes(path: Path) -> Tuple[str, int]:
    h = hashlib.sha256()
    size = 0
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
            size += len(chunk)
    return h.hexdigest(), size


def fingerprint(path_value: Any) -> Fingerprint:
    path = _resolve_path(path_value)
    sha256, size = _sha256_and_bytes(path)
    return Fingerprint(path=str(path), sha256=sha256, size_bytes=size)


def _separator(path: Path) -> str:
    return "," if path.suffix.lower() == ".csv" else "\t"


def _read(path: Path, *, sep: str, skiprows: int = 0, what: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, sep=sep, index_col=0, skiprows=skiprows, converters={0: str})
    except (ValueError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise UploadFormatError(
            message=f"Could not parse {what}: {exc}",
            details={"path": str(path), "kind": what},
            hint="Verifique o delimitador e o cabeçalho do arquivo.",
        ) from exc
    if df.empty or df.shape[1] == 0:
        raise UploadFormatError(
            message=f"{what} is empty",
            details={"path": str(path), "kind": what},
        )
    df.index = df.index.map(str)
    df.index.name = None
    df.columns = [str(c).strip() for c in df.columns]
    return df


def _first_line(path: Path) -> str:
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return f.readline()


def read_feature_table(path_value: Any) -> pd.DataFrame:
    """Tabela de contagens (TSV): primeira coluna = taxon id, demais = amostras."""
    path = _resolve_path(path_value)
    skip = 1 if _first_line(path).startswith(BIOM_PREAMBLE) else 0
    return _read(path, sep=_separator(path), skiprows=skip, what="feature table")


def split_taxon_string(taxon: Any) -> list:
    """'d__Bacteria; p__Firmicutes; ...' -> ['Bacteria', 'Firmicutes', ...]."""
    if not isinstance(taxon, str):
        return []
    parts = []
    for raw in taxon.split(";"):
        label = raw.strip()
        if len(label) > 3 and label[1:3] == "__":
            label = label[3:]
        elif label.endswith("__"):
            label = ""
        parts.append(label or None)
    return parts


def read_taxonomy_table(path_value: Any) -> pd.DataFrame:
    """Taxonomia (TSV). Uma coluna QIIME `Taxon` é expandida em ranks."""
    path = _resolve_path(path_value)
    df = _read(path, sep=_separator(path), what="taxonomy table")
    if QIIME_TAXON_COLUMN not in df.columns:
        return df
    split = df[QIIME_TAXON_COLUMN].map(split_taxon_string)
    ranks = pd.DataFrame(
        [(row + [None] * len(RANK_COLUMNS))[: len(RANK_COLUMNS)] for row in split],
        index=df.index,
        columns=list(RANK_COLUMNS),
    )
    rest = df.drop(columns=[QIIME_TAXON_COLUMN])
    return pd.concat([ranks, rest], axis=1)


def read_metadata_table(path_value: Any) -> pd.DataFrame:
    """Metadata: `.csv` -> vírgula, `.tsv`/`.txt` -> tab; linhas `#q2:` descartadas."""
    path = _resolve_path(path_value)
    df = _read(path, sep=_separator(path), what="metadata table")
    directives = df.index.str.startswith(QIIME_DIRECTIVE)
    if directives.any():
        df = df.loc[~directives].copy()
        df = df.apply(_maybe_numeric)
    return df


def _maybe_numeric(column: pd.Series) -> pd.Series:
    converted = pd.to_numeric(column, errors="coerce")
    if converted.notna().sum() == column.notna().sum():
        return converted
    return column
