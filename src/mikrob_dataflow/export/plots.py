"""Figuras dos artefatos (matplotlib, backend Agg).

- curvas de rarefação
- diversidade alfa por grupo
- ordenação (PCoA / NMDS)
- barras de abundância relativa

`save_figure` grava PNG, PDF ou SVG com largura/altura em polegadas e dpi.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from mikrob_dataflow.analysis.beta import Ordination  # noqa: E402

PALETTE = [
    "#4C72B0", "#DD8452", "#55A868", "#C44E52", "#8172B3",
    "#937860", "#DA8BC3", "#8C8C8C", "#CCB974", "#64B5CD",
]
FORMATS = {".png": "png", ".pdf": "pdf", ".svg": "svg"}


def _clean(ax) -> None:
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def plot_rarefaction(curve: pd.DataFrame) -> Figure:
    fig, ax = plt.subplots()
    for i, (sample, rows) in enumerate(curve.groupby("sample", sort=False)):
        ax.plot(rows["depth"], rows["observed"], lw=1.5, color=PALETTE[i % len(PALETTE)], label=str(sample))
    ax.set_xlabel("Sequencing depth")
    ax.set_ylabel("Observed taxa")
    ax.set_title("Rarefaction curves")
    if curve["sample"].nunique() <= 20:
        ax.legend(fontsize=8, frameon=False, bbox_to_anchor=(1.01, 1), loc="upper left")
    _clean(ax)
    fig.tight_layout()
    return fig


def plot_alpha(alpha: pd.DataFrame, metadata: pd.DataFrame, group_var: str, metric: str = "Shannon") -> Figure:
    groups = metadata.loc[alpha.index, group_var].astype(str)
    labels = sorted(groups.unique())
    data = [alpha.loc[groups == g, metric].to_numpy() for g in labels]
    fig, ax = plt.subplots()
    ax.boxplot(data)
    ax.set_xticks(range(1, len(labels) + 1))
    ax.set_xticklabels(labels)
    for i, values in enumerate(data, start=1):
        ax.scatter([i] * len(values), values, s=18, color=PALETTE[(i - 1) % len(PALETTE)], zorder=3)
    ax.set_xlabel(group_var)
    ax.set_ylabel(metric)
    ax.set_title(f"Alpha diversity ({metric})")
    _clean(ax)
    fig.tight_layout()
    return fig


def plot_ordination(
    ordination: Ordination,
    metadata: Optional[pd.DataFrame] = None,
    group_var: Optional[str] = None,
) -> Figure:
    coords = ordination.coordinates
    x_label, y_label = ordination.axis_labels()[:2]
    fig, ax = plt.subplots()
    if metadata is not None and group_var is not None:
        groups = metadata.loc[coords.index, group_var].astype(str)
        for i, g in enumerate(sorted(groups.unique())):
            mask = (groups == g).to_numpy()
            ax.scatter(coords.iloc[mask, 0], coords.iloc[mask, 1], s=60, color=PALETTE[i % len(PALETTE)], label=g)
        ax.legend(title=group_var, frameon=False)
    else:
        ax.scatter(coords.iloc[:, 0], coords.iloc[:, 1], s=60, color=PALETTE[0])
    title = ordination.method
    if ordination.stress is not None:
        title += f"  stress={ordination.stress:.3f}"
    ax.set_title(title)
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)
    _clean(ax)
    fig.tight_layout()
    return fig


def plot_abundance(abundance: pd.DataFrame) -> Figure:
    fig, ax = plt.subplots()
    bottom = pd.Series(0.0, index=abundance.columns)
    for i, label in enumerate(abundance.index):
        values = abundance.loc[label]
        ax.bar(range(len(values)), values.to_numpy(), bottom=bottom.to_numpy(), color=PALETTE[i % len(PALETTE)], label=str(label))
        bottom = bottom + values
    ax.set_xticks(range(len(abundance.columns)))
    ax.set_xticklabels([str(c) for c in abundance.columns], rotation=90)
    ax.set_ylabel("Relative abundance (%)")
    ax.set_title("Taxonomic composition")
    ax.legend(fontsize=8, frameon=False, bbox_to_anchor=(1.01, 1), loc="upper left")
    _clean(ax)
    fig.tight_layout()
    return fig


def save_figure(
    fig: Figure,
    path: Union[str, Path],
    *,
    width: float = 8.0,
    height: float = 6.0,
    dpi: int = 300,
) -> Path:
    """Grava a figura no formato indicado pela extensão e a fecha."""
    path = Path(path)
    fmt = FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ValueError(f"Unsupported figure format: {path.suffix} (expected png, pdf or svg)")
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.set_size_inches(width, height)
    fig.savefig(path, format=fmt, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path
