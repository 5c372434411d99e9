# src/mikrob_dataflow/analysis/stats.py
"""
Testes de associação entre covariáveis de metadata e diversidade.

- `permanova`: PERMANOVA (scikit-bio) sobre a matriz de distâncias beta,
  um teste por covariável; amostras com valor ausente são excluídas.
- `anova`: OLS + ANOVA tipo II (statsmodels) de um índice alfa contra as
  covariáveis; covariáveis categóricas entram como fatores.

Falhas das bibliotecas viram ExternalRoutineError com a mensagem original.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from skbio import DistanceMatrix
from skbio.stats.distance import permanova as _skbio_permanova
from statsmodels.stats.anova import anova_lm

from mikrob_dataflow.core.exceptions import ExternalRoutineError, ValidationError

PERMANOVA_COLUMNS = ["covariate", "method", "pseudo_F", "R2", "p_value", "n_groups", "n_samples", "permutations"]
ANOVA_COLUMNS = ["covariate", "df", "sum_sq", "F", "p_value", "eta_sq"]


def _require_columns(metadata: pd.DataFrame, covariates: Sequence[str]) -> None:
    missing = [c for c in covariates if c not in metadata.columns]
    if missing:
        raise ValidationError(
            message=f"Unknown metadata column(s): {', '.join(missing)}",
            details={"missing": missing, "available": [str(c) for c in metadata.columns]},
            hint="Escolha covariáveis presentes na tabela de metadata.",
        )


def permanova(
    distance: DistanceMatrix,
    metadata: pd.DataFrame,
    covariates: Sequence[str],
    permutations: int = 999,
    seed: int = 711,
) -> pd.DataFrame:
    """Uma linha por covariável: pseudo-F, R², p-value, nº de grupos e de amostras."""
    _require_columns(metadata, covariates)
    rows = []
    for covariate in covariates:
        grouping = metadata.loc[list(distance.ids), covariate]
        grouping = grouping[grouping.notna()].astype(str)
        sub = distance.filter(list(grouping.index)) if len(grouping) != len(distance.ids) else distance
        try:
            result = _skbio_permanova(sub, grouping, permutations=permutations, seed=seed)
        except ValueError as exc:
            raise ExternalRoutineError(
                message=str(exc),
                details={"routine": "skbio.stats.distance.permanova", "covariate": covariate},
            ) from exc
        f_stat = float(result["test statistic"])
        n = int(result["sample size"])
        g = int(result["number of groups"])
        between = f_stat * (g - 1)
        r2 = between / (between + (n - g)) if (between + (n - g)) > 0 else float("nan")
        rows.append(
            {
                "covariate": covariate,
                "method": "PERMANOVA",
                "pseudo_F": f_stat,
                "R2": r2,
                "p_value": float(result["p-value"]),
                "n_groups": g,
                "n_samples": n,
                "permutations": int(result["number of permutations"]),
            }
        )
    return pd.DataFrame(rows, columns=PERMANOVA_COLUMNS)


def _is_categorical(series: pd.Series) -> bool:
    return not pd.api.types.is_numeric_dtype(series) or pd.api.types.is_bool_dtype(series)


def anova(response: pd.Series, metadata: pd.DataFrame, covariates: Sequence[str]) -> pd.DataFrame:
    """
    ANOVA tipo II do índice `response` contra `covariates`.

    Colunas são renomeadas internamente (y, x0, x1, ...) para que nomes
    arbitrários de metadata não quebrem a fórmula.
    """
    _require_columns(metadata, covariates)
    frame = pd.DataFrame({"y": response.astype(float)})
    terms = []
    names = {}
    for i, covariate in enumerate(covariates):
        alias = f"x{i}"
        column = metadata.loc[frame.index, covariate]
        frame[alias] = column
        term = f"C({alias})" if _is_categorical(column) else alias
        terms.append(term)
        names[term] = covariate
    frame = frame.dropna()

    # erros de fórmula do statsmodels não derivam de ValueError
    try:
        model = smf.ols("y ~ " + " + ".join(terms), data=frame).fit()
    except Exception as exc:
        raise ExternalRoutineError(
            message=str(exc),
            details={"routine": "statsmodels.ols", "covariates": list(covariates)},
        ) from exc
    if model.df_resid <= 0:
        raise ExternalRoutineError(
            message=f"Saturated design: {int(model.df_resid)} residual degrees of freedom",
            details={"routine": "statsmodels.ols", "n_samples": int(len(frame)), "covariates": list(covariates)},
            hint="Reduza o número de covariáveis ou envie mais amostras.",
        )
    try:
        table = anova_lm(model, typ=2)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ExternalRoutineError(
            message=str(exc),
            details={"routine": "statsmodels.anova_lm", "covariates": list(covariates)},
        ) from exc

    total = float(table["sum_sq"].sum())
    rows = []
    for term in terms:
        rec = table.loc[term]
        rows.append(
            {
                "covariate": names[term],
                "df": float(rec["df"]),
                "sum_sq": float(rec["sum_sq"]),
                "F": float(rec["F"]),
                "p_value": float(rec["PR(>F)"]),
                "eta_sq": float(rec["sum_sq"]) / total if total > 0 else float("nan"),
            }
        )
    return pd.DataFrame(rows, columns=ANOVA_COLUMNS)
