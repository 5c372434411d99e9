# tests/core/graph/test_parameters.py
"""
Testes de validação e normalização de parâmetros nomeados.

Invariantes:
    - None é sempre aceito (limpa o parâmetro)
    - Valores fora do domínio levantam ParameterValidationError
    - `covariates` é normalizado para tupla ordenada e sem duplicatas
"""

import pandas as pd
import pytest

from mikrob_dataflow.core.exceptions import ParameterValidationError
from mikrob_dataflow.core.graph.parameters import (
    DEFAULT_SEED,
    INPUT_KEYS,
    PARAMETER_KEYS,
    TABLE_KEYS,
    validate_input,
)


def test_key_catalog():
    assert DEFAULT_SEED == 711
    assert set(TABLE_KEYS) == {"asv_table", "taxonomy_table", "metadata_table"}
    assert len(PARAMETER_KEYS) == 14
    assert set(INPUT_KEYS) == set(TABLE_KEYS) | set(PARAMETER_KEYS)


@pytest.mark.parametrize(
    "key, value, expected",
    [
        ("rarefy_depth", 1000, 1000),
        ("rarefy_depth", 1000.0, 1000),
        ("seed", 0, 0),
        ("min_count", 0, 0),
        ("confidence_threshold", 70, 70.0),
        ("tax_level", "Family", "Family"),
        ("distance_method", "jaccard", "jaccard"),
        ("ordination_method", "NMDS", "NMDS"),
        ("alpha_metric", "InvSimpson", "InvSimpson"),
        ("group_var", "site", "site"),
        ("covariates", ["site", "ph", "site"], ("site", "ph")),
        ("covariates", "site", ("site",)),
        ("covariates", {"site", "age"}, ("age", "site")),
        ("unknown_key", object, object),
    ],
)
def test_valid_values_are_normalized(key, value, expected):
    assert validate_input(key, value) == expected


@pytest.mark.parametrize(
    "key, value",
    [
        ("rarefy_depth", 0),
        ("rarefy_depth", 10.5),
        ("rarefy_depth", True),
        ("seed", -1),
        ("depth_step", "100"),
        ("confidence_threshold", 101),
        ("tax_level", "Kingdom"),
        ("distance_method", "unifrac"),
        ("ordination_method", "pcoa"),
        ("group_var", "  "),
        ("covariates", 3),
        ("covariates", ["ok", ""]),
        ("asv_table", [[1, 2]]),
    ],
)
def test_invalid_values_raise(key, value):
    with pytest.raises(ParameterValidationError) as ei:
        validate_input(key, value)
    assert ei.value.details["parameter"] == key


def test_none_always_clears():
    for key in INPUT_KEYS:
        assert validate_input(key, None) is None


def test_tables_accept_dataframes():
    df = pd.DataFrame({"S1": [1]})
    assert validate_input("asv_table", df) is df
