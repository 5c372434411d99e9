# tests/core/graph/test_input_store.py
"""
Testes do InputStore (estado raiz versionado da sessão).

Invariantes:
    - Chave nunca escrita tem versão 0
    - Toda escrita incrementa a versão em 1, inclusive de valores iguais ou None
    - `has` significa escrita e não vazia
"""

import pandas as pd
import pytest

from mikrob_dataflow.core.graph.store import InputStore, is_present


def test_versions_start_at_zero_and_increment_on_every_write():
    s = InputStore()
    assert s.version("seed") == 0
    assert s.write("seed", 711) == 1
    assert s.write("seed", 711) == 2
    assert s.write("seed", None) == 3
    assert s.version("seed") == 3
    assert s.entry("seed").value is None


def test_has_means_written_and_non_empty():
    s = InputStore()
    assert not s.has("asv_table")
    s.write("asv_table", pd.DataFrame())
    assert not s.has("asv_table")
    s.write("asv_table", pd.DataFrame({"S1": [1]}))
    assert s.has("asv_table")
    s.write("min_count", 0)
    assert s.has("min_count")
    s.write("covariates", ())
    assert not s.has("covariates")


def test_get_unwritten_key_raises():
    with pytest.raises(KeyError):
        InputStore().get("seed")


def test_keys_and_versions_are_sorted():
    s = InputStore()
    s.write("top_n", 5)
    s.write("seed", 1)
    s.write("seed", 2)
    assert s.keys() == ["seed", "top_n"]
    assert dict(s.versions()) == {"seed": 2, "top_n": 1}


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, False),
        ("", False),
        ([], False),
        (pd.Series(dtype=float), False),
        (0, True),
        (0.0, True),
        ("Genus", True),
        (("group",), True),
    ],
)
def test_is_present(value, expected):
    assert is_present(value) is expected
