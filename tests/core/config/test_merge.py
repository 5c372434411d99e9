# tests/core/config/test_merge.py
"""
Testes da política de deep-merge de configuração.

Política validada:
    - dict → merge recursivo
    - list → sobrescrita total
    - escalar → sobrescrita direta
    - None em qualquer lado → sobrescrita sem conflito
    - conflito de tipo → ConfigTypeConflictError

Invariantes:
    - Nenhum input é mutado
"""

import copy

import pytest

from mikrob_dataflow.core.config.errors import ConfigTypeConflictError
from mikrob_dataflow.core.config.merge import deep_merge


def test_merge_simple_override():
    base = {"parameters": {"seed": 711, "top_n": 10}}
    override = {"parameters": {"top_n": 5}}
    assert deep_merge(base, override) == {"parameters": {"seed": 711, "top_n": 5}}


def test_merge_nested_dict():
    base = {"export": {"plot": {"width": 8.0, "height": 6.0}}}
    override = {"export": {"plot": {"height": 4.0}, "extra": True}}
    out = deep_merge(base, override)
    assert out == {"export": {"plot": {"width": 8.0, "height": 4.0}, "extra": True}}


def test_merge_list_override_total():
    base = {"analysis": {"alpha_indices": ["Observed", "Shannon", "Simpson"]}}
    override = {"analysis": {"alpha_indices": ["Shannon"]}}
    assert deep_merge(base, override) == {"analysis": {"alpha_indices": ["Shannon"]}}


def test_merge_none_is_unset_not_conflict():
    """`rarefy_depth: null` aceita um inteiro, e vice-versa."""
    assert deep_merge({"p": {"rarefy_depth": None}}, {"p": {"rarefy_depth": 100}}) == {"p": {"rarefy_depth": 100}}
    assert deep_merge({"p": {"group_var": "site"}}, {"p": {"group_var": None}}) == {"p": {"group_var": None}}


def test_merge_int_float_are_compatible():
    assert deep_merge({"confidence_threshold": 70}, {"confidence_threshold": 72.5}) == {"confidence_threshold": 72.5}


def test_merge_type_conflict_raises():
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"parameters": {"seed": 711}}, {"parameters": {"seed": "auto"}})
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"parameters": {"seed": 711}}, {"parameters": {"seed": True}})


def test_merge_does_not_mutate_inputs():
    base = {"a": {"b": [1, 2]}, "c": 1}
    override = {"a": {"b": [3]}, "d": {"e": 1}}
    before = (copy.deepcopy(base), copy.deepcopy(override))
    out = deep_merge(base, override)
    out["d"]["e"] = 99
    assert (base, override) == before
