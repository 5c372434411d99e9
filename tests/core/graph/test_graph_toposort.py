# tests/core/graph/test_graph_toposort.py
"""
Testes de ordenação topológica e de dependentes do DependencyGraph.

Os testes asseguram que:
- a ordem respeita as arestas upstream → nó
- empates são resolvidos lexicograficamente (ordem determinística)
- `dependents_of` devolve dependentes diretos e transitivos em ordem topológica

Limites explícitos:
    - Não resolve nós (ver tests/core/engine)
"""

from mikrob_dataflow.core.graph.graph import build_graph
from mikrob_dataflow.core.graph.node import artifact_node


def _identity(*args):
    return args


def test_toposort_linear():
    g = build_graph(
        ["a"],
        [
            artifact_node("c", ["b"], _identity),
            artifact_node("b", ["a"], _identity),
        ],
    )
    assert g.topological_order() == ["a", "b", "c"]


def test_toposort_ties_are_lexicographic(toy_graph):
    assert toy_graph.topological_order() == ["a", "b", "x", "y", "z"]


def test_toposort_is_stable_across_calls(toy_graph):
    assert toy_graph.topological_order() == toy_graph.topological_order()


def test_dependents_are_transitive_and_ordered(toy_graph):
    assert toy_graph.dependents_of("a") == ["x", "z"]
    assert toy_graph.dependents_of("b") == ["y", "z"]
    assert toy_graph.dependents_of("z") == []


def test_upstream_and_downstream_lookups(toy_graph):
    assert toy_graph.upstreams_of("z") == ["x", "y"]
    assert toy_graph.upstreams_of("a") == []
    assert toy_graph.downstream_of("x") == ["z"]
    assert toy_graph.is_input("a") and not toy_graph.is_node("a")
    assert toy_graph.is_node("x") and not toy_graph.is_input("x")
    assert [n.name for n in toy_graph.nodes()] == ["x", "y", "z"]
    assert toy_graph.inputs() == ["a", "b"]
