# tests/core/engine/test_evaluator_superseded.py
"""
Testes de resultados superados por escritas concorrentes.

Se um input a montante muda enquanto a transformação roda, o resultado é
descartado (não cacheado) e a resolução devolve Pending(superseded=True).
A próxima requisição recalcula com o valor novo.
"""

from mikrob_dataflow.core.engine import Evaluator, InvalidationTracker
from mikrob_dataflow.core.graph.cache import ArtifactCache
from mikrob_dataflow.core.graph.graph import build_graph
from mikrob_dataflow.core.graph.node import artifact_node
from mikrob_dataflow.core.graph.store import InputStore
from mikrob_dataflow.core.graph.types import Pending, Resolved


def test_write_during_compute_discards_result():
    store, cache = InputStore(), ArtifactCache()
    holder = {}

    def slow_plus_one(a):
        if not holder.get("written"):
            holder["written"] = True
            holder["tracker"].on_write("a", 99)
        return a + 1

    graph = build_graph(
        ["a"],
        [
            artifact_node("x", ["a"], slow_plus_one),
            artifact_node("z", ["x"], lambda x: x * 10),
        ],
    )
    evaluator = Evaluator(graph=graph, store=store, cache=cache)
    holder["tracker"] = InvalidationTracker(graph=graph, store=store, cache=cache)
    holder["tracker"].on_write("a", 1)

    first = evaluator.resolve("z")
    assert isinstance(first, Pending)
    assert first.superseded is True
    assert "request again" in first.message
    assert cache.get("x") is None
    assert cache.get("z") is None

    second = evaluator.resolve("z")
    assert isinstance(second, Resolved)
    assert second.value == 1000
