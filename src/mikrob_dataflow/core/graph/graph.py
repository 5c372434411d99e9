# src/mikrob_dataflow/core/graph/graph.py
"""
Grafo de dependências de artefatos (DAG).

Este módulo define o `DependencyGraph`, responsável por registrar inputs
e ArtifactNodes, validar a integridade estrutural do grafo e responder
às consultas de que dependem Evaluator e InvalidationTracker.

Responsabilidades do módulo:
    - Validar unicidade de nomes (inputs e nós compartilham o namespace)
    - Rejeitar registros que fechem um ciclo
    - Expor ordenação topológica determinística (diagnóstico)
    - Responder a lookup reverso: quem precisa ser invalidado quando `id` muda

Decisões arquiteturais:
    - Referências adiantadas são permitidas no `register`; identificadores
      nunca declarados são detectados em `validate()`
    - Ciclos são detectados no momento do registro, e o registro é desfeito
    - Ordenação topológica via Kahn determinístico; empates por ordem lexicográfica
    - A topologia é fixa após a construção da Session

Invariantes:
    - O grafo registrado é sempre acíclico
    - Cada nome aparece exatamente uma vez
    - A mesma definição produz sempre a mesma ordem

Limites explícitos:
    - Não resolve nós
    - Não mantém cache nem versões
    - Não registra eventos
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from .node import ArtifactNode


class DuplicateNameError(ValueError):
    """
    Exceção levantada quando um nome já existe no grafo.

    Inputs do InputStore e ArtifactNodes compartilham o mesmo namespace:
    um nó não pode ter o nome de um input, e vice-versa.
    """


class CycleError(ValueError):
    """
    Exceção levantada quando o registro de um nó tornaria o grafo cíclico.

    O registro que fecharia o ciclo é desfeito; o grafo permanece no
    estado anterior, ainda acíclico.
    """


class UnknownDependencyError(ValueError):
    """
    Exceção levantada quando um nó referencia um identificador nunca declarado.

    Detectada em `validate()`, antes de qualquer resolução.
    """


class DependencyGraph:
    """
    Conjunto de inputs e ArtifactNodes mais as arestas entre eles.

    Decisões arquiteturais:
        - Inputs são folhas (sem upstreams)
        - Ordem de registro preservada separadamente da estrutura de armazenamento
        - Arestas reversas mantidas incrementalmente para lookup O(arestas)
    """

    def __init__(self) -> None:
        self._inputs: List[str] = []
        self._nodes: Dict[str, ArtifactNode] = {}
        self._order: List[str] = []
        self._downstream: Dict[str, Set[str]] = {}

    # ------------------------------------------------------------------
    # Registro
    # ------------------------------------------------------------------
    def _check_name(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("name must be a non-empty string")
        if name in self._nodes or name in self._inputs:
            raise DuplicateNameError(f"Duplicate name: {name}")

    def declare_input(self, key: str) -> None:
        self._check_name(key)
        self._inputs.append(key)
        self._downstream.setdefault(key, set())

    def register(self, node: ArtifactNode) -> None:
        self._check_name(node.name)
        if node.name in node.upstreams:
            raise CycleError(f"Node '{node.name}' depends on itself")

        self._nodes[node.name] = node
        self._order.append(node.name)
        self._downstream.setdefault(node.name, set())
        for up in node.upstreams:
            self._downstream.setdefault(up, set()).add(node.name)

        if self._reaches(node.name, node.name):
            self._unregister(node)
            raise CycleError(f"Registering '{node.name}' would create a cycle")

    def _unregister(self, node: ArtifactNode) -> None:
        del self._nodes[node.name]
        self._order.remove(node.name)
        for up in node.upstreams:
            self._downstream.get(up, set()).discard(node.name)
        if not self._downstream.get(node.name):
            self._downstream.pop(node.name, None)

    def _reaches(self, start: str, target: str) -> bool:
        """True se `target` é alcançável a jusante de `start` (excluindo o próprio start)."""
        stack = list(self._downstream.get(start, ()))
        seen: Set[str] = set()
        while stack:
            current = stack.pop()
            if current == target:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._downstream.get(current, ()))
        return False

    def validate(self) -> None:
        """Garante que todo upstream declarado é um input ou nó registrado."""
        for name in self._order:
            for up in self._nodes[name].upstreams:
                if not self.contains(up):
                    raise UnknownDependencyError(f"Node '{name}' depends on unknown identifier '{up}'")

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def contains(self, name: str) -> bool:
        return name in self._nodes or name in self._inputs

    def is_input(self, name: str) -> bool:
        return name in self._inputs

    def is_node(self, name: str) -> bool:
        return name in self._nodes

    def get(self, name: str) -> ArtifactNode:
        return self._nodes[name]

    def inputs(self) -> List[str]:
        return list(self._inputs)

    def nodes(self) -> List[ArtifactNode]:
        return [self._nodes[n] for n in self._order]

    def upstreams_of(self, name: str) -> List[str]:
        if name in self._inputs:
            return []
        return list(self._nodes[name].upstreams)

    def downstream_of(self, name: str) -> List[str]:
        """Dependentes diretos de `name`, em ordem lexicográfica."""
        return sorted(self._downstream.get(name, ()))

    def dependents_of(self, name: str) -> List[str]:
        """
        Todos os nós (diretos e transitivos) a invalidar quando `name` muda.

        A lista segue a ordem topológica do grafo, o que a torna determinística
        e adequada para logs e manifest.
        """
        if not self.contains(name):
            raise KeyError(name)
        found: Set[str] = set()
        stack = list(self._downstream.get(name, ()))
        while stack:
            current = stack.pop()
            if current in found:
                continue
            found.add(current)
            stack.extend(self._downstream.get(current, ()))
        return [n for n in self.topological_order() if n in found]

    def topological_order(self) -> List[str]:
        """
        Ordem topológica determinística de todos os identificadores.

        Variação determinística do algoritmo de Kahn: sempre que vários
        identificadores estão prontos, o menor em ordem lexicográfica sai
        primeiro. Identificadores referenciados mas não declarados são
        ignorados aqui (ver `validate`).

        Raises:
            CycleError: Se houver ciclo (não deveria ocorrer após `register`).
        """
        names: List[str] = list(self._inputs) + list(self._order)
        incoming: Dict[str, int] = {n: 0 for n in names}
        for n in self._order:
            incoming[n] = sum(1 for up in self._nodes[n].upstreams if up in incoming)

        ready: List[str] = sorted(n for n, c in incoming.items() if c == 0)
        ordered: List[str] = []
        while ready:
            current = ready.pop(0)
            ordered.append(current)
            for child in sorted(self._downstream.get(current, ())):
                if child not in incoming:
                    continue
                incoming[child] -= 1
                if incoming[child] == 0:
                    ready.append(child)
                    ready.sort()

        if len(ordered) != len(names):
            raise CycleError("Cycle detected in artifact dependency graph")
        return ordered


def build_graph(inputs: Iterable[str], nodes: Iterable[ArtifactNode]) -> DependencyGraph:
    """Declara inputs, registra nós na ordem dada e valida o grafo."""
    graph = DependencyGraph()
    for key in inputs:
        graph.declare_input(key)
    for node in nodes:
        graph.register(node)
    graph.validate()
    return graph
