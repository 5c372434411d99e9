# src/mikrob_dataflow/core/engine/__init__.py
"""
Engine do mikrob-dataflow.

Componentes principais:
    - evaluator    → resolução sob demanda com cache por version-vector
    - invalidation → escrita de inputs e marcação de dependentes como stale

Princípios fundamentais:
    - Escrita e resolução são responsabilidades separadas
    - Nenhum recálculo acontece na escrita; apenas na leitura
    - Falhas são valores (`Failed`), nunca exceções que escapam da resolução

Limites explícitos:
    - Não define nós de domínio (ver `mikrob_dataflow.nodes`)
    - Não persiste resultados automaticamente
"""

from .evaluator import Evaluator, CACHED, STALE, EMPTY
from .invalidation import InvalidationTracker

__all__ = ["Evaluator", "InvalidationTracker", "CACHED", "STALE", "EMPTY"]
