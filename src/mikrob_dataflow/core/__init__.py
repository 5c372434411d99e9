# src/mikrob_dataflow/core/__init__.py
"""
Core do Mikrob DataFlow.

Este pacote reúne o motor reativo, independente das rotinas de domínio:
declaração de nós, grafo de dependências, armazenamento versionado de
entradas, cache de artefatos, avaliação sob demanda e rastreabilidade.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada (nós com transformações triviais)
    - livre de dependências de UI ou de formatos de arquivo

Componentes principais:
    - config       → resolução de configuração (merge e hashing)
    - graph        → ArtifactNode, DependencyGraph, InputStore, ArtifactCache
    - engine       → Evaluator e InvalidationTracker
    - traceability → Manifest de eventos
    - session      → composição de tudo acima em uma sessão de usuário

Limites explícitos:
    - Não contém rotinas estatísticas nem ecológicas
    - Não lê nem escreve arquivos de dados
"""
