"""
Mikrob DataFlow — grafo reativo de artefatos para análise de microbioma.

Este pacote raiz define o namespace público do Mikrob DataFlow: uma sessão
interativa que recebe tabelas de contagem (ASV/OTU), taxonomia e metadados,
e deriva artefatos analíticos (rarefação, diversidade alfa e beta,
ordenação, testes estatísticos e composição taxonômica) sob demanda.

Princípios centrais:
    - Cada artefato é um nó de um DAG explícito e nomeado
    - Artefatos são recalculados apenas quando uma entrada da qual dependem muda
    - A aleatoriedade é semeada e, portanto, reprodutível
    - Falhas são valores: um erro em um nó não derruba a sessão

Arquitetura em alto nível:
    - core.config       → carregamento, merge e hashing de configuração
    - core.graph        → nós, grafo de dependências, InputStore e cache
    - core.engine       → avaliação sob demanda e invalidação
    - core.traceability → Manifest de eventos da sessão
    - ingest / analysis → leitura de tabelas e rotinas analíticas
    - nodes             → catálogo de nós do pipeline de microbioma
    - export            → exportação explícita de tabelas, figuras e snapshots
    - presentation      → renderização de resoluções (HTML + texto)

Limites explícitos:
    - Não expõe servidor HTTP nem interface gráfica
    - Não persiste sessões automaticamente
"""
# src/mikrob_dataflow/__init__.py
from .core.session import Session
from .presentation import RenderResult, render_resolution

__all__ = ["Session", "RenderResult", "render_resolution"]
