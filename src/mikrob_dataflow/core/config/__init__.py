# src/mikrob_dataflow/core/config/__init__.py

"""
Camada de configuração do mikrob-dataflow.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade

A configuração define o valor inicial dos parâmetros da sessão, opções
das rotinas analíticas e defaults de exportação. Ela é lida uma única
vez na criação da Session; mudanças interativas passam pelo InputStore.

Limites explícitos:
    - Não valida domínio de parâmetros
    - Não interage com o grafo de artefatos diretamente
"""

from .loader import load_config, BUNDLED_DEFAULTS
from .merge import deep_merge
from .hashing import compute_config_hash

__all__ = ["load_config", "deep_merge", "compute_config_hash", "BUNDLED_DEFAULTS"]
