# src/mikrob_dataflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do mikrob-dataflow.

As exceções aqui definidas representam **violações estruturais
explícitas** da configuração da sessão, e não erros de resolução de
artefatos.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de domínio ou falha de nó

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Session, Evaluator ou grafo
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração da sessão.

    Permite captura genérica de falhas de configuração, distinguindo-as
    das falhas de artefato (que viram `Failed` dentro do grafo).
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de defaults não encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório quando informado explicitamente
        - Sem caminho explícito, o `defaults.yaml` empacotado é utilizado
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato do arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Conteúdo raiz da configuração não é um dicionário (`dict`).

    Listas ou valores escalares no root são inválidos.
    """


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"parameters": {"seed": 711}}
        - override: {"parameters": {"seed": "auto"}}

    `None` em qualquer lado não é conflito: representa valor não definido
    (ex.: `rarefy_depth: null`, cujo default depende dos dados enviados).
    """
