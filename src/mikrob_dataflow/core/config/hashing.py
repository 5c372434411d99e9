# src/mikrob_dataflow/core/config/hashing.py
"""
Hashing canônico de configuração da sessão.

O hash representa a identidade estrutural da configuração efetiva e é
registrado no manifest da sessão, permitindo associar um snapshot
exportado aos defaults e overrides que o produziram.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256

Limites explícitos:
    - Não inclui informações de runtime (uploads, versões de inputs)
    - Não persiste o hash
"""


import json
import hashlib
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva da sessão.

    Invariantes:
        - O valor retornado é uma string hexadecimal de 64 caracteres
        - Configurações estruturalmente equivalentes produzem o mesmo hash

    Args:
        config (Dict[str, Any]): Configuração efetiva.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
