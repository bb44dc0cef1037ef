from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from minio import Minio
import urllib3

from bucket_connector.config import ConnectionConfig


def normalize_endpoint(endpoint: str) -> str:
    """Remove o esquema http(s):// e barras finais do endpoint.

    Exemplo
    >>> normalize_endpoint("https://s3.amazonaws.com/")
    's3.amazonaws.com'
    >>> normalize_endpoint("http://127.0.0.1:9000")
    '127.0.0.1:9000'
    """
    return re.sub(r"^https?://", "", endpoint.strip(), flags=re.IGNORECASE).rstrip("/")


@dataclass(frozen=True)
class MinioFactory:
    """Fábrica para construir clientes MinIO a partir de ConnectionConfig.

    Exemplo
    >>> from bucket_connector.config import Settings, connection_config, init_default_configs
    >>> settings = Settings()
    >>> init_default_configs(settings, "media")
    >>> factory = MinioFactory(connection_config(settings, "media"))
    >>> isinstance(factory.build(factory.build_http()), Minio)
    True
    """

    config: ConnectionConfig

    def build_http(self) -> urllib3.PoolManager:
        """Cria o pool HTTP com timeouts de conexão/leitura do escopo."""
        timeout = self.config.timeout
        return urllib3.PoolManager(timeout=urllib3.Timeout(connect=timeout, read=timeout))

    def build(self, http_client: Optional[urllib3.PoolManager] = None) -> Minio:
        """Cria um cliente MinIO com credenciais estáticas e região do escopo."""
        return Minio(
            endpoint=normalize_endpoint(self.config.endpoint),
            access_key=self.config.access_key,
            secret_key=self.config.secret_key,
            session_token=self.config.session_token or None,
            secure=self.config.secure,
            region=self.config.region or None,
            http_client=http_client if http_client is not None else self.build_http(),
        )
