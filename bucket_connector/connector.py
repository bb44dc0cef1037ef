from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from minio import Minio
import urllib3

from bucket_connector.application.ports.storage_port import BucketInfo
from bucket_connector.application.usecases.delete_objects_usecase import DeleteObjectsUseCase
from bucket_connector.application.usecases.upload_object_usecase import (
    DEFAULT_CONTENT_TYPE,
    UploadObjectUseCase,
    UploadRequest,
)
from bucket_connector.config import (
    ConnectionConfig,
    Settings,
    config_path,
    connection_config,
    init_default_configs,
)
from bucket_connector.errors import ConnectorClosedError
from bucket_connector.infra.s3.miniosdk import MinioFactory
from bucket_connector.infra.s3.s3_manager import DEFAULT_PAGE_SIZE, MinioS3Adapter
from bucket_connector.logging_config import scoped_logger


class BucketConnector:
    """Conector de bucket com ciclo de vida explícito `open`/`close`.

    A configuração vem de `Settings` sob o escopo informado
    (`<escopo>.bucket_name`, `<escopo>.bucket_key`, ...). O nome do bucket é
    lido a cada chamada, os parâmetros de conexão apenas em `open()`.

    Exemplo
    >>> from bucket_connector.config import Settings
    >>> with BucketConnector(Settings(), "media") as conn:  # doctest: +SKIP
    ...     conn.delete_with_prefix(conn.bucket_name, "logs/")
    """

    def __init__(
        self,
        settings: Settings,
        scope: str,
        logger: Optional[logging.Logger] = None,
        factory: Callable[[ConnectionConfig], Any] = MinioFactory,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.settings = settings
        self.scope = scope
        self.logger = logger if logger is not None else scoped_logger(scope)
        self._factory = factory
        self._page_size = page_size
        self._http: Optional[urllib3.PoolManager] = None
        self._client: Optional[Minio] = None
        self._storage: Optional[MinioS3Adapter] = None
        self._deleter: Optional[DeleteObjectsUseCase] = None
        self._uploader: Optional[UploadObjectUseCase] = None
        init_default_configs(self.settings, self.scope)

    def __enter__(self) -> "BucketConnector":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def bucket_name(self) -> str:
        """Nome do bucket configurado, lido novamente a cada acesso."""
        return self.settings.get_str(config_path(self.scope, "bucket_name"))

    @property
    def client(self) -> Minio:
        """Cliente MinIO subjacente (somente com o conector aberto)."""
        self._ensure_open()
        return self._client

    def open(self) -> None:
        """Cria o pool HTTP e o cliente do serviço de armazenamento."""
        if self.is_open:
            return
        cfg = connection_config(self.settings, self.scope)
        self.logger.info(
            "Iniciando BucketConnector: scope=%s bucket_name=%s endpoint=%s region=%s",
            self.scope,
            self.bucket_name,
            cfg.endpoint,
            cfg.region,
        )
        factory = self._factory(cfg)
        http = factory.build_http()
        try:
            client = factory.build(http)
        except Exception:
            http.clear()
            self.logger.error("Falha ao criar cliente de armazenamento: scope=%s", self.scope)
            raise

        storage = MinioS3Adapter(client=client, page_size=self._page_size)
        self._http = http
        self._client = client
        self._storage = storage
        self._deleter = DeleteObjectsUseCase(storage=storage, logger=self.logger)
        self._uploader = UploadObjectUseCase(
            storage=storage,
            default_acl=self.settings.get_str(config_path(self.scope, "bucket_acl")) or None,
            logger=self.logger,
        )

    def close(self) -> None:
        """Libera o pool HTTP; chamadas repetidas não têm efeito."""
        if not self.is_open:
            return
        try:
            if self._http is not None:
                self._http.clear()
        finally:
            self._http = None
            self._client = None
            self._storage = None
            self._deleter = None
            self._uploader = None
            self.logger.info("BucketConnector encerrado: scope=%s", self.scope)

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise ConnectorClosedError(f"BucketConnector '{self.scope}' não está aberto")

    def list_buckets(self) -> list[BucketInfo]:
        self._ensure_open()
        return self._storage.list_buckets()

    def delete_object(self, bucket: str, key: str) -> None:
        """Remove uma chave; objeto inexistente é tratado como sucesso."""
        self._ensure_open()
        self._deleter.delete_by_key(bucket, key)

    def delete_with_prefix(
        self,
        bucket: str,
        prefix: str,
        cancel: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> int:
        """Remove todos os objetos sob o prefixo; prefixo vazio remove o bucket inteiro."""
        self._ensure_open()
        return self._deleter.delete_by_prefix(bucket, prefix, cancel=cancel, deadline=deadline)

    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> str:
        """Grava o conteúdo e retorna a URL pública do objeto."""
        self._ensure_open()
        return self._uploader.upload(bucket, key, content, content_type)

    def save_file(self, request: UploadRequest, content_type: str) -> str:
        """Grava um payload base64 no bucket configurado do escopo."""
        self._ensure_open()
        return self._uploader.save_file(self.bucket_name, request, content_type)
