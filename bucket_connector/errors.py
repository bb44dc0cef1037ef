from __future__ import annotations

from typing import Optional


class BucketConnectorError(Exception):
    error_type = "UNKNOWN"


class ObjectNotFoundError(BucketConnectorError):
    """O objeto alvo não existe no bucket."""

    error_type = "NOT_FOUND"

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"Objeto não encontrado: s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


class StorageBackendError(BucketConnectorError):
    """Falha de rede/serviço não classificada como ausência do objeto."""

    error_type = "BACKEND"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class DeletionCancelledError(BucketConnectorError):
    """Remoção por prefixo interrompida pelo chamador entre páginas."""

    error_type = "CANCELLED"

    def __init__(self, bucket: str, prefix: str, deleted: int) -> None:
        super().__init__(
            f"Remoção cancelada em s3://{bucket}/{prefix} após {deleted} objeto(s) removido(s)"
        )
        self.bucket = bucket
        self.prefix = prefix
        self.deleted = deleted


class ConnectorClosedError(BucketConnectorError):
    error_type = "CLOSED"


class InvalidUploadError(BucketConnectorError, ValueError):
    error_type = "INVALID_UPLOAD"
