from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol


@dataclass(frozen=True)
class BucketInfo:
    """Bucket retornado pela listagem do serviço de armazenamento."""

    name: str
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class ObjectPage:
    """Página de chaves em ordem de listagem e o cursor para a próxima página.

    `next_cursor` igual a None indica a última página.
    """

    keys: list[str] = field(default_factory=list)
    next_cursor: Optional[str] = None


class StoragePort(Protocol):
    """Porta de acesso ao armazenamento de objetos utilizada pela camada de aplicação."""

    def list_buckets(self) -> list[BucketInfo]:
        """Lista os buckets visíveis para as credenciais configuradas."""
        ...

    def list_page(self, bucket: str, prefix: str, cursor: Optional[str] = None) -> ObjectPage:
        """Retorna uma página de chaves que iniciam com o prefixo, a partir do cursor."""
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        """Remove a chave exata; levanta ObjectNotFoundError se ela não existir."""
        ...

    def put_object(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: str,
        acl: Optional[str] = None,
    ) -> None:
        """Grava o conteúdo na chave informada."""
        ...
