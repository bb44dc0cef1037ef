from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from bucket_connector.application.ports.storage_port import StoragePort
from bucket_connector.errors import DeletionCancelledError, ObjectNotFoundError


def _require_bucket(bucket: str) -> None:
    if not bucket:
        raise ValueError("Nome do bucket é obrigatório")


@dataclass
class DeleteObjectsUseCase:
    """Caso de uso para remover objetos do bucket, por chave ou por prefixo.

    A remoção por prefixo não é transacional: uma falha no meio do caminho
    mantém removidos os objetos já apagados e intactos os restantes.
    """

    storage: StoragePort
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def delete_by_key(self, bucket: str, key: str) -> None:
        """Remove um objeto específico; objeto inexistente é tratado como sucesso."""
        _require_bucket(bucket)
        try:
            self.storage.delete_object(bucket, key)
        except ObjectNotFoundError:
            self.logger.debug("Objeto já ausente: bucket=%s key=%s", bucket, key)
            return
        self.logger.info("Objeto removido: bucket=%s key=%s", bucket, key)

    def delete_by_prefix(
        self,
        bucket: str,
        prefix: str,
        cancel: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> int:
        """Remove todos os objetos que iniciam com o prefixo e retorna o total removido.

        Páginas e chaves são processadas em ordem de listagem, uma a uma. O
        primeiro erro de listagem ou remoção interrompe a operação sem novas
        tentativas. `cancel` e `deadline` (instante de `time.monotonic()`) são
        verificados antes de cada página.
        """
        _require_bucket(bucket)
        removed = 0
        cursor: Optional[str] = None
        while True:
            if _cancelled(cancel, deadline):
                self.logger.warning(
                    "Remoção por prefixo cancelada: bucket=%s prefix=%r removidos=%d",
                    bucket,
                    prefix,
                    removed,
                )
                raise DeletionCancelledError(bucket, prefix, removed)

            try:
                page = self.storage.list_page(bucket, prefix, cursor)
            except Exception:
                self.logger.error("Falha ao listar objetos: bucket=%s prefix=%r", bucket, prefix)
                raise

            for key in page.keys:
                try:
                    self.delete_by_key(bucket, key)
                except Exception:
                    self.logger.error("Falha ao remover objeto: bucket=%s key=%s", bucket, key)
                    raise
                removed += 1

            if page.next_cursor is None:
                return removed
            cursor = page.next_cursor

    def delete_all(self, bucket: str) -> int:
        """Remove todos os objetos do bucket."""
        return self.delete_by_prefix(bucket, "")


def _cancelled(cancel: Optional[threading.Event], deadline: Optional[float]) -> bool:
    if cancel is not None and cancel.is_set():
        return True
    return deadline is not None and time.monotonic() >= deadline
