from __future__ import annotations

import base64
import binascii
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import quote

from bucket_connector.application.ports.storage_port import StoragePort
from bucket_connector.errors import InvalidUploadError

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def object_url(bucket: str, key: str) -> str:
    """Monta a URL pública do objeto escapando a chave como um único segmento de caminho.

    Barras também são escapadas (`%2F`); `$&+:=@` permanecem literais.

    Exemplo
    >>> object_url("example.com", "docs/relatório final.pdf")
    'https://example.com/docs%2Frelat%C3%B3rio%20final.pdf'
    """
    escaped = quote(key, safe="$&+:=@")
    return f"https://{bucket}/{escaped}"


@dataclass(frozen=True)
class UploadRequest:
    """Requisição de upload com conteúdo codificado em base64.

    Exemplo
    >>> UploadRequest.from_dict({"file_name": "a.txt", "category": "docs", "rowData": "YQ=="}).category
    'docs'
    """

    file_name: str
    category: str
    raw_data: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UploadRequest":
        """Aceita os nomes de campo do payload JSON (`file_name`, `category`, `rowData`)."""
        raw = payload.get("rowData", payload.get("raw_data", ""))
        return cls(
            file_name=str(payload.get("file_name") or ""),
            category=str(payload.get("category") or ""),
            raw_data=str(raw or ""),
        )

    def object_key(self) -> str:
        """Chave `categoria/nome`; sem nome, usa um UUID4."""
        file_name = self.file_name or str(uuid.uuid4())
        return f"{self.category}/{file_name}"


@dataclass
class UploadObjectUseCase:
    """Caso de uso para gravar objetos no bucket e devolver sua URL pública."""

    storage: StoragePort
    default_acl: Optional[str] = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
        acl: Optional[str] = None,
    ) -> str:
        """Envia bytes para a chave informada e retorna a URL do objeto."""
        if not bucket:
            raise ValueError("Nome do bucket é obrigatório")
        effective_acl = acl if acl is not None else (self.default_acl or None)
        try:
            self.storage.put_object(bucket, key, content, content_type, effective_acl)
        except Exception:
            self.logger.error("Falha ao gravar objeto: bucket=%s key=%s", bucket, key)
            raise
        self.logger.info("Objeto gravado: bucket=%s key=%s size=%d", bucket, key, len(content))
        return object_url(bucket, key)

    def save_file(self, bucket: str, request: UploadRequest, content_type: str) -> str:
        """Decodifica o payload base64 e o envia para `categoria/nome`."""
        try:
            decoded = base64.b64decode(request.raw_data, validate=True)
        except binascii.Error as exc:
            self.logger.error("Upload com payload base64 inválido: category=%s", request.category)
            raise InvalidUploadError(f"Payload base64 inválido: {exc}") from exc
        key = request.object_key()
        self.logger.info("Enviando arquivo: bucket=%s key=%s", bucket, key)
        return self.upload(bucket, key, decoded, content_type)
