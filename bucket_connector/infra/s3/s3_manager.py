from __future__ import annotations

import io
from dataclasses import dataclass
from itertools import islice
from typing import Optional

from minio import Minio
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from bucket_connector.application.ports.storage_port import BucketInfo, ObjectPage, StoragePort
from bucket_connector.errors import ObjectNotFoundError, StorageBackendError

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound"})

DEFAULT_PAGE_SIZE = 1000


def _backend_error(action: str, target: str, exc: Exception) -> StorageBackendError:
    code = exc.code if isinstance(exc, S3Error) else None
    return StorageBackendError(f"Falha ao {action} {target}: {exc}", code=code)


@dataclass
class MinioS3Adapter(StoragePort):
    """Adaptador S3 baseado em MinIO que implementa o contrato StoragePort.

    O cursor de paginação é a última chave da página anterior, repassada ao
    SDK como `start_after`.
    """

    client: Minio
    page_size: int = DEFAULT_PAGE_SIZE

    def list_buckets(self) -> list[BucketInfo]:
        """Lista os buckets da conta."""
        try:
            buckets = self.client.list_buckets()
        except (MinioException, HTTPError) as exc:
            raise _backend_error("listar", "buckets", exc) from exc
        return [BucketInfo(name=b.name, creation_date=getattr(b, "creation_date", None)) for b in buckets]

    def list_page(self, bucket: str, prefix: str, cursor: Optional[str] = None) -> ObjectPage:
        """Retorna até `page_size` chaves sob o prefixo, após o cursor."""
        try:
            objects = self.client.list_objects(
                bucket_name=bucket,
                prefix=prefix,
                recursive=True,
                start_after=cursor,
            )
            batch = list(islice(objects, self.page_size + 1))
        except (MinioException, HTTPError) as exc:
            raise _backend_error("listar", f"s3://{bucket}/{prefix}", exc) from exc

        keys = [obj.object_name for obj in batch[: self.page_size]]
        next_cursor = keys[-1] if len(batch) > self.page_size else None
        return ObjectPage(keys=keys, next_cursor=next_cursor)

    def delete_object(self, bucket: str, key: str) -> None:
        """Remove um objeto específico do bucket."""
        try:
            self.client.remove_object(bucket_name=bucket, object_name=key)
        except S3Error as exc:
            if exc.code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(bucket, key) from exc
            raise _backend_error("remover", f"s3://{bucket}/{key}", exc) from exc
        except (MinioException, HTTPError) as exc:
            raise _backend_error("remover", f"s3://{bucket}/{key}", exc) from exc

    def put_object(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: str,
        acl: Optional[str] = None,
    ) -> None:
        """Envia bytes para a chave informada, com ACL opcional."""
        metadata = {"x-amz-acl": acl} if acl else None
        try:
            self.client.put_object(
                bucket_name=bucket,
                object_name=key,
                data=io.BytesIO(content),
                length=len(content),
                content_type=content_type,
                metadata=metadata,
            )
        except (MinioException, HTTPError) as exc:
            raise _backend_error("gravar", f"s3://{bucket}/{key}", exc) from exc
